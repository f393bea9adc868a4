"""Turning raw images into network inputs."""
