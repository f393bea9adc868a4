"""Complete training runs on standard datasets."""
