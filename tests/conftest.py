"""
conftest.py
~~~~~~~~~~~

Shared fixtures: small synthetic IDX files and datasets.
"""

import numpy as np
import pytest

from scrawl.data import files


@pytest.fixture
def rng():
    return np.random.RandomState(1234)


@pytest.fixture
def small_images(rng):
    """Twelve random 5x4 (height x width) images."""
    return rng.randint(0, 256, size=(12, 5, 4)).astype(np.uint8)


@pytest.fixture
def small_labels():
    return np.arange(12, dtype=np.uint8) % 10


@pytest.fixture
def idx_files(tmp_path, small_images, small_labels):
    """Write the small images and labels to IDX files, returning the two paths."""
    image_path = str(tmp_path / "images-idx3-ubyte")
    label_path = str(tmp_path / "labels-idx1-ubyte")
    files.write_image_file(image_path, small_images)
    files.write_label_file(label_path, small_labels)
    return image_path, label_path
