"""
test_files.py
~~~~~~~~~~~~~

Unit tests for reading and writing IDX image and label files.
"""

import gzip
import io
import struct

import numpy as np
import pytest

from scrawl.data import files


def _image_bytes(images):
    n, rows, cols = images.shape
    return struct.pack(">iiii", files.IMAGE_MAGIC, n, rows, cols) + images.tobytes()


def _label_bytes(labels):
    return struct.pack(">ii", files.LABEL_MAGIC, len(labels)) + bytes(bytearray(labels))


class TestReadImages:
    """Test parsing of IDX image files."""

    def test_read_written_file(self, idx_files, small_images):
        """Test that images come back with their shape and pixel values."""
        images = files.read_image_file(idx_files[0])

        assert images.shape == (12, 5, 4)
        assert images.dtype == np.uint8
        np.testing.assert_array_equal(images, small_images)

    def test_byte_layout(self, small_images):
        """Test that the header is four big-endian int32s followed by row-major pixels."""
        buf = io.BytesIO()
        files.write_image_file(buf, small_images)
        raw = buf.getvalue()

        assert raw[:16] == b"\x00\x00\x08\x03\x00\x00\x00\x0c\x00\x00\x00\x05\x00\x00\x00\x04"
        assert raw[16:] == small_images.tobytes()

    def test_read_from_stream(self, small_images):
        """Test that an open binary stream can be read instead of a path."""
        images = files.read_image_file(io.BytesIO(_image_bytes(small_images)))

        np.testing.assert_array_equal(images, small_images)

    def test_read_gzip(self, tmp_path, small_images):
        """Test that file names ending in "gz" are decompressed."""
        fname = str(tmp_path / "images-idx3-ubyte.gz")
        with gzip.open(fname, "wb") as fout:
            fout.write(_image_bytes(small_images))

        np.testing.assert_array_equal(files.read_image_file(fname), small_images)

    def test_swapped_magic_fails(self, idx_files):
        """Test that a file with its magic number bytes reversed is rejected."""
        with open(idx_files[0], "rb") as fin:
            raw = fin.read()

        with pytest.raises(files.FormatError):
            files.read_image_file(io.BytesIO(raw[3::-1] + raw[4:]))

    def test_label_file_as_images_fails(self, idx_files):
        """Test that a label file is not accepted as an image file."""
        with pytest.raises(files.FormatError):
            files.read_image_file(idx_files[1])

    def test_truncated_pixels_fail(self, small_images):
        """Test that a file shorter than its header declares is rejected."""
        raw = _image_bytes(small_images)

        with pytest.raises(files.FormatError):
            files.read_image_file(io.BytesIO(raw[:-1]))

    def test_truncated_header_fails(self, small_images):
        """Test that a file which ends inside the header is rejected."""
        with pytest.raises(files.FormatError):
            files.read_image_file(io.BytesIO(_image_bytes(small_images)[:10]))

    @pytest.mark.parametrize("shape", [(2 ** 31 - 1, 2 ** 31 - 1, 2 ** 31 - 1),
                                       (2 ** 31 - 1, 28, 28)])
    def test_huge_declared_size_fails_from_stream(self, shape):
        """Test that a header declaring far more pixels than the file holds is
        reported as a format problem, not an allocation failure."""
        raw = struct.pack(">iiii", files.IMAGE_MAGIC, *shape) + bytes(10)

        with pytest.raises(files.FormatError):
            files.read_image_file(io.BytesIO(raw))

    @pytest.mark.parametrize("shape", [(2 ** 31 - 1, 2 ** 31 - 1, 2 ** 31 - 1),
                                       (2 ** 31 - 1, 28, 28)])
    def test_huge_declared_size_fails_from_path(self, tmp_path, shape):
        fname = str(tmp_path / "huge-images-idx3-ubyte")
        with open(fname, "wb") as fout:
            fout.write(struct.pack(">iiii", files.IMAGE_MAGIC, *shape) + bytes(10))

        with pytest.raises(files.FormatError):
            files.read_image_file(fname)

    def test_read_larger_than_one_chunk(self, monkeypatch, small_images):
        """Test that a payload spanning several read chunks is reassembled in order."""
        monkeypatch.setattr(files, "_CHUNK_SIZE", 7)

        images = files.read_image_file(io.BytesIO(_image_bytes(small_images)))

        np.testing.assert_array_equal(images, small_images)

    def test_empty_file_fails(self):
        with pytest.raises(files.FormatError):
            files.read_image_file(io.BytesIO(b""))

    def test_write_rejects_flat_images(self, tmp_path):
        with pytest.raises(files.FormatError):
            files.write_image_file(str(tmp_path / "bad"), np.zeros((3, 4), dtype=np.uint8))


class TestReadLabels:
    """Test parsing of IDX label files."""

    def test_read_written_file(self, idx_files, small_labels):
        labels = files.read_label_file(idx_files[1])

        assert labels.shape == (12,)
        np.testing.assert_array_equal(labels, small_labels)

    def test_write_creates_directories(self, tmp_path):
        """Test that missing parent directories are created when writing."""
        fname = str(tmp_path / "nested" / "dir" / "labels-idx1-ubyte")
        files.write_label_file(fname, [3, 1, 4])

        np.testing.assert_array_equal(files.read_label_file(fname), [3, 1, 4])

    def test_write_gzip_creates_directories(self, tmp_path, small_images):
        fname = str(tmp_path / "new" / "images-idx3-ubyte.gz")
        files.write_image_file(fname, small_images)

        np.testing.assert_array_equal(files.read_image_file(fname), small_images)

    def test_huge_declared_count_fails(self):
        raw = struct.pack(">ii", files.LABEL_MAGIC, 2 ** 31 - 1) + bytes(bytearray([1, 2, 3]))

        with pytest.raises(files.FormatError):
            files.read_label_file(io.BytesIO(raw))

    def test_swapped_magic_fails(self, idx_files):
        with open(idx_files[1], "rb") as fin:
            raw = fin.read()

        with pytest.raises(files.FormatError):
            files.read_label_file(io.BytesIO(raw[3::-1] + raw[4:]))

    def test_declared_count_too_large_fails(self):
        """Test that a label file holding fewer labels than declared is rejected."""
        raw = struct.pack(">ii", files.LABEL_MAGIC, 5) + bytes(bytearray([1, 2, 3]))

        with pytest.raises(files.FormatError):
            files.read_label_file(io.BytesIO(raw))

    def test_label_out_of_range_fails(self):
        with pytest.raises(files.FormatError):
            files.read_label_file(io.BytesIO(_label_bytes([1, 2, 10])))

    def test_format_error_is_io_error(self):
        assert issubclass(files.FormatError, IOError)
