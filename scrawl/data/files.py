"""File interactions utilities for Scrawl.

Reads and writes the big-endian IDX layouts used by the MNIST corpus:

* Images: int32 magic (0x00000803), int32 count, int32 rows, int32 columns,
  then count * rows * columns unsigned bytes, row-major, images concatenated.
* Labels: int32 magic (0x00000801), int32 count, then count unsigned bytes.
"""
import errno
import gzip
import os
import struct
import sys

import numpy as np

from ..util import netlog
log = netlog.setup_logging("scrawl_files", level="INFO")


IMAGE_MAGIC = 0x00000803
LABEL_MAGIC = 0x00000801
N_CLASSES = 10

_INT32 = struct.Struct(">i")
_CHUNK_SIZE = 2 ** 20


class FormatError(IOError):
    pass


def tolerant_makedirs(dirname):
    """This is a wrapper around os.makedirs which will quietly continue without doing anything
    if the specified `dirname` is empty or is an existing directory.
    """
    if not dirname:
        return
    try:
        os.makedirs(dirname)
    except (IOError, OSError) as e:
        # We get this if the directory exists already.
        if e.errno == errno.EEXIST:
            pass
        else:
            raise


def _open(src, mode):
    """Open a file name for reading or writing, using gzip if the name ends in "gz" or "gzip".
    Returns None if `src` is already a file-like object."""
    if hasattr(src, "read") or hasattr(src, "write"):
        return None
    src = os.fspath(src)
    opener = gzip.open if (src.endswith("gz") or src.endswith("gzip")) else open
    return opener(src, mode)


def _read_exact(fin, n_bytes, what):
    """Read exactly `n_bytes` from `fin`, in chunks of at most `_CHUNK_SIZE`, so that
    a header which declares more data than the file holds fails at end of file
    instead of on allocation."""
    if n_bytes > sys.maxsize:
        raise FormatError("Declared size of {} ({} bytes) is larger than "
                          "any file this platform can read.".format(what, n_bytes))
    buf = bytearray()
    while len(buf) < n_bytes:
        chunk = fin.read(min(_CHUNK_SIZE, n_bytes - len(buf)))
        if not chunk:
            break
        buf.extend(chunk)
    if len(buf) != n_bytes:
        raise FormatError("Unexpected end of file while reading {}: wanted {} bytes, "
                          "found {}.".format(what, n_bytes, len(buf)))
    return bytes(buf)


def _read_header(fin, magic, n_fields, kind):
    """Read `n_fields` big-endian int32 values, checking that the first is `magic`."""
    fields = [_INT32.unpack(_read_exact(fin, _INT32.size, "the {} header".format(kind)))[0]
              for _ in range(n_fields)]
    if fields[0] != magic:
        raise FormatError("This does not look like an IDX {} file: magic number was {:#010x}, "
                          "expected {:#010x}.".format(kind, fields[0], magic))
    if any(f < 0 for f in fields[1:]):
        raise FormatError("Negative dimension in the {} header: {}.".format(kind, fields[1:]))
    return fields[1:]


def _parse_images(fin):
    n_images, n_rows, n_cols = _read_header(fin, IMAGE_MAGIC, 4, "image")
    n_pixels = n_images * n_rows * n_cols
    buf = _read_exact(fin, n_pixels, "{} images of {}x{} pixels".format(n_images, n_rows, n_cols))
    log.debug("Read {} images of {}x{} pixels.".format(n_images, n_rows, n_cols))

    return np.frombuffer(buf, dtype=np.uint8).reshape((n_images, n_rows, n_cols)).copy()


def _parse_labels(fin):
    n_labels, = _read_header(fin, LABEL_MAGIC, 2, "label")
    buf = _read_exact(fin, n_labels, "{} labels".format(n_labels))
    labels = np.frombuffer(buf, dtype=np.uint8).copy()
    if labels.size and labels.max() >= N_CLASSES:
        raise FormatError("Found label {}; labels must be in [0, {}].".format(labels.max(),
                                                                            N_CLASSES - 1))
    log.debug("Read {} labels.".format(n_labels))

    return labels


def read_image_file(src):
    """Read an IDX image file.

    **Parameters**

    * `src` <str|path|file>: File name, or an open binary file. If the file name
        ends with "gz" or "gzip" we'll read it as a gzip file.

    **Returns**

    A uint8 array of shape (n_images, n_rows, n_columns).

    **Raises**

    `FormatError` if the magic number is wrong or the file ends before all
    declared pixels are read.
    """
    fin = _open(src, "rb")
    if fin is None:
        return _parse_images(src)
    with fin:
        return _parse_images(fin)


def read_label_file(src):
    """Read an IDX label file. Returns a 1D uint8 array of digit labels.

    **Raises**

    `FormatError` if the magic number is wrong, the file is truncated, or a label
    lies outside [0, 9].
    """
    fin = _open(src, "rb")
    if fin is None:
        return _parse_labels(src)
    with fin:
        return _parse_labels(fin)


def _write(dst, header, payload):
    if not hasattr(dst, "write"):
        tolerant_makedirs(os.path.dirname(os.fspath(dst)))
    fout = _open(dst, "wb")
    if fout is None:
        fout = dst
    try:
        fout.write(b"".join(_INT32.pack(h) for h in header))
        fout.write(payload)
    finally:
        if fout is not dst:
            fout.close()


def write_image_file(dst, images):
    """Write a (n_images, n_rows, n_columns) array of bytes as an IDX image file."""
    images = np.asarray(images)
    if images.ndim != 3:
        raise FormatError("Images must be a 3D (n_images, n_rows, n_columns) array, "
                          "not shape {}.".format(images.shape))
    _write(dst, (IMAGE_MAGIC,) + images.shape, images.astype(np.uint8).tobytes())


def write_label_file(dst, labels):
    """Write a 1D array of digit labels as an IDX label file."""
    labels = np.asarray(labels).ravel()
    _write(dst, (LABEL_MAGIC, len(labels)), labels.astype(np.uint8).tobytes())
