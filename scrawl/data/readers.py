"""
This module reads and iterates over data, making it available for training.
"""
import numpy as np
import pandas as pd

from ..util import misc
from ..util import netlog
from ..data import files
from ..image import process
log = netlog.setup_logging("data_readers", level="INFO")


ONE_HOT_LOW, ONE_HOT_HIGH = 0.001, 0.999


def one_hot(labels, n_classes=files.N_CLASSES, low=ONE_HOT_LOW, high=ONE_HOT_HIGH):
    """Encode integer labels as rows of `n_classes` values: `high` at the label's
    column, `low` everywhere else. The defaults keep targets away from the
    sigmoid's asymptotes at 0 and 1.
    """
    labels = np.asarray(labels).astype(int).ravel()
    if labels.size and (labels.min() < 0 or labels.max() >= n_classes):
        raise ValueError("Labels must be in [0, {}].".format(n_classes - 1))
    encoded = np.full((len(labels), n_classes), low, dtype=np.float64)
    encoded[np.arange(len(labels)), labels] = high
    return encoded


class Dataset(object):
    """
    Raw images paired with their digit labels.

    **Parameters**

    * `images` <array>: uint8 array of shape (n_images, height, width)
    * `labels` <array>: integer array of shape (n_images,)

    **Raises**

    `FormatError` if there isn't exactly one label per image.
    """
    def __init__(self, images, labels):
        self.images = np.asarray(images, dtype=np.uint8)
        self.labels = np.asarray(labels, dtype=np.uint8).ravel()

        if self.images.ndim != 3:
            raise files.FormatError("Images must be a (n_images, height, width) array, "
                                    "not shape {}.".format(self.images.shape))
        if len(self.images) != len(self.labels):
            raise files.FormatError("Found {} images but {} labels.".format(len(self.images),
                                                                         len(self.labels)))
        self.height, self.width = self.images.shape[1:]

    def __len__(self):
        return len(self.labels)

    def __getitem__(self, index):
        return self.images[index], int(self.labels[index])

    def __iter__(self):
        for index in range(len(self)):
            yield self[index]

    def __repr__(self):
        return "<Dataset: {} images of {}x{} pixels>".format(len(self), self.height, self.width)

    @property
    def n_pixels(self):
        return self.height * self.width

    def image(self, index):
        """The `index`th image as a (height, width) array. Index the result as [row, column]."""
        return self.images[index]

    def subset(self, indices):
        """A new Dataset holding only the given rows, in the given order."""
        indices = np.asarray(indices)
        return Dataset(self.images[indices], self.labels[indices])

    def features(self):
        """The design matrix: one row per image, one column per pixel, with pixel
        intensities mapped into [0.001, 0.999]."""
        return process.weight_from_byte(process.flatten_images(self.images))

    def targets(self, n_classes=files.N_CLASSES):
        """One-hot encoded labels, one row per image."""
        return one_hot(self.labels, n_classes=n_classes)


def load_dataset(image_src, label_src):
    """Read an IDX image file and its IDX label file.

    **Returns**

    A `Dataset`.

    **Raises**

    `FormatError` if either file is malformed or the files disagree about
    the number of images.
    """
    images = files.read_image_file(image_src)
    labels = files.read_label_file(label_src)
    if len(images) != len(labels):
        raise files.FormatError("The image file holds {} images, but the label file holds "
                                "{} labels.".format(len(images), len(labels)))
    dataset = Dataset(images, labels)
    log.debug("Loaded {!r}.".format(dataset))

    return dataset


class Data(object):
    """
    In-memory iterator over matched rows of features and targets, for
    training one example at a time. The rows are copied, so shuffling
    never touches the caller's arrays.
    """
    def __init__(self, features, targets=None):
        if isinstance(features, pd.DataFrame):
            features = features.values
        if isinstance(targets, (pd.DataFrame, pd.Series)):
            targets = targets.values
        self.features = np.array(features, dtype=np.float64)
        self.targets = None if targets is None else np.array(targets, dtype=np.float64)

        if self.features.ndim != 2:
            raise misc.ShapeError("Features must be a 2D (samples x features) array, "
                                  "not shape {}.".format(self.features.shape))
        if self.targets is not None and len(self.features) != len(self.targets):
            raise misc.ShapeError("The features have {} rows, but the targets have {} "
                                  "rows.".format(len(self.features), len(self.targets)))
        self.n_epochs = 0

    def __len__(self):
        return len(self.features)

    def iter_epoch(self):
        """Iterate once through the data in its current order.

        **Yields**

        A 2-tuple of (feature row, target row) if this object holds targets, else
        a feature row.
        """
        for index in range(len(self)):
            if self.targets is not None:
                yield self.features[index], self.targets[index]
            else:
                yield self.features[index]
        self.n_epochs += 1

    def peek(self):
        """Return the first item of an epoch. Raises `ValueError` if there are no rows."""
        if len(self) == 0:
            raise ValueError("Cannot peek at an empty Data object.")
        if self.targets is not None:
            return self.features[0], self.targets[0]
        return self.features[0]

    def shuffle(self, rng=None):
        """Put the rows in a new random order, in place. Features and targets
        receive the same permutation. Returns the permutation."""
        arrays = [self.features] if self.targets is None else [self.features, self.targets]
        return misc.shuffle_together(*arrays, rng=rng)
