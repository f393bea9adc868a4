"""
This module processes images and makes them suitable to use as neural network inputs.
"""
import numpy as np

from ..util import misc
from ..util import netlog
log = netlog.setup_logging("image_process", level="INFO")


PIXEL_RANGE = 255
WEIGHT_LOW, WEIGHT_HIGH = 0.001, 0.999
DEFAULT_ZCA_REGULARIZATION = 0.08


class LinearAlgebraError(np.linalg.LinAlgError):
    pass


def weight_from_byte(px):
    """Map pixel intensities in [0, 255] onto [0.001, 0.999]. The top of the range is clamped
    to 0.999 so that no input is ever exactly 1. Accepts a scalar or an array; scalars
    come back as floats.
    """
    px = np.asarray(px, dtype=np.float64)
    weight = np.minimum(px / PIXEL_RANGE * WEIGHT_HIGH + WEIGHT_LOW, WEIGHT_HIGH)
    if weight.ndim == 0:
        return float(weight)
    return weight


def byte_from_weight(weight):
    """Approximate inverse of `weight_from_byte`. Truncates, so the round trip
    may come back one unit low."""
    weight = np.asarray(weight, dtype=np.float64)
    px = np.clip((weight - WEIGHT_LOW) / WEIGHT_HIGH * PIXEL_RANGE, 0, PIXEL_RANGE).astype(np.uint8)
    if px.ndim == 0:
        return int(px)
    return px


def flatten_images(images):
    """Turn a (n_images, height, width) stack into a (n_images, height * width) matrix,
    one row-major image per row."""
    images = np.asarray(images)
    return images.reshape((images.shape[0], -1))


def minus_mean(data):
    """Return a copy of the 2D input with each row's mean subtracted, and then each
    column's mean subtracted. The output is centered along both axes.
    """
    centered = np.array(data, dtype=np.float64)
    centered -= centered.mean(axis=1, keepdims=True)
    centered -= centered.mean(axis=0)
    return centered


class ZCA:
    """ Zero-phase component analysis whitening, based off
    http://ufldl.stanford.edu/wiki/index.php/Implementing_PCA/Whitening

    This version centers the training data on both rows and columns before taking
    the covariance, and normalizes the covariance by the number of columns rather than
    the number of rows. `transform` applies the whitening matrix to the data as given,
    without subtracting any mean.

    **Parameters**

    * `regularization` <float|0.08>
        Added to each singular value of the covariance before taking the inverse square root.
    """
    def __init__(self, regularization=DEFAULT_ZCA_REGULARIZATION):
        self.regularization = regularization
        self.components_ = None

    def fit(self, X, y=None):
        X = _as_design_matrix(X)
        centered = minus_mean(X)
        sigma = np.dot(centered.T, centered) / centered.shape[1]  # Column count, not row count.
        try:
            U, S, _ = np.linalg.svd(sigma)
        except np.linalg.LinAlgError as err:
            raise LinearAlgebraError("SVD of the {} covariance matrix failed: "
                                     "{}".format(sigma.shape, err)) from err
        tmp = np.dot(U, np.diag(1 / np.sqrt(S + self.regularization)))
        self.components_ = np.dot(tmp, U.T).T
        log.debug("Fit ZCA whitening to {} rows and {} columns. Largest singular value {:.4g}, "
                  "smallest {:.4g}.".format(X.shape[0], X.shape[1], S.max(), S.min()))
        return self

    def transform(self, X):
        if self.components_ is None:
            raise ValueError("Call `fit` before `transform`.")
        X = _as_design_matrix(X)
        if X.shape[1] != self.components_.shape[0]:
            raise misc.ShapeError("This whitening matrix takes {} columns, but the input has "
                                  "{}.".format(self.components_.shape[0], X.shape[1]))
        return np.dot(X, self.components_)

    def fit_transform(self, X, y=None):
        return self.fit(X).transform(X)


def _as_design_matrix(X):
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2 or 0 in X.shape:
        raise LinearAlgebraError("Whitening needs a non-empty 2D (samples x features) matrix, "
                                 "not one of shape {}.".format(X.shape))
    if not np.all(np.isfinite(X)):
        raise LinearAlgebraError("Can't whiten data containing NaN or infinite values.")
    return X


def whiten(X, regularization=DEFAULT_ZCA_REGULARIZATION):
    """Decorrelate the columns of `X` with a ZCA whitening matrix fit to `X` itself.
    Returns a new matrix of the same shape."""
    return ZCA(regularization=regularization).fit_transform(X)
