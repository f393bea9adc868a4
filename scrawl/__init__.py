"""Handwritten digit classification with a from-scratch neural network.

**Subpackages**

`data` : Reading IDX image and label files, and iterating over examples
`image` : Pixel normalization and ZCA whitening
`nnets` : The two-layer network and the SGD training controller
`util` : Logging and miscellaneous helpers
"""
from .data.files import FormatError
from .image.process import LinearAlgebraError
from .util.misc import ShapeError

__version__ = "0.1"
