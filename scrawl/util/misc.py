"""
Utility functions which don't quite fit anywhere else.
"""
import collections.abc

import numpy as np

from ..util import netlog
log = netlog.setup_logging("scrawl_misc", level="INFO")


class ShapeError(ValueError):
    """An array doesn't have the shape an operation requires."""


def check_random_state(rng=None):
    """Turn `rng` into a `np.random.RandomState`. Accepts None (fresh, unseeded
    generator), an integer seed, or an existing RandomState, which is returned unchanged.
    """
    if not isinstance(rng, np.random.RandomState):
        log.debug("Making a new RNG with seed {}.".format(rng))
        rng = np.random.RandomState(rng)
    return rng


def argmax(values):
    """Index of the largest entry of a 1D sequence. Ties go to the lowest index."""
    values = np.asarray(values).ravel()
    best, best_index = -np.inf, 0
    for i, val in enumerate(values):
        if val > best:
            best, best_index = val, i
    return best_index


def shuffle_together(*arrays, rng=None):
    """Shuffle the rows of every input array in place, using the same
    Fisher-Yates permutation for all of them so that row `i` of one array still
    corresponds to row `i` of the others.

    **Returns**

    The permutation which was applied: new row `k` holds what was previously row `perm[k]`.

    **Raises**

    `ValueError` if the arrays don't all have the same number of rows.
    """
    rng = check_random_state(rng)
    n_rows = {len(arr) for arr in arrays}
    if len(n_rows) > 1:
        raise ValueError("Can't shuffle arrays with different numbers of "
                         "rows: {}.".format(sorted(n_rows)))
    n_rows = n_rows.pop() if n_rows else 0

    perm = np.arange(n_rows)
    for i in range(n_rows - 1, 0, -1):
        j = rng.randint(i + 1)
        perm[i], perm[j] = perm[j], perm[i]

    for arr in arrays:
        arr[...] = arr[perm]

    return perm


def as_list(x):
    """If an object is a string or non-iterable, returns it as a one-element list.
    Otherwise returns the object unchanged.
    """
    if isinstance(x, str) or not isinstance(x, collections.abc.Iterable):
        x = [x]
    return x
