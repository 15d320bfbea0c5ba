"""
Ordering of SVD results by decreasing singular value.

Columns of U and V move together with their singular value. Singular
values below eps relative to the largest are then flushed to exactly
zero (numerical rank truncation), so the inverter treats them as singular.

Temporary storage equals the storage being reordered; dense SVD is not
used at sizes where that matters.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from densesvd.config import SVDConfig, resolve
from densesvd.diagnostics import Progress
from densesvd.errors import InvalidDimensions
from densesvd.matrix import dimensions

logger = logging.getLogger(__name__)


def descending_order(w: np.ndarray) -> np.ndarray:
    """
    Permutation sorting w by decreasing value.
    Equal values keep their original relative order (tie-break by index).
    """
    w = np.asarray(w, dtype=np.float64)
    index = np.arange(len(w))
    # lexsort: last key is primary
    return np.lexsort((index, -w))


def sort_svd(
    u: np.ndarray,
    w: np.ndarray,
    v: np.ndarray,
    config: Optional[SVDConfig] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Reorder (U, W, V) in place by decreasing W and flush tiny values.

    Parameters
    ----------
    u : np.ndarray
        (m, n) left singular vectors, as left in A by decompose().
    w : np.ndarray
        (n,) singular values.
    v : np.ndarray
        (n, n) right singular vectors, not transposed.

    Returns
    -------
    (u, w, v), the same arrays.
    """
    config = resolve(config)
    n, m = dimensions(u)
    if w.ndim != 1 or w.shape[0] < n:
        raise InvalidDimensions(f"w has shape {w.shape}; expected at least ({n},)")
    if v.ndim != 2 or v.shape[0] < 1 or v.shape[1] != n:
        raise InvalidDimensions(f"V has shape {v.shape}; expected {n} columns")

    progress = Progress(config)
    progress.phase('sorting')

    pos = descending_order(w[:n])

    # fancy indexing copies: these are the temporaries
    w_sorted = w[pos]
    u[:, :] = u[:, pos]
    v[:, :] = v[:, pos]

    wmax = w_sorted[0]
    if wmax > 0.0:
        flush = w_sorted / wmax < config.eps
        w_sorted[flush] = 0.0
        if flush.any():
            logger.debug("rank truncation: %d of %d singular values set to 0", int(flush.sum()), n)
    w[:n] = w_sorted

    progress.done()
    return u, w, v


def rank(w: np.ndarray) -> int:
    """Number of non-zero entries of a sorted, truncated W."""
    return int(np.count_nonzero(w))
