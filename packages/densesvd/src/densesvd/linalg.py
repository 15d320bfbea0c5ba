"""
Whole-matrix entry points built on decompose → sort_svd → pseudo_inverse.

These copy their input, so the caller's array survives, and handle
m < n by decomposing the transpose.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np

from densesvd.config import SVDConfig, resolve
from densesvd.decompose import decompose
from densesvd.errors import InvalidInput
from densesvd.inverse import pseudo_inverse
from densesvd.matrix import as_matrix
from densesvd.ordering import rank, sort_svd

logger = logging.getLogger(__name__)


def svd(a, config: Optional[SVDConfig] = None) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Sorted thin SVD of any (m, n) matrix.

    Returns
    -------
    u : (m, r) np.ndarray
    w : (r,) np.ndarray, non-increasing, rank-truncated
    v : (n, r) np.ndarray
        with r = min(m, n) and a ≈ u @ diag(w) @ v.T
    """
    config = resolve(config)
    a = as_matrix(a)
    m, n = a.shape

    if m >= n:
        u, w, v = decompose(np.ascontiguousarray(a), config=config)
        sort_svd(u, w, v, config=config)
        return u, w, v

    # A' = U'.W.V'' → A = V'.W.U''
    logger.debug("m = %d < n = %d: decomposing the transpose", m, n)
    ut, w, vt = decompose(np.ascontiguousarray(a.T), config=config)
    sort_svd(ut, w, vt, config=config)
    return vt, w, ut


def pinv(a, config: Optional[SVDConfig] = None) -> np.ndarray:
    """Moore-Penrose pseudo-inverse, shape (n, m)."""
    u, w, v = svd(a, config=config)
    return pseudo_inverse(u, w, v, config=config)


def lstsq(
    a,
    z,
    std=None,
    config: Optional[SVDConfig] = None,
) -> Dict[str, Any]:
    """
    Least squares fit of a @ x ≈ z via SVD.

    Parameters
    ----------
    a : array-like
        (m, n) design matrix, one row per measurement.
    z : array-like
        (m,) measurements.
    std : array-like, optional
        (m,) standard deviation of each measurement. Rows are weighted
        by 1/std; all entries must be positive and finite.

    Returns
    -------
    dict with:
        x : np.ndarray — (n,) solution
        residuals : np.ndarray — z - a @ x, unweighted
        rank : int — non-zero singular values after truncation
        singular_values : np.ndarray — of the (weighted) system, descending
    """
    a = as_matrix(a)
    m, n = a.shape
    z = np.asarray(z, dtype=np.float64).ravel()
    if z.shape[0] != m:
        raise InvalidInput(f"z has {z.shape[0]} values; expected {m}")
    if not np.all(np.isfinite(z)):
        raise InvalidInput("z contains non-finite values")

    weighted_a = a
    weighted_z = z
    if std is not None:
        std = np.asarray(std, dtype=np.float64).ravel()
        if std.shape[0] != m:
            raise InvalidInput(f"std has {std.shape[0]} values; expected {m}")
        if not np.all(np.isfinite(std)) or np.any(std <= 0.0):
            raise InvalidInput("std must be positive and finite")
        weighted_a = a / std[:, None]
        weighted_z = z / std

    u, w, v = svd(weighted_a, config=config)
    x = pseudo_inverse(u, w, v, config=config) @ weighted_z

    return {
        'x': x,
        'residuals': z - a @ x,
        'rank': rank(w),
        'singular_values': w,
    }
