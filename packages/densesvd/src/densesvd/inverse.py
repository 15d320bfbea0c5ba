"""
Moore-Penrose pseudo-inverse from a sorted decomposition.

    A+ = V . W^-1 . U'

computed as AT[i, j] = sum_k (V[i, k] / w[k]) * U[j, k] over the first
min(n, m) columns, without forming W^-1 as a matrix. Singular values
flushed to zero by sort_svd() are skipped.
"""

from typing import Optional

import numpy as np

from densesvd.config import SVDConfig, resolve
from densesvd.diagnostics import Progress
from densesvd.errors import InvalidDimensions
from densesvd.matrix import check_dimensions, dimensions


def pseudo_inverse(
    u: np.ndarray,
    w: np.ndarray,
    v: np.ndarray,
    out: Optional[np.ndarray] = None,
    config: Optional[SVDConfig] = None,
) -> np.ndarray:
    """
    Pseudo-inverse from (U, W, V). Inputs are read only.

    Parameters
    ----------
    u : np.ndarray
        (m, r_u) left singular vectors.
    w : np.ndarray
        Singular values, sorted and rank-truncated by sort_svd().
    v : np.ndarray
        (n, r_v) right singular vectors, not transposed.
    out : np.ndarray, optional
        (n, m) buffer for the result; must not alias u or v.

    Returns
    -------
    np.ndarray
        (n, m) pseudo-inverse.
    """
    config = resolve(config)
    _, m = dimensions(u)
    if v.ndim != 2:
        raise InvalidDimensions(f"V has shape {v.shape}; expected a 2-D matrix")
    n = v.shape[0]
    check_dimensions(n, m)

    progress = Progress(config)
    progress.phase('pseudo-inverse')

    r = min(n, m, u.shape[1], v.shape[1], len(w))
    keep = np.flatnonzero(w[:r] != 0.0)

    vtemp = v[:, keep] / w[keep]

    if out is None:
        out = np.zeros((n, m), dtype=np.float64)
    else:
        if out.shape != (n, m):
            raise InvalidDimensions(f"output has shape {out.shape}; expected ({n}, {m})")
        if np.shares_memory(out, u) or np.shares_memory(out, v):
            raise ValueError("output must not share memory with U or V")
    out[:, :] = vtemp @ u[:, keep].T

    progress.done()
    return out
