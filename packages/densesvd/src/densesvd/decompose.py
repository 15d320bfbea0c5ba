"""
Singular value decomposition of a dense real matrix.

Golub-Kahan-Reinsch, after the EISPACK routine SVD (1972-1973):

    A = U . diag(W) . V'

1. Householder reduction to bidiagonal form
2. accumulation of right-hand transformations into V
3. accumulation of left-hand transformations, A becomes U in place
4. diagonalization of the bidiagonal form by implicit-shift QR

The input array is destroyed: on return it holds U. W is left unsorted;
see densesvd.ordering.sort_svd.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from densesvd.config import SVDConfig, resolve
from densesvd.diagnostics import Progress
from densesvd.errors import AllocationFailure, InvalidDimensions, NonConvergence
from densesvd.matrix import dimensions

logger = logging.getLogger(__name__)


def _check_buffers(a: np.ndarray, w: Optional[np.ndarray], v: Optional[np.ndarray]):
    if not isinstance(a, np.ndarray):
        raise TypeError(f"decompose() works in place on a numpy array, got {type(a).__name__}")
    n, m = dimensions(a)
    if a.dtype != np.float64 or not a.flags.writeable:
        raise TypeError("decompose() needs a writable float64 array")
    if w is not None and (w.ndim != 1 or w.shape[0] < n):
        raise InvalidDimensions(f"w has shape {w.shape}; expected at least ({n},)")
    if v is not None and v.shape != (n, n):
        raise InvalidDimensions(f"V has shape {v.shape}; expected ({n}, {n})")
    buffers = [buf for buf in (a, w, v) if buf is not None]
    for p in range(len(buffers)):
        for q in range(p + 1, len(buffers)):
            if np.shares_memory(buffers[p], buffers[q]):
                raise ValueError("A, w and V must not share memory")
    return n, m


def decompose(
    a: np.ndarray,
    w: Optional[np.ndarray] = None,
    v: Optional[np.ndarray] = None,
    config: Optional[SVDConfig] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Decompose A = U.W.V' in place.

    Parameters
    ----------
    a : np.ndarray
        (m, n) float64 matrix, m rows by n columns. Overwritten with U.
        Designed for m >= n; transpose first otherwise.
    w : np.ndarray, optional
        Output vector [0..n-1] of singular values. Allocated if None.
    v : np.ndarray, optional
        Output (n, n) matrix V, not transposed. Allocated if None.
    config : SVDConfig, optional
        Iteration cap and verbosity.

    Returns
    -------
    (u, w, v) where u is `a` itself.

    Raises
    ------
    InvalidDimensions
        n <= 0 or m <= 0, or buffers of the wrong shape.
    NonConvergence
        More than config.max_iterations QR sweeps for one singular value.
    """
    config = resolve(config)
    n, m = _check_buffers(a, w, v)
    progress = Progress(config)

    try:
        if w is None:
            w = np.zeros(n, dtype=np.float64)
        if v is None:
            v = np.zeros((n, n), dtype=np.float64)
        rv1 = np.zeros(n, dtype=np.float64)
    except MemoryError as exc:
        raise AllocationFailure(f"svd(): {exc or 'Cannot allocate memory'}") from exc

    progress.phase('householder reduction')
    g, tst1 = _bidiagonalize(a, w, rv1, n, m, progress)

    progress.phase('accumulating right-hand transformations')
    _accumulate_right(a, v, rv1, g, n, progress)

    progress.phase('accumulating left-hand transformations')
    _accumulate_left(a, w, n, m, progress)

    progress.phase('diagonalization of the bidiagonal form')
    _diagonalize(a, w, v, rv1, tst1, n, m, config.max_iterations, progress)

    progress.done()
    return a, w, v


# ---------------------------------------------------------------------------
# Phase 1: Householder reduction to bidiagonal form
# ---------------------------------------------------------------------------

def _bidiagonalize(a, w, rv1, n, m, progress):
    """
    Diagonal into w, super-diagonal into rv1 (rv1[0] is always zero).
    Returns the last right-reflection g and tst1 = max |w[i]| + |rv1[i]|.
    """
    g = 0.0
    scale = 0.0
    tst1 = 0.0
    for i in range(n):
        progress.tick()
        l = i + 1
        rv1[i] = scale * g
        g = 0.0
        scale = 0.0

        # left reflection: zero a[i+1:, i]
        if i < m:
            scale = np.sum(np.abs(a[i:, i]))
            if scale != 0.0:
                a[i:, i] /= scale
                s = a[i:, i] @ a[i:, i]
                f = a[i, i]
                g = -np.copysign(np.sqrt(s), f)
                h = f * g - s
                a[i, i] = f - g
                if i < n - 1:
                    s_cols = a[i:, i] @ a[i:, l:]
                    a[i:, l:] += np.outer(a[i:, i], s_cols / h)
                a[i:, i] *= scale
        w[i] = scale * g

        # right reflection: zero a[i, i+2:]
        g = 0.0
        scale = 0.0
        if i < m and i < n - 1:
            scale = np.sum(np.abs(a[i, l:]))
            if scale != 0.0:
                a[i, l:] /= scale
                s = a[i, l:] @ a[i, l:]
                f = a[i, l]
                g = -np.copysign(np.sqrt(s), f)
                h = f * g - s
                a[i, l] = f - g
                rv1[l:] = a[i, l:] / h
                s_rows = a[l:, l:] @ a[i, l:]
                a[l:, l:] += np.outer(s_rows, rv1[l:])
                a[i, l:] *= scale

        tst1 = max(tst1, abs(w[i]) + abs(rv1[i]))

    return g, tst1


# ---------------------------------------------------------------------------
# Phase 2: V = product of right reflections, applied last-to-first
# ---------------------------------------------------------------------------

def _accumulate_right(a, v, rv1, g, n, progress):
    l = n
    for i in range(n - 1, -1, -1):
        progress.tick()
        if i < n - 1:
            if g != 0.0:
                # double division avoids possible underflow
                v[l:, i] = (a[i, l:] / a[i, l]) / g
                s_cols = a[i, l:] @ v[l:, l:]
                v[l:, l:] += np.outer(v[l:, i], s_cols)
            v[i, l:] = 0.0
            v[l:, i] = 0.0
        v[i, i] = 1.0
        g = rv1[i]
        l = i


# ---------------------------------------------------------------------------
# Phase 3: U = product of left reflections, built inside A
# ---------------------------------------------------------------------------

def _accumulate_left(a, w, n, m, progress):
    for i in range(min(m, n) - 1, -1, -1):
        progress.tick()
        l = i + 1
        g = w[i]
        if i != n - 1:
            a[i, l:] = 0.0
        if g != 0.0:
            if l < n:
                s_cols = a[l:, i] @ a[l:, l:]
                # double division avoids possible underflow
                f_cols = (s_cols / a[i, i]) / g
                a[i:, l:] += np.outer(a[i:, i], f_cols)
            a[i:, i] /= g
        else:
            a[i:, i] = 0.0
        a[i, i] += 1.0


# ---------------------------------------------------------------------------
# Phase 4: implicit-shift QR on the bidiagonal form
# ---------------------------------------------------------------------------

def _rotate(mat, p, q, c, s):
    """Givens rotation of columns p and q."""
    y = mat[:, p].copy()
    z = mat[:, q].copy()
    mat[:, p] = y * c + z * s
    mat[:, q] = z * c - y * s


def _diagonalize(a, w, v, rv1, tst1, n, m, max_iterations, progress):
    for k in range(n - 1, -1, -1):
        progress.tick()
        k1 = k - 1
        its = 0
        while True:
            its += 1
            if its > max_iterations:
                raise NonConvergence(max_iterations, index=k)

            # test for splitting; rv1[0] is zero so the scan always stops
            docancellation = True
            l1 = -1
            for l in range(k, -1, -1):
                if abs(rv1[l]) + tst1 == tst1:
                    docancellation = False
                    break
                l1 = l - 1
                if abs(w[l1]) + tst1 == tst1:
                    break

            # cancellation of rv1[l] when w[l-1] is negligible
            if docancellation:
                c = 0.0
                s = 1.0
                for i in range(l, k + 1):
                    f = s * rv1[i]
                    rv1[i] = c * rv1[i]
                    if abs(f) + tst1 == tst1:
                        break
                    g = w[i]
                    h = np.hypot(f, g)
                    w[i] = h
                    c = g / h
                    s = -f / h
                    _rotate(a, l1, i, c, s)

            # test for convergence
            z = w[k]
            if l == k:
                if z < 0.0:
                    w[k] = -z
                    v[:, k] = -v[:, k]
                logger.debug("singular value %d converged after %d sweep(s)", k, its)
                break

            # shift from bottom 2 by 2 minor
            x = w[l]
            y = w[k1]
            g = rv1[k1]
            h = rv1[k]
            f = 0.5 * (((g + z) / h) * ((g - z) / y) + y / h - h / y)
            g = np.hypot(f, 1.0)
            f = x - (z / x) * z + (h / x) * (y / (f + np.copysign(g, f)) - h)

            # next QR transformation
            c = 1.0
            s = 1.0
            for i1 in range(l, k):
                i = i1 + 1
                g = rv1[i]
                y = w[i]
                h = s * g
                g = c * g
                z = np.hypot(f, h)
                rv1[i1] = z
                c = f / z
                s = h / z
                f = x * c + g * s
                g = g * c - x * s
                h = y * s
                y = y * c
                _rotate(v, i1, i, c, s)
                z = np.hypot(f, h)
                w[i1] = z
                # rotation can be arbitrary if z = 0
                if z != 0.0:
                    c = f / z
                    s = h / z
                f = c * g + s * y
                x = c * y - s * g
                _rotate(a, i1, i, c, s)

            rv1[l] = 0.0
            rv1[k] = f
            w[k] = x
