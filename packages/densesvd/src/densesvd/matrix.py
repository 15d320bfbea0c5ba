"""
Dense matrix helpers.

A matrix is a float64 numpy array of shape (m, n): m rows, n columns,
element (row j, column i) at a[j, i]. The array owns its storage;
the only sanctioned aliasing is decompose() turning A into U in place.
"""

from typing import Iterable, List, Optional

import numpy as np

from densesvd.config import get
from densesvd.errors import AllocationFailure, InvalidDimensions, InvalidInput


def check_dimensions(n: int, m: int):
    """Contract check shared by every operation."""
    if n <= 0:
        raise InvalidDimensions(f"n = {n}; expected n > 0")
    if m <= 0:
        raise InvalidDimensions(f"m = {m}; expected m > 0")


def alloc2d(n: int, m: int) -> np.ndarray:
    """Zeroed matrix with n columns and m rows."""
    if n <= 0 or m <= 0:
        raise InvalidDimensions(f"alloc2d(): invalid size (n1 = {n}, n2 = {m})")
    try:
        return np.zeros((m, n), dtype=np.float64)
    except MemoryError as exc:
        raise AllocationFailure(f"alloc2d(): {exc or 'Cannot allocate memory'}") from exc


def dimensions(a: np.ndarray):
    """(n, m) of a 2-D matrix, validated."""
    if a.ndim != 2:
        raise InvalidDimensions(f"expected a 2-D matrix, got {a.ndim} dimension(s)")
    m, n = a.shape
    check_dimensions(n, m)
    return n, m


def as_matrix(values) -> np.ndarray:
    """Float64 copy of `values`; rejects NaN/inf."""
    a = np.array(values, dtype=np.float64)
    if a.ndim == 1:
        a = a.reshape(1, -1)
    dimensions(a)
    if not np.all(np.isfinite(a)):
        raise InvalidInput("matrix contains non-finite values")
    return a


def from_values(values: Iterable[float], n: int, m: int) -> np.ndarray:
    """Fill an n-column, m-row matrix row by row."""
    a = alloc2d(n, m)
    flat = np.asarray(list(values), dtype=np.float64)
    if flat.size != n * m:
        raise InvalidInput(f"expected {n * m} values for a {m}x{n} matrix, got {flat.size}")
    a[:, :] = flat.reshape(m, n)
    return a


def diag(w: np.ndarray, n: int, rows: Optional[int] = None) -> np.ndarray:
    """W as a matrix: n columns, `rows` rows (default n), w on the diagonal."""
    rows = n if rows is None else rows
    out = alloc2d(n, rows)
    k = min(n, rows, len(w))
    out[np.arange(k), np.arange(k)] = w[:k]
    return out


def format_matrix(a: np.ndarray, offset: Optional[str] = None, eps: Optional[float] = None) -> List[str]:
    """One line per row, `%10.5g ` per value, |x| < eps shown as 0."""
    offset = get('display.offset') if offset is None else offset
    eps = get('display.eps') if eps is None else eps
    spec = f"{get('display.width')}.{get('display.precision')}g"
    lines = []
    for row in np.atleast_2d(a):
        cells = [format(0.0 if abs(x) < eps else float(x), spec) + ' ' for x in row]
        lines.append(offset + ''.join(cells))
    return lines
