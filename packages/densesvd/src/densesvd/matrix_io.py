"""
Matrix files: headerless CSV or parquet, one row per matrix row.
"""

from pathlib import Path

import numpy as np
import polars as pl

from densesvd.errors import InvalidInput
from densesvd.matrix import as_matrix

SUPPORTED = ('.csv', '.parquet')


def _suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED:
        raise InvalidInput(f"{path}: unsupported matrix file type '{suffix}' (expected one of {SUPPORTED})")
    return suffix


def read_matrix(path) -> np.ndarray:
    """Load a matrix; dimensions come from the file."""
    path = Path(path)
    if not path.exists():
        raise InvalidInput(f"{path} does not exist")

    try:
        if _suffix(path) == '.csv':
            df = pl.read_csv(path, has_header=False)
        else:
            df = pl.read_parquet(path)
    except pl.exceptions.PolarsError as exc:
        raise InvalidInput(f"{path}: unreadable matrix file ({exc})") from exc

    if df.height == 0 or df.width == 0:
        raise InvalidInput(f"{path}: empty matrix")
    try:
        values = df.cast(pl.Float64).to_numpy()
    except (pl.exceptions.InvalidOperationError, pl.exceptions.ComputeError) as exc:
        raise InvalidInput(f"{path}: non-numeric entries") from exc
    return as_matrix(values)


def write_matrix(path, a: np.ndarray) -> Path:
    """Write a matrix; columns are named c0, c1, ..."""
    path = Path(path)
    suffix = _suffix(path)
    a = np.atleast_2d(np.asarray(a, dtype=np.float64))
    df = pl.DataFrame({f"c{i}": a[:, i] for i in range(a.shape[1])})

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == '.csv':
        df.write_csv(path, include_header=False)
    else:
        df.write_parquet(path)
    return path
