"""
densesvd — Dense Singular Value Decomposition
==============================================

Golub-Kahan-Reinsch SVD of a dense real matrix, ordering of the result by
decreasing singular value, and the Moore-Penrose pseudo-inverse.

Three in-place steps, each consuming the previous one's output:

    densesvd.decompose(a)
        A (m x n) is overwritten with U; returns (u, w, v).

    densesvd.sort_svd(u, w, v)
        Reorders by decreasing w; w[i] / w[0] < 4e-15 is set to 0.

    densesvd.pseudo_inverse(u, w, v)
        Fresh (n x m) array V . W^-1 . U'.

Usage:
    import densesvd

    u, w, v = densesvd.decompose(a.copy())
    densesvd.sort_svd(u, w, v)
    a_pinv = densesvd.pseudo_inverse(u, w, v)

    # or, without touching a:
    u, w, v = densesvd.svd(a)
    result = densesvd.lstsq(a, z, std=sigma)
"""

__version__ = '0.1.0'

from densesvd.config import CONFIG, SVDConfig, get as get_config
from densesvd.decompose import decompose
from densesvd.errors import (
    AllocationFailure,
    InvalidDimensions,
    InvalidInput,
    NonConvergence,
    Reason,
    SVDError,
)
from densesvd.inverse import pseudo_inverse
from densesvd.linalg import lstsq, pinv, svd
from densesvd.ordering import rank, sort_svd

__all__ = [
    'CONFIG',
    'SVDConfig',
    'get_config',
    'decompose',
    'sort_svd',
    'pseudo_inverse',
    'svd',
    'pinv',
    'lstsq',
    'rank',
    'SVDError',
    'InvalidDimensions',
    'AllocationFailure',
    'NonConvergence',
    'InvalidInput',
    'Reason',
]
