"""Shared fixtures for the densesvd tests."""
import numpy as np
import pytest


def reconstruct(u, w, v):
    return u @ np.diag(w) @ v.T


def relative_error(a, b):
    return np.linalg.norm(a - b) / np.linalg.norm(a)


@pytest.fixture
def tall_matrix():
    """7 rows, 4 columns, full column rank."""
    np.random.seed(42)
    return np.random.randn(7, 4)


@pytest.fixture
def square_matrix():
    np.random.seed(42)
    return np.random.randn(5, 5)


@pytest.fixture
def worked_example():
    """4 rows, 2 columns."""
    return np.array([
        [1.0, 0.0],
        [0.0, 1.0],
        [-1.0, 0.0],
        [2.0, 1.0],
    ])


@pytest.fixture
def rank1_matrix():
    return np.array([[1.0, 2.0], [2.0, 4.0]])
