"""
Discrete cosine transform (type II) and its inverse.

Direct matrix evaluation; the number of mel bands is small enough that an
O(N^2) product is fine.
"""

import numpy as np


def _scale(N: int) -> np.ndarray:
    """Orthonormal scaling: sqrt(1/(4N)) for k = 0, sqrt(1/(2N)) otherwise."""
    scale = np.full(N, np.sqrt(1.0 / (2 * N)))
    scale[0] = np.sqrt(1.0 / (4 * N))
    return scale


def _basis(N: int, normalize: bool) -> np.ndarray:
    n = np.arange(N)
    k = np.arange(N)[:, np.newaxis]

    # y[k] = 2 * sum_n x[n] * cos(pi * k * (2n + 1) / (2N))
    basis = 2.0 * np.cos(np.pi * k * (2 * n + 1) / (2 * N))
    if normalize:
        basis *= _scale(N)[:, np.newaxis]
    return basis


def dct(x: np.ndarray, normalize: bool = True) -> np.ndarray:
    """
    DCT-II along the last axis, matching scipy.fftpack.dct(type=2).

    Parameters
    ----------
    x : np.ndarray
        Input vector, or a matrix transformed row by row
    normalize : bool
        Apply the orthonormal scaling (scipy's norm='ortho')

    Returns
    -------
    np.ndarray
        Same shape as x
    """
    x = np.asarray(x, dtype=np.float64)
    N = x.shape[-1]
    return np.dot(x, _basis(N, normalize).T)


def idct(y: np.ndarray, normalize: bool = True) -> np.ndarray:
    """Inverse of dct() for the same normalize flag (a scaled DCT-III)."""
    y = np.asarray(y, dtype=np.float64)
    N = y.shape[-1]
    if not normalize:
        y = y * _scale(N)
    return np.dot(y, _basis(N, True))
