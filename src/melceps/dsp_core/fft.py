"""
FFT collaborator for the spectral analyzer.

Iterative Cooley-Tukey radix-2 transform compiled with Numba, with a direct
DFT for lengths that are not a power of two. Only the forward transform is
needed by the MFCC pipeline.
"""

import math
from typing import Optional

import numpy as np
from numba import jit


@jit(nopython=True, cache=True)
def _bit_reverse(x: int, n_bits: int) -> int:
    """Reverse the lowest n_bits of x."""
    result = 0
    for _ in range(n_bits):
        result = (result << 1) | (x & 1)
        x >>= 1
    return result


@jit(nopython=True, cache=True)
def _radix2_fft(x: np.ndarray) -> np.ndarray:
    N = len(x)
    n_bits = int(math.log2(N))

    X = np.empty(N, dtype=np.complex128)
    for i in range(N):
        X[_bit_reverse(i, n_bits)] = x[i]

    # Butterflies over stages of size 2, 4, ..., N
    stage_size = 2
    while stage_size <= N:
        half_size = stage_size // 2
        w_mult = np.exp(-2j * np.pi / stage_size)

        for start in range(0, N, stage_size):
            w = 1.0 + 0j
            for j in range(half_size):
                top = start + j
                bottom = top + half_size

                even = X[top]
                odd = X[bottom] * w

                X[top] = even + odd
                X[bottom] = even - odd

                w = w * w_mult

        stage_size *= 2

    return X


@jit(nopython=True, cache=True)
def _direct_dft(x: np.ndarray) -> np.ndarray:
    N = len(x)
    X = np.empty(N, dtype=np.complex128)

    for k in range(N):
        s = 0j
        for n in range(N):
            s += x[n] * np.exp(-2j * np.pi * k * n / N)
        X[k] = s

    return X


@jit(nopython=True, cache=True)
def _transform(x: np.ndarray) -> np.ndarray:
    N = len(x)
    if N > 0 and N & (N - 1) == 0:
        return _radix2_fft(x)
    return _direct_dft(x)


def fft(x: np.ndarray, n: Optional[int] = None) -> np.ndarray:
    """
    Compute the 1-D discrete Fourier transform of a frame.

    Parameters
    ----------
    x : np.ndarray
        Real or complex 1-D input
    n : int, optional
        Transform length. The input is truncated or zero-padded to n
        samples. Defaults to len(x).

    Returns
    -------
    np.ndarray
        n complex128 values

    Examples
    --------
    >>> X = fft(np.array([1.0, 2.0, 1.0, -1.0, 1.5, 1.0, 0.5, -0.5]))
    >>> X.shape
    (8,)
    """
    x = np.asarray(x)
    if x.ndim != 1:
        raise ValueError(f"Input must be 1D, got shape {x.shape}")

    if n is None:
        n = x.shape[0]
    if n <= 0:
        raise ValueError(f"Transform length must be > 0 (got {n})")

    if x.shape[0] < n:
        x = np.pad(x, (0, n - x.shape[0]), mode='constant')
    elif x.shape[0] > n:
        x = x[:n]

    return _transform(np.ascontiguousarray(x, dtype=np.complex128))


def rfft(x: np.ndarray, n: Optional[int] = None) -> np.ndarray:
    """
    One-sided FFT of a real frame: bins 0 .. n // 2 inclusive.
    """
    X = fft(np.asarray(x, dtype=np.float64), n=n)
    return X[:X.shape[0] // 2 + 1]
