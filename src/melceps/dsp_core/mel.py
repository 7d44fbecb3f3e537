"""
Mel scale conversion and triangular filterbank construction.
"""

from typing import Optional, Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


def _scalar_or_array(result: np.ndarray) -> ArrayLike:
    if np.ndim(result) == 0:
        return float(result)
    return result


def hertz_to_mel(freq: ArrayLike) -> ArrayLike:
    """Convert frequencies in Hz to mels: 1127 * ln(1 + f / 700)."""
    return _scalar_or_array(1127.0 * np.log(1.0 + np.asarray(freq, dtype=np.float64) / 700.0))


def mel_to_hertz(mel: ArrayLike) -> ArrayLike:
    """Convert mels back to Hz: 700 * (exp(m / 1127) - 1)."""
    return _scalar_or_array(700.0 * (np.exp(np.asarray(mel, dtype=np.float64) / 1127.0) - 1.0))


def grid_indexes(sample_rate: int, num_filters: int, fft_size: int) -> np.ndarray:
    """
    FFT bin index of each of the num_filters + 2 filter edge points.

    The points are equally spaced on the mel scale from 0 up to
    hertz_to_mel(sample_rate) and mapped to bins with the full transform
    size: floor(hz * fft_size / sample_rate).
    """
    interval = hertz_to_mel(float(sample_rate)) / (num_filters + 1)
    grid_mels = np.arange(num_filters + 2) * interval
    grid_hertz = mel_to_hertz(grid_mels)
    return np.floor(grid_hertz * fft_size / sample_rate).astype(np.int64)


def filterbanks(
    sample_rate: int,
    num_filters: int,
    fft_bins: int,
    fft_size: Optional[int] = None
) -> np.ndarray:
    """
    Build triangular mel filters over a one-sided FFT bin grid.

    Filter i rises linearly from 0 at grid index i to 1.0 at index i + 1,
    then falls back to 0 at index i + 2. Bin positions use the full FFT
    size while each filter only stores the fft_bins one-sided bins, so the
    upper part of the grid may fall outside the stored range.

    Args:
        sample_rate: Sampling rate in Hz (> 0)
        num_filters: Number of filters (> 0)
        fft_bins: Stored bins per filter (fft_size // 2 + 1)
        fft_size: Full FFT size. Derived from fft_bins when omitted.

    Returns:
        Read-only array of shape (num_filters, fft_bins)
    """
    if fft_size is None:
        fft_size = 2 * (fft_bins - 1)

    indexes = grid_indexes(sample_rate, num_filters, fft_size)
    bins = np.arange(fft_bins)
    filters = np.zeros((num_filters, fft_bins))

    for i in range(num_filters):
        left, center, right = indexes[i], indexes[i + 1], indexes[i + 2]

        # Empty ramps (coincident indices) contribute nothing
        if center > left:
            rising = (bins >= left) & (bins < center)
            filters[i, rising] = (bins[rising] - left) / (center - left)
        if right > center:
            falling = (bins > center) & (bins < right)
            filters[i, falling] = (right - bins[falling]) / (right - center)
        if center < fft_bins:
            filters[i, center] = 1.0

    filters.setflags(write=False)
    return filters
