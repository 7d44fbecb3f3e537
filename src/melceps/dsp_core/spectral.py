"""
Power spectrum and mel band energies of a single frame.
"""

import math
from typing import Union

import numpy as np

from .fft import rfft

# ln of the smallest positive float64 (the subnormal 5e-324)
LOG_FLOOR = math.log(np.nextafter(0.0, 1.0))


def safe_log(value: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Natural log that maps non-positive values to LOG_FLOOR instead of
    -inf or NaN. Scalars give a float, arrays give an array.
    """
    value = np.asarray(value, dtype=np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        logged = np.log(value)
    result = np.where(value > 0, logged, LOG_FLOOR)
    if result.ndim == 0:
        return float(result)
    return result


def power_spectrum(frame: np.ndarray, fft_size: int) -> np.ndarray:
    """
    One-sided power spectrum of the first fft_size samples of a frame.

    Frames shorter than fft_size are zero-padded.

    Returns:
        fft_size // 2 + 1 values, (re^2 + im^2) / fft_size per bin
    """
    frame = np.asarray(frame, dtype=np.float64)
    spectrum = rfft(frame[:fft_size], n=fft_size)
    return (spectrum.real ** 2 + spectrum.imag ** 2) / fft_size


def mel_coefs(power_spec: np.ndarray, filters: np.ndarray) -> np.ndarray:
    """Log energy of the power spectrum under each mel filter."""
    energies = np.dot(filters, np.asarray(power_spec, dtype=np.float64))
    return safe_log(energies)
