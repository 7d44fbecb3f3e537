"""
DSP Core Module - FFT, mel filterbank, spectral and cepstral transforms

Modules:
    - fft: Cooley-Tukey FFT (Numba JIT)
    - mel: Hz <-> mel conversion and triangular filterbanks
    - spectral: power spectrum, mel band log-energies, safe log
    - cepstral: DCT-II and its inverse
"""

from .fft import fft, rfft
from .mel import hertz_to_mel, mel_to_hertz, grid_indexes, filterbanks
from .spectral import LOG_FLOOR, safe_log, power_spectrum, mel_coefs
from .cepstral import dct, idct

__all__ = [
    # FFT functions
    'fft',
    'rfft',
    # Mel scale
    'hertz_to_mel',
    'mel_to_hertz',
    'grid_indexes',
    'filterbanks',
    # Spectral analysis
    'LOG_FLOOR',
    'safe_log',
    'power_spectrum',
    'mel_coefs',
    # Cepstral transform
    'dct',
    'idct',
]
