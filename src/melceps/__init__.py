"""
melceps - Mel-frequency cepstral coefficients, batch and streaming.
"""

from .dsp_core import (
    LOG_FLOOR,
    dct,
    filterbanks,
    grid_indexes,
    hertz_to_mel,
    idct,
    mel_coefs,
    mel_to_hertz,
    power_spectrum,
    safe_log,
)
from .errors import (
    InvalidCoefficientCount,
    InvalidFFTSize,
    InvalidFilterCount,
    InvalidSampleRate,
    InvalidSignal,
    InvalidWindowLength,
    InvalidWindowStride,
    MFCCParameterError,
    StreamClosedError,
)
from .mfcc import (
    MFCC,
    mfcc_feats,
    pre_emphasis,
    split_signal,
    validate_parameters,
    validate_processor_parameters,
)
from .stream import MFCCStream, Subscription
from .config import FeatureConfig, load_config, save_config

__all__ = [
    'MFCC',
    'mfcc_feats',
    'split_signal',
    'pre_emphasis',
    'validate_parameters',
    'validate_processor_parameters',
    'MFCCStream',
    'Subscription',
    'FeatureConfig',
    'load_config',
    'save_config',
    'hertz_to_mel',
    'mel_to_hertz',
    'grid_indexes',
    'filterbanks',
    'power_spectrum',
    'mel_coefs',
    'safe_log',
    'LOG_FLOOR',
    'dct',
    'idct',
    'MFCCParameterError',
    'InvalidSignal',
    'InvalidSampleRate',
    'InvalidWindowLength',
    'InvalidWindowStride',
    'InvalidFFTSize',
    'InvalidFilterCount',
    'InvalidCoefficientCount',
    'StreamClosedError',
]

__version__ = '1.0.0'
