"""
MFCC frame processor and batch feature extraction.

There are two ways to get features:
    - mfcc_feats() slices a whole signal into overlapping frames and
      returns the (n_frames, num_coefs) matrix.
    - MFCC processes frames one at a time with process_frame() or
      process_frames(), carrying the pre-emphasis state across calls.

Per frame the pipeline is:
    1. (Optional) pre-emphasis, continued from the previous frame
    2. Power spectrum
    3. Triangular filters on the mel scale, log of each band
    4. Orthonormal DCT-II
    5. (Optional) first coefficient replaced by the frame log-energy
"""

import logging
from typing import Optional, Sequence

import numpy as np

from .dsp_core.cepstral import dct
from .dsp_core.mel import filterbanks
from .dsp_core.spectral import mel_coefs, power_spectrum, safe_log
from .errors import (
    InvalidCoefficientCount,
    InvalidFFTSize,
    InvalidFilterCount,
    InvalidSampleRate,
    InvalidSignal,
    InvalidWindowLength,
    InvalidWindowStride,
)

logger = logging.getLogger(__name__)

DEFAULT_PRE_EMPHASIS = 0.97


def pre_emphasis(
    signal: np.ndarray,
    factor: float,
    last_value: float = 0.0
) -> np.ndarray:
    """
    First-order high-pass filter y[n] = x[n] - factor * x[n-1].

    x[-1] is taken as last_value, so consecutive frames can be filtered as
    one continuous signal.
    """
    x = np.asarray(signal, dtype=np.float64)
    if x.size == 0:
        return x.copy()
    previous = np.concatenate(([last_value], x[:-1]))
    return x - factor * previous


class MFCC:
    """
    Stateful MFCC extractor for a single ordered stream of frames.

    The filterbank is built once at construction and reused for every
    frame. The last raw sample of each frame is kept to continue the
    pre-emphasis filter on the next one, so an instance must only ever see
    frames in temporal order. Use one instance per signal or channel.

    Args:
        sample_rate: Sampling rate of the frames in Hz
        fft_size: FFT size; frames are truncated or zero-padded to it
        num_filters: Number of mel filters
        num_coefs: Number of coefficients returned per frame
        energy: Replace the first coefficient with the frame log-energy.
            When False, coefficient 0 is dropped and one more higher order
            coefficient is kept instead.
        pre_emphasis: Pre-emphasis factor, None to disable
    """

    def __init__(
        self,
        sample_rate: int,
        fft_size: int,
        num_filters: int,
        num_coefs: int,
        energy: bool = True,
        pre_emphasis: Optional[float] = DEFAULT_PRE_EMPHASIS
    ):
        self.sample_rate = sample_rate
        self.fft_size = fft_size
        self.num_filters = num_filters
        self.num_coefs = num_coefs
        self.energy = energy
        self.pre_emphasis = pre_emphasis

        validate_processor_parameters(sample_rate, fft_size, num_filters, num_coefs, energy=energy)

        # Without energy, slot 0 is dropped so one extra coefficient is kept
        self._dct_coefs = num_coefs if energy else num_coefs + 1

        self.filters = filterbanks(sample_rate, num_filters, fft_size // 2 + 1, fft_size=fft_size)
        self.last_value = 0.0

        logger.debug(
            f"MFCC processor: sr={sample_rate}, fft_size={fft_size}, "
            f"num_filters={num_filters}, num_coefs={num_coefs}, "
            f"energy={energy}, pre_emphasis={pre_emphasis}"
        )

    def process_frame(self, frame: Sequence[float]) -> np.ndarray:
        """Return the MFCC vector of one frame and advance the emphasis state."""
        frame = np.asarray(frame, dtype=np.float64)
        if frame.size == 0:
            raise InvalidWindowLength("Cannot process an empty frame", 0)

        if self.pre_emphasis is not None:
            last_sample = float(frame[-1])
            frame = pre_emphasis(frame, self.pre_emphasis, last_value=self.last_value)
            self.last_value = last_sample

        spectrum = power_spectrum(frame, self.fft_size)
        mels = mel_coefs(spectrum, self.filters)
        mfccs = dct(mels, normalize=True)[:self._dct_coefs]

        if self.energy:
            mfccs[0] = safe_log(spectrum.sum())
            return mfccs
        return mfccs[1:]

    def process_frames(self, frames: Sequence[Sequence[float]]) -> np.ndarray:
        """
        Process frames in order.

        Returns:
            Array of shape (len(frames), num_coefs)
        """
        features = [self.process_frame(frame) for frame in frames]
        if not features:
            return np.empty((0, self.num_coefs))
        return np.vstack(features)


def split_signal(
    signal: Sequence[float],
    window_length: int,
    window_stride: int
) -> np.ndarray:
    """
    Slice a signal into overlapping frames.

    Frame i covers signal[i * window_stride : i * window_stride + window_length]
    and there are (len(signal) - window_length) // window_stride + 1 frames.

    Returns:
        Array of shape (n_frames, window_length)
    """
    signal = np.asarray(signal, dtype=np.float64)
    if window_length <= 0 or window_length > len(signal):
        raise InvalidWindowLength(
            f"Window length must be in [1, {len(signal)}] (got {window_length})",
            window_length
        )
    if window_stride <= 0:
        raise InvalidWindowStride(f"Stride must be > 0 (got {window_stride})", window_stride)

    n_frames = (len(signal) - window_length) // window_stride + 1

    frame_starts = np.arange(n_frames) * window_stride
    frame_indices = frame_starts[:, np.newaxis] + np.arange(window_length)
    return signal[frame_indices]


def validate_parameters(
    signal_length: int,
    sample_rate: int,
    window_length: int,
    window_stride: int,
    fft_size: int,
    num_filters: int,
    num_coefs: int,
    energy: bool = True
) -> None:
    """Raise the matching MFCCParameterError for the first invalid parameter."""
    if sample_rate <= 0:
        raise InvalidSampleRate(f"Sample rate must be > 0 (got {sample_rate})", sample_rate)
    if window_length <= 0:
        raise InvalidWindowLength(f"Window length must be > 0 (got {window_length})", window_length)
    if window_stride <= 0:
        raise InvalidWindowStride(f"Stride must be > 0 (got {window_stride})", window_stride)
    if window_length > signal_length:
        raise InvalidWindowLength(
            f"Window length cannot be greater than signal length "
            f"(got {window_length} > {signal_length})",
            window_length
        )
    validate_processor_parameters(sample_rate, fft_size, num_filters, num_coefs, energy=energy)


def validate_processor_parameters(
    sample_rate: int,
    fft_size: int,
    num_filters: int,
    num_coefs: int,
    energy: bool = True
) -> None:
    """
    Checks shared by mfcc_feats() and MFCC.

    Without energy, coefficient 0 is dropped, so at most num_filters - 1
    coefficients can be returned.
    """
    if sample_rate <= 0:
        raise InvalidSampleRate(f"Sample rate must be > 0 (got {sample_rate})", sample_rate)
    if fft_size <= 0:
        raise InvalidFFTSize(f"FFT size must be > 0 (got {fft_size})", fft_size)
    if num_filters <= 0:
        raise InvalidFilterCount(f"Number of filters must be > 0 (got {num_filters})", num_filters)
    if num_coefs <= 0:
        raise InvalidCoefficientCount(
            f"Number of coefficients must be > 0 (got {num_coefs})", num_coefs
        )
    if num_coefs > num_filters:
        raise InvalidCoefficientCount(
            f"Number of coefficients cannot exceed the number of filters "
            f"(got {num_coefs} > {num_filters})",
            num_coefs
        )
    if not energy and num_coefs > num_filters - 1:
        raise InvalidCoefficientCount(
            f"Without energy at most {num_filters - 1} coefficients are available "
            f"(got {num_coefs})",
            num_coefs
        )


def mfcc_feats(
    signal: Sequence[float],
    sample_rate: int,
    window_length: int,
    window_stride: int,
    fft_size: int,
    num_filters: int,
    num_coefs: int,
    energy: bool = True,
    pre_emphasis: Optional[float] = DEFAULT_PRE_EMPHASIS
) -> np.ndarray:
    """
    Compute MFCC features over sliding windows of a signal.

    Args:
        signal: 1-D signal
        sample_rate: Sampling rate in samples/s (> 0)
        window_length: Window length in samples (> 0, <= len(signal))
        window_stride: Window stride in samples (> 0)
        fft_size: FFT size per window (> 0)
        num_filters: Number of mel filters (> 0)
        num_coefs: Cepstral coefficients to keep (> 0, <= num_filters,
            < num_filters when energy is False)
        energy: Replace the first coefficient with the window log-energy
        pre_emphasis: Pre-emphasis factor, None to disable

    Returns:
        Array of shape (n_frames, num_coefs)

    Raises:
        MFCCParameterError: a parameter is out of range. Nothing is
            processed in that case.

    Examples
    --------
    >>> feats = mfcc_feats(np.arange(16000.0), 16000, 1024, 512, 512, 20, 13)
    >>> feats.shape
    (30, 13)
    """
    signal = np.asarray(signal, dtype=np.float64)
    if signal.ndim != 1:
        raise InvalidSignal(f"Input must be 1D, got shape {signal.shape}", signal.shape)

    validate_parameters(
        len(signal), sample_rate, window_length, window_stride,
        fft_size, num_filters, num_coefs, energy=energy
    )

    frames = split_signal(signal, window_length, window_stride)
    processor = MFCC(
        sample_rate, fft_size, num_filters, num_coefs,
        energy=energy, pre_emphasis=pre_emphasis
    )
    features = processor.process_frames(frames)

    logger.debug(f"Extracted {features.shape[0]}x{features.shape[1]} MFCCs from {len(signal)} samples")
    return features
