"""
Push-style streaming adapter around an MFCC processor.

Frames (or raw sample chunks) are pushed in, coefficient vectors are
returned and forwarded to subscribers in delivery order. Everything runs
synchronously in the caller's thread.
"""

import logging
from typing import Callable, List, Optional, Sequence

import numpy as np

from .errors import InvalidWindowLength, InvalidWindowStride, StreamClosedError
from .mfcc import MFCC

logger = logging.getLogger(__name__)

Callback = Callable[[np.ndarray], None]


class Subscription:
    """Handle returned by MFCCStream.subscribe()."""

    def __init__(self, stream: 'MFCCStream', callback: Callback):
        self._stream = stream
        self.callback = callback

    @property
    def active(self) -> bool:
        return self in self._stream._subscriptions

    def unsubscribe(self) -> None:
        """Stop delivering coefficients to this callback. Idempotent."""
        if self.active:
            self._stream._subscriptions.remove(self)


class MFCCStream:
    """
    Feed frames to one MFCC processor and fan the results out.

    Args:
        processor: The processor owning the pre-emphasis state
        window_length: Frame length used by feed() (optional)
        window_stride: Hop between frames used by feed(). Defaults to
            window_length (no overlap).

    Example
    -------
    >>> stream = MFCCStream(MFCC(16000, 512, 20, 13), window_length=1024, window_stride=512)
    >>> sub = stream.subscribe(print)
    >>> stream.feed(chunk)
    >>> stream.close()
    """

    def __init__(
        self,
        processor: MFCC,
        window_length: Optional[int] = None,
        window_stride: Optional[int] = None
    ):
        if window_length is not None and window_length <= 0:
            raise InvalidWindowLength(f"Window length must be > 0 (got {window_length})", window_length)
        if window_stride is None:
            window_stride = window_length
        if window_stride is not None and window_stride <= 0:
            raise InvalidWindowStride(f"Stride must be > 0 (got {window_stride})", window_stride)

        self.processor = processor
        self.window_length = window_length
        self.window_stride = window_stride
        self.closed = False

        self._subscriptions: List[Subscription] = []
        self._buffer = np.empty(0)
        # Samples still to drop when the stride is longer than a window
        self._skip = 0

    def __enter__(self) -> 'MFCCStream':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def subscribe(self, callback: Callback) -> Subscription:
        """Register a callback receiving every coefficient vector from now on."""
        if self.closed:
            raise StreamClosedError("Cannot subscribe to a closed stream")
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def submit_frame(self, frame: Sequence[float]) -> np.ndarray:
        """Process one frame and forward its coefficients to all subscribers."""
        if self.closed:
            raise StreamClosedError("Cannot submit frames to a closed stream")

        coefs = self.processor.process_frame(frame)
        # Copy so a callback unsubscribing itself does not skip the next one
        for subscription in list(self._subscriptions):
            subscription.callback(coefs)
        return coefs

    def feed(self, samples: Sequence[float]) -> List[np.ndarray]:
        """
        Append raw samples and submit every complete frame.

        Framing matches split_signal() applied to the concatenation of all
        chunks fed so far.

        Returns:
            Coefficient vectors of the frames completed by this chunk
        """
        if self.closed:
            raise StreamClosedError("Cannot feed a closed stream")
        if self.window_length is None:
            raise InvalidWindowLength("feed() needs a window_length", None)

        samples = np.asarray(samples, dtype=np.float64).ravel()
        if self._skip:
            dropped = min(self._skip, len(samples))
            samples = samples[dropped:]
            self._skip -= dropped
        self._buffer = np.concatenate((self._buffer, samples))

        results = []
        while len(self._buffer) >= self.window_length:
            results.append(self.submit_frame(self._buffer[:self.window_length]))
            if self.window_stride > len(self._buffer):
                self._skip = self.window_stride - len(self._buffer)
                self._buffer = np.empty(0)
            else:
                self._buffer = self._buffer[self.window_stride:]
        return results

    def close(self) -> None:
        """Stop the stream: drop subscribers and pending samples."""
        if self.closed:
            return
        self.closed = True
        self._subscriptions.clear()
        self._buffer = np.empty(0)
        logger.debug("MFCC stream closed")
