"""
Exceptions raised by melceps.

Parameter errors are ValueErrors so callers that only know about the usual
numpy/scipy conventions still catch them.
"""


class MFCCParameterError(ValueError):
    """A feature extraction parameter is out of range."""

    def __init__(self, message: str, value=None):
        super().__init__(message)
        self.value = value


class InvalidSignal(MFCCParameterError):
    pass


class InvalidSampleRate(MFCCParameterError):
    pass


class InvalidWindowLength(MFCCParameterError):
    pass


class InvalidWindowStride(MFCCParameterError):
    pass


class InvalidFFTSize(MFCCParameterError):
    pass


class InvalidFilterCount(MFCCParameterError):
    pass


class InvalidCoefficientCount(MFCCParameterError):
    pass


class StreamClosedError(RuntimeError):
    """Raised when frames are submitted to a closed MFCCStream."""
