"""Engine exceptions.

Empty input and "no matching cluster" are normal return values, not errors.
"""


class PredictionError(Exception):
    """Base exception for all prediction engine errors."""
    pass


class InvalidParameter(PredictionError, ValueError):
    """Raised when a query parameter is out of range or malformed."""
    pass


class StorageError(PredictionError):
    """Raised when report or zone data cannot be read or parsed."""
    pass
