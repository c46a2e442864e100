"""Exception types raised by the aggregation engine."""


class RestoDashError(Exception):
    """Base class for dashboard engine errors."""


class ParseError(RestoDashError, ValueError):
    """Raised when a date string cannot be interpreted as ``YYYY-MM-DD``."""


class InvalidRangeError(RestoDashError, ValueError):
    """Raised when a date range ends before it starts."""


__all__ = ["InvalidRangeError", "ParseError", "RestoDashError"]
