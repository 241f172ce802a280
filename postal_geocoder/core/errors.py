"""Exceptions raised by the geocoder core."""


class GeocoderError(Exception):
    """Base class for geocoder errors."""


class NotInitializedError(GeocoderError):
    """Lookup attempted before the spatial index was built."""

    def __init__(self, message: str = "You must first call init before calling look_up"):
        super().__init__(message)


class MalformedRecordError(GeocoderError, ValueError):
    """A source line could not be turned into a postal code record."""

    def __init__(self, message: str, line_number: int = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class InvalidQueryPointError(GeocoderError, ValueError):
    """Query coordinates are missing, non-numeric or out of range."""


class DataDownloadError(GeocoderError):
    """The postal code dataset could not be obtained."""
