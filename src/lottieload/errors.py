"""Fatal load errors.

All four are raised by the loader and abort the load; no partial
composition is returned.
"""

from lottieload.codes import LoadErrorCode


class LottieLoadError(ValueError):
    """Base class for fatal load errors."""

    code: LoadErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class UnsupportedFormatError(LottieLoadError):
    """Unrecognized file extension, or an image entry with an unmappable extension."""

    code = LoadErrorCode.UNSUPPORTED_FORMAT


class MissingEntryError(LottieLoadError):
    """Zip bundle has no data.json entry."""

    code = LoadErrorCode.MISSING_ENTRY


class StreamUnavailableError(LottieLoadError):
    """No readable stream could be produced."""

    code = LoadErrorCode.STREAM_UNAVAILABLE


class ParseFailedError(LottieLoadError):
    """Parser ran but produced no composition."""

    code = LoadErrorCode.PARSE_FAILED
