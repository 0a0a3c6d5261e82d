"""Error and issue code constants for lottieload.

These constants prevent stringly-typed codes and ensure
client code matches on the correct values.
"""

from enum import Enum


class LoadErrorCode(str, Enum):
    """Fatal load error codes (carried by LottieLoadError)."""

    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    MISSING_ENTRY = "MISSING_ENTRY"
    STREAM_UNAVAILABLE = "STREAM_UNAVAILABLE"
    PARSE_FAILED = "PARSE_FAILED"


class IssueCode(str, Enum):
    """Non-fatal issue codes produced by the default reader and validator."""

    # Reader (JSON parsing)
    INVALID_JSON = "LP0001"
    INVALID_ROOT = "LP0002"
    MISSING_FIELD = "LP0003"
    INVALID_FIELD = "LP0004"
    INVALID_ASSET = "LP0005"
    DUPLICATE_ASSET_ID = "LP0006"
    UNDECODABLE_IMAGE = "LP0007"

    # Validator
    NON_POSITIVE_FRAME_RATE = "LV0001"
    EMPTY_TIME_RANGE = "LV0002"
    NON_POSITIVE_SIZE = "LV0003"
    MISSING_ASSET_REF = "LV0004"
    UNRESOLVED_EXTERNAL_IMAGE = "LV0005"
    EMPTY_IMAGE_DATA = "LV0006"
