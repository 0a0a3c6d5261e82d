"""lottieload: load Lottie compositions from JSON files and .lottie/.zip bundles."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("lottieload")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from lottieload.api import load, load_async, load_composition, load_storage, load_storage_async
from lottieload.contracts import Issue, LoadDiagnostics, LoadOptions, LoadResult
from lottieload.codes import IssueCode, LoadErrorCode
from lottieload.errors import (
    LottieLoadError,
    MissingEntryError,
    ParseFailedError,
    StreamUnavailableError,
    UnsupportedFormatError,
)
from lottieload.kernel.assets import (
    Asset,
    AssetCollection,
    EmbeddedImageAsset,
    ExternalImageAsset,
    PrecompAsset,
)
from lottieload.kernel.composition import Composition

__all__ = [
    "__version__",
    "load",
    "load_async",
    "load_composition",
    "load_storage",
    "load_storage_async",
    "Issue",
    "LoadDiagnostics",
    "LoadOptions",
    "LoadResult",
    "IssueCode",
    "LoadErrorCode",
    "LottieLoadError",
    "MissingEntryError",
    "ParseFailedError",
    "StreamUnavailableError",
    "UnsupportedFormatError",
    "Asset",
    "AssetCollection",
    "EmbeddedImageAsset",
    "ExternalImageAsset",
    "PrecompAsset",
    "Composition",
]
