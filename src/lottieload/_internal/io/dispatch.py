"""Select the stream provider for a load source."""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import BinaryIO, Union

from lottieload.errors import UnsupportedFormatError

from .json_file import JsonFileProvider
from .provider import StreamProvider
from .storage import StorageProvider
from .zip_bundle import ZipBundleProvider

Source = Union[str, os.PathLike, BinaryIO, bytes]

ZIP_EXTENSIONS = frozenset({".lottie", ".zip"})
JSON_EXTENSIONS = frozenset({".json"})


def select_provider(source: Source) -> StreamProvider:
    """Return the provider for a path, an open binary stream, or raw bytes.

    Paths are dispatched on their extension (case-insensitive). Streams and
    bytes are always treated as plain JSON; their content is not sniffed.
    No stream is opened here.
    """
    if isinstance(source, (bytes, bytearray)):
        return StorageProvider.from_stream(io.BytesIO(bytes(source)))
    if isinstance(source, (str, os.PathLike)):
        return _provider_for_path(Path(source))
    if hasattr(source, "read"):
        return StorageProvider.from_stream(source)
    raise TypeError(f"Unsupported load source type: {type(source).__name__}")


def _provider_for_path(path: Path) -> StreamProvider:
    ext = path.suffix.lower()
    if ext in ZIP_EXTENSIONS:
        provider: StreamProvider = ZipBundleProvider(path)
    elif ext in JSON_EXTENSIONS:
        provider = JsonFileProvider(path)
    else:
        raise UnsupportedFormatError(f"Unsupported file format: {ext or path.name}")

    if not path.is_file() or not os.access(path, os.R_OK):
        raise UnsupportedFormatError(f"File not found or unreadable: {path}")
    return provider
