"""Storage-backed provider: a named file or a stream supplied by the caller."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, ClassVar, Optional, Union

from lottieload.errors import StreamUnavailableError
from lottieload.kernel.composition import Composition

from .json_file import JsonFileProvider


@dataclass
class StorageProvider:
    """Opens a document from storage, or wraps an already-open stream.

    Named files are read through a JsonFileProvider, whatever their extension.
    A caller-supplied stream stays owned by the caller and is not closed.
    No asset resolution happens here (there is no archive to read from).
    """

    path: Optional[Path] = None
    stream: Optional[BinaryIO] = None
    kind: ClassVar[str] = "storage"
    _file: Optional[JsonFileProvider] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.path is not None:
            self._file = JsonFileProvider(self.path)

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike]) -> StorageProvider:
        if not str(path).strip():
            raise ValueError("path must be a non-empty string")
        return cls(path=Path(path))

    @classmethod
    def from_stream(cls, stream: Optional[BinaryIO]) -> StorageProvider:
        return cls(stream=stream)

    @property
    def display_name(self) -> str:
        return self._file.display_name if self._file is not None else ""

    def open_stream(self) -> BinaryIO:
        if self._file is not None:
            return self._file.open_stream()
        if self.stream is None:
            raise StreamUnavailableError("No stream was supplied")
        return self.stream

    def resolve_assets(self, composition: Composition) -> None:
        return None

    def close(self) -> None:
        if self._file is not None:
            self._file.close()

    def __enter__(self) -> StorageProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
