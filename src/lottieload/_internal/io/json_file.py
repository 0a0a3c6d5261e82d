"""Plain JSON file provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, ClassVar, Optional

from lottieload.errors import StreamUnavailableError
from lottieload.kernel.composition import Composition


@dataclass
class JsonFileProvider:
    """Reads a raw .json document. Plain files carry no sibling images."""

    path: Path
    kind: ClassVar[str] = "json"
    _stream: Optional[BinaryIO] = field(default=None, init=False, repr=False)

    @property
    def display_name(self) -> str:
        return self.path.name

    def open_stream(self) -> BinaryIO:
        if self._stream is None:
            try:
                self._stream = open(self.path, "rb")
            except OSError as e:
                raise StreamUnavailableError(f"Could not open {self.path}: {e}") from e
        return self._stream

    def resolve_assets(self, composition: Composition) -> None:
        return None

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def __enter__(self) -> JsonFileProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
