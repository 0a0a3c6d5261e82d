"""Zip bundle provider (.zip and .lottie).

The bundle holds the document as ``data.json`` and may carry the images its
external image assets refer to. Images are matched by entry base name, so
``images/img_0.png`` satisfies an asset whose file name is ``img_0.png``.
"""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import BinaryIO, ClassVar, Dict, List, Optional

from lottieload.errors import MissingEntryError, StreamUnavailableError, UnsupportedFormatError
from lottieload.kernel.assets import EmbeddedImageAsset, ExternalImageAsset
from lottieload.kernel.composition import Composition

logger = logging.getLogger(__name__)

DATA_ENTRY_NAME = "data.json"

# Case-insensitive entry extension -> canonical image format tag
IMAGE_FORMATS = {
    ".png": "png",
    ".jpg": "jpg",
    ".jpeg": "jpg",
}


def image_format_for(entry_name: str) -> str:
    """Map an image entry name to its format tag. Raises UnsupportedFormatError."""
    suffix = PurePosixPath(entry_name).suffix.lower()
    try:
        return IMAGE_FORMATS[suffix]
    except KeyError:
        raise UnsupportedFormatError(f"Unsupported image format for bundle entry {entry_name!r}") from None


@dataclass
class ZipBundleProvider:
    """Reads data.json and image entries from a zip archive."""

    path: Path
    kind: ClassVar[str] = "zip"
    _file: Optional[BinaryIO] = field(default=None, init=False, repr=False)
    _archive: Optional[zipfile.ZipFile] = field(default=None, init=False, repr=False)
    _stream: Optional[BinaryIO] = field(default=None, init=False, repr=False)

    @property
    def display_name(self) -> str:
        return self.path.name

    def _open_archive(self) -> zipfile.ZipFile:
        if self._archive is not None:
            return self._archive
        try:
            self._file = open(self.path, "rb")
            self._archive = zipfile.ZipFile(self._file, "r")
        except (OSError, zipfile.BadZipFile) as e:
            self.close()
            raise StreamUnavailableError(f"Could not open archive {self.path}: {e}") from e
        return self._archive

    def open_stream(self) -> BinaryIO:
        archive = self._open_archive()
        if self._stream is None:
            try:
                info = archive.getinfo(DATA_ENTRY_NAME)
            except KeyError:
                raise MissingEntryError(f"{self.path.name} has no {DATA_ENTRY_NAME} entry") from None
            self._stream = archive.open(info, "r")
        return self._stream

    def resolve_assets(self, composition: Composition) -> None:
        """Replace external image assets with embedded copies read from the archive.

        Entries that no asset refers to are ignored, and assets with no entry
        are left as they are. An entry that an asset refers to but whose
        extension is not png/jpg/jpeg is an UnsupportedFormatError.
        """
        pending: Dict[str, List[ExternalImageAsset]] = {}
        for asset in composition.assets.of_type(ExternalImageAsset):
            pending.setdefault(asset.file_name, []).append(asset)
        if not pending:
            return

        archive = self._open_archive()
        for info in archive.infolist():
            if info.is_dir():
                continue
            entry_name = PurePosixPath(info.filename).name
            matches = pending.pop(entry_name, None)
            if not matches:
                continue

            image_format = image_format_for(entry_name)
            try:
                data = archive.read(info)
            except (OSError, zipfile.BadZipFile) as e:
                logger.warning("Skipping unreadable bundle entry %s: %s", info.filename, e)
                continue

            for external in matches:
                composition.assets.remove(external)
                composition.assets.add(
                    EmbeddedImageAsset(
                        id=external.id,
                        width=external.width,
                        height=external.height,
                        data=data,
                        format=image_format,
                    )
                )
                logger.debug("Embedded image asset %s from %s", external.id, info.filename)

        for file_name in pending:
            logger.debug("No bundle entry for external image %s", file_name)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        if self._archive is not None:
            self._archive.close()
            self._archive = None
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> ZipBundleProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
