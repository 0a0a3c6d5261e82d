"""Stream provider contract shared by the json, zip and storage providers."""

from typing import BinaryIO, Protocol

from lottieload.kernel.composition import Composition


class StreamProvider(Protocol):
    """Opens the document stream and resolves assets for one load.

    Providers are context managers: leaving the ``with`` block releases every
    handle the provider opened, whatever the exit path.
    """

    kind: str

    @property
    def display_name(self) -> str:
        ...

    def open_stream(self) -> BinaryIO:
        ...

    def resolve_assets(self, composition: Composition) -> None:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "StreamProvider":
        ...

    def __exit__(self, *exc_info: object) -> None:
        ...
