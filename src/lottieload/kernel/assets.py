"""Asset records and the id-indexed AssetCollection."""

from typing import Any, Dict, Iterable, Iterator, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Asset(BaseModel):
    """Base for every asset record. Assets are identified by id within a composition."""
    id: str

    model_config = ConfigDict(frozen=True, extra="forbid")


class ExternalImageAsset(Asset):
    """An image referenced by file name, not embedded in the JSON document."""
    kind: Literal["external_image"] = "external_image"
    width: float
    height: float
    file_name: str
    path: str = ""  # directory hint from the document's "u" field


class EmbeddedImageAsset(Asset):
    """An image whose bytes are held inline."""
    kind: Literal["embedded_image"] = "embedded_image"
    width: float
    height: float
    data: bytes = Field(repr=False)
    format: Literal["png", "jpg"]

    model_config = ConfigDict(frozen=True, extra="forbid", ser_json_bytes="base64")


class PrecompAsset(Asset):
    """A precomposition: a nested list of layers referenced by id."""
    kind: Literal["precomp"] = "precomp"
    layers: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("layers", mode="before")
    @classmethod
    def validate_layers(cls, v: Any) -> List[Dict[str, Any]]:
        """Keep only object-shaped layers."""
        if not isinstance(v, list):
            raise ValueError("precomp layers must be a list")
        return [layer for layer in v if isinstance(layer, dict)]


AnyAsset = Union[ExternalImageAsset, EmbeddedImageAsset, PrecompAsset]

A = TypeVar("A", bound=Asset)


class AssetCollection:
    """Ordered assets plus an id index.

    Both structures are updated together: every id in the index maps to
    exactly one entry in the ordered list, and vice versa.
    """

    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._assets: List[Asset] = []
        self._assets_by_id: Dict[str, Asset] = {}
        for asset in assets:
            # Later assets with an id already seen are dropped. Ids should be
            # unique, but a document that repeats one still loads.
            if asset.id in self._assets_by_id:
                continue
            self._assets.append(asset)
            self._assets_by_id[asset.id] = asset

    def get_asset_by_id(self, asset_id: Optional[str]) -> Optional[Asset]:
        """Return the asset with the given id, or None if not found."""
        if asset_id is None:
            return None
        return self._assets_by_id.get(asset_id)

    def add(self, asset: Asset) -> None:
        """Append an asset. Raises ValueError if its id is already present."""
        if asset.id in self._assets_by_id:
            raise ValueError(f"Asset id {asset.id!r} already present")
        self._assets.append(asset)
        self._assets_by_id[asset.id] = asset

    def remove(self, asset: Asset) -> None:
        """Remove an asset. Removing a non-member is a no-op."""
        current = self._assets_by_id.get(asset.id)
        if current is None or current != asset:
            return
        self._assets.remove(current)
        del self._assets_by_id[asset.id]

    def of_type(self, asset_type: Type[A]) -> List[A]:
        """Return the assets of the given type, in collection order."""
        return [asset for asset in self._assets if isinstance(asset, asset_type)]

    def ids(self) -> List[str]:
        return [asset.id for asset in self._assets]

    def __iter__(self) -> Iterator[Asset]:
        return iter(list(self._assets))

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._assets_by_id
        if isinstance(item, Asset):
            return self._assets_by_id.get(item.id) == item
        return False

    def __repr__(self) -> str:
        return f"AssetCollection({self.ids()!r})"
