"""Composition model: the root of a parsed Lottie document."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SerializationInfo, field_serializer

from .assets import AssetCollection


class Composition(BaseModel):
    """A parsed Lottie composition.

    Layers and markers are kept as raw JSON objects; only assets are modeled.
    The asset collection is owned by this composition and is mutated in place
    during asset resolution.
    """
    name: Optional[str] = None
    version: Optional[str] = None
    width: float = 0
    height: float = 0
    in_point: float = 0
    out_point: float = 0
    frame_rate: float = 0
    layers: List[Dict[str, Any]] = Field(default_factory=list)
    markers: List[Dict[str, Any]] = Field(default_factory=list)
    assets: AssetCollection = Field(default_factory=AssetCollection)

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    @field_serializer("assets")
    def serialize_assets(self, assets: AssetCollection, info: SerializationInfo) -> List[Dict[str, Any]]:
        mode = "json" if info.mode_is_json() else "python"
        return [asset.model_dump(mode=mode) for asset in assets]

    @property
    def duration_seconds(self) -> float:
        """Playback duration, or 0.0 when the frame rate is not positive."""
        if self.frame_rate <= 0:
            return 0.0
        return max(self.out_point - self.in_point, 0.0) / self.frame_rate
