"""Default validator: inspects a composition and reports issues.

Pure inspection; the composition is never mutated.
"""

from typing import Any, Dict, Iterable, List, Tuple

from lottieload.codes import IssueCode
from .assets import EmbeddedImageAsset, ExternalImageAsset, PrecompAsset
from .composition import Composition


def validate_composition(composition: Composition) -> List[Tuple[str, str]]:
    """Return (code, description) pairs for every problem found."""
    issues: List[Tuple[str, str]] = []

    if composition.frame_rate <= 0:
        issues.append((IssueCode.NON_POSITIVE_FRAME_RATE.value, f"Frame rate {composition.frame_rate} is not positive"))
    if composition.out_point <= composition.in_point:
        issues.append(
            (
                IssueCode.EMPTY_TIME_RANGE.value,
                f"Out point {composition.out_point} is not after in point {composition.in_point}",
            )
        )
    if composition.width <= 0 or composition.height <= 0:
        issues.append(
            (IssueCode.NON_POSITIVE_SIZE.value, f"Size {composition.width}x{composition.height} is not positive")
        )

    issues.extend(_check_refs(composition, composition.layers, "composition"))
    for precomp in composition.assets.of_type(PrecompAsset):
        issues.extend(_check_refs(composition, precomp.layers, f"precomp {precomp.id!r}"))

    for asset in composition.assets.of_type(ExternalImageAsset):
        issues.append(
            (
                IssueCode.UNRESOLVED_EXTERNAL_IMAGE.value,
                f"Image asset {asset.id!r} references external file {asset.file_name!r}",
            )
        )
    for asset in composition.assets.of_type(EmbeddedImageAsset):
        if not asset.data:
            issues.append((IssueCode.EMPTY_IMAGE_DATA.value, f"Image asset {asset.id!r} has no data"))

    return issues


def _check_refs(composition: Composition, layers: Iterable[Dict[str, Any]], owner: str) -> List[Tuple[str, str]]:
    issues = []
    for layer in layers:
        ref_id = layer.get("refId")
        if ref_id is None:
            continue
        if composition.assets.get_asset_by_id(str(ref_id)) is None:
            issues.append(
                (
                    IssueCode.MISSING_ASSET_REF.value,
                    f"Layer {layer.get('nm', layer.get('ind'))!r} in {owner} references missing asset {ref_id!r}",
                )
            )
    return issues
