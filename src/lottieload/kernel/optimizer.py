"""Default optimizer: drops content that can never be shown.

The result is a new Composition; the input is left untouched.
"""

import logging
from typing import Any, Dict, List, Optional, Set

from .assets import Asset, AssetCollection, PrecompAsset
from .composition import Composition

logger = logging.getLogger(__name__)


def optimize(composition: Composition) -> Composition:
    """Return a simplified composition that renders identically.

    - Layers with an empty [ip, op) range are removed, at the top level and
      inside precomps. Top-level layers that end before the composition starts
      or start after it ends are removed too.
    - A removed layer is kept anyway when a kept layer depends on it: as its
      parent (directly or through a chain), or as the track matte (td) sitting
      directly above it.
    - Precomp assets that no remaining layer references are removed.
    Image assets are always kept.
    """
    comp_range = None
    if composition.out_point > composition.in_point:
        comp_range = (composition.in_point, composition.out_point)
    layers = _kept_layers(composition.layers, comp_range)

    precomps = {asset.id: asset for asset in composition.assets.of_type(PrecompAsset)}
    reachable = _reachable_precomps(layers, precomps)

    assets: List[Asset] = []
    for asset in composition.assets:
        if isinstance(asset, PrecompAsset):
            if asset.id not in reachable:
                continue
            kept = _kept_layers(asset.layers, None)
            if len(kept) != len(asset.layers):
                asset = asset.model_copy(update={"layers": kept})
        assets.append(asset)

    removed_layers = len(composition.layers) - len(layers)
    removed_precomps = len(precomps) - len(reachable)
    if removed_layers or removed_precomps:
        logger.debug(
            "Optimizer removed %d top-level layers and %d precomp assets",
            removed_layers, removed_precomps,
        )

    return composition.model_copy(
        update={
            "layers": layers,
            "markers": list(composition.markers),
            "assets": AssetCollection(assets),
        }
    )


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _is_visible(layer: Dict[str, Any], comp_range: Optional[tuple]) -> bool:
    ip = _number(layer.get("ip"))
    op = _number(layer.get("op"))
    if ip is None or op is None:
        return True
    if op <= ip:
        return False
    if comp_range is not None:
        start, end = comp_range
        if op <= start or ip >= end:
            return False
    return True


def _reachable_precomps(layers: List[Dict[str, Any]], precomps: Dict[str, PrecompAsset]) -> Set[str]:
    reachable: Set[str] = set()
    pending = [layer.get("refId") for layer in layers]
    while pending:
        ref_id = pending.pop()
        if not isinstance(ref_id, str) or ref_id in reachable or ref_id not in precomps:
            continue
        reachable.add(ref_id)
        pending.extend(layer.get("refId") for layer in _kept_layers(precomps[ref_id].layers, None))
    return reachable


def _kept_layers(layers: List[Dict[str, Any]], comp_range: Optional[tuple]) -> List[Dict[str, Any]]:
    """Visible layers plus every layer a visible one depends on, in original order."""
    keep = {index for index, layer in enumerate(layers) if _is_visible(layer, comp_range)}
    if len(keep) == len(layers):
        return list(layers)

    index_by_ind: Dict[float, int] = {}
    for index, layer in enumerate(layers):
        ind = _number(layer.get("ind"))
        if ind is not None:
            index_by_ind.setdefault(ind, index)

    # Parents and mattes can themselves have parents or mattes; run to a fixed point.
    changed = True
    while changed:
        changed = False
        for index in sorted(keep):
            parent = _number(layers[index].get("parent"))
            parent_index = index_by_ind.get(parent) if parent is not None else None
            if parent_index is not None and parent_index not in keep:
                keep.add(parent_index)
                changed = True
        for index, layer in enumerate(layers[:-1]):
            if index not in keep and layer.get("td") and index + 1 in keep:
                keep.add(index)
                changed = True

    return [layer for index, layer in enumerate(layers) if index in keep]
