"""Default JSON reader: byte stream -> Composition plus non-fatal issues."""

import base64
import binascii
import json
import logging
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

from pydantic import ValidationError

from lottieload.codes import IssueCode
from .assets import Asset, AssetCollection, EmbeddedImageAsset, ExternalImageAsset, PrecompAsset
from .composition import Composition

logger = logging.getLogger(__name__)

RawIssue = Tuple[str, str]

# Document key -> Composition field, for the required numeric header fields
_NUMERIC_FIELDS = (
    ("w", "width"),
    ("h", "height"),
    ("ip", "in_point"),
    ("op", "out_point"),
    ("fr", "frame_rate"),
)

_MEDIA_TYPE_FORMATS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
}


def read_composition(stream: BinaryIO) -> Tuple[Optional[Composition], List[RawIssue]]:
    """Read a Lottie document from a binary stream.

    Returns (composition, issues). The composition is None only when the
    document is not a JSON object; every other problem is reported as an
    issue and the affected value is defaulted or skipped.
    """
    issues: List[RawIssue] = []
    try:
        data = json.load(stream)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        issues.append((IssueCode.INVALID_JSON.value, f"Invalid JSON: {e}"))
        return None, issues

    if not isinstance(data, dict):
        issues.append((IssueCode.INVALID_ROOT.value, f"Root must be a JSON object, got {type(data).__name__}"))
        return None, issues

    fields: Dict[str, Any] = {}
    for key, attr in _NUMERIC_FIELDS:
        fields[attr] = _read_number(data, key, issues)

    name = data.get("nm")
    fields["name"] = name if isinstance(name, str) else None
    version = data.get("v")
    fields["version"] = version if isinstance(version, str) else None

    fields["layers"] = _read_object_list(data, "layers", issues, required=True)
    fields["markers"] = _read_object_list(data, "markers", issues, required=False)
    fields["assets"] = AssetCollection(_read_assets(data.get("assets"), issues))

    composition = Composition(**fields)
    logger.debug(
        "Read composition %r: %d layers, %d assets, %d issues",
        composition.name, len(composition.layers), len(composition.assets), len(issues),
    )
    return composition, issues


def _read_number(data: Dict[str, Any], key: str, issues: List[RawIssue]) -> float:
    value = data.get(key)
    if value is None:
        issues.append((IssueCode.MISSING_FIELD.value, f"Missing required field {key!r}"))
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        issues.append((IssueCode.INVALID_FIELD.value, f"Field {key!r} must be a number, got {value!r}"))
        return 0
    return value


def _read_object_list(
    data: Dict[str, Any], key: str, issues: List[RawIssue], required: bool
) -> List[Dict[str, Any]]:
    value = data.get(key)
    if value is None:
        if required:
            issues.append((IssueCode.MISSING_FIELD.value, f"Missing required field {key!r}"))
        return []
    if not isinstance(value, list):
        issues.append((IssueCode.INVALID_FIELD.value, f"Field {key!r} must be a list"))
        return []
    return [item for item in value if isinstance(item, dict)]


def _read_assets(raw_assets: Any, issues: List[RawIssue]) -> List[Asset]:
    if raw_assets is None:
        return []
    if not isinstance(raw_assets, list):
        issues.append((IssueCode.INVALID_FIELD.value, "Field 'assets' must be a list"))
        return []

    assets: List[Asset] = []
    seen_ids = set()
    for index, raw in enumerate(raw_assets):
        asset = _read_asset(index, raw, issues)
        if asset is None:
            continue
        if asset.id in seen_ids:
            issues.append(
                (IssueCode.DUPLICATE_ASSET_ID.value, f"Duplicate asset id {asset.id!r}; keeping the first")
            )
        seen_ids.add(asset.id)
        assets.append(asset)
    return assets


def _read_asset(index: int, raw: Any, issues: List[RawIssue]) -> Optional[Asset]:
    if not isinstance(raw, dict):
        issues.append((IssueCode.INVALID_ASSET.value, f"Asset #{index} is not an object"))
        return None

    asset_id = raw.get("id")
    if isinstance(asset_id, (int, float)) and not isinstance(asset_id, bool):
        asset_id = str(asset_id)
    if not isinstance(asset_id, str) or not asset_id:
        issues.append((IssueCode.INVALID_ASSET.value, f"Asset #{index} has no id"))
        return None

    try:
        if "layers" in raw:
            return PrecompAsset(id=asset_id, layers=raw["layers"])

        file_ref = raw.get("p")
        if not isinstance(file_ref, str):
            issues.append((IssueCode.INVALID_ASSET.value, f"Asset {asset_id!r} has no layers or image reference"))
            return None

        width = raw.get("w", 0)
        height = raw.get("h", 0)
        if raw.get("e") == 1 or file_ref.startswith("data:"):
            decoded = _decode_data_uri(file_ref)
            if decoded is None:
                issues.append((IssueCode.UNDECODABLE_IMAGE.value, f"Asset {asset_id!r} has an undecodable image"))
                return None
            payload, image_format = decoded
            return EmbeddedImageAsset(id=asset_id, width=width, height=height, data=payload, format=image_format)

        directory = raw.get("u")
        return ExternalImageAsset(
            id=asset_id,
            width=width,
            height=height,
            file_name=file_ref,
            path=directory if isinstance(directory, str) else "",
        )
    except ValidationError as e:
        issues.append((IssueCode.INVALID_ASSET.value, f"Asset {asset_id!r} is invalid: {e.error_count()} error(s)"))
        return None


def _decode_data_uri(value: str) -> Optional[Tuple[bytes, str]]:
    """Decode an inline image. Returns (bytes, format) or None."""
    media_type = ""
    payload = value
    if value.startswith("data:"):
        header, sep, payload = value.partition(",")
        if not sep:
            return None
        media_type = header[len("data:"):].split(";", 1)[0].strip().lower()
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None

    image_format = _MEDIA_TYPE_FORMATS.get(media_type) or sniff_image_format(data)
    if image_format is None:
        return None
    return data, image_format


def sniff_image_format(data: bytes) -> Optional[str]:
    """Identify png/jpg payloads by magic bytes."""
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if data.startswith(b"\xff\xd8\xff"):
        return "jpg"
    return None
