"""Performance sentinels for loading large synthetic documents."""

from __future__ import annotations

import io
import json
import os
import zipfile
from time import perf_counter
from typing import Any, Dict, Tuple

from lottieload.api import load
from lottieload.contracts import LoadOptions, LoadResult

# Smallest valid PNG signature; the loader never decodes pixels.
_PNG_STUB = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _budget_from_env(var_name: str, default_ms: float) -> float:
    raw = os.getenv(var_name)
    if not raw:
        return default_ms
    try:
        return float(raw)
    except ValueError:
        return default_ms


MAX_LARGE_JSON_MS = _budget_from_env("LOTTIELOAD_MAX_LARGE_JSON_MS", 1000.0)
MAX_MANY_IMAGES_BUNDLE_MS = _budget_from_env("LOTTIELOAD_MAX_MANY_IMAGES_BUNDLE_MS", 1000.0)


def build_large_document(layer_count: int, image_count: int = 0) -> Dict[str, Any]:
    """Synthetic document with `layer_count` shape layers and `image_count` external images."""
    assets = [
        {"id": f"img_{i}", "w": 64, "h": 64, "u": "images/", "p": f"img_{i}.png", "e": 0}
        for i in range(image_count)
    ]
    layers = [
        {"ind": i + 1, "ty": 4, "nm": f"shape {i}", "ip": 0, "op": 120, "shapes": [{"ty": "rc"}]}
        for i in range(layer_count)
    ]
    layers.extend(
        {"ind": layer_count + i + 1, "ty": 2, "refId": f"img_{i}", "ip": 0, "op": 120}
        for i in range(image_count)
    )
    return {
        "v": "5.7.4", "nm": "sentinel", "w": 1920, "h": 1080,
        "ip": 0, "op": 120, "fr": 60, "assets": assets, "layers": layers,
    }


def build_bundle_bytes(document: Dict[str, Any], image_count: int) -> bytes:
    """Zip `document` as data.json plus `image_count` stub PNG entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("data.json", json.dumps(document))
        for i in range(image_count):
            archive.writestr(f"images/img_{i}.png", _PNG_STUB)
    return buffer.getvalue()


def _timed_load(source, options: LoadOptions = LoadOptions.ALL) -> Tuple[float, LoadResult]:
    start = perf_counter()
    result = load(source, options)
    elapsed_ms = (perf_counter() - start) * 1000.0
    return elapsed_ms, result


def benchmark_large_json(layer_count: int = 5000) -> Tuple[float, LoadResult]:
    payload = json.dumps(build_large_document(layer_count)).encode("utf-8")
    return _timed_load(payload)


def benchmark_many_images_bundle(path: os.PathLike, image_count: int = 200) -> Tuple[float, LoadResult]:
    """Write a bundle with `image_count` images to `path` and time loading it."""
    with open(path, "wb") as f:
        f.write(build_bundle_bytes(build_large_document(10, image_count), image_count))
    return _timed_load(path)
