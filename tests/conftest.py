"""Pytest configuration and shared builders for Lottie documents and bundles.

No sys.path hacks - tests should import from installed lottieload package.
"""

import json
import os
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"png-payload"
JPG_BYTES = b"\xff\xd8\xff\xe0" + b"jpg-payload"


def pytest_addoption(parser):
    """Add gated perf test option."""
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Run timing-sensitive tests (gated)."
    )


def pytest_collection_modifyitems(config, items):
    """Skip perf-marked tests unless --run-perf is set."""
    if config.getoption("--run-perf"):
        return
    skip_perf = pytest.mark.skip(reason="perf tests gated; pass --run-perf")
    for item in items:
        if "perf" in item.keywords:
            item.add_marker(skip_perf)


def pytest_sessionfinish(session, exitstatus):
    """Best-effort cleanup for basetemp on Windows without patching pytest internals."""
    if os.name != "nt":
        return
    basetemp = getattr(session.config.option, "basetemp", None)
    if not basetemp:
        return
    basetemp_path = Path(basetemp)
    if not basetemp_path.exists():
        return
    try:
        import shutil
        shutil.rmtree(basetemp_path)
    except (PermissionError, OSError):
        # If cleanup fails, let it surface as a warning rather than masking errors.
        import warnings
        warnings.warn(f"Could not remove basetemp: {basetemp_path}")


def build_document(assets=None, layers=None, **overrides) -> Dict:
    """Minimal well-formed Lottie document."""
    doc = {
        "v": "5.7.4",
        "nm": "test",
        "w": 512,
        "h": 256,
        "ip": 0,
        "op": 60,
        "fr": 30,
        "assets": assets if assets is not None else [],
        "layers": layers if layers is not None else [
            {"ind": 1, "ty": 4, "nm": "shape", "ip": 0, "op": 60},
        ],
    }
    doc.update(overrides)
    return doc


def external_image(asset_id: str, file_name: str, w: int = 100, h: int = 50, u: str = "images/") -> Dict:
    return {"id": asset_id, "w": w, "h": h, "u": u, "p": file_name, "e": 0}


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_bundle(
    path: Path,
    doc: Optional[Dict],
    entries: Optional[Dict[str, bytes]] = None,
) -> Path:
    """Write a zip bundle. doc=None leaves out data.json."""
    with zipfile.ZipFile(path, "w") as archive:
        if doc is not None:
            archive.writestr("data.json", json.dumps(doc))
        for name, data in (entries or {}).items():
            archive.writestr(name, data)
    return path
