"""Tests for the plain JSON and storage-backed providers."""

import io
import json

import pytest

from lottieload.api import load, load_storage
from lottieload.contracts import LoadOptions
from lottieload.errors import ParseFailedError, StreamUnavailableError
from lottieload.kernel.assets import EmbeddedImageAsset, ExternalImageAsset
from lottieload._internal.io.json_file import JsonFileProvider
from lottieload._internal.io.storage import StorageProvider
from conftest import build_document, external_image, write_json


def test_json_provider_opens_and_closes(tmp_path):
    doc = build_document()
    path = write_json(tmp_path / "a.json", doc)
    with JsonFileProvider(path) as provider:
        stream = provider.open_stream()
        assert json.load(stream) == doc
    assert stream.closed


def test_json_provider_missing_file(tmp_path):
    with JsonFileProvider(tmp_path / "gone.json") as provider:
        with pytest.raises(StreamUnavailableError):
            provider.open_stream()


def test_json_load_never_embeds_images(tmp_path):
    doc = build_document(assets=[external_image("img", "foo.png")])
    path = write_json(tmp_path / "a.json", doc)
    # A sibling file with the same name is not picked up by the plain provider.
    (tmp_path / "foo.png").write_bytes(b"\x89PNG\r\n\x1a\n")

    composition = load(path).composition

    assert composition.assets.of_type(EmbeddedImageAsset) == []
    assert isinstance(composition.assets.get_asset_by_id("img"), ExternalImageAsset)


def test_json_load_keeps_source_embedded_images(tmp_path):
    data_uri = "data:image/png;base64,iVBORw0KGgpwbmc="
    doc = build_document(assets=[{"id": "inline", "w": 4, "h": 4, "u": "", "p": data_uri, "e": 1}])
    path = write_json(tmp_path / "a.json", doc)

    composition = load(path).composition

    embedded = composition.assets.of_type(EmbeddedImageAsset)
    assert [a.id for a in embedded] == ["inline"]


def test_storage_from_path_reports_display_name(tmp_path):
    path = write_json(tmp_path / "anim.json", build_document())
    result = load_storage(path, LoadOptions.INCLUDE_DIAGNOSTICS)
    assert result.diagnostics.file_name == "anim.json"
    assert result.composition.name == "test"


def test_storage_reads_any_extension_as_json(tmp_path):
    path = tmp_path / "anim.data"
    path.write_text(json.dumps(build_document()), encoding="utf-8")
    result = load_storage(path)
    assert result.composition.width == 512


def test_storage_from_stream_leaves_stream_open():
    stream = io.BytesIO(json.dumps(build_document()).encode("utf-8"))
    result = load_storage(stream, LoadOptions.INCLUDE_DIAGNOSTICS)
    assert result.diagnostics.file_name == ""
    assert not stream.closed


def test_storage_none_stream_is_unavailable():
    with pytest.raises(StreamUnavailableError):
        load_storage(None)


def test_storage_blank_path_rejected():
    with pytest.raises(ValueError):
        StorageProvider.from_path("   ")


def test_storage_missing_file_is_unavailable(tmp_path):
    with pytest.raises(StreamUnavailableError):
        load_storage(tmp_path / "missing.json")


def test_storage_does_not_resolve_assets(tmp_path):
    doc = build_document(assets=[external_image("img", "foo.png")])
    stream = io.BytesIO(json.dumps(doc).encode("utf-8"))
    composition = load_storage(stream).composition
    assert isinstance(composition.assets.get_asset_by_id("img"), ExternalImageAsset)


def test_stream_with_invalid_json_fails_parse():
    with pytest.raises(ParseFailedError):
        load(io.BytesIO(b"{not json"))


def test_storage_from_path_reads_through_json_provider(tmp_path):
    path = write_json(tmp_path / "anim.data", build_document())
    provider = StorageProvider.from_path(path)
    assert isinstance(provider._file, JsonFileProvider)

    with provider:
        stream = provider.open_stream()
        assert provider.open_stream() is stream
        assert json.load(stream)["nm"] == "test"
    assert stream.closed


def test_storage_from_stream_has_no_file_provider():
    stream = io.BytesIO(b"{}")
    with StorageProvider.from_stream(stream) as provider:
        assert provider._file is None
        assert provider.open_stream() is stream
    assert not stream.closed
