"""Tests for the zip bundle provider and image asset resolution."""

import json
import zipfile

import pytest

from lottieload.api import load
from lottieload.contracts import LoadOptions
from lottieload.errors import MissingEntryError, StreamUnavailableError, UnsupportedFormatError
from lottieload.kernel.assets import AssetCollection, EmbeddedImageAsset, ExternalImageAsset
from lottieload.kernel.composition import Composition
from lottieload._internal.io.zip_bundle import ZipBundleProvider, image_format_for
from conftest import JPG_BYTES, PNG_BYTES, build_document, external_image, write_bundle


def _composition_with(*assets) -> Composition:
    return Composition(width=10, height=10, out_point=10, frame_rate=30, assets=AssetCollection(assets))


def test_open_stream_reads_data_json(tmp_path):
    doc = build_document()
    path = write_bundle(tmp_path / "a.lottie", doc)
    with ZipBundleProvider(path) as provider:
        assert json.load(provider.open_stream()) == doc


def test_missing_data_json(tmp_path):
    path = write_bundle(tmp_path / "a.lottie", None, {"other.json": b"{}"})
    with ZipBundleProvider(path) as provider:
        with pytest.raises(MissingEntryError):
            provider.open_stream()


def test_data_json_must_be_at_root(tmp_path):
    path = write_bundle(tmp_path / "a.lottie", None, {"animations/data.json": b"{}"})
    with ZipBundleProvider(path) as provider:
        with pytest.raises(MissingEntryError):
            provider.open_stream()


def test_not_a_zip(tmp_path):
    path = tmp_path / "broken.zip"
    path.write_bytes(b"definitely not a zip archive")
    with ZipBundleProvider(path) as provider:
        with pytest.raises(StreamUnavailableError):
            provider.open_stream()
    assert provider._file is None


def test_close_releases_handles(tmp_path):
    path = write_bundle(tmp_path / "a.zip", build_document())
    provider = ZipBundleProvider(path)
    with provider:
        stream = provider.open_stream()
        file_handle = provider._file
    assert stream.closed
    assert file_handle.closed
    assert provider._archive is None


@pytest.mark.parametrize(
    "name,expected",
    [("a.png", "png"), ("a.PNG", "png"), ("a.jpg", "jpg"), ("a.jpeg", "jpg"), ("dir/a.JPEG", "jpg")],
)
def test_image_format_for(name, expected):
    assert image_format_for(name) == expected


@pytest.mark.parametrize("name", ["a.bmp", "a.gif", "apng", "a"])
def test_image_format_for_unsupported(name):
    with pytest.raises(UnsupportedFormatError):
        image_format_for(name)


def test_resolve_replaces_external_with_embedded(tmp_path):
    path = write_bundle(tmp_path / "a.lottie", build_document(), {"foo.png": PNG_BYTES})
    composition = _composition_with(ExternalImageAsset(id="img_0", width=64, height=32, file_name="foo.png"))

    with ZipBundleProvider(path) as provider:
        provider.resolve_assets(composition)

    asset = composition.assets.get_asset_by_id("img_0")
    assert isinstance(asset, EmbeddedImageAsset)
    assert (asset.id, asset.width, asset.height) == ("img_0", 64, 32)
    assert asset.format == "png"
    assert asset.data == PNG_BYTES
    assert composition.assets.of_type(ExternalImageAsset) == []


def test_resolve_matches_entry_base_name(tmp_path):
    path = write_bundle(tmp_path / "a.lottie", build_document(), {"images/photo.jpeg": JPG_BYTES})
    composition = _composition_with(ExternalImageAsset(id="img", width=1, height=1, file_name="photo.jpeg"))

    with ZipBundleProvider(path) as provider:
        provider.resolve_assets(composition)

    asset = composition.assets.get_asset_by_id("img")
    assert isinstance(asset, EmbeddedImageAsset)
    assert asset.format == "jpg"
    assert asset.data == JPG_BYTES


def test_resolve_ignores_unreferenced_entries(tmp_path):
    path = write_bundle(
        tmp_path / "a.lottie",
        build_document(),
        {"unused.png": PNG_BYTES, "notes.bmp": b"BM", "readme.txt": b"hi"},
    )
    composition = _composition_with(ExternalImageAsset(id="img", width=1, height=1, file_name="foo.png"))

    with ZipBundleProvider(path) as provider:
        provider.resolve_assets(composition)

    # No entry for foo.png: left unresolved, not an error.
    assert isinstance(composition.assets.get_asset_by_id("img"), ExternalImageAsset)
    assert len(composition.assets) == 1


def test_resolve_referenced_unsupported_extension_fails(tmp_path):
    path = write_bundle(tmp_path / "a.lottie", build_document(), {"foo.bmp": b"BM"})
    composition = _composition_with(ExternalImageAsset(id="img", width=1, height=1, file_name="foo.bmp"))

    with ZipBundleProvider(path) as provider:
        with pytest.raises(UnsupportedFormatError):
            provider.resolve_assets(composition)


def test_resolve_all_assets_sharing_a_file(tmp_path):
    path = write_bundle(tmp_path / "a.lottie", build_document(), {"shared.png": PNG_BYTES})
    composition = _composition_with(
        ExternalImageAsset(id="a", width=1, height=1, file_name="shared.png"),
        ExternalImageAsset(id="b", width=2, height=2, file_name="shared.png"),
    )

    with ZipBundleProvider(path) as provider:
        provider.resolve_assets(composition)

    assert [type(a) for a in composition.assets] == [EmbeddedImageAsset, EmbeddedImageAsset]
    assert composition.assets.get_asset_by_id("b").width == 2


def test_resolve_twice_is_noop(tmp_path):
    path = write_bundle(tmp_path / "a.lottie", build_document(), {"foo.png": PNG_BYTES})
    composition = _composition_with(ExternalImageAsset(id="img", width=1, height=1, file_name="foo.png"))

    with ZipBundleProvider(path) as provider:
        provider.resolve_assets(composition)
        first = list(composition.assets)
        provider.resolve_assets(composition)

    assert list(composition.assets) == first


def test_resolve_without_external_assets_does_not_open_archive(tmp_path):
    provider = ZipBundleProvider(tmp_path / "never-created.lottie")
    provider.resolve_assets(_composition_with())
    assert provider._archive is None


def test_load_bundle_end_to_end(tmp_path):
    doc = build_document(
        assets=[external_image("img_0", "foo.png", w=64, h=32)],
        layers=[{"ind": 1, "ty": 2, "refId": "img_0", "ip": 0, "op": 60}],
    )
    path = write_bundle(tmp_path / "anim.lottie", doc, {"images/foo.png": PNG_BYTES})

    result = load(path, LoadOptions.INCLUDE_DIAGNOSTICS)

    asset = result.composition.assets.get_asset_by_id("img_0")
    assert isinstance(asset, EmbeddedImageAsset)
    assert (asset.width, asset.height, asset.format, asset.data) == (64, 32, "png", PNG_BYTES)
    assert result.diagnostics.file_name == "anim.lottie"
    assert result.diagnostics.validation_issues == []


def test_load_bundle_missing_data_json(tmp_path):
    path = write_bundle(tmp_path / "anim.zip", None, {"foo.png": PNG_BYTES})
    with pytest.raises(MissingEntryError):
        load(path)


def test_load_bundle_unsupported_referenced_image(tmp_path):
    doc = build_document(assets=[external_image("img", "foo.bmp")])
    path = write_bundle(tmp_path / "anim.zip", doc, {"foo.bmp": b"BM"})
    with pytest.raises(UnsupportedFormatError):
        load(path)


def test_load_bundle_with_corrupt_data_json_entry(tmp_path):
    path = tmp_path / "anim.zip"
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_STORED) as archive:
        archive.writestr("data.json", json.dumps(build_document()))
    raw = bytearray(path.read_bytes())
    # Flip a byte inside the stored data.json payload so its CRC no longer matches.
    offset = raw.index(b'"nm"')
    raw[offset + 1] = ord("X")
    path.write_bytes(bytes(raw))

    with pytest.raises(StreamUnavailableError):
        load(path)
