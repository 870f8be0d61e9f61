import base64
import os

import pytest

from tubely.assets import (
    asset_disk_path,
    asset_url,
    ensure_assets_dir,
    get_asset_path,
    media_type_to_ext,
    object_url,
)


@pytest.mark.parametrize(
    "media_type, ext",
    [("image/png", ".png"), ("image/jpeg", ".jpeg"), ("video/mp4", ".mp4")],
)
def test_media_type_to_ext(media_type, ext):
    assert media_type_to_ext(media_type) == ext


@pytest.mark.parametrize("media_type", ["", "png", "a/b/c"])
def test_media_type_to_ext_malformed(media_type):
    assert media_type_to_ext(media_type) == ".bin"


def test_get_asset_path_has_extension_and_random_id():
    path = get_asset_path("video/mp4")
    assert path.endswith(".mp4")
    asset_id = path[: -len(".mp4")]
    decoded = base64.urlsafe_b64decode(asset_id + "=" * (-len(asset_id) % 4))
    assert len(decoded) == 32
    assert "=" not in asset_id


def test_get_asset_path_is_unique():
    paths = {get_asset_path("image/png") for _ in range(50)}
    assert len(paths) == 50


def test_ensure_assets_dir_creates_and_is_idempotent(tmp_path):
    root = tmp_path / "assets"
    ensure_assets_dir(str(root))
    assert root.is_dir()
    (root / "keep.txt").write_text("x")
    ensure_assets_dir(str(root))
    assert (root / "keep.txt").read_text() == "x"


def test_ensure_assets_dir_needs_parent(tmp_path):
    with pytest.raises(FileNotFoundError):
        ensure_assets_dir(str(tmp_path / "missing" / "assets"))


def test_asset_disk_path_joins(tmp_path):
    result = asset_disk_path(str(tmp_path), "abc.png")
    assert os.path.dirname(result) == str(tmp_path)
    assert os.path.basename(result) == "abc.png"


def test_asset_url():
    assert asset_url("8091", "abc.png") == "http://localhost:8091/assets/abc.png"


def test_object_url():
    url = object_url("bucket", "us-east-2", "landscape/x.mp4")
    assert url == "https://bucket.s3.us-east-2.amazonaws.com/landscape/x.mp4"