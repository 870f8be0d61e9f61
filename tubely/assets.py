"""Naming, placing and addressing uploaded asset files."""

from __future__ import annotations

import base64
import os
import secrets


def media_type_to_ext(media_type: str) -> str:
    """File extension for a media type such as ``image/png``; ``.bin`` if malformed."""
    parts = media_type.split("/")
    if len(parts) != 2:
        return ".bin"
    return "." + parts[1]


def get_asset_path(media_type: str) -> str:
    """A fresh random file name carrying the extension of ``media_type``."""
    raw = secrets.token_bytes(32)
    asset_id = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
    return f"{asset_id}{media_type_to_ext(media_type)}"


def ensure_assets_dir(assets_root: str) -> None:
    """Create the assets directory if it does not exist yet."""
    if not os.path.exists(assets_root):
        os.mkdir(assets_root, 0o755)


def asset_disk_path(assets_root: str, asset_path: str) -> str:
    """Where an asset lives on disk."""
    return os.path.join(assets_root, asset_path)


def asset_url(port: str, asset_path: str) -> str:
    """Public URL of a locally served asset."""
    return f"http://localhost:{port}/assets/{asset_path}"


def object_url(bucket: str, region: str, key: str) -> str:
    """Public URL of an object stored in an S3 bucket."""
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"