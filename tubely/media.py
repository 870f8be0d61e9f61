"""Inspecting and preparing uploaded videos with ffprobe and ffmpeg."""

from __future__ import annotations

import json
import os
import subprocess


class MediaError(Exception):
    """A video could not be inspected or processed."""


def classify_aspect_ratio(width: int, height: int) -> str:
    """Return ``16:9``, ``9:16`` or ``other`` for the given frame size."""
    if width == 16 * height // 9:
        return "16:9"
    if height == 16 * width // 9:
        return "9:16"
    return "other"


def aspect_ratio_directory(aspect_ratio: str) -> str:
    """Storage directory for videos of the given aspect ratio."""
    return {"16:9": "landscape", "9:16": "portrait"}.get(aspect_ratio, "other")


def get_video_aspect_ratio(file_path: str) -> str:
    """Aspect ratio of the first stream of a video file, read with ffprobe."""
    cmd = ["ffprobe", "-v", "error", "-print_format", "json", "-show_streams", file_path]
    try:
        result = subprocess.run(cmd, stdout=subprocess.PIPE, check=True)
    except (subprocess.CalledProcessError, OSError) as exc:
        raise MediaError(f"error executing ffprobe -show_streams {exc}") from exc

    try:
        output = json.loads(result.stdout)
    except (ValueError, TypeError) as exc:
        raise MediaError(f"error unmarshalling ffprobe -show_streams {exc}") from exc

    streams = output.get("streams") or [] if isinstance(output, dict) else []
    if not streams:
        raise MediaError("no video streams found")

    first = streams[0]
    return classify_aspect_ratio(int(first.get("width", 0)), int(first.get("height", 0)))


def process_video_for_fast_start(input_file_path: str) -> str:
    """Rewrite a video with its index at the front; return the new file's path."""
    processed_file_path = f"{input_file_path}.processing"
    cmd = [
        "ffmpeg",
        "-i",
        input_file_path,
        "-movflags",
        "faststart",
        "-codec",
        "copy",
        "-f",
        "mp4",
        processed_file_path,
    ]
    try:
        subprocess.run(cmd, stderr=subprocess.PIPE, text=True, check=True)
    except subprocess.CalledProcessError as exc:
        raise MediaError(f"error processing video: {exc.stderr or ''}, {exc}") from exc
    except OSError as exc:
        raise MediaError(f"error processing video: , {exc}") from exc

    try:
        size = os.stat(processed_file_path).st_size
    except OSError as exc:
        raise MediaError(f"could not stat processed file: {exc}") from exc
    if size == 0:
        raise MediaError("processed file is empty")

    return processed_file_path