import json
import subprocess
from unittest import mock

import pytest

from tubely.media import (
    MediaError,
    aspect_ratio_directory,
    classify_aspect_ratio,
    get_video_aspect_ratio,
    process_video_for_fast_start,
)


@pytest.mark.parametrize(
    "width, height, expected",
    [(1920, 1080, "16:9"), (1280, 720, "16:9"), (1080, 1920, "9:16"), (100, 100, "other")],
)
def test_classify_aspect_ratio(width, height, expected):
    assert classify_aspect_ratio(width, height) == expected


@pytest.mark.parametrize(
    "ratio, directory",
    [("16:9", "landscape"), ("9:16", "portrait"), ("other", "other"), ("4:3", "other")],
)
def test_aspect_ratio_directory(ratio, directory):
    assert aspect_ratio_directory(ratio) == directory


def _probe_result(payload):
    data = json.dumps(payload).encode()
    return subprocess.CompletedProcess(args=["ffprobe"], returncode=0, stdout=data)


def test_get_video_aspect_ratio_reads_first_stream():
    payload = {"streams": [{"width": 1080, "height": 1920}, {"width": 0, "height": 0}]}
    with mock.patch("tubely.media.subprocess.run", return_value=_probe_result(payload)) as run:
        assert get_video_aspect_ratio("clip.mp4") == "9:16"
    cmd = run.call_args.args[0]
    assert cmd[0] == "ffprobe"
    assert cmd[-1] == "clip.mp4"
    assert "-show_streams" in cmd


def test_get_video_aspect_ratio_no_streams():
    with mock.patch("tubely.media.subprocess.run", return_value=_probe_result({"streams": []})):
        with pytest.raises(MediaError, match="no video streams found"):
            get_video_aspect_ratio("clip.mp4")


def test_get_video_aspect_ratio_bad_json():
    bad = subprocess.CompletedProcess(args=["ffprobe"], returncode=0, stdout=b"not json")
    with mock.patch("tubely.media.subprocess.run", return_value=bad):
        with pytest.raises(MediaError, match="unmarshalling"):
            get_video_aspect_ratio("clip.mp4")


def test_get_video_aspect_ratio_command_fails():
    err = subprocess.CalledProcessError(1, ["ffprobe"])
    with mock.patch("tubely.media.subprocess.run", side_effect=err):
        with pytest.raises(MediaError, match="error executing ffprobe"):
            get_video_aspect_ratio("clip.mp4")


def test_process_video_for_fast_start(tmp_path):
    source = tmp_path / "in.mp4"
    source.write_bytes(b"raw")

    def fake_run(cmd, **kwargs):
        with open(cmd[-1], "wb") as fh:
            fh.write(b"processed")
        return subprocess.CompletedProcess(cmd, 0, stderr="")

    with mock.patch("tubely.media.subprocess.run", side_effect=fake_run) as run:
        result = process_video_for_fast_start(str(source))
    assert result == str(source) + ".processing"
    with open(result, "rb") as fh:
        assert fh.read() == b"processed"
    cmd = run.call_args.args[0]
    assert cmd[0] == "ffmpeg"
    assert "faststart" in cmd


def test_process_video_empty_output(tmp_path):
    source = tmp_path / "in.mp4"

    def fake_run(cmd, **kwargs):
        open(cmd[-1], "wb").close()
        return subprocess.CompletedProcess(cmd, 0, stderr="")

    with mock.patch("tubely.media.subprocess.run", side_effect=fake_run):
        with pytest.raises(MediaError, match="processed file is empty"):
            process_video_for_fast_start(str(source))


def test_process_video_missing_output(tmp_path):
    done = subprocess.CompletedProcess(["ffmpeg"], 0, stderr="")
    with mock.patch("tubely.media.subprocess.run", return_value=done):
        with pytest.raises(MediaError, match="could not stat processed file"):
            process_video_for_fast_start(str(tmp_path / "in.mp4"))


def test_process_video_command_fails(tmp_path):
    err = subprocess.CalledProcessError(1, ["ffmpeg"], stderr="boom")
    with mock.patch("tubely.media.subprocess.run", side_effect=err):
        with pytest.raises(MediaError, match="boom"):
            process_video_for_fast_start(str(tmp_path / "in.mp4"))