from datetime import datetime

import pytest

from frames import FakeCapture, blank
from video_io import (
    CameraDisconnected,
    VideoSinkError,
    build_libcamera_pipeline,
    clip_path,
    frame_size,
    make_writer,
    read_frame,
)


def test_libcamera_pipeline_matches_pi_setup():
    assert build_libcamera_pipeline() == (
        "libcamerasrc ! video/x-raw, width=800, height=600 ! "
        "videoconvert ! videoscale ! video/x-raw, width=400, height=300 ! "
        "videoflip method=rotate-180 ! appsink drop=true max_buffers=2"
    )


def test_libcamera_pipeline_without_rotation():
    assert "videoflip" not in build_libcamera_pipeline(rotate_180=False)


def test_read_frame_returns_frame():
    frame = blank()
    assert read_frame(FakeCapture([frame])) is frame


def test_read_frame_raises_on_empty_frame():
    with pytest.raises(CameraDisconnected):
        read_frame(FakeCapture([]))


def test_frame_size_is_width_height():
    assert frame_size(blank(400, 300)) == (400, 300)


def test_clip_path_placeholders():
    when = datetime(2024, 5, 1, 13, 4, 5)

    assert clip_path("motion.avi", 3, when) == "motion.avi"
    assert clip_path("clip_{index:03d}.avi", 7, when) == "clip_007.avi"
    assert clip_path("m_{timestamp}.avi", 1, when) == "m_20240501_130405.avi"


def test_make_writer_rejects_bad_codec(tmp_path):
    with pytest.raises(VideoSinkError):
        make_writer(str(tmp_path / "out.avi"), 15.0, (64, 48), codec="MJPEG")
