from datetime import datetime
from typing import Optional

import cv2
import numpy as np


class CameraError(RuntimeError):
    pass


class CameraDisconnected(CameraError):
    pass


class VideoSinkError(RuntimeError):
    pass


def build_libcamera_pipeline(
    capture_size: tuple[int, int] = (800, 600),
    output_size: tuple[int, int] = (400, 300),
    rotate_180: bool = True,
) -> str:
    cw, ch = capture_size
    ow, oh = output_size
    parts = [
        f"libcamerasrc ! video/x-raw, width={cw}, height={ch}",
        f"videoconvert ! videoscale ! video/x-raw, width={ow}, height={oh}",
    ]
    if rotate_180:
        parts.append("videoflip method=rotate-180")
    parts.append("appsink drop=true max_buffers=2")
    return " ! ".join(parts)


def open_camera(source: str) -> cv2.VideoCapture:
    if source == "libcamera":
        cap = cv2.VideoCapture(build_libcamera_pipeline(), cv2.CAP_GSTREAMER)
    elif "!" in source:
        cap = cv2.VideoCapture(source, cv2.CAP_GSTREAMER)
    elif source.isdigit():
        cap = cv2.VideoCapture(int(source))
    else:
        cap = cv2.VideoCapture(source)

    if not cap.isOpened():
        raise CameraError(f"Could not open camera: {source}")
    return cap


def read_frame(cap: cv2.VideoCapture) -> np.ndarray:
    ok, frame = cap.read()
    if not ok or frame is None or frame.size == 0:
        raise CameraDisconnected("Camera disconnected!")
    return frame


def frame_size(frame: np.ndarray) -> tuple[int, int]:
    h, w = frame.shape[:2]
    return w, h


def clip_path(template: str, index: int, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return template.format(index=index, timestamp=now.strftime("%Y%m%d_%H%M%S"))


def make_writer(path: str, fps: float, size: tuple[int, int], codec: str = "MJPG") -> cv2.VideoWriter:
    if len(codec) != 4:
        raise VideoSinkError(f"Codec must be a four-character code, got {codec!r}")
    fourcc = cv2.VideoWriter_fourcc(*codec)
    writer = cv2.VideoWriter(path, fourcc, fps, size)
    if not writer.isOpened():
        raise VideoSinkError(f"Could not open video writer: {path}")
    return writer
