import os
from dataclasses import dataclass, field
from typing import Tuple

HSV = Tuple[int, int, int]
Band = Tuple[HSV, HSV]  # (lower, upper), inclusive


@dataclass(frozen=True)
class ColorRange:
    name: str
    # One band for most colors; red needs two because hue wraps at 0/180.
    bands: Tuple[Band, ...]


# Priority order: earlier colors win when several move in the same frame.
COLOR_RANGES: Tuple[ColorRange, ...] = (
    ColorRange("blue", (((100, 100, 50), (130, 255, 255)),)),
    ColorRange("red", (
        ((0, 100, 50), (10, 255, 255)),
        ((160, 100, 50), (179, 255, 255)),
    )),
    ColorRange("green", (((40, 70, 50), (80, 255, 255)),)),
    ColorRange("yellow", (((20, 100, 100), (30, 255, 255)),)),
    ColorRange("white", (((0, 0, 200), (179, 30, 255)),)),
)


def env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def max_frames_for(fps: float, duration_s: float) -> int:
    # round half up: 15 fps * 30 s -> 450
    return int(fps * duration_s + 0.5)


@dataclass(frozen=True)
class Config:
    # "libcamera" selects the Pi camera pipeline; otherwise a device index,
    # a file path or a raw GStreamer pipeline.
    camera_source: str = field(default_factory=lambda: os.getenv("CAMERA_SOURCE", "libcamera"))

    # {index} and {timestamp} are substituted per clip when present
    output_path: str = field(default_factory=lambda: os.getenv("OUTPUT_PATH", "motion.avi"))
    codec: str = field(default_factory=lambda: os.getenv("VIDEO_CODEC", "MJPG"))

    # Recording
    write_fps: float = field(default_factory=lambda: float(os.getenv("WRITE_FPS", "15.0")))
    record_duration_s: float = field(default_factory=lambda: float(os.getenv("RECORD_DURATION_S", "30")))

    # Detection
    motion_threshold_px: float = field(default_factory=lambda: float(os.getenv("MOTION_THRESHOLD_PX", "30.0")))
    quiet_period_s: float = field(default_factory=lambda: float(os.getenv("QUIET_PERIOD_S", "10")))
    erode_radius: int = field(default_factory=lambda: int(os.getenv("ERODE_RADIUS", "2")))
    dilate_radius: int = field(default_factory=lambda: int(os.getenv("DILATE_RADIUS", "2")))
    colors: Tuple[ColorRange, ...] = COLOR_RANGES

    show_preview: bool = field(default_factory=lambda: env_bool("SHOW_PREVIEW", "true"))

    @property
    def max_recording_frames(self) -> int:
        return max_frames_for(self.write_fps, self.record_duration_s)

    def validate(self) -> None:
        if self.write_fps <= 0:
            raise ValueError(f"write_fps must be positive, got {self.write_fps}")
        if self.record_duration_s <= 0:
            raise ValueError(f"record_duration_s must be positive, got {self.record_duration_s}")
        if self.max_recording_frames < 1:
            raise ValueError("write_fps * record_duration_s must give at least one frame")
        if self.motion_threshold_px < 0:
            raise ValueError(f"motion_threshold_px must be >= 0, got {self.motion_threshold_px}")
        if self.quiet_period_s < 0:
            raise ValueError(f"quiet_period_s must be >= 0, got {self.quiet_period_s}")
        if self.erode_radius < 0 or self.dilate_radius < 0:
            raise ValueError("erode_radius and dilate_radius must be >= 0")
        if not self.colors:
            raise ValueError("at least one color range is required")
