import cv2
import numpy as np

from video_io import VideoSinkError

BLUE = (255, 0, 0)
RED_LOW = (0, 0, 255)      # hue 0
RED_HIGH = (85, 0, 255)    # hue 170
GREEN = (0, 255, 0)
MAGENTA = (255, 0, 255)    # hue 150, between the red bands


def blank(w: int = 200, h: int = 200) -> np.ndarray:
    return np.zeros((h, w, 3), np.uint8)


def with_square(frame: np.ndarray, x: int, y: int, color, size: int = 20) -> np.ndarray:
    cv2.rectangle(frame, (x, y), (x + size - 1, y + size - 1), color, -1)
    return frame


def square(x: int, y: int, color, size: int = 20) -> np.ndarray:
    return with_square(blank(), x, y, color, size)


class FakeCapture:
    def __init__(self, frames):
        self.frames = list(frames)
        self.reads = 0
        self.released = False

    def read(self):
        self.reads += 1
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def isOpened(self):
        return True

    def release(self):
        self.released = True


class FakeSink:
    def __init__(self, fail_after=None):
        self.frames = []
        self.released = False
        self.fail_after = fail_after

    def write(self, frame):
        if self.fail_after is not None and len(self.frames) >= self.fail_after:
            raise VideoSinkError("disk full")
        self.frames.append(frame)

    def release(self):
        self.released = True


class Clock:
    def __init__(self, step: float, start: float = 0.0):
        self.t = start - step
        self.step = step

    def __call__(self) -> float:
        self.t += self.step
        return self.t
