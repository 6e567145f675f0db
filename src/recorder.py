from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional

import cv2
import numpy as np

from video_io import VideoSinkError

logger = logging.getLogger(__name__)

# Called with the first clip frame; returns anything with write() and release(),
# e.g. a cv2.VideoWriter
SinkFactory = Callable[[np.ndarray], Any]


class SessionState(Enum):
    IDLE = "idle"
    RECORDING = "recording"


class RecordingSessionController:
    """
    Gates frames into the video sink.

    IDLE -> RECORDING on start(frame); every feed() while recording writes one
    frame, and the session closes itself after max_frames frames.
    A sink failure drops the session and goes back to IDLE.
    """

    def __init__(self, sink_factory: SinkFactory, max_frames: int) -> None:
        if max_frames < 1:
            raise ValueError(f"max_frames must be >= 1, got {max_frames}")
        self.sink_factory = sink_factory
        self.max_frames = int(max_frames)
        self.state = SessionState.IDLE
        self.frames_written = 0
        self._sink: Optional[Any] = None

    @property
    def recording(self) -> bool:
        return self.state is SessionState.RECORDING

    def start(self, frame: np.ndarray) -> bool:
        """Open the sink sized for frame. False if already recording or the sink failed."""
        if self.recording:
            return False
        try:
            self._sink = self.sink_factory(frame)
        except (VideoSinkError, cv2.error) as e:
            logger.error("Could not start recording: %s", e)
            self._sink = None
            return False

        self.frames_written = 0
        self.state = SessionState.RECORDING
        return True

    def feed(self, frame: np.ndarray) -> bool:
        """Write one frame. Returns True when this frame completed the clip."""
        if not self.recording:
            return False

        try:
            self._sink.write(frame)
        except (VideoSinkError, cv2.error) as e:
            logger.error("Video sink failed after %d frames, dropping session: %s", self.frames_written, e)
            self.stop()
            return False

        self.frames_written += 1
        if self.frames_written >= self.max_frames:
            self.stop()
            return True
        return False

    def stop(self) -> None:
        if self._sink is not None:
            self._sink.release()
        self._sink = None
        self.frames_written = 0
        self.state = SessionState.IDLE

