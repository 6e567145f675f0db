from typing import Mapping, Optional, Tuple

import cv2
import numpy as np

# BGR marker colors per color class; unknown names fall back to grey
MARKER_COLORS = {
    "blue": (255, 0, 0),
    "red": (0, 0, 255),
    "green": (0, 255, 0),
    "yellow": (0, 255, 255),
    "white": (255, 255, 255),
}


def draw_centroid(frame: np.ndarray, name: str, c: Tuple[int, int]) -> None:
    color = MARKER_COLORS.get(name, (128, 128, 128))
    cv2.circle(frame, c, 5, color, -1)
    cv2.putText(frame, name, (c[0] + 8, c[1] - 8), cv2.FONT_HERSHEY_SIMPLEX, 0.4, color, 1)


def draw_status(frame: np.ndarray, recording: bool, frames_written: int = 0, max_frames: int = 0) -> None:
    if recording:
        text, color = f"REC {frames_written}/{max_frames}", (0, 0, 255)
    else:
        text, color = "IDLE", (200, 200, 200)
    cv2.putText(frame, text, (8, 18), cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 1)


def render_preview(
    frame: np.ndarray,
    centroids: Mapping[str, Optional[Tuple[int, int]]],
    recording: bool,
    frames_written: int = 0,
    max_frames: int = 0,
) -> np.ndarray:
    # draw on a copy; the original frame goes to the video sink untouched
    out = frame.copy()
    for name, c in centroids.items():
        if c is not None:
            draw_centroid(out, name, c)
    draw_status(out, recording, frames_written, max_frames)
    return out
