# src/main.py
from __future__ import annotations

import logging
import sys
import time
from itertools import count
from typing import Callable

import cv2
import numpy as np

from config import Config, env_bool
from motion import MotionDecisionEngine
from recorder import RecordingSessionController
from video_io import CameraDisconnected, CameraError, clip_path, frame_size, make_writer, open_camera, read_frame
from visualize import render_preview

logger = logging.getLogger(__name__)

ESC = 27
PREVIEW_WINDOW = "color-motion-recorder"


def _no_key() -> int:
    return -1


def _poll_key() -> int:
    return cv2.waitKey(1) & 0xFF


def run_cycle(
    cap: cv2.VideoCapture,
    engine: MotionDecisionEngine,
    controller: RecordingSessionController,
    quiet_period_s: float,
    clock: Callable[[], float] = time.monotonic,
    poll_key: Callable[[], int] = _no_key,
    preview: bool = False,
) -> bool:
    """
    Detect and record one clip.

    Returns True if the operator asked to quit, False once a clip has been
    written. CameraDisconnected propagates to the caller.
    """
    cycle = engine.new_cycle()

    while True:
        frame = read_frame(cap)
        now = clock()

        # --- detection (idle only, gated by the quiet period) ---
        if not controller.recording and cycle.attempt_due(now, quiet_period_s):
            event = engine.evaluate(frame, cycle, now)
            if event is not None:
                if controller.start(frame):
                    logger.info(
                        "Started recording due to motion: %s moved %.1f px (%s -> %s)",
                        event.color, event.displacement, event.previous, event.current,
                    )
                else:
                    # sink would not open; back off like a no-motion attempt
                    cycle.last_attempt = now

        # --- write & stop ---
        if controller.recording:
            if controller.feed(frame):
                logger.info("Stopped recording after one clip.")
                return False
            if not controller.recording:
                cycle.last_attempt = now

        if preview:
            cv2.imshow(PREVIEW_WINDOW, render_preview(
                frame, cycle.centroids, controller.recording,
                controller.frames_written, controller.max_frames,
            ))

        if poll_key() == ESC:
            return True


def wait_for_operator() -> bool:
    try:
        input("Press Enter to start one detection/recording cycle...")
    except EOFError:
        return False
    return True


def make_sink_factory(cfg: Config) -> Callable[[np.ndarray], cv2.VideoWriter]:
    clip_numbers = count(1)

    def factory(frame: np.ndarray) -> cv2.VideoWriter:
        path = clip_path(cfg.output_path, next(clip_numbers))
        logger.info("Writing clip to %s", path)
        return make_writer(path, cfg.write_fps, frame_size(frame), cfg.codec)

    return factory


def run(
    cfg: Config,
    wait: Callable[[], bool] = wait_for_operator,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    try:
        cap = open_camera(cfg.camera_source)
    except CameraError as e:
        logger.error("%s", e)
        return 1

    engine = MotionDecisionEngine(cfg.colors, cfg.motion_threshold_px, cfg.erode_radius, cfg.dilate_radius)
    controller = RecordingSessionController(make_sink_factory(cfg), cfg.max_recording_frames)
    poll_key = _poll_key if cfg.show_preview else _no_key
    if not cfg.show_preview:
        # Escape is read through the preview window
        logger.info("Preview disabled; press Ctrl+C to quit")

    try:
        while wait():
            logger.info("Detection cycle started")
            if run_cycle(cap, engine, controller, cfg.quiet_period_s, clock=clock,
                         poll_key=poll_key, preview=cfg.show_preview):
                logger.info("Quit requested")
                break
    except CameraDisconnected as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        controller.stop()
        cap.release()
        if cfg.show_preview:
            cv2.destroyAllWindows()

    return 0


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def main() -> int:
    setup_logging(env_bool("VERBOSE", "false"))
    try:
        cfg = Config()
        cfg.validate()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    logger.info(
        "threshold=%.1fpx quiet=%.1fs clip=%d frames @ %.1f fps, colors=%s",
        cfg.motion_threshold_px, cfg.quiet_period_s, cfg.max_recording_frames,
        cfg.write_fps, ", ".join(c.name for c in cfg.colors),
    )
    return run(cfg)


if __name__ == "__main__":
    sys.exit(main())
