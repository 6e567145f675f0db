from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import numpy as np

from config import ColorRange
from detector import Point, detect_centroid, hsv_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MotionEvent:
    color: str
    previous: Point
    current: Point
    displacement: float


def displacement(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def exceeds_threshold(prev: Optional[Point], new: Point, threshold: float) -> bool:
    # No prior observation never counts as motion.
    if prev is None:
        return False
    return displacement(prev, new) > threshold


@dataclass
class DetectionCycle:
    """
    State owned by one operator-started cycle.

    centroids: last valid centroid per color name, None until first seen.
    last_attempt: time of the last no-motion attempt; None means an attempt
    is due immediately.
    """
    color_names: Sequence[str]
    centroids: Dict[str, Optional[Point]] = field(default_factory=dict)
    last_attempt: Optional[float] = None

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.centroids = {name: None for name in self.color_names}
        self.last_attempt = None

    def attempt_due(self, now: float, quiet_period: float) -> bool:
        if self.last_attempt is None:
            return True
        # exclusive: exactly one quiet period later is not yet due
        return (now - self.last_attempt) > quiet_period


class MotionDecisionEngine:
    def __init__(
        self,
        colors: Sequence[ColorRange],
        threshold: float,
        erode_radius: int = 2,
        dilate_radius: int = 2,
    ) -> None:
        self.colors = tuple(colors)
        self.threshold = float(threshold)
        self.erode_radius = int(erode_radius)
        self.dilate_radius = int(dilate_radius)

    def new_cycle(self) -> DetectionCycle:
        return DetectionCycle([c.name for c in self.colors])

    def evaluate(self, frame: np.ndarray, cycle: DetectionCycle, now: float) -> Optional[MotionEvent]:
        """
        One detection attempt. Colors are scanned in priority order and the
        first one whose centroid moved more than the threshold wins; the
        remaining colors are not looked at this frame.
        """
        hsv = hsv_frame(frame)

        for color in self.colors:
            c = detect_centroid(hsv, color, self.erode_radius, self.dilate_radius)
            if c is None:
                # keep whatever we had; an empty mask is not an observation
                continue

            prev = cycle.centroids.get(color.name)
            if exceeds_threshold(prev, c, self.threshold):
                event = MotionEvent(color.name, prev, c, displacement(prev, c))
                logger.debug("motion: %s %s -> %s (%.1f px)", color.name, prev, c, event.displacement)
                return event

            cycle.centroids[color.name] = c

        logger.debug("no motion, centroids=%s", cycle.centroids)
        cycle.last_attempt = now
        return None
