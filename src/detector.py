from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from config import ColorRange

Point = Tuple[int, int]


def hsv_frame(frame: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)


def color_mask_hsv(hsv: np.ndarray, color: ColorRange) -> np.ndarray:
    """Binary mask (0/255) of pixels inside any of the color's bands."""
    mask = None
    for lo, hi in color.bands:
        band = cv2.inRange(hsv, np.array(lo, np.uint8), np.array(hi, np.uint8))
        mask = band if mask is None else cv2.bitwise_or(mask, band)
    if mask is None:
        raise ValueError(f"color {color.name!r} has no HSV bands")
    return mask


def color_mask(frame: np.ndarray, color: ColorRange) -> np.ndarray:
    return color_mask_hsv(hsv_frame(frame), color)


def _disk(radius: int) -> np.ndarray:
    size = 2 * radius + 1
    return cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (size, size))


def apply_morphology(mask: np.ndarray, erode_radius: int, dilate_radius: int) -> np.ndarray:
    """Erode then dilate; a zero radius skips that step."""
    if erode_radius < 0 or dilate_radius < 0:
        raise ValueError("morphology radii must be >= 0")

    out = mask.copy()
    if erode_radius > 0:
        out = cv2.erode(out, _disk(erode_radius))
    if dilate_radius > 0:
        out = cv2.dilate(out, _disk(dilate_radius))
    return out


def locate_centroid(mask: np.ndarray) -> Optional[Point]:
    m = cv2.moments(mask, binaryImage=True)
    if m["m00"] <= 0:
        return None
    return int(m["m10"] / m["m00"]), int(m["m01"] / m["m00"])


def detect_centroid(
    hsv: np.ndarray,
    color: ColorRange,
    erode_radius: int,
    dilate_radius: int,
) -> Optional[Point]:
    mask = color_mask_hsv(hsv, color)
    mask = apply_morphology(mask, erode_radius, dilate_radius)
    return locate_centroid(mask)
