"""Baseline calibration, normalisation and drawing of a 3x3 pressure grid."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

GRID_SIZE = 9
BORDER = 130
FULL_SCALE = 710
CANVAS_SIZE = (500, 500)
CANVAS_CENTER = (250, 250)
GRID_POSITIONS: tuple[tuple[int, int], ...] = (
    (125, 125), (250, 125), (375, 125),
    (125, 250), (250, 250), (375, 250),
    (125, 375), (250, 375), (375, 375),
)

WHITE = (255, 255, 255)
BLUE = (0, 0, 255)
RED = (255, 0, 0)


class BaselineCalibration:
    """Learns a non-zero baseline reading for each sensor."""

    def __init__(self, count: int = GRID_SIZE) -> None:
        if count < 1:
            raise ValueError("count must be at least 1")
        self.minima = [0] * count
        self.complete = False

    def update(self, current: Sequence[int], previous: Sequence[int]) -> bool:
        """Take baselines from a new sample; return whether every sensor has one.

        A sensor's baseline is taken once, from the first reading that is non-zero
        and not lower than the previous reading.
        """
        if len(current) != len(self.minima) or len(previous) != len(self.minima):
            raise ValueError("sample length does not match sensor count")
        if self.complete:
            return True
        all_set = True
        for k, (now, before) in enumerate(zip(current, previous)):
            if self.minima[k] != 0:
                continue
            if now != 0 and now >= before:
                self.minima[k] = now
            else:
                all_set = False
        if all_set:
            self.complete = True
            logger.info("Calibration complete for %d sensors.", len(self.minima))
        return self.complete


def all_above(values: Iterable[int], border: int = BORDER) -> bool:
    """Whether every reading is strictly above ``border``."""
    return all(value > border for value in values)


def normalize(
    values: Sequence[int], baseline: Sequence[int], full_scale: int = FULL_SCALE
) -> list[float]:
    """Scale each reading to 0..1 between its baseline and ``full_scale``."""
    weights = []
    for value, low in zip(values, baseline, strict=True):
        span = full_scale - low
        weight = 0.0 if span <= 0 else (value - low) / span
        weights.append(min(max(weight, 0.0), 1.0))
    return weights


def weighted_center(
    weights: Sequence[float],
    positions: Sequence[tuple[int, int]] = GRID_POSITIONS,
) -> tuple[int, int]:
    """Weight-averaged position, or the canvas centre when all weights are zero."""
    total = 0.0
    wx = 0.0
    wy = 0.0
    for weight, (x, y) in zip(weights, positions, strict=True):
        wx += weight * x
        wy += weight * y
        total += weight
    if total > 0.0:
        return int(wx / total), int(wy / total)
    return CANVAS_CENTER


def render(weights: Sequence[float], center: tuple[int, int]) -> Image.Image:
    """Draw a circle per sensor sized by its weight, and a dot at ``center``."""
    image = Image.new("RGB", CANVAS_SIZE, WHITE)
    draw = ImageDraw.Draw(image)
    for weight, (x, y) in zip(weights, GRID_POSITIONS, strict=True):
        radius = int(35 + 65 * weight)
        draw.ellipse((x - radius, y - radius, x + radius, y + radius), outline=BLUE, width=2)
    cx, cy = center
    draw.ellipse((cx - 10, cy - 10, cx + 10, cy + 10), fill=RED)
    return image