"""Two-phase dark/bright calibration of five light sensors."""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable

from tactgrid.bus import Bus

logger = logging.getLogger(__name__)

SENSOR_COUNT = 5
UINT16_MAX = 0xFFFF
DEFAULT_SAMPLES = 500
DEFAULT_WAIT_SECONDS = 5.0


class Phase(enum.Enum):
    WAIT_DARK = enum.auto()
    CALIB_DARK = enum.auto()
    WAIT_BRIGHT = enum.auto()
    CALIB_BRIGHT = enum.auto()
    DONE = enum.auto()


class Calibrator:
    """Collects per-sensor minima in the dark and maxima in the light.

    Readings arrive on topics ``sensor1`` .. ``sensor5``; results are published
    as lists on ``calibration_min`` and ``calibration_max``. ``tick`` is meant
    to be called periodically.
    """

    def __init__(
        self,
        bus: Bus,
        clock: Callable[[], float] = time.monotonic,
        samples: int = DEFAULT_SAMPLES,
        wait_seconds: float = DEFAULT_WAIT_SECONDS,
    ) -> None:
        if samples < 0:
            raise ValueError("samples must not be negative")
        self._bus = bus
        self._clock = clock
        self._samples = samples
        self._wait = wait_seconds
        self.phase = Phase.WAIT_DARK
        self._sample_count = 0
        self._raw = [0] * SENSOR_COUNT
        self._min = [UINT16_MAX] * SENSOR_COUNT
        self._max = [0] * SENSOR_COUNT
        for index in range(SENSOR_COUNT):
            bus.subscribe(
                f"sensor{index + 1}",
                lambda value, index=index: self.set_raw(index, value),
            )
        self._start = clock()
        logger.info(
            "Dark calibration: please place sensors in a dark area. Waiting %g seconds...",
            wait_seconds,
        )

    @property
    def minimum(self) -> tuple[int, ...]:
        return tuple(self._min)

    @property
    def maximum(self) -> tuple[int, ...]:
        return tuple(self._max)

    def set_raw(self, index: int, value: int) -> None:
        """Record the latest reading of sensor ``index`` (0-based)."""
        if not 0 <= index < SENSOR_COUNT:
            raise IndexError(f"sensor index {index} out of range")
        if not 0 <= value <= UINT16_MAX:
            raise ValueError(f"reading {value} is not a 16-bit unsigned value")
        self._raw[index] = value

    def tick(self) -> None:
        """Advance the calibration by one step."""
        elapsed = self._clock() - self._start

        if self.phase is Phase.WAIT_DARK:
            if elapsed >= self._wait:
                self._min = [UINT16_MAX] * SENSOR_COUNT
                self._sample_count = 0
                self.phase = Phase.CALIB_DARK
                logger.info("Starting dark sampling (%d samples)...", self._samples)
        elif self.phase is Phase.CALIB_DARK:
            if self._sample_count < self._samples:
                self._min = [min(lo, raw) for lo, raw in zip(self._min, self._raw)]
                self._sample_count += 1
            else:
                logger.info("Dark calibration complete.")
                self.phase = Phase.WAIT_BRIGHT
                self._start = self._clock()
                logger.info(
                    "Bright calibration: please place sensors in a bright area. "
                    "Waiting %g seconds...",
                    self._wait,
                )
        elif self.phase is Phase.WAIT_BRIGHT:
            if elapsed >= self._wait:
                self._max = [0] * SENSOR_COUNT
                self._sample_count = 0
                self.phase = Phase.CALIB_BRIGHT
                logger.info("Starting bright sampling (%d samples)...", self._samples)
        elif self.phase is Phase.CALIB_BRIGHT:
            if self._sample_count < self._samples:
                self._max = [max(hi, raw) for hi, raw in zip(self._max, self._raw)]
                self._sample_count += 1
            else:
                logger.info("Bright calibration complete.")
                self._publish_results()
                self.phase = Phase.DONE

    def _publish_results(self) -> None:
        for number, (lo, hi) in enumerate(zip(self._min, self._max), start=1):
            logger.info("Sensor %d: min = %d, max = %d", number, lo, hi)
        self._bus.publish("calibration_min", list(self._min))
        self._bus.publish("calibration_max", list(self._max))
        logger.info("Published calibration_min and calibration_max topics.")