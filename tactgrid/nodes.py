"""Serial sensor readers and the command-line entry points that run them."""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Any, Callable, Sequence

import serial

from tactgrid.bus import Bus
from tactgrid.calibrator import (
    DEFAULT_SAMPLES,
    DEFAULT_WAIT_SECONDS,
    Calibrator,
    Phase,
)
from tactgrid.frames import (
    SIMPLE_FRAME_LENGTH,
    SIMPLE_SENSOR_COUNT,
    decode_framed_packet,
    decode_simple_frame,
)
from tactgrid.pressure import (
    GRID_SIZE,
    BaselineCalibration,
    all_above,
    normalize,
    render,
    weighted_center,
)

logger = logging.getLogger(__name__)

PERIOD_SECONDS = 0.05
SIMPLE_PORT = "/dev/ttyACM0"
SIMPLE_BAUDRATE = 9600
SIMPLE_TIMEOUT = 0.5
GRID_PORT = "/dev/ttyUSB0"
GRID_BAUDRATE = 115200
GRID_TIMEOUT = 1.0
GRID_PACKET_LENGTH = 2 + 2 * GRID_SIZE + 2
RAW_TOPIC = "sensor_values_raw"


class SerialSensorReader:
    """Reads five-sensor frames and publishes each reading on ``sensor1`` .. ``sensor5``."""

    def __init__(self, bus: Bus, port: Any) -> None:
        self._bus = bus
        self._port = port
        self.values: tuple[int, ...] = (0,) * SIMPLE_SENSOR_COUNT

    def _read_frame(self) -> None:
        waiting = self._port.in_waiting
        if waiting < SIMPLE_FRAME_LENGTH:
            return
        data = self._port.read(waiting)
        decoded = decode_simple_frame(data)
        if decoded is not None:
            self.values = decoded

    def poll(self) -> tuple[int, ...]:
        """Read what is waiting and publish the latest readings; return them."""
        self._read_frame()
        for number, value in enumerate(self.values, start=1):
            self._bus.publish(f"sensor{number}", value)
        return self.values


class GridSensorReader:
    """Reads nine-sensor packets, publishes them and draws the pressure grid."""

    def __init__(self, bus: Bus, port: Any, image_path: str | Path | None = None) -> None:
        self._bus = bus
        self._port = port
        self._image_path = Path(image_path) if image_path is not None else None
        self.values: tuple[int, ...] = (0,) * GRID_SIZE
        self.previous: tuple[int, ...] = (0,) * GRID_SIZE
        self.calibration = BaselineCalibration(GRID_SIZE)
        self.image = None

    def poll(self) -> tuple[int, ...] | None:
        """Process one waiting packet; return its readings, or ``None`` if there was none."""
        waiting = self._port.in_waiting
        if waiting < GRID_PACKET_LENGTH:
            return None
        data = self._port.read(waiting)
        if not data:
            return None
        decoded = decode_framed_packet(data, GRID_SIZE)
        if decoded is None:
            return None

        self.previous = self.values
        self.values = decoded
        self._bus.publish(RAW_TOPIC, list(decoded))

        if not self.calibration.complete:
            self.calibration.update(decoded, self.previous)

        print("".join(f"b{k}data({v}) " for k, v in enumerate(decoded, start=1)))

        if all_above(decoded) and self.calibration.complete:
            weights = normalize(decoded, self.calibration.minima)
            self.image = render(weights, weighted_center(weights))
            if self._image_path is not None:
                self.image.save(self._image_path)
        return decoded


def _run(
    step: Callable[[], None],
    cycles: int | None,
    finished: Callable[[], bool] = lambda: False,
) -> None:
    count = 0
    try:
        while cycles is None or count < cycles:
            step()
            count += 1
            if finished():
                break
            time.sleep(PERIOD_SECONDS)
    except KeyboardInterrupt:
        pass


def _open(path: str, baudrate: int, timeout: float) -> Any:
    return serial.Serial(path, baudrate=baudrate, timeout=timeout)


def _parser(description: str, default_port: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--port", default=default_port, help="serial device to read")
    parser.add_argument(
        "--cycles", type=int, default=None, help="stop after this many polls"
    )
    return parser


def main_serial(argv: Sequence[str] | None = None) -> int:
    """Read five sensors from the serial line and publish them periodically."""
    args = _parser("Read five light sensors.", SIMPLE_PORT).parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        port = _open(args.port, SIMPLE_BAUDRATE, SIMPLE_TIMEOUT)
    except serial.SerialException as exc:
        logger.error("Serial port open failed: %s", exc)
        return 1
    logger.info("Serial port initialized.")
    with port:
        reader = SerialSensorReader(Bus(), port)
        _run(reader.poll, args.cycles)
    return 0


def main_grid(argv: Sequence[str] | None = None) -> int:
    """Read the nine-sensor grid and draw it to an image file."""
    parser = _parser("Read a 3x3 pressure sensor grid.", GRID_PORT)
    parser.add_argument("--image", default="grid.png", help="where to write the drawing")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        port = _open(args.port, GRID_BAUDRATE, GRID_TIMEOUT)
    except serial.SerialException as exc:
        logger.error("Failed to open serial port: %s", exc)
        return 1
    logger.info("Serial port initialized.")
    with port:
        reader = GridSensorReader(Bus(), port, args.image)
        _run(reader.poll, args.cycles)
    return 0


def main_calibrator(argv: Sequence[str] | None = None) -> int:
    """Calibrate the five sensors read from the serial line and print the result."""
    parser = _parser("Dark/bright calibration of five light sensors.", SIMPLE_PORT)
    parser.add_argument("--samples", type=int, default=DEFAULT_SAMPLES)
    parser.add_argument("--wait", type=float, default=DEFAULT_WAIT_SECONDS)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        port = _open(args.port, SIMPLE_BAUDRATE, SIMPLE_TIMEOUT)
    except serial.SerialException as exc:
        logger.error("Serial port open failed: %s", exc)
        return 1
    with port:
        bus = Bus()
        for topic in ("calibration_min", "calibration_max"):
            bus.subscribe(
                topic,
                lambda values, topic=topic: print(
                    f"{topic}: {' '.join(str(v) for v in values)}"
                ),
            )
        reader = SerialSensorReader(bus, port)
        calibrator = Calibrator(bus, samples=args.samples, wait_seconds=args.wait)

        def step() -> None:
            reader.poll()
            calibrator.tick()

        _run(step, args.cycles, lambda: calibrator.phase is Phase.DONE)
    return 0