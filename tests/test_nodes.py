from unittest import mock

import pytest
import serial

from tactgrid.bus import Bus
from tactgrid.nodes import (
    GridSensorReader,
    SerialSensorReader,
    main_calibrator,
    main_grid,
    main_serial,
)


class FakePort:
    def __init__(self, chunks, repeat=False):
        self._chunks = [bytes(c) for c in chunks]
        self._repeat = repeat
        self.closed = False

    @property
    def in_waiting(self):
        return len(self._chunks[0]) if self._chunks else 0

    def read(self, size=1):
        if not self._chunks:
            return b""
        chunk = self._chunks[0]
        data = chunk[:size]
        if not self._repeat:
            rest = chunk[size:]
            if rest:
                self._chunks[0] = rest
            else:
                self._chunks.pop(0)
        return data

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def simple_frame(values):
    return b"\xff\xff" + b"".join(v.to_bytes(2, "big") for v in values)


def grid_packet(values):
    return b"\xff\xff" + b"".join(v.to_bytes(2, "big") for v in values) + b"\xff\xff"


def collect(bus, topics):
    received = {topic: [] for topic in topics}
    for topic in topics:
        bus.subscribe(topic, received[topic].append)
    return received


SENSOR_TOPICS = [f"sensor{n}" for n in range(1, 6)]


def test_serial_reader_publishes_each_sensor():
    bus = Bus()
    received = collect(bus, SENSOR_TOPICS)
    reader = SerialSensorReader(bus, FakePort([simple_frame([1, 2, 3, 4, 5])]))
    assert reader.poll() == (1, 2, 3, 4, 5)
    assert [received[t] for t in SENSOR_TOPICS] == [[1], [2], [3], [4], [5]]


def test_serial_reader_short_buffer_publishes_initial_values():
    bus = Bus()
    received = collect(bus, SENSOR_TOPICS)
    port = FakePort([b"\xff\xff\x00\x01"])
    reader = SerialSensorReader(bus, port)
    assert reader.poll() == (0, 0, 0, 0, 0)
    assert received["sensor1"] == [0]
    assert port.in_waiting == 4


def test_serial_reader_keeps_last_values_on_bad_frame():
    bus = Bus()
    received = collect(bus, SENSOR_TOPICS)
    port = FakePort([simple_frame([10, 20, 30, 40, 50]), b"\x00" * 12])
    reader = SerialSensorReader(bus, port)
    reader.poll()
    assert reader.poll() == (10, 20, 30, 40, 50)
    assert received["sensor3"] == [30, 30]


def test_grid_reader_publishes_raw_and_prints(capsys):
    bus = Bus()
    received = collect(bus, ["sensor_values_raw"])
    values = list(range(1, 10))
    reader = GridSensorReader(bus, FakePort([grid_packet(values)]))
    assert reader.poll() == tuple(values)
    assert received["sensor_values_raw"] == [values]
    out = capsys.readouterr().out
    assert "b1data(1) " in out
    assert "b9data(9) " in out


def test_grid_reader_without_tail_returns_none():
    bus = Bus()
    received = collect(bus, ["sensor_values_raw"])
    packet = b"\xff\xff" + b"\x00\xc8" * 9 + b"\x00\x00"
    reader = GridSensorReader(bus, FakePort([packet]))
    assert reader.poll() is None
    assert received["sensor_values_raw"] == []


def test_grid_reader_draws_image_when_calibrated(tmp_path):
    path = tmp_path / "grid.png"
    reader = GridSensorReader(Bus(), FakePort([grid_packet([200] * 9)]), path)
    reader.poll()
    assert reader.calibration.complete
    assert reader.calibration.minima == [200] * 9
    assert path.exists()
    assert reader.image.getpixel((250, 250)) == (255, 0, 0)
    assert reader.image.getpixel((125, 125)) == (255, 255, 255)


def test_grid_reader_no_image_below_border(tmp_path):
    path = tmp_path / "grid.png"
    reader = GridSensorReader(Bus(), FakePort([grid_packet([100] * 9)]), path)
    assert reader.poll() == (100,) * 9
    assert reader.image is None
    assert not path.exists()


def test_grid_reader_tracks_previous_values():
    port = FakePort([grid_packet([150] * 9), grid_packet([160] * 9)])
    reader = GridSensorReader(Bus(), port)
    reader.poll()
    reader.poll()
    assert reader.previous == (150,) * 9
    assert reader.values == (160,) * 9


def test_main_serial_open_failure_returns_error():
    with mock.patch("serial.Serial", side_effect=serial.SerialException("missing")):
        assert main_serial(["--port", "nowhere", "--cycles", "1"]) == 1


def test_main_serial_runs_and_closes_port():
    port = FakePort([simple_frame([1, 2, 3, 4, 5])])
    with mock.patch("serial.Serial", return_value=port) as opener, mock.patch(
        "time.sleep"
    ):
        assert main_serial(["--port", "dev", "--cycles", "2"]) == 0
    assert port.closed
    assert opener.call_args.kwargs["baudrate"] == 9600


def test_main_grid_writes_image(tmp_path):
    path = tmp_path / "out.png"
    port = FakePort([grid_packet([200] * 9)])
    with mock.patch("serial.Serial", return_value=port) as opener, mock.patch(
        "time.sleep"
    ):
        assert main_grid(["--port", "dev", "--cycles", "1", "--image", str(path)]) == 0
    assert path.exists()
    assert opener.call_args.kwargs["baudrate"] == 115200


def test_main_calibrator_prints_results(capsys):
    port = FakePort([simple_frame([1, 2, 3, 4, 5])], repeat=True)
    with mock.patch("serial.Serial", return_value=port), mock.patch("time.sleep"):
        status = main_calibrator(
            ["--port", "dev", "--samples", "2", "--wait", "0", "--cycles", "50"]
        )
    assert status == 0
    out = capsys.readouterr().out
    assert "calibration_min: 1 2 3 4 5" in out
    assert "calibration_max: 1 2 3 4 5" in out


@pytest.mark.parametrize("entry", [main_grid, main_calibrator])
def test_other_mains_report_open_failure(entry):
    with mock.patch("serial.Serial", side_effect=serial.SerialException("missing")):
        assert entry(["--port", "nowhere", "--cycles", "1"]) == 1