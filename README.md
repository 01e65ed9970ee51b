# tactgrid

Readers for serial tactile and light sensors, with frame decoding, a small
in-process publish/subscribe bus, a two-phase dark/bright calibrator and a
drawing of a 3×3 pressure grid.

## Installation

```
pip install .
```

The tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Commands

All commands poll their serial port every 50 ms and run until interrupted
with Ctrl-C, or until `--cycles N` polls have been made.

- `tactgrid-serial [--port /dev/ttyACM0] [--cycles N]`: opens the port at
  9600 baud and reads five-sensor frames: a `0xFF 0xFF` header followed by
  five big-endian 16-bit values. On every poll the latest values are published
  on the bus topics `sensor1` … `sensor5`. Exits with status 1 if the port
  cannot be opened.
- `tactgrid-grid [--port /dev/ttyUSB0] [--image grid.png] [--cycles N]`: opens
  the port at 115200 baud and reads nine-sensor packets: a `0xFF 0xFF` header,
  nine big-endian 16-bit values and a `0xFF 0xFF` tail. Each packet's values
  are published on `sensor_values_raw` and printed as
  `b1data(…) b2data(…) …`. Once a baseline has been collected for every sensor
  and every value is above 130, the values are normalised between baseline
  and 710, a weighted centre is computed, and the grid is drawn to the image
  file given by `--image`.
- `tactgrid-calibrator [--port /dev/ttyACM0] [--samples 500] [--wait 5] [--cycles N]`:
  reads the five-sensor board like `tactgrid-serial` and runs a calibration on
  the readings. It waits `--wait` seconds, takes `--samples` samples keeping
  each sensor's minimum (dark), waits again, then takes `--samples` samples
  keeping each maximum (bright). The results are printed as
  `calibration_min: …` and `calibration_max: …` lines, and the command stops.

## Library use

```python
from tactgrid.bus import Bus
from tactgrid.frames import decode_framed_packet
from tactgrid.pressure import normalize, weighted_center, render

bus = Bus()
unsubscribe = bus.subscribe("sensor_values_raw", print)

values = decode_framed_packet(packet_bytes, 9)
if values is not None:
    bus.publish("sensor_values_raw", list(values))
```

- `tactgrid.bus.Bus`: `subscribe(topic, callback)` returns a function that
  removes the subscription; `publish(topic, message)` calls the subscribers in
  the order they subscribed.
- `tactgrid.frames`: `decode_simple_frame(buf)` and
  `decode_framed_packet(buf, count)` return a tuple of readings, or `None`
  when no complete frame is found.
- `tactgrid.calibrator.Calibrator(bus, clock, samples, wait_seconds)`
  subscribes to `sensor1` … `sensor5` and is driven by calling `tick()` at a
  regular interval. Its `phase` is a `Phase` value; `minimum` and `maximum`
  hold the results, which are also published on `calibration_min` and
  `calibration_max`. The clock is a function returning seconds, so timing can
  be controlled in tests.
- `tactgrid.pressure`: `BaselineCalibration` collects the per-sensor baseline;
  `all_above`, `normalize`, `weighted_center` and `render` (a Pillow image)
  make up the grid drawing.
- `tactgrid.nodes`: `SerialSensorReader` and `GridSensorReader` take a bus and
  any object with `in_waiting` and `read(n)`, such as a `serial.Serial`, and
  do their work in `poll()`.

## What it does not do

The bus lives inside one process: topics are not shared with other programs
or over a network, so `tactgrid-serial` publishes only to itself. The grid
drawing is written to an image file; there is no live window. No velocity or
motion commands are produced.