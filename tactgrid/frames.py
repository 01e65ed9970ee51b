"""Decoding of the sensor frames sent over the serial line."""

from __future__ import annotations

HEADER = b"\xff\xff"
SIMPLE_SENSOR_COUNT = 5
SIMPLE_FRAME_LENGTH = 12


def _big_endian_words(data: bytes, count: int) -> tuple[int, ...]:
    return tuple(
        int.from_bytes(data[2 * k : 2 * k + 2], "big") for k in range(count)
    )


def decode_simple_frame(buf: bytes) -> tuple[int, ...] | None:
    """Decode five big-endian 16-bit readings that follow the first ``FF FF`` header.

    The header is searched for only where a whole 12-byte frame still fits.
    Returns ``None`` when the buffer is too short or holds no header.
    """
    data = bytes(buf)
    if len(data) < SIMPLE_FRAME_LENGTH:
        return None
    for start in range(len(data) - SIMPLE_FRAME_LENGTH + 1):
        if data[start : start + 2] == HEADER:
            payload = data[start + 2 : start + 2 + 2 * SIMPLE_SENSOR_COUNT]
            return _big_endian_words(payload, SIMPLE_SENSOR_COUNT)
    return None


def decode_framed_packet(buf: bytes, count: int) -> tuple[int, ...] | None:
    """Decode ``count`` big-endian 16-bit readings framed by ``FF FF`` on both ends.

    A header counts only if the ``FF FF`` tail sits right after the payload.
    Returns ``None`` when no complete packet is found.
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    data = bytes(buf)
    payload_size = 2 * count
    packet_length = 2 + payload_size + 2
    if len(data) < packet_length:
        return None
    for start in range(len(data) - packet_length + 1):
        if data[start : start + 2] != HEADER:
            continue
        tail = start + 2 + payload_size
        if data[tail : tail + 2] == HEADER:
            return _big_endian_words(data[start + 2 : tail], count)
    return None