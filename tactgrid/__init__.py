"""Serial tactile and light sensor readers, frame decoding, calibration and a pub/sub bus."""

__version__ = "0.1.0"