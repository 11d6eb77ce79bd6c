"""Data encoding for QR Code symbols: segments, bit streams, ECC and frames."""

__version__ = "0.1.0"

__all__ = ["qrspec", "entry", "qrinput", "rsecc", "structured"]