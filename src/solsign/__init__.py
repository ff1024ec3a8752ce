"""solsign - Ed25519 message signing with local keys or wallet extensions."""

__version__ = "0.1.0"
