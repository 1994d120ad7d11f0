"""Body-shape scanning and profile services for the DressMeWell stylist."""

__version__ = "0.1.0"
