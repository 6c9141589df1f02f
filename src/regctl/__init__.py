"""regctl — sequential registration numbers for administrative letters."""

__version__ = "0.1.0"
