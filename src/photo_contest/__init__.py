"""Community photo contest backend."""

__version__ = "0.1.0"
