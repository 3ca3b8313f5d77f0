"""catapi: cat image metadata sync service with temperament tagging."""

__version__ = "0.1.0"
