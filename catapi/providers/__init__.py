"""Concrete adapters for the ports in ``catapi.interfaces``."""
