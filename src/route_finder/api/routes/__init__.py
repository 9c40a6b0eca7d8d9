"""Route group exports."""

from . import addresses, health, routes

__all__ = ["addresses", "routes", "health"]
