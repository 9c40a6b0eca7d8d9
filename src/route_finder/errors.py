"""Error types raised by the ranking and routing core."""

from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when a request carries out-of-range coordinates or bad parameters.

    Subclasses ``ValueError`` so the API layer maps it to a client error
    alongside the other validation failures.
    """
