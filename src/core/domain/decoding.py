"""Decode targets for JSON response bodies.

The caller chooses, per client and optionally per call, whether decoded
bodies come back as plain dictionaries or as attribute-style objects.
"""

from __future__ import annotations

from enum import Enum


class DecodeTarget(str, Enum):
    """Supported shapes for decoded JSON bodies."""

    MAPPING = "mapping"
    OBJECT = "object"

    @classmethod
    def default(cls) -> "DecodeTarget":
        """Return the default decode target used across the application."""

        return cls.MAPPING

    @classmethod
    def from_bool(cls, objects: bool) -> "DecodeTarget":
        """Derive a decode target from a 'return objects' flag."""

        return cls.OBJECT if objects else cls.MAPPING
