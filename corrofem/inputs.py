"""Nested input parameters, addressed by key paths."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

__all__ = ["InputError", "InputTree"]


class InputError(ValueError):
    """A required input parameter is missing or malformed."""


_MISSING = object()


def _format_path(path: Sequence[Any]) -> str:
    return "/".join(str(key) for key in path)


class InputTree:
    """Read-only view of a nested parameter document (e.g. parsed JSON)."""

    def __init__(self, data):
        self._data = data

    def _lookup(self, path):
        node = self._data
        for key in path:
            if isinstance(node, Mapping):
                if key not in node:
                    return _MISSING
                node = node[key]
            elif (
                isinstance(node, Sequence)
                and not isinstance(node, str)
                and isinstance(key, int)
                and not isinstance(key, bool)
            ):
                if not 0 <= key < len(node):
                    return _MISSING
                node = node[key]
            else:
                return _MISSING
        return node

    def get_required(self, path):
        """Return the value at ``path``, raising InputError if it is absent."""
        value = self._lookup(path)
        if value is _MISSING:
            raise InputError(f"Required input parameter {_format_path(path)} not found")
        return value

    def get_optional(self, path, default):
        """Return the value at ``path``, or ``default`` if it is absent."""
        value = self._lookup(path)
        return default if value is _MISSING else value

    def get_type(self, path):
        """Name the kind of value stored at ``path``."""
        value = self._lookup(path)
        if value is _MISSING:
            return "Missing"
        if value is None:
            return "Null"
        if isinstance(value, bool):
            return "Bool"
        if isinstance(value, (int, float)):
            return "Number"
        if isinstance(value, str):
            return "String"
        if isinstance(value, Mapping):
            return "Object"
        if isinstance(value, Sequence):
            return "Array"
        return type(value).__name__