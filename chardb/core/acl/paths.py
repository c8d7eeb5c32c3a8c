"""Dot-path lookup into operation arguments."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from strawberry import UNSET

__all__ = ["MISSING", "get_nested_value", "is_blank", "split_path"]


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def split_path(path: str) -> tuple[str, ...]:
    """Split a dot-path into segments, rejecting empty segments.

    Raises:
        ValueError: If the path is empty or contains an empty segment.
    """
    segments = tuple(path.split("."))
    if not path or any(not segment for segment in segments):
        msg = f"Invalid argument path: {path!r}"
        raise ValueError(msg)
    return segments


def get_nested_value(args: Any, path: str) -> Any:
    """Read the value at ``path`` inside ``args``.

    Each segment is resolved against the current value: mappings by key,
    sequences by integer index, anything else by attribute (Strawberry input
    objects are plain dataclasses). Returns ``MISSING`` when any segment
    does not resolve, so callers can tell an absent argument apart from an
    explicit ``None``. An optional input field the client left out holds
    Strawberry's ``UNSET`` and is reported as ``MISSING`` too.

    Example:
        >>> get_nested_value({"input": {"species_id": "s1"}}, "input.species_id")
        's1'
        >>> get_nested_value({"ids": ["a", "b"]}, "ids.1")
        'b'
    """
    current = args
    for segment in split_path(path):
        if current is None or current is MISSING or current is UNSET:
            return MISSING
        if isinstance(current, Mapping):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not segment.lstrip("-").isdigit():
                return MISSING
            index = int(segment)
            if not -len(current) <= index < len(current):
                return MISSING
            current = current[index]
        else:
            current = getattr(current, segment, MISSING)
    if current is UNSET:
        return MISSING
    return current


def is_blank(value: Any) -> bool:
    """Whether a looked-up value carries no id at all."""
    if value is MISSING or value is UNSET or value is None:
        return True
    return isinstance(value, (str, list, tuple)) and len(value) == 0
