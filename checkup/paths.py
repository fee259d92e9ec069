"""
checkup/paths.py — Dotted-path lookup over nested snapshot data.

    resolve(snapshot, "entity.settings.logs.settings.index")

Missing keys, out-of-range indexes and non-container intermediates all
yield ABSENT; falsy values that are actually stored are returned as-is.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final, Iterable


class _Absent:
    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Final = _Absent()


def resolve(root: Any, dotted_path: str) -> Any:
    return resolve_segments(root, dotted_path.split("."))


def resolve_segments(root: Any, segments: Iterable[str]) -> Any:
    """Like resolve(), for keys that may themselves contain dots."""
    current = root
    for segment in segments:
        if isinstance(current, Mapping):
            if segment not in current:
                return ABSENT
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                index = int(segment)
            except ValueError:
                return ABSENT
            if not 0 <= index < len(current):
                return ABSENT
            current = current[index]
        else:
            return ABSENT
    return current


def is_absent(value: Any) -> bool:
    return value is ABSENT
