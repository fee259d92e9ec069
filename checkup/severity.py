"""Ranked outcome severities and the combine operation that folds them."""

from __future__ import annotations

from enum import IntEnum
from functools import reduce
from typing import Iterable


class Severity(IntEnum):
    GREEN = 0
    BLUE = 1
    YELLOW = 2
    RED = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str | Severity) -> Severity:
        if isinstance(value, Severity):
            return value
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown severity: {value!r}") from None

    def __str__(self) -> str:
        return self.label


def combine(a: Severity, b: Severity) -> Severity:
    """Return the worse of two severities (green is the identity)."""
    return a if a >= b else b


def worst(severities: Iterable[Severity]) -> Severity:
    return reduce(combine, severities, Severity.GREEN)
