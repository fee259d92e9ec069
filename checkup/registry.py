"""
checkup/registry.py — Phase-scoped, append-only registry of checks.

A registry is built once during setup and handed to the orchestrator:

    registry = CheckRegistry()
    registry.register(Phase.SETTINGS, [Check("Shard count", Severity.BLUE, too_many_shards)])
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Union

from checkup.errors import UnknownPhase
from checkup.flatten import FieldDescriptor
from checkup.severity import Severity

EntityPredicate = Callable[[Any, str], Optional[str]]
FieldPredicate = Callable[[FieldDescriptor], Optional[str]]


class Phase(str, Enum):
    SEGMENTS = "segments"
    SETTINGS = "settings"
    MAPPINGS = "mappings"
    FLAT_MAPPINGS = "flat_mappings"
    MAPPING_FIELDS = "mapping-fields"

    def __str__(self) -> str:
        return self.value


# Phases evaluated against entity.<phase>.<name>, in evaluation order.
DATA_PHASES = (Phase.SEGMENTS, Phase.SETTINGS, Phase.MAPPINGS, Phase.FLAT_MAPPINGS)


@dataclass(frozen=True)
class Check:
    """Entity-level check: check(data, entity_name) -> message or None."""

    name: str
    severity: Severity
    check: EntityPredicate


@dataclass(frozen=True)
class FieldCheck:
    """Field-level check: check(field_descriptor) -> message or None."""

    name: str
    severity: Severity
    check: FieldPredicate


AnyCheck = Union[Check, FieldCheck]


def as_phase(phase: Phase | str) -> Phase:
    try:
        return Phase(phase)
    except ValueError:
        raise UnknownPhase(phase) from None


class CheckRegistry:
    def __init__(self) -> None:
        self._checks: dict[Phase, list[AnyCheck]] = {phase: [] for phase in Phase}

    def register(self, phase: Phase | str, checks: Iterable[AnyCheck]) -> CheckRegistry:
        phase = as_phase(phase)
        expected = FieldCheck if phase is Phase.MAPPING_FIELDS else Check
        checks = list(checks)
        for check in checks:
            if not isinstance(check, expected):
                raise TypeError(
                    f"phase '{phase}' takes {expected.__name__} entries, got {check!r}"
                )
        self._checks[phase].extend(checks)
        return self

    def checks_for(self, phase: Phase | str) -> tuple[AnyCheck, ...]:
        return tuple(self._checks[as_phase(phase)])

    def __len__(self) -> int:
        return sum(len(checks) for checks in self._checks.values())
