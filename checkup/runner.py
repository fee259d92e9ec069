"""
checkup/runner.py — Evaluate registered checks against one entity.

run_checks() covers the data-scoped phases (one predicate call per check);
check_fields() covers the mapping-fields phase (one predicate call per
field of every type). Both return severities already folded with combine().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from checkup.errors import CheckDefect
from checkup.registry import Check, FieldCheck
from checkup.severity import Severity, combine


@dataclass(frozen=True)
class CheckResult:
    name: str
    severity: Severity
    message: str | None = None

    @property
    def passed(self) -> bool:
        return self.severity is Severity.GREEN

    def __str__(self) -> str:
        line = f"  [{self.severity.label.upper()}] {self.name}"
        if self.message:
            line += "\n" + "\n".join(f"         {msg}" for msg in self.message.splitlines())
        return line


def run_checks(
    checks: Sequence[Check], data: Any, entity_name: str
) -> tuple[Severity, list[CheckResult]]:
    phase_severity = Severity.GREEN
    results: list[CheckResult] = []
    for check in checks:
        message = _call(check, data, entity_name)
        if message:
            result = CheckResult(check.name, check.severity, message)
        else:
            result = CheckResult(check.name, Severity.GREEN)
        phase_severity = combine(phase_severity, result.severity)
        results.append(result)
    return phase_severity, results


def check_fields(
    check: FieldCheck, flat_types: Mapping[str, Mapping[str, Any]]
) -> tuple[Severity, CheckResult]:
    messages = []
    for descriptor in iter_fields(flat_types):
        message = _call(check, descriptor)
        if message:
            messages.append(message)
    if not messages:
        return Severity.GREEN, CheckResult(check.name, Severity.GREEN)
    return check.severity, CheckResult(check.name, check.severity, "\n".join(messages))


def iter_fields(flat_types: Mapping[str, Mapping[str, Any]]) -> Iterable[Any]:
    for type_name in sorted(flat_types):
        type_def = flat_types[type_name]
        properties = type_def.get("properties") if isinstance(type_def, Mapping) else None
        if properties:
            for path in sorted(properties):
                yield properties[path]


def _call(check: Check | FieldCheck, *args: Any) -> str | None:
    try:
        return check.check(*args)
    except Exception as exc:
        raise CheckDefect(check.name, exc) from exc
