"""
Root-object and cross-type checks, run against one index's flattened
mapping types (`entity.flat_mappings.<index>`).
"""

from __future__ import annotations

from typing import Any

from checkup.checks import check_types
from checkup.paths import ABSENT, resolve
from checkup.registry import Check, Phase
from checkup.severity import Severity

PHASE = Phase.FLAT_MAPPINGS


def _has(path: str):
    return lambda _, type_def: resolve(type_def, path) is not ABSENT


def id_path(data: Any, index: str) -> str | None:
    return check_types("The `_id` field can no longer be set with `path`", data, _has("_id.path"))


def routing_path(data: Any, index: str) -> str | None:
    return check_types(
        "The `_routing` field can no longer be set with `path`", data, _has("_routing.path")
    )


def analyzer_field(data: Any, index: str) -> str | None:
    return check_types("The `_analyzer` field has been removed", data, _has("_analyzer"))


def boost_field(data: Any, index: str) -> str | None:
    return check_types("The `_boost` field has been removed", data, _has("_boost"))


def timestamp_ttl_options(data: Any, index: str) -> str | None:
    options = ("_timestamp.path", "_timestamp.store", "_timestamp.index", "_ttl.store", "_size.store")

    def configured(_: str, type_def: Any) -> bool:
        return any(resolve(type_def, option) is not ABSENT for option in options)

    return check_types(
        "Options on `_timestamp`, `_ttl` or `_size` other than `enabled` are ignored",
        data,
        configured,
    )


def conflicting_field_types(data: Any, index: str) -> str | None:
    seen: dict[str, tuple[str, str]] = {}
    conflicts: list[str] = []
    for type_name in sorted(data):
        properties = resolve(data[type_name], "properties")
        if properties is ABSENT:
            continue
        for path, field in properties.items():
            field_type = field.get("type", "object")
            if path not in seen:
                seen[path] = (type_name, field_type)
                continue
            other_type_name, other_field_type = seen[path]
            if other_field_type != field_type:
                conflicts.append(
                    f"`{path}` is `{other_field_type}` in `{other_type_name}` "
                    f"but `{field_type}` in `{type_name}`"
                )
    if conflicts:
        return "\n".join(conflicts)
    return None


CHECKS = [
    Check("`_id` path", Severity.YELLOW, id_path),
    Check("`_routing` path", Severity.YELLOW, routing_path),
    Check("`_analyzer` field", Severity.RED, analyzer_field),
    Check("`_boost` field", Severity.YELLOW, boost_field),
    Check("Meta-field options", Severity.BLUE, timestamp_ttl_options),
    Check("Conflicting field mappings", Severity.RED, conflicting_field_types),
]
