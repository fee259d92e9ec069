"""Per-field checks, run once for every flattened field of every type."""

from __future__ import annotations

from checkup.flatten import FieldDescriptor
from checkup.registry import FieldCheck, Phase
from checkup.severity import Severity

PHASE = Phase.MAPPING_FIELDS


def dots_in_name(field: FieldDescriptor) -> str | None:
    if "." in field.name:
        return f"`{field.qualified_name}`"
    return None


def index_analyzer(field: FieldDescriptor) -> str | None:
    if "index_analyzer" in field:
        return f"`{field.qualified_name}` uses `index_analyzer`, use `analyzer` instead"
    return None


def index_name(field: FieldDescriptor) -> str | None:
    if "index_name" in field:
        return f"`{field.qualified_name}` sets `index_name`, which is no longer supported"
    return None


def legacy_multi_field(field: FieldDescriptor) -> str | None:
    if field.get("type") == "multi_field":
        return f"`{field.qualified_name}` is a `multi_field`, use multi-fields via `fields`"
    return None


def path_setting(field: FieldDescriptor) -> str | None:
    if "path" in field:
        return f"`{field.qualified_name}` sets `path`, which is no longer supported"
    return None


CHECKS = [
    FieldCheck("Dots in field names", Severity.RED, dots_in_name),
    FieldCheck("`index_analyzer` setting", Severity.YELLOW, index_analyzer),
    FieldCheck("`index_name` setting", Severity.YELLOW, index_name),
    FieldCheck("Legacy `multi_field` type", Severity.BLUE, legacy_multi_field),
    FieldCheck("`path` setting", Severity.YELLOW, path_setting),
]
