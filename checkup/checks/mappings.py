"""Type-name checks, run against `<index>.mappings` from `/_mappings`."""

from __future__ import annotations

from typing import Any

from checkup.checks import check_types
from checkup.registry import Check, Phase
from checkup.severity import Severity

PHASE = Phase.MAPPINGS

MAX_TYPE_NAME_LENGTH = 255


def type_name_underscore(data: Any, index: str) -> str | None:
    return check_types(
        "Type names may not start with `_`",
        data,
        lambda name, _: name.startswith("_") and name != "_default_",
    )


def type_name_dots(data: Any, index: str) -> str | None:
    return check_types("Type names may not contain `.`", data, lambda name, _: "." in name)


def type_name_length(data: Any, index: str) -> str | None:
    return check_types(
        f"Type names may not be longer than {MAX_TYPE_NAME_LENGTH} characters",
        data,
        lambda name, _: len(name) > MAX_TYPE_NAME_LENGTH,
    )


CHECKS = [
    Check("Type names starting with `_`", Severity.RED, type_name_underscore),
    Check("Type names containing `.`", Severity.RED, type_name_dots),
    Check("Type name length", Severity.RED, type_name_length),
]
