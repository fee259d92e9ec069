"""
checkup/checks — Built-in upgrade-readiness checks.

Each module exposes PHASE and CHECKS; default_registry() registers them all
in a fixed order. Extra checks can be appended to the returned registry.

Usage:
    from checkup.checks import default_registry
    registry = default_registry()
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from checkup.registry import CheckRegistry


def check_types(
    message: str,
    type_mappings: Mapping[str, Any],
    predicate: Callable[[str, Any], bool],
) -> str | None:
    """Name every type (sorted) for which predicate(type_name, type_def) holds."""
    matches = [f"`{name}`" for name in sorted(type_mappings) if predicate(name, type_mappings[name])]
    if not matches:
        return None
    return f"{message}, in type{'s' if len(matches) > 1 else ''}: {', '.join(matches)}"


def default_registry() -> CheckRegistry:
    from checkup.checks import fields, flat_mappings, mappings, segments, settings

    registry = CheckRegistry()
    for module in (segments, settings, mappings, flat_mappings, fields):
        registry.register(module.PHASE, module.CHECKS)
    return registry
