"""
checkup — Rule-based health checks over an Elasticsearch cluster snapshot.

The engine is built from small pieces that can be used on their own:

    paths.resolve          dotted-path lookup, ABSENT on any miss
    severity               green < blue < yellow < red, combine()
    flatten.flatten        nested field mappings -> dotted-path descriptors
    registry.CheckRegistry phase-scoped, append-only checks
    runner                 run_checks() / check_fields()
    orchestrator.Checkup   fetch, evaluate and emit report events

Usage:
    from checkup.checks import default_registry
    from checkup.orchestrator import Checkup
"""

from checkup.registry import Check, CheckRegistry, FieldCheck, Phase
from checkup.severity import Severity, combine

__all__ = ["Check", "CheckRegistry", "FieldCheck", "Phase", "Severity", "combine"]
