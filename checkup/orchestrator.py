"""
checkup/orchestrator.py — Drive one checkup run end to end.

    version probe -> snapshot -> flatten mappings -> per index:
        segments, settings, mappings, flat_mappings checks
        flatten path collisions
        mapping-fields checks
    -> one report section per index -> "Done"

A failed retrieval aborts before any index section is emitted. Evaluation
itself is synchronous over the already-fetched snapshot.

Importable:
    from checkup.orchestrator import run_checkup
    summary = run_checkup(cfg, sink)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from checkup.errors import FetchFailure, SnapshotFileError
from checkup.fetch import (
    FileSnapshotSource,
    SnapshotFetcher,
    SnapshotSource,
    VersionInfo,
    build_snapshot,
)
from checkup.flatten import FlattenedMapping, flatten
from checkup.paths import ABSENT, resolve, resolve_segments
from checkup.registry import DATA_PHASES, CheckRegistry, Phase
from checkup.report import ReportSink
from checkup.runner import check_fields, run_checks
from checkup.severity import Severity, combine

if TYPE_CHECKING:
    from config.settings import Settings

logger = logging.getLogger(__name__)

SECTION_PREFIX = "Index: "


@dataclass
class RunSummary:
    version: VersionInfo | None = None
    entities: dict[str, Severity] = field(default_factory=dict)
    error: str | None = None

    @property
    def aborted(self) -> bool:
        return self.error is not None

    @property
    def severity(self) -> Severity:
        if self.aborted:
            return Severity.RED
        worst = Severity.GREEN
        for severity in self.entities.values():
            worst = combine(worst, severity)
        return worst


def data_for_phase(snapshot: Mapping[str, Any], phase: Phase, entity: str) -> Any:
    """entity.<phase>.<entity>, unwrapped from its `<phase>` envelope if it has one."""
    data = resolve_segments(snapshot, ["entity", phase.value, entity])
    if isinstance(data, Mapping) and phase.value in data:
        return data[phase.value]
    return data


class Checkup:
    def __init__(self, registry: CheckRegistry, source: SnapshotSource, sink: ReportSink) -> None:
        self.registry = registry
        self.source = source
        self.sink = sink

    def run(self) -> RunSummary:
        summary = RunSummary()
        self.sink.info(f"Checking cluster at: {self.source.description}")
        try:
            summary.version = self.source.fetch_version()
            self.sink.result(Severity.GREEN, f"Elasticsearch version: {summary.version.display}")
            responses = self.source.fetch_snapshot()
        except (FetchFailure, SnapshotFileError) as e:
            logger.error("checkup aborted: %s", e)
            summary.error = str(e)
            self.sink.error(summary.error)
            return summary

        flattened = flatten(responses["/_mappings"])
        snapshot = build_snapshot(responses, flattened)
        self.evaluate(snapshot, flattened, summary)
        self.sink.info("Done")
        return summary

    def evaluate(
        self,
        snapshot: Mapping[str, Any],
        flattened: FlattenedMapping,
        summary: RunSummary | None = None,
    ) -> RunSummary:
        summary = summary if summary is not None else RunSummary()
        aliases = resolve(snapshot, "entity.aliases")
        entities = sorted(aliases) if isinstance(aliases, Mapping) else []
        if not entities:
            self.sink.info("No indices found")
            return summary

        logger.info("checking %d indices", len(entities))
        for entity in entities:
            summary.entities[entity] = self.check_entity(entity, snapshot, flattened)
        return summary

    def check_entity(
        self, entity: str, snapshot: Mapping[str, Any], flattened: FlattenedMapping
    ) -> Severity:
        entity_severity = Severity.GREEN
        self.sink.start_section(SECTION_PREFIX + entity)

        for phase in DATA_PHASES:
            data = data_for_phase(snapshot, phase, entity)
            if data is ABSENT:
                continue
            severity, results = run_checks(self.registry.checks_for(phase), data, entity)
            for result in results:
                self.sink.result(result.severity, result.name, result.message)
            entity_severity = combine(entity_severity, severity)

        for collision in flattened.collisions_for(entity):
            self.sink.result(
                Severity.RED, f"Field path collision `{collision.qualified_name}`", str(collision)
            )
            entity_severity = combine(entity_severity, Severity.RED)

        flat_types = resolve_segments(snapshot, ["entity", "flat_mappings", entity])
        if flat_types is not ABSENT:
            for check in self.registry.checks_for(Phase.MAPPING_FIELDS):
                severity, result = check_fields(check, flat_types)
                self.sink.result(result.severity, result.name, result.message)
                entity_severity = combine(entity_severity, severity)

        self.sink.set_section_severity(entity_severity)
        self.sink.end_section()
        return entity_severity


def source_from_settings(cfg: Settings) -> SnapshotSource:
    if cfg.SNAPSHOT_FILE:
        return FileSnapshotSource(cfg.SNAPSHOT_FILE)
    return SnapshotFetcher.from_settings(cfg)


def run_checkup(
    cfg: Settings,
    sink: ReportSink,
    registry: CheckRegistry | None = None,
) -> RunSummary:
    if registry is None:
        from checkup.checks import default_registry

        registry = default_registry()
    return Checkup(registry, source_from_settings(cfg), sink).run()
