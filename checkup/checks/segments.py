"""Segment-level checks, run against one index's `/_segments` entry."""

from __future__ import annotations

from typing import Any

from checkup.registry import Check, Phase
from checkup.severity import Severity

PHASE = Phase.SEGMENTS


def _iter_segments(data: Any):
    shards = data.get("shards") if isinstance(data, dict) else None
    for copies in (shards or {}).values():
        for shard_copy in copies if isinstance(copies, list) else [copies]:
            for segment in (shard_copy.get("segments") or {}).values():
                yield segment


def ancient_segments(data: Any, index: str) -> str | None:
    ancient = sum(
        1 for seg in _iter_segments(data) if str(seg.get("version", "")).startswith("3.")
    )
    if ancient:
        return (
            f"Index `{index}` contains {ancient} segment(s) written by Lucene 3.x. "
            "Run the `_upgrade` API on this index before upgrading"
        )
    return None


CHECKS = [
    Check("Ancient Lucene segments", Severity.RED, ancient_segments),
]
