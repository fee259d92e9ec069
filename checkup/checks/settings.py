"""Index settings checks, run against `<index>.settings` from `/_settings`."""

from __future__ import annotations

from typing import Any

from checkup.paths import ABSENT, resolve
from checkup.registry import Check, Phase
from checkup.severity import Severity

PHASE = Phase.SETTINGS

# version.created ids are MMmmrrbb: major, minor, revision, build.
MIN_CREATED_ID = 900099

REMOVED_SETTINGS = (
    "index.buffer_size",
    "index.index_concurrency",
    "index.fail_on_merge_failure",
    "index.merge.policy.type",
    "index.merge.scheduler.type",
    "index.translog.fs.type",
)


def version_from_id(version_id: int) -> str:
    major = version_id // 1000000
    minor = (version_id // 10000) % 100
    revision = (version_id // 100) % 100
    return f"{major}.{minor}.{revision}"


def created_before_0_90(data: Any, index: str) -> str | None:
    created = resolve(data, "index.version.created")
    if created is ABSENT:
        return None
    try:
        version_id = int(created)
    except (TypeError, ValueError):
        return f"Index `{index}` has an unreadable `index.version.created`: {created!r}"
    if version_id < MIN_CREATED_ID:
        return (
            f"Index `{index}` was created with Elasticsearch v{version_from_id(version_id)} "
            "and must be reindexed"
        )
    return None


def removed_settings(data: Any, index: str) -> str | None:
    found = [f"`{name}`" for name in REMOVED_SETTINGS if resolve(data, name) is not ABSENT]
    if found:
        return f"Settings no longer supported: {', '.join(found)}"
    return None


CHECKS = [
    Check("Index created before v0.90", Severity.RED, created_before_0_90),
    Check("Removed index settings", Severity.YELLOW, removed_settings),
]
