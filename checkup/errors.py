"""
checkup/errors.py — Exception types raised by the checkup engine.

Only FetchFailure and SnapshotFileError are recovered from (by the
orchestrator, which turns them into a single report error). The rest are
programming errors in setup code or in a check and propagate.
"""

from __future__ import annotations


class CheckupError(Exception):
    """Base class for every error raised by the checkup engine."""


class FetchFailure(CheckupError):
    """A snapshot sub-retrieval failed; the whole run is aborted."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch [{url}]. REASON: {reason}")


class SnapshotFileError(CheckupError):
    """An offline snapshot capture could not be read or is incomplete."""


class UnknownPhase(CheckupError):
    def __init__(self, phase: object) -> None:
        self.phase = phase
        super().__init__(f"unknown check phase: {phase!r}")


class FlattenPathCollision(CheckupError):
    """Two field definitions in one mapping type flatten to the same path.

    Recorded by the flattener rather than raised, so the affected entity can
    report it next to its other results.
    """

    def __init__(self, entity: str, type_name: str, path: str) -> None:
        self.entity = entity
        self.type_name = type_name
        self.path = path
        super().__init__(
            f"field path `{type_name}:{path}` is defined more than once in [{entity}]"
        )

    @property
    def qualified_name(self) -> str:
        return f"{self.type_name}:{self.path}"


class CheckDefect(CheckupError):
    """A check predicate raised instead of returning a message."""

    def __init__(self, check_name: str, cause: BaseException) -> None:
        self.check_name = check_name
        self.cause = cause
        super().__init__(f"check '{check_name}' raised {type(cause).__name__}: {cause}")
