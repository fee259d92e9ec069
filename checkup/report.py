"""
checkup/report.py — Report event sinks.

The orchestrator only emits events; what happens to them is up to the sink:

    info(message)                      free-form progress line
    start_section(label)               open a nested section
    result(severity, label, message)   one check outcome
    set_section_severity(severity)     colour the innermost open section
    end_section()                      close it
    error(message)                     abort; closes all open sections

ReportBuilder turns the stream into an immutable ReportNode tree,
TextRenderer prints it as it arrives and FanoutSink feeds several sinks.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Protocol, TextIO, Union

from checkup.severity import Severity


class ReportSink(Protocol):
    def info(self, message: str) -> None: ...

    def start_section(self, label: str) -> None: ...

    def result(self, severity: Severity, label: str, message: str | None = None) -> None: ...

    def set_section_severity(self, severity: Severity) -> None: ...

    def end_section(self) -> None: ...

    def error(self, message: str) -> None: ...


ReportItem = Union[str, "ReportNode"]


@dataclass(frozen=True)
class ReportNode:
    label: str
    severity: Severity = Severity.GREEN
    items: tuple[ReportItem, ...] = ()

    @property
    def sections(self) -> tuple[ReportNode, ...]:
        return tuple(item for item in self.items if isinstance(item, ReportNode))

    def find(self, label: str) -> ReportNode | None:
        for item in self.items:
            if isinstance(item, ReportNode) and item.label == label:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "severity": self.severity.label,
            "items": [
                item.to_dict() if isinstance(item, ReportNode) else item for item in self.items
            ],
        }


@dataclass
class _OpenSection:
    label: str
    severity: Severity = Severity.GREEN
    items: list[ReportItem] = field(default_factory=list)

    def close(self) -> ReportNode:
        return ReportNode(self.label, self.severity, tuple(self.items))


class ReportBuilder:
    """Collects the event stream into a ReportNode tree rooted at `report`."""

    ROOT_LABEL = "report"

    def __init__(self) -> None:
        self._stack: list[_OpenSection] = [_OpenSection(self.ROOT_LABEL)]
        self.errors: list[str] = []
        self._root: ReportNode | None = None

    def info(self, message: str) -> None:
        self._stack[-1].items.append(message)

    def start_section(self, label: str) -> None:
        self._stack.append(_OpenSection(label))

    def result(self, severity: Severity, label: str, message: str | None = None) -> None:
        lines: tuple[ReportItem, ...] = tuple(message.split("\n")) if message else ()
        self._stack[-1].items.append(ReportNode(label, severity, lines))

    def set_section_severity(self, severity: Severity) -> None:
        self._stack[-1].severity = severity

    def end_section(self) -> None:
        if len(self._stack) == 1:
            raise RuntimeError("end_section() without a matching start_section()")
        node = self._stack.pop().close()
        self._stack[-1].items.append(node)

    def error(self, message: str) -> None:
        while len(self._stack) > 1:
            self.end_section()
        self.errors.append(message)

    @property
    def root(self) -> ReportNode:
        """The finished tree; open sections other than the root are not included."""
        root = self._stack[0]
        severity = root.severity
        for item in root.items:
            if isinstance(item, ReportNode) and item.severity > severity:
                severity = item.severity
        if self.errors:
            severity = Severity.RED
        return ReportNode(root.label, severity, tuple(root.items))

    @property
    def failed(self) -> bool:
        return bool(self.errors)


class TextRenderer:
    """Prints the event stream as an indented plain-text tree."""

    INDENT = "  "

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self._depth = 0
        self._section_labels: list[str] = []

    def _write(self, text: str) -> None:
        print(f"{self.INDENT * self._depth}{text}", file=self.stream)

    def info(self, message: str) -> None:
        self._write(message)

    def start_section(self, label: str) -> None:
        self._write(f"━━━ {label} ━━━")
        self._section_labels.append(label)
        self._depth += 1

    def result(self, severity: Severity, label: str, message: str | None = None) -> None:
        self._write(f"[{severity.label.upper()}] {label}")
        if message:
            self._depth += 1
            for line in message.split("\n"):
                self._write(f"- {line}")
            self._depth -= 1

    def set_section_severity(self, severity: Severity) -> None:
        label = self._section_labels[-1] if self._section_labels else ""
        self._depth -= 1
        self._write(f"└── {label}: {severity.label.upper()}")
        self._depth += 1

    def end_section(self) -> None:
        self._section_labels.pop()
        self._depth -= 1

    def error(self, message: str) -> None:
        self._section_labels.clear()
        self._depth = 0
        self._write(f"ERROR: {message}")


class FanoutSink:
    def __init__(self, *sinks: ReportSink) -> None:
        self.sinks = sinks

    def info(self, message: str) -> None:
        for sink in self.sinks:
            sink.info(message)

    def start_section(self, label: str) -> None:
        for sink in self.sinks:
            sink.start_section(label)

    def result(self, severity: Severity, label: str, message: str | None = None) -> None:
        for sink in self.sinks:
            sink.result(severity, label, message)

    def set_section_severity(self, severity: Severity) -> None:
        for sink in self.sinks:
            sink.set_section_severity(severity)

    def end_section(self) -> None:
        for sink in self.sinks:
            sink.end_section()

    def error(self, message: str) -> None:
        for sink in self.sinks:
            sink.error(message)
