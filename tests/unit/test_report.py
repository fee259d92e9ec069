"""Unit tests for checkup.report sinks."""

import io

import pytest

from checkup.report import FanoutSink, ReportBuilder, ReportNode, TextRenderer
from checkup.severity import Severity


def _emit(sink):
    sink.info("Checking cluster at: http://es:9200")
    sink.start_section("Index: logs")
    sink.result(Severity.GREEN, "Quiet check")
    sink.result(Severity.YELLOW, "Noisy check", "`t:a` first\n`t:b` second")
    sink.set_section_severity(Severity.YELLOW)
    sink.end_section()
    sink.info("Done")


class TestReportBuilder:
    def test_builds_tree(self):
        builder = ReportBuilder()
        _emit(builder)
        root = builder.root
        assert root.label == "report"
        assert root.severity is Severity.YELLOW
        assert root.items[0] == "Checking cluster at: http://es:9200"
        assert root.items[-1] == "Done"

        section = root.find("Index: logs")
        assert section.severity is Severity.YELLOW
        assert section.items[0] == ReportNode("Quiet check", Severity.GREEN)
        noisy = section.find("Noisy check")
        assert noisy.items == ("`t:a` first", "`t:b` second")
        assert root.sections == (section,)

    def test_nodes_are_immutable(self):
        builder = ReportBuilder()
        _emit(builder)
        with pytest.raises(AttributeError):
            builder.root.find("Index: logs").severity = Severity.GREEN

    def test_error_closes_open_sections(self):
        builder = ReportBuilder()
        builder.start_section("Index: a")
        builder.start_section("nested")
        builder.error("boom")
        root = builder.root
        assert builder.failed
        assert builder.errors == ["boom"]
        assert root.severity is Severity.RED
        assert root.find("Index: a").find("nested") is not None

    def test_unbalanced_end_section(self):
        with pytest.raises(RuntimeError):
            ReportBuilder().end_section()

    def test_to_dict(self):
        builder = ReportBuilder()
        _emit(builder)
        data = builder.root.to_dict()
        assert data["severity"] == "yellow"
        section = data["items"][1]
        assert section["label"] == "Index: logs"
        assert section["items"][1] == {
            "label": "Noisy check",
            "severity": "yellow",
            "items": ["`t:a` first", "`t:b` second"],
        }


class TestTextRenderer:
    def test_renders_indented_tree(self):
        out = io.StringIO()
        _emit(TextRenderer(out))
        assert out.getvalue().splitlines() == [
            "Checking cluster at: http://es:9200",
            "━━━ Index: logs ━━━",
            "  [GREEN] Quiet check",
            "  [YELLOW] Noisy check",
            "    - `t:a` first",
            "    - `t:b` second",
            "└── Index: logs: YELLOW",
            "Done",
        ]

    def test_error_resets_indent(self):
        out = io.StringIO()
        renderer = TextRenderer(out)
        renderer.start_section("Index: a")
        renderer.error("Failed to fetch [x]")
        assert out.getvalue().splitlines()[-1] == "ERROR: Failed to fetch [x]"


def test_fanout_feeds_every_sink():
    first, second = ReportBuilder(), ReportBuilder()
    _emit(FanoutSink(first, second))
    assert first.root == second.root
