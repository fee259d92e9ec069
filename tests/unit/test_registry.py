"""Unit tests for checkup.registry."""

import pytest

from checkup.errors import UnknownPhase
from checkup.registry import DATA_PHASES, Check, CheckRegistry, FieldCheck, Phase
from checkup.severity import Severity


def _check(name, severity=Severity.YELLOW):
    return Check(name, severity, lambda data, entity: None)


def _field_check(name):
    return FieldCheck(name, Severity.BLUE, lambda field: None)


class TestRegister:
    def test_checks_come_back_in_registration_order(self):
        registry = CheckRegistry()
        registry.register(Phase.SETTINGS, [_check("a"), _check("b")])
        registry.register("settings", [_check("c")])
        names = [c.name for c in registry.checks_for(Phase.SETTINGS)]
        assert names == ["a", "b", "c"]

    def test_repeated_reads_are_stable(self):
        registry = CheckRegistry().register(Phase.MAPPINGS, [_check("x"), _check("y")])
        assert registry.checks_for("mappings") == registry.checks_for(Phase.MAPPINGS)

    def test_read_result_cannot_reorder_registry(self):
        registry = CheckRegistry().register(Phase.SEGMENTS, [_check("x"), _check("y")])
        first = registry.checks_for(Phase.SEGMENTS)
        assert isinstance(first, tuple)
        registry.register(Phase.SEGMENTS, [_check("z")])
        assert [c.name for c in first] == ["x", "y"]
        assert [c.name for c in registry.checks_for(Phase.SEGMENTS)] == ["x", "y", "z"]

    def test_phases_are_independent(self):
        registry = CheckRegistry().register(Phase.SETTINGS, [_check("s")])
        for phase in Phase:
            if phase is not Phase.SETTINGS:
                assert registry.checks_for(phase) == ()
        assert len(registry) == 1

    def test_field_phase_takes_field_checks(self):
        registry = CheckRegistry().register("mapping-fields", [_field_check("f")])
        assert [c.name for c in registry.checks_for(Phase.MAPPING_FIELDS)] == ["f"]

    def test_wrong_check_kind_raises(self):
        with pytest.raises(TypeError, match="FieldCheck"):
            CheckRegistry().register(Phase.MAPPING_FIELDS, [_check("entity-level")])
        with pytest.raises(TypeError, match="Check"):
            CheckRegistry().register(Phase.SETTINGS, [_field_check("field-level")])


class TestUnknownPhase:
    @pytest.mark.parametrize("phase", ["index.settings", "warmers", "", None])
    def test_register_rejects_unknown_phase(self, phase):
        with pytest.raises(UnknownPhase) as exc_info:
            CheckRegistry().register(phase, [_check("a")])
        assert exc_info.value.phase == phase

    def test_checks_for_rejects_unknown_phase(self):
        with pytest.raises(UnknownPhase):
            CheckRegistry().checks_for("aliases")


def test_data_phases_evaluation_order():
    assert DATA_PHASES == (Phase.SEGMENTS, Phase.SETTINGS, Phase.MAPPINGS, Phase.FLAT_MAPPINGS)


def test_checks_are_immutable():
    check = _check("frozen")
    with pytest.raises(AttributeError):
        check.name = "thawed"
