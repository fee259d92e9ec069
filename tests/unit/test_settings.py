"""
tests/unit/test_settings.py — Unit tests for config/settings.py.

These tests validate the Pydantic Settings schema with no network
dependencies. They run in under 1 second.

Run: pytest tests/unit/test_settings.py -v
"""

import pytest

# conftest.py adds project root to sys.path
from config.settings import Settings, load_settings, read_env_file

# ---------------------------------------------------------------------------
# Host validation
# ---------------------------------------------------------------------------


class TestHost:
    def test_default_host(self):
        s = Settings()
        assert s.ES_HOST == "http://localhost:9200"

    def test_trailing_slash_removed(self):
        s = Settings(ES_HOST="http://es:9200/")
        assert s.ES_HOST == "http://es:9200"

    def test_whitespace_stripped(self):
        """GNU make leaves trailing whitespace after `include .env`."""
        s = Settings(ES_HOST="https://es.example.com:9243  ")
        assert s.ES_HOST == "https://es.example.com:9243"

    def test_missing_scheme_raises(self):
        with pytest.raises(ValueError, match="http"):
            Settings(ES_HOST="es:9200")

    def test_blank_host_raises(self):
        with pytest.raises(Exception):  # pydantic ValidationError
            Settings(ES_HOST="   ")


# ---------------------------------------------------------------------------
# Retrieval knobs
# ---------------------------------------------------------------------------


class TestRetrieval:
    def test_defaults(self):
        s = Settings()
        assert s.HTTP_TIMEOUT_SECONDS == 30
        assert s.FETCH_MAX_WORKERS == 6
        assert s.SNAPSHOT_FILE is None

    @pytest.mark.parametrize("field", ["HTTP_TIMEOUT_SECONDS", "FETCH_MAX_WORKERS"])
    def test_non_positive_raises(self, field):
        with pytest.raises(ValueError, match=">= 1"):
            Settings(**{field: 0})

    def test_blank_snapshot_file_is_none(self):
        s = Settings(SNAPSHOT_FILE="  ")
        assert s.SNAPSHOT_FILE is None


# ---------------------------------------------------------------------------
# Log level
# ---------------------------------------------------------------------------


class TestLogLevel:
    def test_lower_case_is_accepted(self):
        s = Settings(LOG_LEVEL="debug ")
        assert s.LOG_LEVEL == "DEBUG"

    def test_unknown_level_raises(self):
        with pytest.raises(Exception):
            Settings(LOG_LEVEL="chatty")


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


class TestLoadSettings:
    def test_reads_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ES_HOST", raising=False)
        monkeypatch.delenv("FETCH_MAX_WORKERS", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# cluster\n"
            "ES_HOST=http://es:9200   # prod cluster\n"
            "\n"
            "FETCH_MAX_WORKERS=2\n"
            "UNRELATED=ignored\n"
        )
        s = load_settings(str(env_file))
        assert s.ES_HOST == "http://es:9200"
        assert s.FETCH_MAX_WORKERS == 2

    def test_environment_wins_over_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("ES_HOST=http://from-file:9200\n")
        monkeypatch.setenv("ES_HOST", "http://from-env:9200")
        s = load_settings(str(env_file))
        assert s.ES_HOST == "http://from-env:9200"

    def test_missing_env_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ES_HOST", raising=False)
        s = load_settings(str(tmp_path / "nope.env"))
        assert s.ES_HOST == "http://localhost:9200"


class TestReadEnvFile:
    def test_export_prefix_and_quotes(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "export ES_HOST='http://es:9200'\n"
            'SNAPSHOT_FILE="captures/prod.yml"   # nightly\n'
            "not a pair\n"
            "LOG_LEVEL=\n"
        )
        assert read_env_file(str(env_file)) == {
            "ES_HOST": "http://es:9200",
            "SNAPSHOT_FILE": "captures/prod.yml",
            "LOG_LEVEL": "",
        }

    def test_missing_file_is_empty(self, tmp_path):
        assert read_env_file(str(tmp_path / "nope.env")) == {}
