"""
tests/conftest.py — Shared fixtures and path setup for all tests.

Adds the project root to sys.path so unit tests can import:
    from config.settings import Settings
    from checkup.orchestrator import Checkup
    from checkup.flatten import flatten

Snapshot fixtures are endpoint -> response dicts shaped like the cluster's
REST responses, so they can feed both the fetcher fakes and Checkup.
"""
import io
import json
import pathlib
import sys
import urllib.error

import pytest

# Make project root importable without installing as a package
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def make_responses(mappings=None, aliases=None, settings=None, segments=None, version="1.7.5"):
    """Endpoint responses for a cluster whose indices are the keys of `aliases`."""
    aliases = aliases if aliases is not None else {name: {"aliases": {}} for name in mappings or {}}
    return {
        "/": {"version": {"number": version, "build_snapshot": False}},
        "/_segments": {"indices": segments or {}},
        "/_settings": settings or {},
        "/_mappings": mappings or {},
        "/_warmers": {},
        "/_aliases": aliases,
        "/_cluster/settings": {"persistent": {}, "transient": {}},
    }


class FakeSource:
    """SnapshotSource stand-in that serves prepared responses."""

    description = "http://fake:9200"

    def __init__(self, responses, snapshot_error=None):
        self.responses = responses
        self.snapshot_error = snapshot_error

    def fetch_version(self):
        from checkup.fetch import VersionInfo

        return VersionInfo.from_root(self.responses["/"])

    def fetch_snapshot(self):
        if self.snapshot_error is not None:
            raise self.snapshot_error
        return {path: body for path, body in self.responses.items() if path != "/"}


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def fake_urlopen(routes):
    """Build a urlopen replacement: routes maps URL -> body dict or (status, body)."""

    def _urlopen(url, timeout=None):  # noqa: ARG001
        route = routes[url]
        if isinstance(route, tuple):
            status, body = route
            raw = body if isinstance(body, bytes) else json.dumps(body).encode()
            raise urllib.error.HTTPError(url, status, "Unauthorized", {}, io.BytesIO(raw))
        return FakeResponse(json.dumps(route).encode())

    return _urlopen


@pytest.fixture
def one_index_responses():
    return make_responses(
        mappings={
            "a": {
                "mappings": {
                    "t": {
                        "properties": {
                            "user": {
                                "properties": {"name": {"type": "keyword"}},
                            }
                        }
                    }
                }
            }
        }
    )
