"""
checkup/fetch.py — Snapshot retrieval from a cluster or from a capture file.

Uses the cluster REST API directly over urllib. The six snapshot endpoints
are independent, so they are fetched concurrently and joined before any
check runs. Any one failing aborts the snapshot with a FetchFailure.

A capture file is a YAML (or JSON) document keyed by endpoint path:

    /:                 {version: {number: 1.7.5}}
    /_segments:        {indices: {...}}
    /_settings:        {...}
    ...
"""

from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import yaml
from pydantic import BaseModel, model_validator

from checkup.errors import FetchFailure, SnapshotFileError
from checkup.paths import ABSENT, resolve

if TYPE_CHECKING:
    from config.settings import Settings
    from checkup.flatten import FlattenedMapping

logger = logging.getLogger(__name__)

ROOT_ENDPOINT = "/"
SNAPSHOT_ENDPOINTS = (
    "/_segments",
    "/_settings",
    "/_mappings",
    "/_warmers",
    "/_aliases",
    "/_cluster/settings",
)
_LEADING_INT_RE = re.compile(r"^(\d+)")


class VersionInfo(BaseModel):
    number: str
    major: int = 0
    minor: int = 0
    patch: int = 0
    snapshot: bool = False

    @model_validator(mode="before")
    @classmethod
    def split_number(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("number"), str):
            data = dict(data)
            parts = data["number"].split(".") + ["0", "0"]
            for name, part in zip(("major", "minor", "patch"), parts):
                match = _LEADING_INT_RE.match(part)
                data.setdefault(name, int(match.group(1)) if match else 0)
        return data

    @property
    def display(self) -> str:
        return self.number + (".SNAPSHOT" if self.snapshot else "")

    @classmethod
    def from_root(cls, body: Any, url: str = ROOT_ENDPOINT) -> VersionInfo:
        number = resolve(body, "version.number")
        if not isinstance(number, str):
            raise FetchFailure(url, "response has no version.number")
        snapshot = resolve(body, "version.build_snapshot")
        return cls(number=number, snapshot=snapshot is not ABSENT and bool(snapshot))


class SnapshotSource(Protocol):
    description: str

    def fetch_version(self) -> VersionInfo: ...

    def fetch_snapshot(self) -> dict[str, Any]: ...


def failure_reason(body: bytes | str | None, status_text: str) -> str:
    """Prefer the body's `error` field, then the raw body, then the status text."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    text = (body or "").strip()
    if not text:
        return status_text
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    if isinstance(payload, dict) and "error" in payload:
        error = payload["error"]
        if isinstance(error, str):
            return error
        if isinstance(error, dict) and isinstance(error.get("reason"), str):
            return error["reason"]
        return json.dumps(error)
    return text


class SnapshotFetcher:
    """Reads the snapshot endpoints from a live cluster."""

    def __init__(self, host: str, timeout_seconds: int = 30, max_workers: int = 6) -> None:
        self.host = host.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_workers = max_workers

    @classmethod
    def from_settings(cls, cfg: Settings) -> SnapshotFetcher:
        return cls(cfg.ES_HOST, cfg.HTTP_TIMEOUT_SECONDS, cfg.FETCH_MAX_WORKERS)

    @property
    def description(self) -> str:
        return self.host

    def get(self, path: str) -> Any:
        url = self.host + path
        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(url, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            try:
                body = e.read()
            except OSError:
                body = None
            raise FetchFailure(url, failure_reason(body, f"{e.code} {e.reason}")) from e
        except urllib.error.URLError as e:
            raise FetchFailure(url, str(e.reason)) from e
        except (TimeoutError, OSError) as e:
            raise FetchFailure(url, str(e) or type(e).__name__) from e
        try:
            return json.loads(raw)
        except ValueError as e:
            raise FetchFailure(url, f"response is not valid JSON: {e}") from e

    def fetch_version(self) -> VersionInfo:
        return VersionInfo.from_root(self.get(ROOT_ENDPOINT), self.host + ROOT_ENDPOINT)

    def fetch_snapshot(self) -> dict[str, Any]:
        responses: dict[str, Any] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(self.get, path): path for path in SNAPSHOT_ENDPOINTS}
            try:
                for future in as_completed(futures):
                    responses[futures[future]] = future.result()
            except FetchFailure:
                for future in futures:
                    future.cancel()
                raise
        logger.debug("fetched %d snapshot endpoints from %s", len(responses), self.host)
        return responses


class FileSnapshotSource:
    """Reads a previously captured snapshot from a YAML or JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._responses: dict[str, Any] | None = None

    @property
    def description(self) -> str:
        return str(self.path)

    def _load(self) -> dict[str, Any]:
        if self._responses is None:
            self._responses = load_snapshot_file(self.path)
        return self._responses

    def fetch_version(self) -> VersionInfo:
        try:
            return VersionInfo.from_root(self._load()[ROOT_ENDPOINT], f"{self.path}#/")
        except FetchFailure as e:
            raise SnapshotFileError(f"{self.path}: {e.reason}") from e

    def fetch_snapshot(self) -> dict[str, Any]:
        responses = self._load()
        return {path: responses[path] for path in SNAPSHOT_ENDPOINTS}


def load_snapshot_file(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as fh:
            payload = yaml.safe_load(fh)
    except FileNotFoundError as e:
        raise SnapshotFileError(f"snapshot file not found: {path}") from e
    except yaml.YAMLError as e:
        raise SnapshotFileError(f"could not parse {path.name}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotFileError(f"could not read {path}: {e}") from e

    if not isinstance(payload, dict):
        raise SnapshotFileError(f"{path.name} must contain a mapping of endpoint -> response")
    missing = [ep for ep in (ROOT_ENDPOINT, *SNAPSHOT_ENDPOINTS) if ep not in payload]
    if missing:
        raise SnapshotFileError(f"{path.name} is missing endpoint(s): {', '.join(missing)}")
    malformed = [
        ep for ep in (ROOT_ENDPOINT, *SNAPSHOT_ENDPOINTS) if not isinstance(payload[ep], dict)
    ]
    if malformed:
        raise SnapshotFileError(
            f"{path.name}: response for {', '.join(malformed)} must be a mapping"
        )
    return payload


def build_snapshot(responses: dict[str, Any], flattened: FlattenedMapping) -> dict[str, Any]:
    """Arrange endpoint responses into the entity.* / global.* namespaces."""
    segments = resolve(responses["/_segments"], "indices")
    return {
        "entity": {
            "segments": segments if segments is not ABSENT else {},
            "settings": responses["/_settings"],
            "mappings": responses["/_mappings"],
            "flat_mappings": flattened.entities,
            "warmers": responses["/_warmers"],
            "aliases": responses["/_aliases"],
        },
        "global": {
            "settings": responses["/_cluster/settings"],
        },
    }
