#!/usr/bin/env python3
"""
checkup/cli.py — Run the built-in checks against a cluster and print a report.

Usage:
    python -m checkup                                # reads .env from cwd
    python -m checkup --host http://es:9200
    python -m checkup --snapshot-file capture.yml --json

Exit code is 0 when every index is below red, 1 otherwise or on abort.
"""

from __future__ import annotations

import argparse
import logging
import sys

import orjson

from checkup.orchestrator import run_checkup
from checkup.report import FanoutSink, ReportBuilder, TextRenderer
from checkup.severity import Severity
from config.settings import Settings, load_settings


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="index-checkup",
        description="Check an Elasticsearch cluster's indices for upgrade problems.",
    )
    parser.add_argument("--host", help="cluster URL (overrides ES_HOST)")
    parser.add_argument("--env-file", default=".env", help="env file to read (default: .env)")
    parser.add_argument(
        "--snapshot-file", help="read a YAML/JSON capture instead of the live cluster"
    )
    parser.add_argument(
        "--json", action="store_true", help="print the report tree as JSON instead of text"
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    cfg = load_settings(args.env_file)
    overrides = {}
    if args.host:
        overrides["ES_HOST"] = args.host
    if args.snapshot_file:
        overrides["SNAPSHOT_FILE"] = args.snapshot_file
    if overrides:
        cfg = Settings(**{**cfg.model_dump(), **overrides})
    return cfg


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    cfg = build_settings(args)
    logging.basicConfig(
        level=getattr(logging, cfg.LOG_LEVEL),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    builder = ReportBuilder()
    sink = builder if args.json else FanoutSink(builder, TextRenderer(sys.stdout))
    summary = run_checkup(cfg, sink)

    if args.json:
        sys.stdout.write(orjson.dumps(builder.root.to_dict(), option=orjson.OPT_INDENT_2).decode())
        sys.stdout.write("\n")
    return 0 if summary.severity < Severity.RED else 1


if __name__ == "__main__":
    sys.exit(main())
