"""
Command-line interface for eventkey.

``eventkey hash`` reads newline-delimited JSON events and writes them back
with the hash id set. ``eventkey inspect`` decodes an id. The HMAC key is only
taken from configuration (file or ``EVENTKEY_HASHID__KEY``), never from argv.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import IO, Any, Iterator, Sequence

import orjson

from .._version import __version__
from ..core import diagnostics
from ..core.config import load_settings
from ..core.encoding import decode_sortable
from ..core.errors import ConfigurationError
from ..core.hashid import HashIdGenerator
from ..core.timestamp import PREFIX_LENGTH, prefix_to_epoch
from ..metrics.metrics import MetricsCollector

BATCH_SIZE = 256


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eventkey",
        description="Deterministic, sortable deduplication keys for events.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    sub = parser.add_subparsers(dest="command", required=True)

    hash_cmd = sub.add_parser("hash", help="add hash ids to NDJSON events")
    hash_cmd.add_argument("--config", type=Path, help="JSON or TOML settings file")
    hash_cmd.add_argument(
        "--source",
        action="append",
        metavar="FIELD",
        help="field to hash over (repeatable)",
    )
    hash_cmd.add_argument("--target", help="field receiving the id")
    hash_cmd.add_argument(
        "--method", help="MD5, SHA1, SHA256, SHA384 or SHA512"
    )
    hash_cmd.add_argument("--hash-bytes-used", type=int, metavar="N")
    hash_cmd.add_argument("--timestamp-field", metavar="FIELD")
    hash_cmd.add_argument(
        "--no-timestamp-prefix",
        dest="add_timestamp_prefix",
        action="store_false",
        default=None,
        help="do not prefix ids with the event timestamp",
    )
    hash_cmd.add_argument(
        "--normalize-timestamp",
        action="store_true",
        default=None,
        help="hash an ISO-8601 timestamp source field in canonical form",
    )
    hash_cmd.add_argument("--input", type=Path, help="read events from file")
    hash_cmd.add_argument("--output", type=Path, help="write events to file")

    inspect_cmd = sub.add_parser("inspect", help="decode a hash id")
    inspect_cmd.add_argument("hashid")
    inspect_cmd.add_argument(
        "--no-prefix",
        dest="prefixed",
        action="store_false",
        help="the id was built without a timestamp prefix",
    )
    return parser


def _hashid_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.source:
        overrides["source"] = args.source
    for name in (
        "target",
        "method",
        "hash_bytes_used",
        "timestamp_field",
        "add_timestamp_prefix",
        "normalize_timestamp",
    ):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return overrides


def _read_events(stream: IO[bytes]) -> Iterator[dict[str, Any] | None]:
    for lineno, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        try:
            event = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            diagnostics.warn("cli", "invalid JSON line", line=lineno, reason=str(exc))
            yield None
            continue
        if not isinstance(event, dict):
            diagnostics.warn("cli", "event is not a JSON object", line=lineno)
            yield None
            continue
        yield event


async def _hash_stream(
    generator: HashIdGenerator,
    source: IO[bytes],
    sink: IO[bytes],
    *,
    concurrency: int,
) -> int:
    """Process ``source`` into ``sink``; return the number of skipped lines."""
    skipped = 0
    batch: list[dict[str, Any]] = []

    async def flush() -> None:
        for event in await generator.generate_many(batch, concurrency=concurrency):
            sink.write(orjson.dumps(event, default=str) + b"\n")
        batch.clear()

    for event in _read_events(source):
        if event is None:
            skipped += 1
            continue
        batch.append(event)
        if len(batch) >= BATCH_SIZE:
            await flush()
    if batch:
        await flush()
    return skipped


async def _run_hash(args: argparse.Namespace) -> int:
    overrides = _hashid_overrides(args)
    if overrides:
        settings = load_settings(args.config, hashid=overrides)
    else:
        settings = load_settings(args.config)
    metrics = MetricsCollector(enabled=settings.core.enable_metrics)
    generator = HashIdGenerator(settings.hashid, metrics=metrics)
    diagnostics.debug(
        "cli",
        "hash generator ready",
        generator=repr(generator),
        settings=settings.to_json(),
    )

    with ExitStack() as stack:
        source: IO[bytes] = (
            stack.enter_context(args.input.open("rb"))
            if args.input
            else sys.stdin.buffer
        )
        sink: IO[bytes] = (
            stack.enter_context(args.output.open("wb"))
            if args.output
            else sys.stdout.buffer
        )
        try:
            skipped = await _hash_stream(
                generator, source, sink, concurrency=settings.core.max_concurrency
            )
        finally:
            sink.flush()
    return 2 if skipped else 0


def _run_inspect(args: argparse.Namespace) -> int:
    try:
        raw = decode_sortable(args.hashid)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    info: dict[str, Any] = {"length": len(args.hashid), "bytes": raw.hex()}
    if args.prefixed:
        if len(raw) < PREFIX_LENGTH:
            print("Error: id too short for a timestamp prefix", file=sys.stderr)
            return 1
        info["timestamp"] = prefix_to_epoch(raw)
        info["digest"] = raw[PREFIX_LENGTH:].hex()
    else:
        info["digest"] = raw.hex()
    print(orjson.dumps(info).decode("utf-8"))
    return 0


async def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    try:
        if args.command == "inspect":
            return _run_inspect(args)
        return await _run_hash(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cli_main() -> int:
    """CLI main function for non-async entry."""
    return asyncio.run(main())


if __name__ == "__main__":
    sys.exit(cli_main())
