from __future__ import annotations

import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from cloudherder.widgets import Panel


class HerderCliError(Exception):
    pass


class UsageError(HerderCliError):
    pass


class OpError(HerderCliError):
    pass


_ERROR_CONSOLE = Console(stderr=True)


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _rich_error(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[bold red]error:[/bold red] {escape(msg)}")


@dataclass(frozen=True)
class GlobalOpts:
    pretty: bool
    quiet: bool


def _print_json(obj: Any, *, pretty: bool) -> None:
    if pretty:
        sys.stdout.write(json.dumps(obj, indent=2, sort_keys=True, ensure_ascii=False) + "\n")
    else:
        sys.stdout.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False) + "\n")


def _now_ms() -> int:
    return int(time.monotonic() * 1000)


def _emit_event(opts: GlobalOpts, *, op: str, started_ms: int, **fields: Any) -> None:
    if opts.quiet:
        return
    event: dict[str, Any] = {
        "kind": "cloudherder.cli.event.v1",
        "op": op,
        "durationMs": max(0, _now_ms() - started_ms),
    }
    event.update(fields)
    _eprint(json.dumps(event, separators=(",", ":"), sort_keys=True))


def _read_text_file(path: str, *, label: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise UsageError(f"failed to read {label}: {e}") from e


def _write_text_file(path: str, text: str) -> None:
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OpError(f"failed to write {path}: {e}") from e


def _load_sections(raw: str, *, label: str) -> list[list[Panel]]:
    """Parse a JSON array of sections, each an array of widget objects."""
    try:
        val = json.loads(raw)
    except json.JSONDecodeError as e:
        raise UsageError(f"invalid {label}: {e}") from e
    if not isinstance(val, list):
        raise UsageError(f"invalid {label}: expected a JSON array of sections")
    sections: list[list[Panel]] = []
    for i, section in enumerate(val):
        if not isinstance(section, list):
            raise UsageError(f"invalid {label}: section {i} must be a JSON array of widgets")
        sections.append([Panel.from_dict(item) for item in section])
    return sections
