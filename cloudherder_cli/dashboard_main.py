from __future__ import annotations

import os
import sys

import click
import typer

from cloudherder.assembler import build_dashboard_body, dump_document
from cloudherder.config import CLOUDHERDER_REGION, REGION_ENV_NAMES, DeploymentConfig
from cloudherder.errors import DashboardError
from cloudherder.queries import create_dashboard_query_string, create_saved_query_string
from cloudherder.stacking import stack_widget_sections

from . import __version__
from .cli_shared import (
    GlobalOpts,
    OpError,
    UsageError,
    _emit_event,
    _load_sections,
    _now_ms,
    _print_json,
    _read_text_file,
    _write_text_file,
    _rich_error,
)

app = typer.Typer(
    name="cloudherder-dashboard",
    help="Compose CloudWatch dashboard bodies from widget sections.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cloudherder-dashboard {__version__}")
        raise typer.Exit(code=0)


@app.callback()
def app_callback(
    ctx: typer.Context,
    pretty: bool = typer.Option(False, "--pretty", help="Indent JSON output"),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress the stderr event line"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True),
) -> None:
    del version
    ctx.obj = GlobalOpts(pretty=pretty, quiet=quiet)


def _opts(ctx: typer.Context) -> GlobalOpts:
    obj = ctx.obj
    if isinstance(obj, GlobalOpts):
        return obj
    return GlobalOpts(pretty=False, quiet=False)


def _read_sections(sections_file: str):
    if sections_file == "-":
        raw = sys.stdin.read()
    else:
        raw = _read_text_file(sections_file, label="sections file")
    return _load_sections(raw, label="sections file")


def _resolve_target(*, resource_prefix: str, region: str, service_id: str) -> tuple[str, str]:
    region_value = region.strip()
    if not region_value:
        for name in REGION_ENV_NAMES:
            region_value = (os.environ.get(name) or "").strip()
            if region_value:
                break
    prefix = resource_prefix.strip()
    if prefix:
        if not region_value:
            raise UsageError(f"missing region (pass --region or set {CLOUDHERDER_REGION})")
        return prefix, region_value
    environ = dict(os.environ)
    if region_value:
        environ[CLOUDHERDER_REGION] = region_value
    config = DeploymentConfig.from_env(environ)
    return config.resource_prefix(service_id.strip() or None), config.region


@app.command("render", help="Stack sections and emit the full dashboard body.")
def render(
    ctx: typer.Context,
    sections_file: str = typer.Argument(..., help="JSON file with an array of widget arrays ('-' for stdin)"),
    resource_prefix: str = typer.Option(
        "", "--resource-prefix", help="Resource prefix (default: derived from CLOUDHERDER_* env)"
    ),
    region: str = typer.Option("", "--region", help="Region for the closing ingestion panel"),
    service_id: str = typer.Option("", "--service-id", help="Optional service id suffix for the prefix"),
    output: str = typer.Option("", "--output", help="Write the compact body to this file instead of stdout"),
) -> None:
    opts = _opts(ctx)
    started = _now_ms()
    sections = _read_sections(sections_file)
    prefix, region_value = _resolve_target(
        resource_prefix=resource_prefix,
        region=region,
        service_id=service_id,
    )
    body = build_dashboard_body(sections, resource_prefix=prefix, region=region_value)
    if output.strip():
        _write_text_file(output.strip(), dump_document(body) + "\n")
    else:
        _print_json(body, pretty=opts.pretty)
    _emit_event(
        opts,
        op="render",
        started_ms=started,
        sections=len(sections),
        widgets=len(body["widgets"]),
        resourcePrefix=prefix,
    )


@app.command("stack", help="Stack sections only and emit the floor and widgets.")
def stack(
    ctx: typer.Context,
    sections_file: str = typer.Argument(..., help="JSON file with an array of widget arrays ('-' for stdin)"),
) -> None:
    opts = _opts(ctx)
    started = _now_ms()
    sections = _read_sections(sections_file)
    result = stack_widget_sections(sections)
    _print_json(
        {
            "floor": result.floor,
            "widgets": [panel.to_dict() for panel in result.panels],
        },
        pretty=opts.pretty,
    )
    _emit_event(
        opts,
        op="stack",
        started_ms=started,
        sections=len(sections),
        widgets=len(result.panels),
        floor=result.floor,
    )


@app.command("query", help="Build the Logs Insights query embedded in a log widget.")
def query(
    ctx: typer.Context,
    log_group: str = typer.Argument(..., help="Log group name for the SOURCE clause"),
    base_query: str = typer.Argument(..., help="Query clauses appended after the fields clause"),
    saved: bool = typer.Option(False, "--saved", help="Emit the saved query definition and its log group instead"),
) -> None:
    opts = _opts(ctx)
    started = _now_ms()
    if saved:
        if not log_group.strip():
            raise UsageError("log group name is required for a saved query definition")
        out = {
            "kind": "cloudherder.query.v1",
            "logGroupNames": [log_group],
            "query": create_saved_query_string(base_query),
        }
    else:
        out = {
            "kind": "cloudherder.query.v1",
            "query": create_dashboard_query_string(log_group, base_query),
        }
    _print_json(out, pretty=opts.pretty)
    _emit_event(opts, op="query", started_ms=started, saved=saved)


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        result = app(args=argv, prog_name="cloudherder-dashboard", standalone_mode=False)
        if result is None:
            return 0
        return int(result)
    except typer.Exit as e:
        return int(e.exit_code)
    except click.ClickException as e:
        _rich_error(e.format_message())
        return int(e.exit_code)
    except (UsageError, DashboardError) as e:
        _rich_error(str(e))
        return 2
    except OpError as e:
        _rich_error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
