"""CLI entrypoint for provtrail."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import load_config


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="provtrail")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with an [audit] table",
)
@click.option(
    "--store",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Audit store directory (overrides config and PROVTRAIL_STORE)",
)
@click.option("--verbose", is_flag=True, help="Log pipeline decisions at debug level")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, store: Path | None, verbose: bool) -> None:
    """provtrail - provenance audit trail for repository lifecycle events.

    Classifies create/modify/delete events, mints sharded record paths and
    writes one immutable audit record per audit-worthy event.
    """
    _configure_logging(verbose)
    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))

    if store is not None:
        config = replace(config, store_dir=store)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("signals", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--log-only",
    is_flag=True,
    help="Only log '<agent> <path>' for each event; write no records",
)
@click.pass_context
def ingest(ctx: click.Context, signals: Path, log_only: bool) -> None:
    """Audit the lifecycle signals in a JSON-lines file.

    Each line is one event, e.g.:

        {"event_id": "urn:uuid:27c605e4-...", "resource_path": "/obj1",
         "lifecycle_kinds": ["creation"], "resource_types": ["binary-content"],
         "agent_id": "alice", "timestamp": "2015-04-10T14:30:36Z",
         "base_location": "http://localhost:8080/rest"}
    """
    from .commands.ingest_cmd import run_ingest

    sys.exit(run_ingest(ctx.obj["config"], signals, log_only=log_only))


@cli.command()
@click.argument("event_id")
@click.pass_context
def mint(ctx: click.Context, event_id: str) -> None:
    """Print the sharded record path for an event id or token.

    Examples:

        provtrail mint urn:uuid:27c605e4-98c6-4240-86be-f1bb1971d694
    """
    from .commands.trail_cmd import run_mint

    sys.exit(run_mint(ctx.obj["config"], event_id))


@cli.command()
@click.option(
    "--kind",
    "kinds",
    multiple=True,
    help="Lifecycle kind (creation, deletion, modification or a vocabulary URI). Repeatable.",
)
@click.option(
    "--type",
    "types",
    multiple=True,
    help="Resource type (container, binary-content, ...). Repeatable.",
)
def classify(kinds: tuple[str, ...], types: tuple[str, ...]) -> None:
    """Print the audit category for a combination of lifecycle kinds and resource types."""
    from .commands.trail_cmd import run_classify

    sys.exit(run_classify(list(kinds), list(types)))


# -----------------------------------------------------------------------------
# Trail commands - query persisted records
# -----------------------------------------------------------------------------


@cli.group()
def trail() -> None:
    """Query the persisted audit trail."""
    pass


@trail.command("list")
@click.option("--last", "last_n", type=int, default=None, help="Show only the last N records")
@click.option(
    "--category",
    "categories",
    multiple=True,
    default=None,
    help="Filter by category (content-added, object-removed, ...). Repeatable.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)
@click.pass_context
def trail_list(
    ctx: click.Context,
    last_n: int | None,
    categories: tuple[str, ...],
    output_format: str,
) -> None:
    """List audit records, oldest first.

    Examples:

        provtrail trail list --last 10

        provtrail trail list --category content-removed --format json
    """
    from .commands.trail_cmd import run_trail_list

    sys.exit(
        run_trail_list(
            ctx.obj["config"],
            last_n=last_n,
            categories=list(categories) if categories else None,
            format=output_format,
        )
    )


@trail.command("show")
@click.argument("record_path")
@click.option("--json", "output_json", is_flag=True, help="Output the record as JSON")
@click.pass_context
def trail_show(ctx: click.Context, record_path: str, output_json: bool) -> None:
    """Show one audit record by its path."""
    from .commands.trail_cmd import run_trail_show

    sys.exit(run_trail_show(ctx.obj["config"], record_path, output_json=output_json))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
