"""Trail and inspection CLI commands."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from ..classifier import classify
from ..config import AuditConfig
from ..errors import InvalidTokenError, SinkWriteError
from ..minter import PathMinter
from ..signals import event_token
from ..trail import format_record, get_record, read_trail
from ..vocabulary import AuditCategory, LifecycleKind, ResourceType


def run_trail_list(
    config: AuditConfig,
    *,
    last_n: int | None = None,
    categories: list[str] | None = None,
    format: str = "text",
) -> int:
    """
    List audit records in the store.

    Returns 0 when records were found, 1 otherwise.
    """
    console = Console()
    err = Console(stderr=True)

    category_filter: list[AuditCategory] | None = None
    if categories:
        category_filter = []
        for c in categories:
            try:
                category_filter.append(AuditCategory(c.lower()))
            except ValueError:
                err.print(f"[yellow]Unknown category: {c}[/yellow]", highlight=False)
        if not category_filter:
            if format == "json":
                print("[]")
            else:
                console.print("[dim]No audit records found.[/dim]")
            return 1

    records = read_trail(
        config.store_dir,
        audit_root=config.audit_root or "/",
        last_n=last_n,
        categories=category_filter,
    )

    if format == "json":
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return 0 if records else 1

    if not records:
        console.print("[dim]No audit records found.[/dim]")
        return 1

    table = Table(title=f"Audit trail ({len(records)} records)")
    table.add_column("occurred_at", style="dim", no_wrap=True)
    table.add_column("category", style="magenta")
    table.add_column("agent", style="cyan")
    table.add_column("resource")
    table.add_column("record", style="dim")

    for r in records:
        table.add_row(
            r.occurred_at,
            r.category.value if r.category else "",
            r.agents[0] if r.agents else "",
            r.related_resource or "",
            r.record_path,
        )

    console.print(table)
    return 0


def run_trail_show(config: AuditConfig, record_path: str, *, output_json: bool = False) -> int:
    err = Console(stderr=True)
    try:
        record = get_record(config.store_dir, record_path)
    except (SinkWriteError, ValueError) as e:
        err.print(str(e), style="bold red")
        return 1
    if record is None:
        err.print(f"Audit record not found: {record_path}", style="bold red")
        return 1

    if output_json:
        print(json.dumps(record.to_dict(), indent=2, sort_keys=True))
    else:
        Console().print(format_record(record), markup=False, highlight=False)
    return 0


def run_mint(config: AuditConfig, event_id: str) -> int:
    err = Console(stderr=True)
    minter = PathMinter(segments=config.segments, width=config.segment_width)
    try:
        path = minter.mint(event_token(event_id))
    except InvalidTokenError as e:
        err.print(str(e), style="bold red")
        return 1
    if config.audit_root:
        path = f"{config.audit_root}/{path}"
    print(path)
    return 0


def run_classify(kinds: list[str], types: list[str]) -> int:
    err = Console(stderr=True)
    try:
        lifecycle_kinds = frozenset(LifecycleKind.parse(k) for k in kinds)
    except ValueError as e:
        err.print(str(e), style="bold red")
        return 1

    resource_types: set[ResourceType] = set()
    for t in types:
        parsed = ResourceType.parse(t)
        if parsed is None:
            err.print(f"[yellow]Unknown resource type: {t}[/yellow]", highlight=False)
            continue
        resource_types.add(parsed)

    category = classify(lifecycle_kinds, frozenset(resource_types))
    if category is None:
        print("none")
    else:
        print(f"{category.value}\t{category.uri}")
    return 0
