"""Ingest command - run recorded lifecycle signals through an auditor."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console

from ..auditor import Auditor, InternalAuditor, LogAuditor
from ..config import AuditConfig
from ..errors import SinkWriteError
from ..signals import EventSignal
from ..sink import FileAuditSink


def run_ingest(config: AuditConfig, signals_path: Path, *, log_only: bool = False) -> int:
    """
    Feed a JSON-lines file of signals to an auditor, one event at a time.

    Malformed lines are reported and skipped. A sink failure aborts the run.

    Returns the process exit code.
    """
    console = Console()
    err = Console(stderr=True)

    auditor: Auditor
    if log_only:
        auditor = LogAuditor()
    else:
        internal = InternalAuditor(config, FileAuditSink(config.store_dir))
        try:
            started = internal.start()
        except SinkWriteError as e:
            err.print(f"[bold red]{e}[/bold red]", highlight=False)
            return 1
        if not started:
            err.print("[yellow]Auditing is off: no audit container configured.[/yellow]")
            return 1
        auditor = internal

    seen = written = skipped = invalid = 0
    with signals_path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                signal = EventSignal.from_json(line)
            except (json.JSONDecodeError, KeyError, ValueError) as e:
                invalid += 1
                err.print(f"[yellow]line {line_no}: invalid signal: {e}[/yellow]", highlight=False)
                continue

            seen += 1
            try:
                record = auditor.on_event(signal)
            except SinkWriteError as e:
                err.print(f"[bold red]line {line_no}: {e}[/bold red]", highlight=False)
                return 1

            if record is None:
                skipped += 1
            else:
                written += 1
                console.print(f"[green]+[/green] {record.record_path}", highlight=False)

    if log_only:
        console.print(f"[bold]Logged[/bold] {seen} events ({invalid} invalid lines).")
    else:
        console.print(
            f"[bold]Audited[/bold] {seen} events: {written} recorded, "
            f"{skipped} skipped, {invalid} invalid lines."
        )
    return 0
