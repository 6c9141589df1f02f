"""Command: export the register snapshot to a JSON file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from regctl.commands._base import RegCommand
from regctl.services.transfer import TransferService, default_export_name

if TYPE_CHECKING:
    from regctl.commands._context import AppContext


@click.command(
    cls=RegCommand,
    examples="""\
  regctl export
  regctl export --output backups/register.json""",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Target file. Defaults to <prefix>-<YYYY-MM-DD>.json in the current directory.",
)
@click.pass_obj
def export(app: AppContext, output: Path | None) -> None:
    """Write counters and letters to a JSON file."""
    cfg = app.settings.export
    target = output or Path.cwd() / default_export_name(cfg.filename_prefix)
    result = TransferService(app.registry).export_snapshot(target, indent=cfg.indent or None)
    app.emit(result)
