"""Command: replace the register with an exported JSON snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from regctl.commands._base import RegCommand
from regctl.services.transfer import TransferService

if TYPE_CHECKING:
    from regctl.commands._context import AppContext


@click.command(
    "import",
    cls=RegCommand,
    examples="""\
  regctl import letter-register-export-2024-05-01.json --yes
  regctl import backup.json --strict""",
)
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--strict",
    is_flag=True,
    help="Reject snapshots whose letters are numbered above their counter.",
)
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def import_cmd(app: AppContext, source: Path, strict: bool, assume_yes: bool) -> None:
    """Replace all counters and letters with the contents of SOURCE."""
    app.confirm("Replace the whole register with this file?", assume_yes=assume_yes)
    result = TransferService(app.registry).import_snapshot(source, strict=strict)
    app.emit(result)
