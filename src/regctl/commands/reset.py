"""Command: wipe every counter and letter."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from regctl.commands._base import RegCommand
from regctl.services.transfer import TransferService

if TYPE_CHECKING:
    from regctl.commands._context import AppContext


@click.command(
    cls=RegCommand,
    examples="""\
  regctl export && regctl reset --yes""",
)
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def reset(app: AppContext, assume_yes: bool) -> None:
    """Delete all counters and letters. Numbering restarts at 1."""
    app.confirm("Delete all counters and letters?", assume_yes=assume_yes)
    app.emit(TransferService(app.registry).reset())
