"""Command: show the last-issued number of every series."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from regctl.commands._base import RegCommand
from regctl.services.register import RegisterService

if TYPE_CHECKING:
    from regctl.commands._context import AppContext


@click.command(
    cls=RegCommand,
    examples="""\
  regctl counters
  regctl --json counters""",
)
@click.pass_obj
def counters(app: AppContext) -> None:
    """Show the counters per classification and year."""
    app.emit(RegisterService(app.registry).counters())
