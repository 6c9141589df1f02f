"""Command: show one letter."""

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
  regctl show 3f2a9c1e-5d7b-4c1a-9e0f-2b8d6a4c7e91
  regctl --json show 3f2a9c1e-5d7b-4c1a-9e0f-2b8d6a4c7e91""",
)
@click.argument("letter_id")
@click.pass_obj
def show(app: AppContext, letter_id: str) -> None:
    """Show a letter by ID."""
    app.emit(RegisterService(app.registry).get(letter_id))
