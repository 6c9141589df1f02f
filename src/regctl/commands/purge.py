"""Command: permanently delete a letter record."""

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
  regctl purge 3f2a9c1e-5d7b-4c1a-9e0f-2b8d6a4c7e91 --yes""",
)
@click.argument("letter_id")
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def purge(app: AppContext, letter_id: str, assume_yes: bool) -> None:
    """Delete a letter record. History is lost; the number is never reused.

    Prefer ``void`` for letters that were issued in error.
    """
    app.confirm(f"Permanently delete letter {letter_id}?", assume_yes=assume_yes)
    result = RegisterService(app.registry).purge(letter_id)
    app.emit(result)
