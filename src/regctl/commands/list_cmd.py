"""Command: list letters with optional filters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from regctl.commands._base import CLASSIFICATION_CHOICE, RegCommand
from regctl.domain.letters import LetterQuery
from regctl.domain.types import Classification, LetterStatus
from regctl.services.register import RegisterService

if TYPE_CHECKING:
    from regctl.commands._context import AppContext


@click.command(
    "list",
    cls=RegCommand,
    examples="""\
  regctl list
  regctl list --class certificate --year 2023
  regctl list --status void
  regctl list --search domicile
  regctl -q list --year 2024""",
)
@click.option("--class", "classification", type=CLASSIFICATION_CHOICE, default=None)
@click.option("--year", type=int, default=None, help="Series year.")
@click.option(
    "--status",
    type=click.Choice(["ACTIVE", "VOID"], case_sensitive=False),
    default=None,
)
@click.option(
    "--search",
    "-s",
    default=None,
    help="Text search over number, classification, subject, party, date and status.",
)
@click.pass_obj
def list_cmd(
    app: AppContext,
    classification: str | None,
    year: int | None,
    status: str | None,
    search: str | None,
) -> None:
    """List letters, newest first."""
    query = LetterQuery(
        classification=Classification(classification.upper()) if classification else None,
        year=year,
        status=LetterStatus(status.upper()) if status else None,
        search=search,
    )
    app.emit(RegisterService(app.registry).list_letters(query))
