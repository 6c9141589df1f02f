"""Command: preview the next registration number of a series."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from regctl.commands._base import CLASSIFICATION_CHOICE, RegCommand
from regctl.services.register import RegisterService

if TYPE_CHECKING:
    from regctl.commands._context import AppContext


@click.command(
    "next",
    cls=RegCommand,
    examples="""\
  regctl next outgoing
  regctl next certificate --year 2023
  regctl next certificate --date 2023-06-01""",
)
@click.argument("classification", type=CLASSIFICATION_CHOICE)
@click.option("--year", type=int, default=None, help="Series year.")
@click.option("--date", "letter_date", default=None, help="Take the year from a letter date.")
@click.pass_obj
def next_cmd(
    app: AppContext,
    classification: str,
    year: int | None,
    letter_date: str | None,
) -> None:
    """Preview the next number. Nothing is reserved."""
    if year is not None and letter_date is not None:
        raise click.UsageError("Use either --year or --date, not both.")
    result = RegisterService(app.registry).preview(
        classification, year=year, letter_date=letter_date
    )
    app.emit(result)
