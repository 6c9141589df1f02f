"""Command: issue a new letter under the next number of its series."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from regctl.commands._base import CLASSIFICATION_CHOICE, RegCommand
from regctl.services.register import RegisterService

if TYPE_CHECKING:
    from regctl.commands._context import AppContext


@click.command(
    cls=RegCommand,
    examples="""\
  regctl -q issue certificate "Business permit"
  regctl --json issue outgoing "Budget report"
  regctl issue outgoing "Invitation to village meeting" --party "Head of District"
  regctl issue certificate "Domicile" --date 2023-05-01 --party Budi""",
)
@click.argument("classification", type=CLASSIFICATION_CHOICE)
@click.argument("subject")
@click.option(
    "--date",
    "letter_date",
    default=None,
    help="Letter date (YYYY-MM-DD). Defaults to today; its year picks the series.",
)
@click.option("--party", default=None, help="Recipient or requesting party.")
@click.pass_obj
def issue(
    app: AppContext,
    classification: str,
    subject: str,
    letter_date: str | None,
    party: str | None,
) -> None:
    """Issue a letter and print its registration number."""
    if app.interactive and party is None:
        raw = click.prompt("Party (optional)", default="", show_default=False)
        party = raw.strip() or None

    result = RegisterService(app.registry).issue(
        classification,
        subject,
        letter_date=letter_date,
        party=party,
    )
    app.emit(result)
