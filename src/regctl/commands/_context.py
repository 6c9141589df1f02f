"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy registry loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from regctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from regctl.config.settings import RegSettings
    from regctl.core.registration import RegistrationService
    from regctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The registry is loaded from storage on first use so ``--help`` and
    ``--version`` never touch the register file.
    """

    def __init__(self, settings: RegSettings) -> None:
        self.settings = settings
        self._registry: RegistrationService | None = None

        from regctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            register_name=settings.register.name,
        )

        if settings.verbose:
            from regctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def registry(self) -> RegistrationService:
        """The registration service (state loaded lazily on first access)."""
        if self._registry is None:
            from regctl.core.registration import RegistrationService
            from regctl.domain.errors import PersistenceError
            from regctl.infrastructure.stores import open_store

            try:
                self._registry = RegistrationService(open_store(self.settings))
            except PersistenceError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._registry

    @property
    def interactive(self) -> bool:
        """True when prompts may fire: no ``--no-interact``/``--json`` and a TTY stdin."""
        return (
            not self.settings.no_interact
            and not self.settings.json_output
            and sys.stdin.isatty()
        )

    def confirm(self, message: str, *, assume_yes: bool) -> None:
        """Ask before a destructive step.  Aborts on refusal.

        Skipped when *assume_yes* or when not interactive.
        """
        if assume_yes or not self.interactive:
            return
        click.confirm(message, abort=True)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
