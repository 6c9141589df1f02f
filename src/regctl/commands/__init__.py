"""Subcommand modules for regctl.

Provides register_commands() which uses deferred imports to keep
``regctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    # --- Letter lifecycle ---
    from regctl.commands.issue import issue
    from regctl.commands.purge import purge
    from regctl.commands.void import void

    cli.add_command(issue)
    cli.add_command(void)
    cli.add_command(purge)

    # --- Reads ---
    from regctl.commands.counters import counters
    from regctl.commands.list_cmd import list_cmd
    from regctl.commands.next_cmd import next_cmd
    from regctl.commands.show import show

    cli.add_command(list_cmd)
    cli.add_command(show)
    cli.add_command(next_cmd)
    cli.add_command(counters)

    # --- Whole-register operations ---
    from regctl.commands.export import export
    from regctl.commands.import_cmd import import_cmd
    from regctl.commands.reset import reset

    cli.add_command(export)
    cli.add_command(import_cmd)
    cli.add_command(reset)
