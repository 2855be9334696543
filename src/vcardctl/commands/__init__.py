"""Subcommand modules for vcardctl.

Provides register_commands() which uses deferred imports to keep
``vcardctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from vcardctl.commands.card import qr, render, validate
    from vcardctl.commands.versions import versions

    cli.add_command(versions)
    cli.add_command(validate)
    cli.add_command(render)
    cli.add_command(qr)
