"""Command: list supported vCard versions and their required fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from vcardctl.commands._base import VcardCommand

if TYPE_CHECKING:
    from vcardctl.commands._context import AppContext


@click.command(
    cls=VcardCommand,
    examples="""\
  vcardctl versions
  vcardctl --json versions""",
)
@click.pass_obj
def versions(app: AppContext) -> None:
    """List supported vCard versions."""
    app.emit(app.cards.list_versions())
