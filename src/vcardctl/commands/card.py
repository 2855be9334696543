"""Commands: validate, render, and QR-export card definition files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from vcardctl.commands._base import VcardCommand
from vcardctl.services.definitions import DefinitionError, load_definition
from vcardctl.services.result import ServiceResult

if TYPE_CHECKING:
    from vcardctl.commands._context import AppContext

_FILE_ARGUMENT = click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def _load_definition(app: AppContext, op: str, file: Path) -> dict[str, Any] | None:
    """Load a definition file, emitting a failed result when it is unreadable."""
    try:
        return load_definition(file)
    except DefinitionError as exc:
        app.emit(ServiceResult.failure(op, exc.code, str(exc), exc.detail))
        return None


@click.command(
    cls=VcardCommand,
    examples="""\
  vcardctl validate contact.toml
  vcardctl --json validate contact.json""",
)
@_FILE_ARGUMENT
@click.pass_obj
def validate(app: AppContext, file: Path) -> None:
    """Check a card definition FILE against its vCard version."""
    definition = _load_definition(app, "validate_card", file)
    if definition is not None:
        app.emit(app.cards.validate(definition))


@click.command(
    cls=VcardCommand,
    examples="""\
  vcardctl render contact.toml
  vcardctl render contact.toml > contact.vcf
  vcardctl --json render contact.json""",
)
@_FILE_ARGUMENT
@click.pass_obj
def render(app: AppContext, file: Path) -> None:
    """Render a card definition FILE as vCard text on stdout."""
    definition = _load_definition(app, "render_card", file)
    if definition is not None:
        app.emit(app.cards.render(definition))


@click.command(
    cls=VcardCommand,
    examples="""\
  vcardctl qr contact.toml --output contact.png
  vcardctl qr contact.toml -o contact.png --width 300 --height 300""",
)
@_FILE_ARGUMENT
@click.option(
    "-o",
    "--output",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="PNG file to write.",
)
@click.option("--width", type=click.IntRange(min=1), default=None, help="Image width in pixels.")
@click.option("--height", type=click.IntRange(min=1), default=None, help="Image height in pixels.")
@click.pass_obj
def qr(app: AppContext, file: Path, output: Path, width: int | None, height: int | None) -> None:
    """Write a card definition FILE as a QR-code PNG."""
    definition = _load_definition(app, "export_qr", file)
    if definition is not None:
        app.emit(app.cards.export_qr(definition, output, width=width, height=height))
