"""Card definitions — build Cards from TOML/JSON documents.

A definition is a mapping with an optional ``version`` and a ``fields``
array. Each field entry names its ``kind`` (a FieldKind tag) plus the
attributes of that field model::

    version = "4.0"

    [[fields]]
    kind = "name"
    family_name = "Gump"
    given_name = "Forrest"

    [[fields]]
    kind = "formatted_name"
    text = "Forrest Gump"

An ``agent`` entry may carry a nested ``card`` definition, which is built
(and validated) first. Field attribute errors surface as pydantic
``ValidationError``; domain errors surface as ``VCardError``.
"""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from vcardctl.domain.card import Card, new_card
from vcardctl.domain.fields import FIELD_REGISTRY, BaseField
from vcardctl.domain.versions import FieldKind


class DefinitionError(Exception):
    """A card definition is structurally invalid or unreadable."""

    def __init__(self, message: str, *, code: str = "invalid_definition", **detail: Any) -> None:
        super().__init__(message)
        self.code = code
        self.detail = detail


def load_definition(path: Path) -> dict[str, Any]:
    """Read a definition file; ``.toml`` files are TOML, anything else JSON."""
    try:
        raw = path.read_text(encoding="utf-8")
        data = tomllib.loads(raw) if path.suffix.lower() == ".toml" else json.loads(raw)
    except (OSError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise DefinitionError(f"Error reading {path}: {exc}", code="invalid_file") from exc

    if not isinstance(data, dict):
        raise DefinitionError(f"{path} must contain a top-level object.", code="invalid_format")
    return data


def field_from_definition(entry: Any, *, default_version: str) -> BaseField:
    """Build one field model from its definition entry."""
    if not isinstance(entry, Mapping):
        raise DefinitionError("Each field entry must be an object with a 'kind' key.")

    data = dict(entry)
    raw_kind = data.pop("kind", None)
    try:
        kind = FieldKind(raw_kind)
    except ValueError:
        raise DefinitionError(
            f"Unknown field kind: {raw_kind!r}",
            kind=raw_kind,
            known=sorted(k.value for k in FieldKind),
        ) from None

    if kind is FieldKind.AGENT and isinstance(data.get("card"), Mapping):
        data["card"] = card_from_definition(data["card"], default_version=default_version)

    return FIELD_REGISTRY[kind].model_validate(data)


def card_from_definition(definition: Mapping[str, Any], *, default_version: str) -> Card:
    """Build and validate a Card from a definition mapping.

    A missing ``version`` falls back to *default_version*. TOML/JSON
    numbers such as ``4.0`` are accepted as version strings.
    """
    version = str(definition.get("version", default_version))
    entries = definition.get("fields", [])
    if not isinstance(entries, list):
        raise DefinitionError("'fields' must be an array of field objects.")

    fields = [field_from_definition(entry, default_version=version) for entry in entries]
    return new_card(version, *fields)
