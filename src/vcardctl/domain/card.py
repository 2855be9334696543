"""Card — an ordered, validated collection of fields for one vCard version.

Lifecycle: a Card is built once from a version and a field sequence, and
:func:`new_card` validates it before handing it back. ``serialize()``
revalidates, so a Card that fails validation never produces text.

INVARIANT: Field order is preserved; it is the output line order.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from typing import TYPE_CHECKING

from vcardctl.domain.errors import (
    MissingRequiredFieldError,
    UnknownVersionError,
    UnsupportedFieldError,
)
from vcardctl.domain.versions import FieldKind, VCardVersion, is_supported, required_kinds

if TYPE_CHECKING:
    from vcardctl.domain.fields import BaseField

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"


class Card:
    """A vCard document: one version plus an ordered tuple of fields.

    Fields are frozen models and the tuple is never mutated, so a Card is
    safe to share between threads.
    """

    __slots__ = ("_fields", "_version")

    def __init__(self, version: str, fields: Iterable[BaseField] = ()) -> None:
        if not is_supported(version):
            raise UnknownVersionError(version)
        self._version = VCardVersion(version)
        self._fields: tuple[BaseField, ...] = tuple(fields)

    @property
    def version(self) -> VCardVersion:
        return self._version

    @property
    def fields(self) -> tuple[BaseField, ...]:
        return self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        kinds = ", ".join(f.kind for f in self._fields)
        return f"Card(version={self._version.value!r}, fields=[{kinds}])"

    def kind_counts(self) -> Counter[FieldKind]:
        """Multiset of field kinds present on the card."""
        return Counter(f.kind for f in self._fields)

    def validate(self) -> None:
        """Check the card against its version.

        Support is checked first, field by field in order; then each kind
        the version requires must be present at least once. The first
        failure is raised.

        Raises:
            UnsupportedFieldError: A field does not render for this version.
            MissingRequiredFieldError: A required kind is absent.
        """
        for field in self._fields:
            if not field.supports(self._version):
                raise UnsupportedFieldError(field.kind, self._version)

        present = self.kind_counts()
        for kind in required_kinds(self._version):
            if present[kind] == 0:
                raise MissingRequiredFieldError(kind, self._version)

    def serialize(self) -> str:
        """Render the full ``BEGIN:VCARD`` ... ``END:VCARD`` document.

        No trailing separator follows ``END:VCARD``.
        """
        self.validate()
        lines = ["BEGIN:VCARD", f"VERSION:{self._version}"]
        lines.extend(field.format(self._version) for field in self._fields)
        lines.append("END:VCARD")
        return LINE_SEPARATOR.join(lines)


def new_card(version: str, *fields: BaseField) -> Card:
    """Build a Card and validate it eagerly.

    Only a fully valid Card is ever returned.

    Raises:
        UnknownVersionError: *version* is not supported.
        UnsupportedFieldError: A field does not render for *version*.
        MissingRequiredFieldError: *version* requires a kind not supplied.
    """
    card = Card(version, fields)
    card.validate()
    logger.debug("Built vCard %s with %d fields", card.version, len(card))
    return card
