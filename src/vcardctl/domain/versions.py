"""vCard versions, field kind tags, and the required-field registry.

Three protocol versions are supported. Each one mandates a set of field
kinds that must appear at least once on a card. Kinds are identified by
:class:`FieldKind` tags rather than by Python class identity, so the
registry stays a static table.

INVARIANT: The registry is read-only after import.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType


class VCardVersion(StrEnum):
    """Supported vCard protocol versions."""

    V2_1 = "2.1"
    V3_0 = "3.0"
    V4_0 = "4.0"


ALL_VERSIONS: frozenset[VCardVersion] = frozenset(VCardVersion)


class FieldKind(StrEnum):
    """Tag identifying each field variant."""

    NAME = "name"
    FORMATTED_NAME = "formatted_name"
    ORGANIZATION = "organization"
    TITLE = "title"
    ROLE = "role"
    PHOTO = "photo"
    TELEPHONE = "telephone"
    ADDRESS = "address"
    EMAIL = "email"
    REVISION = "revision"
    AGENT = "agent"
    ANNIVERSARY = "anniversary"
    BIRTHDAY = "birthday"
    FREE_BUSY_URL = "free_busy_url"
    GENDER = "gender"
    GEO = "geo"
    INSTANT_MESSAGING = "instant_messaging"
    KEY = "key"
    KIND = "kind"
    NICKNAME = "nickname"
    NOTE = "note"
    URL = "url"


REQUIRED_KINDS: MappingProxyType[VCardVersion, tuple[FieldKind, ...]] = MappingProxyType(
    {
        VCardVersion.V2_1: (FieldKind.NAME,),
        VCardVersion.V3_0: (FieldKind.NAME, FieldKind.FORMATTED_NAME),
        VCardVersion.V4_0: (FieldKind.FORMATTED_NAME,),
    }
)


def supported_versions() -> list[str]:
    """Return the supported version strings in ascending order."""
    return sorted(v.value for v in VCardVersion)


def is_supported(version: str) -> bool:
    """Check whether *version* is one of the supported version strings."""
    return version in ALL_VERSIONS


def required_kinds(version: str) -> tuple[FieldKind, ...]:
    """Return the field kinds *version* requires, in registry order.

    Raises:
        KeyError: If *version* is not a supported version. Callers are
            expected to reject unknown versions before reaching here.
    """
    return REQUIRED_KINDS[version]  # type: ignore[index]
