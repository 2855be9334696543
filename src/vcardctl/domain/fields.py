"""Field models — one frozen pydantic model per vCard property.

Every field knows its :class:`FieldKind` tag, the property name it emits,
and the set of versions it renders for. ``format(version)`` returns one
``PROPERTY:value`` line or raises :class:`UnsupportedFieldError`.

Versions and syntax per kind:

- Most kinds render identically on 2.1, 3.0 and 4.0.
- AGENT renders on 2.1/3.0 only; ANNIVERSARY, FBURL, GENDER and KIND on
  4.0 only; IMPP and NICKNAME on 3.0/4.0.
- GEO, PHOTO and KEY change syntax between versions.

INVARIANT: Field models are frozen and hold tuples, never lists.
"""

from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod
from enum import StrEnum
from typing import ClassVar, Self

from pydantic import BaseModel, model_validator

from vcardctl.domain.card import Card
from vcardctl.domain.errors import RenderError, UnsupportedFieldError, VCardError
from vcardctl.domain.versions import ALL_VERSIONS, FieldKind, VCardVersion

DATE_FORMAT = "%Y%m%d"
DATETIME_FORMAT = "%Y%m%dT%H%M%S"

DEFAULT_TELEPHONE_TYPES: tuple[str, ...] = ("voice",)
DEFAULT_ADDRESS_TYPES: tuple[str, ...] = ("intl", "postal", "parcel", "work")


# ---------------------------------------------------------------------------
# Type tag vocabularies
# ---------------------------------------------------------------------------


class TelephoneType(StrEnum):
    """Well-known TEL type tags."""

    HOME = "home"
    MSG = "msg"
    WORK = "work"
    PREF = "pref"
    VOICE = "voice"
    FAX = "fax"
    CELL = "cell"
    VIDEO = "video"
    PAGER = "pager"
    BBS = "bbs"
    MODEM = "modem"
    CAR = "car"
    ISDN = "isdn"
    PCS = "pcs"


class AddressType(StrEnum):
    """Well-known ADR type tags."""

    DOM = "dom"
    INTL = "intl"
    POSTAL = "postal"
    PARCEL = "parcel"
    HOME = "home"
    WORK = "work"
    PREF = "pref"


class EmailType(StrEnum):
    """Well-known EMAIL type tags."""

    INTERNET = "internet"
    X400 = "x400"
    PREF = "pref"


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def format_timestamp(value: dt.datetime, pattern: str | None = None) -> str:
    """Format a timestamp for REV.

    The default pattern is basic ISO 8601, suffixed with ``Z`` for UTC or
    ``+HHMM`` for other offsets. Naive timestamps get no suffix.
    """
    if pattern:
        return value.strftime(pattern)
    text = value.strftime(DATETIME_FORMAT)
    offset = value.utcoffset()
    if offset is None:
        return text
    if offset == dt.timedelta(0):
        return f"{text}Z"
    return f"{text}{value.strftime('%z')}"


def render_media(
    prop: str,
    version: VCardVersion,
    media_type: str,
    uri: str | None,
    data: str | None,
) -> str:
    """Render a PHOTO/KEY style property carrying a URI or inline base64 data."""
    parts = [prop]
    if version == VCardVersion.V2_1:
        if media_type:
            parts.append(f";{media_type}")
        parts.append(f";ENCODING=BASE64:{data}" if data else f":{uri}")
    elif version == VCardVersion.V3_0:
        if media_type:
            parts.append(f";TYPE={media_type}")
        parts.append(f";ENCODING=b:{data}" if data else f";VALUE=uri:{uri}")
    else:
        if data:
            return f"{prop}:data:{media_type};base64,{data}"
        if media_type:
            parts.append(f";MEDIATYPE={media_type}")
        parts.append(f":{uri}")
    return "".join(parts)


# ---------------------------------------------------------------------------
# Base field
# ---------------------------------------------------------------------------


class BaseField(BaseModel, ABC):
    """Abstract base for every vCard field.

    Subclasses set three class attributes and implement ``_render``:

    - ``kind``: the :class:`FieldKind` tag.
    - ``property_name``: the vCard property emitted (e.g. ``"TEL"``).
    - ``versions``: versions the field renders for (default: all).
    """

    model_config = {"frozen": True, "extra": "forbid"}

    kind: ClassVar[FieldKind]
    property_name: ClassVar[str]
    versions: ClassVar[frozenset[VCardVersion]] = ALL_VERSIONS

    def supports(self, version: str) -> bool:
        """Whether this field renders for *version*."""
        return version in self.versions

    def format(self, version: str) -> str:
        """Render this field as one property line for *version*.

        Raises:
            UnsupportedFieldError: The field does not render for *version*.
            RenderError: The field's own formatting step failed.
        """
        if not self.supports(version):
            raise UnsupportedFieldError(self.kind, version)
        return self._render(VCardVersion(version))

    @abstractmethod
    def _render(self, version: VCardVersion) -> str: ...


class _TextField(BaseField):
    """Field whose value is a single text string."""

    text: str

    def _render(self, version: VCardVersion) -> str:
        return f"{self.property_name}:{self.text}"


class _MediaField(BaseField):
    """PHOTO/KEY: a media type plus exactly one of a URI or inline base64 data."""

    media_type: str = ""
    uri: str | None = None
    data: str | None = None

    @model_validator(mode="after")
    def _one_source(self) -> Self:
        if bool(self.uri) == bool(self.data):
            raise ValueError("exactly one of 'uri' or 'data' must be set")
        return self

    def _render(self, version: VCardVersion) -> str:
        return render_media(self.property_name, version, self.media_type, self.uri, self.data)


# ---------------------------------------------------------------------------
# Concrete fields
# ---------------------------------------------------------------------------


class Name(BaseField):
    """N: structured name components."""

    kind = FieldKind.NAME
    property_name = "N"

    family_name: str = ""
    given_name: str = ""
    additional_names: str = ""
    honorific_prefixes: str = ""
    honorific_suffixes: str = ""

    def _render(self, version: VCardVersion) -> str:
        components = (
            self.family_name,
            self.given_name,
            self.additional_names,
            self.honorific_prefixes,
            self.honorific_suffixes,
        )
        return f"N:{';'.join(components)}"


class FormattedName(_TextField):
    kind = FieldKind.FORMATTED_NAME
    property_name = "FN"


class Organization(BaseField):
    """ORG: organization name followed by optional unit names."""

    kind = FieldKind.ORGANIZATION
    property_name = "ORG"

    name: str
    units: tuple[str, ...] = ()

    def _render(self, version: VCardVersion) -> str:
        return f"ORG:{';'.join((self.name, *self.units))}"


class Title(_TextField):
    kind = FieldKind.TITLE
    property_name = "TITLE"


class Role(_TextField):
    kind = FieldKind.ROLE
    property_name = "ROLE"


class Photo(_MediaField):
    kind = FieldKind.PHOTO
    property_name = "PHOTO"


class Key(_MediaField):
    kind = FieldKind.KEY
    property_name = "KEY"


class Telephone(BaseField):
    """TEL: number with type tags; defaults to ``voice``."""

    kind = FieldKind.TELEPHONE
    property_name = "TEL"

    number: str
    types: tuple[str, ...] = ()

    def _render(self, version: VCardVersion) -> str:
        types = ",".join(self.types or DEFAULT_TELEPHONE_TYPES)
        return f"TEL;TYPE={types}:{self.number}"


class Address(BaseField):
    """ADR: seven address components with type tags."""

    kind = FieldKind.ADDRESS
    property_name = "ADR"

    po_box: str = ""
    extended_address: str = ""
    street_address: str = ""
    locality: str = ""
    region: str = ""
    postal_code: str = ""
    country_name: str = ""
    types: tuple[str, ...] = ()

    def _render(self, version: VCardVersion) -> str:
        types = ",".join(self.types or DEFAULT_ADDRESS_TYPES)
        components = (
            self.po_box,
            self.extended_address,
            self.street_address,
            self.locality,
            self.region,
            self.postal_code,
            self.country_name,
        )
        return f"ADR;TYPE={types}:{';'.join(components)}"


class Email(BaseField):
    kind = FieldKind.EMAIL
    property_name = "EMAIL"

    address: str
    types: tuple[str, ...] = ()

    def _render(self, version: VCardVersion) -> str:
        if self.types:
            return f"EMAIL;TYPE={','.join(self.types)}:{self.address}"
        return f"EMAIL:{self.address}"


class Revision(BaseField):
    """REV: last revision timestamp of the card."""

    kind = FieldKind.REVISION
    property_name = "REV"

    timestamp: dt.datetime
    time_format: str | None = None

    def _render(self, version: VCardVersion) -> str:
        return f"REV:{format_timestamp(self.timestamp, self.time_format)}"


class Agent(BaseField):
    """AGENT: someone acting on behalf of the card's subject.

    Carries either free text or a nested Card; the nested card wins when
    both are set. A nested card is only validated when the agent is
    rendered, so an outer card holding an invalid one still passes
    ``validate()`` and fails in ``serialize()`` with a RenderError.
    """

    model_config = {"arbitrary_types_allowed": True}

    kind = FieldKind.AGENT
    property_name = "AGENT"
    versions = frozenset({VCardVersion.V2_1, VCardVersion.V3_0})

    text: str = ""
    card: Card | None = None

    def _render(self, version: VCardVersion) -> str:
        if self.card is None:
            return f"AGENT:{self.text}"
        try:
            nested = self.card.serialize()
        except VCardError as exc:
            raise RenderError(self.kind, version, str(exc)) from exc
        return f"AGENT:{nested}"


class _DateField(BaseField):
    date: dt.datetime | dt.date
    time_format: str | None = None

    def _render(self, version: VCardVersion) -> str:
        return f"{self.property_name}:{self.date.strftime(self.time_format or DATE_FORMAT)}"


class Anniversary(_DateField):
    kind = FieldKind.ANNIVERSARY
    property_name = "ANNIVERSARY"
    versions = frozenset({VCardVersion.V4_0})


class Birthday(_DateField):
    kind = FieldKind.BIRTHDAY
    property_name = "BDAY"


class FreeBusyURL(BaseField):
    kind = FieldKind.FREE_BUSY_URL
    property_name = "FBURL"
    versions = frozenset({VCardVersion.V4_0})

    uri: str

    def _render(self, version: VCardVersion) -> str:
        return f"FBURL:{self.uri}"


class Gender(BaseField):
    kind = FieldKind.GENDER
    property_name = "GENDER"
    versions = frozenset({VCardVersion.V4_0})

    value: str

    def _render(self, version: VCardVersion) -> str:
        return f"GENDER:{self.value}"


class Geo(BaseField):
    """GEO: latitude/longitude, always six decimals.

    4.0 wraps the pair in a ``geo:`` URI.
    """

    kind = FieldKind.GEO
    property_name = "GEO"

    latitude: float
    longitude: float

    def _render(self, version: VCardVersion) -> str:
        pair = f"{self.latitude:.6f},{self.longitude:.6f}"
        if version == VCardVersion.V4_0:
            return f"GEO:geo:{pair}"
        return f"GEO:{pair}"


class InstantMessaging(BaseField):
    kind = FieldKind.INSTANT_MESSAGING
    property_name = "IMPP"
    versions = frozenset({VCardVersion.V3_0, VCardVersion.V4_0})

    platform: str
    handle: str

    def _render(self, version: VCardVersion) -> str:
        return f"IMPP:{self.platform.lower()}:{self.handle}"


class Kind(BaseField):
    """KIND: the type of entity the card describes (individual, org, ...)."""

    kind = FieldKind.KIND
    property_name = "KIND"
    versions = frozenset({VCardVersion.V4_0})

    value: str

    def _render(self, version: VCardVersion) -> str:
        return f"KIND:{self.value.lower()}"


class Nickname(BaseField):
    kind = FieldKind.NICKNAME
    property_name = "NICKNAME"
    versions = frozenset({VCardVersion.V3_0, VCardVersion.V4_0})

    names: tuple[str, ...]

    def _render(self, version: VCardVersion) -> str:
        return f"NICKNAME:{','.join(self.names)}"


class Note(_TextField):
    kind = FieldKind.NOTE
    property_name = "NOTE"


class Url(BaseField):
    kind = FieldKind.URL
    property_name = "URL"

    uri: str

    def _render(self, version: VCardVersion) -> str:
        return f"URL:{self.uri}"


FIELD_REGISTRY: dict[FieldKind, type[BaseField]] = {
    cls.kind: cls
    for cls in (
        Name,
        FormattedName,
        Organization,
        Title,
        Role,
        Photo,
        Telephone,
        Address,
        Email,
        Revision,
        Agent,
        Anniversary,
        Birthday,
        FreeBusyURL,
        Gender,
        Geo,
        InstantMessaging,
        Key,
        Kind,
        Nickname,
        Note,
        Url,
    )
}
