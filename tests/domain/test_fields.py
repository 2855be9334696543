"""Tests for field models and their per-version rendering."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from vcardctl.domain.card import Card, new_card
from vcardctl.domain.errors import MissingRequiredFieldError, RenderError, UnsupportedFieldError
from vcardctl.domain.fields import (
    FIELD_REGISTRY,
    Address,
    Agent,
    Anniversary,
    BaseField,
    Birthday,
    Email,
    EmailType,
    FormattedName,
    FreeBusyURL,
    Gender,
    Geo,
    InstantMessaging,
    Key,
    Kind,
    Name,
    Nickname,
    Note,
    Organization,
    Photo,
    Revision,
    Role,
    Telephone,
    TelephoneType,
    Title,
    Url,
    format_timestamp,
    render_media,
)
from vcardctl.domain.versions import FieldKind, VCardVersion

PHOTO_URI = "http://www.abc.com/pub/photos/jqpublic.gif"

# One instance of every kind, used for cross-cutting properties.
SAMPLES: dict[FieldKind, BaseField] = {
    FieldKind.NAME: Name(family_name="Gump", given_name="Forrest"),
    FieldKind.FORMATTED_NAME: FormattedName(text="Forrest Gump"),
    FieldKind.ORGANIZATION: Organization(name="Bubba Gump Shrimp Co."),
    FieldKind.TITLE: Title(text="Shrimp Man"),
    FieldKind.ROLE: Role(text="Captain"),
    FieldKind.PHOTO: Photo(media_type="image/gif", uri=PHOTO_URI),
    FieldKind.TELEPHONE: Telephone(number="+1-111-555-1212"),
    FieldKind.ADDRESS: Address(street_address="42 Plantation St.", locality="Baytown"),
    FieldKind.EMAIL: Email(address="forrest@example.com"),
    FieldKind.REVISION: Revision(timestamp=datetime(2008, 4, 24, 19, 52, 43, tzinfo=UTC)),
    FieldKind.AGENT: Agent(text="Bubba"),
    FieldKind.ANNIVERSARY: Anniversary(date=date(1990, 6, 1)),
    FieldKind.BIRTHDAY: Birthday(date=date(1944, 6, 6)),
    FieldKind.FREE_BUSY_URL: FreeBusyURL(uri="http://example.com/fb/fgump"),
    FieldKind.GENDER: Gender(value="M"),
    FieldKind.GEO: Geo(latitude=30.0, longitude=-90.0),
    FieldKind.INSTANT_MESSAGING: InstantMessaging(platform="XMPP", handle="forrest@example.com"),
    FieldKind.KEY: Key(media_type="application/pgp-keys", uri="http://example.com/key.asc"),
    FieldKind.KIND: Kind(value="individual"),
    FieldKind.NICKNAME: Nickname(names=("Forrest",)),
    FieldKind.NOTE: Note(text="Run, Forrest, run"),
    FieldKind.URL: Url(uri="http://bubbagump.example.com"),
}


class TestRegistry:
    def test_every_kind_registered(self) -> None:
        assert set(FIELD_REGISTRY) == set(FieldKind)

    def test_registry_maps_kind_to_class(self) -> None:
        for kind, cls in FIELD_REGISTRY.items():
            assert cls.kind is kind

    def test_samples_cover_every_kind(self) -> None:
        assert set(SAMPLES) == set(FieldKind)


class TestFieldProperties:
    @pytest.mark.parametrize("kind", list(FieldKind))
    @pytest.mark.parametrize("version", list(VCardVersion))
    def test_format_is_deterministic(self, kind: FieldKind, version: VCardVersion) -> None:
        field = SAMPLES[kind]
        if not field.supports(version):
            pytest.skip(f"{kind} does not render for {version}")
        assert field.format(version) == field.format(version)

    @pytest.mark.parametrize("kind", list(FieldKind))
    @pytest.mark.parametrize("version", list(VCardVersion))
    def test_unsupported_version_raises(self, kind: FieldKind, version: VCardVersion) -> None:
        field = SAMPLES[kind]
        if field.supports(version):
            line = field.format(version)
            assert line.startswith(field.property_name)
        else:
            with pytest.raises(UnsupportedFieldError) as exc_info:
                field.format(version)
            assert exc_info.value.kind == kind
            assert exc_info.value.version == version

    def test_unknown_version_string_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedFieldError):
            FormattedName(text="x").format("5.0")

    def test_plain_string_version_accepted(self) -> None:
        assert FormattedName(text="x").format("3.0") == "FN:x"

    def test_frozen(self) -> None:
        name = Name(family_name="Gump")
        with pytest.raises(ValidationError):
            name.family_name = "Blue"  # type: ignore[misc]

    def test_unknown_attribute_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Name(surname="Gump")  # type: ignore[call-arg]

    def test_list_attributes_stored_as_tuples(self) -> None:
        tel = Telephone(number="1", types=["home", "cell"])  # type: ignore[arg-type]
        assert tel.types == ("home", "cell")


class TestSimpleFields:
    def test_name(self) -> None:
        name = Name(family_name="Person", given_name="Test", honorific_suffixes="PhD")
        assert name.format("3.0") == "N:Person;Test;;;PhD"

    def test_name_all_empty(self) -> None:
        assert Name().format("2.1") == "N:;;;;"

    def test_formatted_name(self) -> None:
        assert FormattedName(text="Test Person").format("4.0") == "FN:Test Person"

    def test_organization_without_units(self) -> None:
        assert Organization(name="ABC, Inc.").format("4.0") == "ORG:ABC, Inc."

    def test_organization_with_units(self) -> None:
        org = Organization(name="ABC, Inc.", units=("North American Division", "Marketing"))
        assert org.format("2.1") == "ORG:ABC, Inc.;North American Division;Marketing"

    def test_title(self) -> None:
        title = Title(text="V.P. Research and Development")
        assert title.format("3.0") == "TITLE:V.P. Research and Development"

    def test_role(self) -> None:
        assert Role(text="Programmer").format("4.0") == "ROLE:Programmer"

    def test_note(self) -> None:
        assert Note(text="likes chocolates").format("2.1") == "NOTE:likes chocolates"

    def test_url(self) -> None:
        assert Url(uri="https://example.org").format("3.0") == "URL:https://example.org"


class TestTelephone:
    @pytest.mark.parametrize("version", ["2.1", "3.0", "4.0"])
    def test_default_type_is_voice(self, version: str) -> None:
        assert Telephone(number="+123").format(version) == "TEL;TYPE=voice:+123"

    def test_multiple_types(self) -> None:
        tel = Telephone(number="+3701234567890", types=(TelephoneType.VOICE, TelephoneType.FAX))
        assert tel.format("4.0") == "TEL;TYPE=voice,fax:+3701234567890"

    def test_free_string_types(self) -> None:
        tel = Telephone(number="+1", types=("textphone",))
        assert tel.format("4.0") == "TEL;TYPE=textphone:+1"


class TestAddress:
    def test_default_types(self) -> None:
        adr = Address(
            street_address="Bandymus gatve 1-1",
            postal_code="10000",
            locality="Testius",
            country_name="Testland",
        )
        assert (
            adr.format("3.0")
            == "ADR;TYPE=intl,postal,parcel,work:;;Bandymus gatve 1-1;Testius;;10000;Testland"
        )

    def test_explicit_types(self) -> None:
        adr = Address(
            types=("work",),
            street_address="Bandymus gatve 1-1",
            postal_code="10000",
            locality="Testius",
            country_name="Testland",
        )
        assert adr.format("4.0") == "ADR;TYPE=work:;;Bandymus gatve 1-1;Testius;;10000;Testland"

    def test_all_components_in_order(self) -> None:
        adr = Address(
            po_box="PO1",
            extended_address="Suite 2",
            street_address="3 Main St",
            locality="Town",
            region="RG",
            postal_code="12345",
            country_name="Country",
            types=("home",),
        )
        assert adr.format("2.1") == "ADR;TYPE=home:PO1;Suite 2;3 Main St;Town;RG;12345;Country"


class TestEmail:
    def test_without_types(self) -> None:
        assert Email(address="test@example.com").format("4.0") == "EMAIL:test@example.com"

    def test_with_types(self) -> None:
        email = Email(address="test@example.com", types=(EmailType.INTERNET,))
        assert email.format("3.0") == "EMAIL;TYPE=internet:test@example.com"

    def test_with_multiple_types(self) -> None:
        email = Email(address="a@b.c", types=("internet", "pref"))
        assert email.format("2.1") == "EMAIL;TYPE=internet,pref:a@b.c"


class TestMedia:
    def test_photo_inline_v4(self) -> None:
        photo = Photo(media_type="image/jpeg", data="AAAA")
        assert photo.format("4.0") == "PHOTO:data:image/jpeg;base64,AAAA"

    def test_photo_uri_v4_with_type(self) -> None:
        photo = Photo(media_type="image/gif", uri=PHOTO_URI)
        assert photo.format("4.0") == f"PHOTO;MEDIATYPE=image/gif:{PHOTO_URI}"

    def test_photo_uri_v4_without_type(self) -> None:
        assert Photo(uri=PHOTO_URI).format("4.0") == f"PHOTO:{PHOTO_URI}"

    def test_photo_inline_v3(self) -> None:
        photo = Photo(media_type="JPEG", data="MIICajCCAdOgAwIBAgICBEUwDQYJKoZIhvcNAQEEBQAw")
        assert (
            photo.format("3.0")
            == "PHOTO;TYPE=JPEG;ENCODING=b:MIICajCCAdOgAwIBAgICBEUwDQYJKoZIhvcNAQEEBQAw"
        )

    def test_photo_uri_v3_without_type(self) -> None:
        assert Photo(uri=PHOTO_URI).format("3.0") == f"PHOTO;VALUE=uri:{PHOTO_URI}"

    def test_photo_uri_v3_with_type(self) -> None:
        photo = Photo(media_type="JPEG", uri=PHOTO_URI)
        assert photo.format("3.0") == f"PHOTO;TYPE=JPEG;VALUE=uri:{PHOTO_URI}"

    def test_photo_inline_v21(self) -> None:
        photo = Photo(media_type="JPEG", data="AAAA")
        assert photo.format("2.1") == "PHOTO;JPEG;ENCODING=BASE64:AAAA"

    def test_photo_uri_v21(self) -> None:
        photo = Photo(media_type="GIF", uri=PHOTO_URI)
        assert photo.format("2.1") == f"PHOTO;GIF:{PHOTO_URI}"

    def test_photo_uri_v21_without_type(self) -> None:
        assert Photo(uri=PHOTO_URI).format("2.1") == f"PHOTO:{PHOTO_URI}"

    def test_inline_without_type(self) -> None:
        photo = Photo(data="AAAA")
        assert photo.format("4.0") == "PHOTO:data:;base64,AAAA"
        assert photo.format("3.0") == "PHOTO;ENCODING=b:AAAA"
        assert photo.format("2.1") == "PHOTO;ENCODING=BASE64:AAAA"

    def test_key_shares_media_rendering(self) -> None:
        key = Key(media_type="application/pgp-keys", data="QUJD")
        assert key.format("4.0") == "KEY:data:application/pgp-keys;base64,QUJD"
        assert key.format("3.0") == "KEY;TYPE=application/pgp-keys;ENCODING=b:QUJD"
        assert key.format("2.1") == "KEY;application/pgp-keys;ENCODING=BASE64:QUJD"

    def test_key_uri(self) -> None:
        key = Key(uri="http://example.com/key.asc")
        assert key.format("4.0") == "KEY:http://example.com/key.asc"

    def test_uri_and_data_are_exclusive(self) -> None:
        with pytest.raises(ValidationError, match="exactly one"):
            Photo(media_type="image/jpeg", uri=PHOTO_URI, data="AAAA")

    def test_uri_or_data_required(self) -> None:
        with pytest.raises(ValidationError, match="exactly one"):
            Key(media_type="application/pgp-keys")

    def test_render_media_helper(self) -> None:
        line = render_media("LOGO", VCardVersion.V4_0, "image/png", None, "AAAA")
        assert line == "LOGO:data:image/png;base64,AAAA"


class TestTimestamps:
    def test_revision_utc(self) -> None:
        rev = Revision(timestamp=datetime(2008, 4, 24, 19, 52, 43, tzinfo=UTC))
        assert rev.format("4.0") == "REV:20080424T195243Z"

    def test_revision_with_offset(self) -> None:
        tz = timezone(timedelta(hours=2))
        rev = Revision(timestamp=datetime(2008, 4, 24, 19, 52, 43, tzinfo=tz))
        assert rev.format("3.0") == "REV:20080424T195243+0200"

    def test_revision_naive(self) -> None:
        rev = Revision(timestamp=datetime(2008, 4, 24, 19, 52, 43))
        assert rev.format("2.1") == "REV:20080424T195243"

    def test_revision_custom_format(self) -> None:
        rev = Revision(timestamp=datetime(2008, 4, 24, 19, 52, 43), time_format="%Y-%m-%d")
        assert rev.format("4.0") == "REV:2008-04-24"

    def test_format_timestamp_pattern_wins(self) -> None:
        ts = datetime(2020, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert format_timestamp(ts, "%H:%M") == "03:04"

    def test_birthday_default_format(self) -> None:
        assert Birthday(date=date(1970, 1, 2)).format("3.0") == "BDAY:19700102"

    def test_birthday_from_datetime(self) -> None:
        assert Birthday(date=datetime(1970, 1, 2, 8, 30)).format("4.0") == "BDAY:19700102"

    def test_birthday_custom_format(self) -> None:
        bday = Birthday(date=date(1970, 1, 2), time_format="%Y-%m-%d")
        assert bday.format("2.1") == "BDAY:1970-01-02"

    def test_anniversary_v4_only(self) -> None:
        anniversary = Anniversary(date=date(1990, 6, 1))
        assert anniversary.format("4.0") == "ANNIVERSARY:19900601"
        with pytest.raises(UnsupportedFieldError):
            anniversary.format("3.0")


class TestAgent:
    def test_text_agent(self) -> None:
        agent = Agent(text="CID:JohnQPublic@host.com")
        assert agent.format("3.0") == "AGENT:CID:JohnQPublic@host.com"
        assert agent.format("2.1") == "AGENT:CID:JohnQPublic@host.com"

    def test_not_supported_on_v4(self) -> None:
        with pytest.raises(UnsupportedFieldError):
            Agent(text="x").format("4.0")

    def test_nested_card(self) -> None:
        nested = new_card(
            "3.0",
            Name(family_name="Friday", given_name="Fred"),
            FormattedName(text="Fred Friday"),
        )
        agent = Agent(card=nested)
        assert agent.format("3.0") == (
            "AGENT:BEGIN:VCARD\nVERSION:3.0\nN:Friday;Fred;;;\nFN:Fred Friday\nEND:VCARD"
        )

    def test_nested_card_wins_over_text(self) -> None:
        nested = new_card("2.1", Name(family_name="Friday"))
        agent = Agent(text="ignored", card=nested)
        assert "ignored" not in agent.format("2.1")

    def test_invalid_nested_card_raises_render_error(self) -> None:
        nested = Card("3.0", [Name(family_name="Friday")])
        with pytest.raises(RenderError) as exc_info:
            Agent(card=nested).format("3.0")
        assert isinstance(exc_info.value.__cause__, MissingRequiredFieldError)
        assert exc_info.value.kind == FieldKind.AGENT

    def test_card_attribute_type_checked(self) -> None:
        with pytest.raises(ValidationError):
            Agent(card="not a card")  # type: ignore[arg-type]


class TestVersionSpecificFields:
    def test_geo_v4(self) -> None:
        assert Geo(latitude=39.95, longitude=-75.1667).format("4.0") == (
            "GEO:geo:39.950000,-75.166700"
        )

    def test_geo_v3(self) -> None:
        assert Geo(latitude=39.95, longitude=-75.1667).format("3.0") == "GEO:39.950000,-75.166700"

    def test_geo_v21(self) -> None:
        assert Geo(latitude=0, longitude=0).format("2.1") == "GEO:0.000000,0.000000"

    def test_gender(self) -> None:
        assert Gender(value="F").format("4.0") == "GENDER:F"

    def test_gender_on_v3_unsupported(self) -> None:
        with pytest.raises(UnsupportedFieldError) as exc_info:
            Gender(value="F").format("3.0")
        assert exc_info.value.kind == FieldKind.GENDER
        assert exc_info.value.version == "3.0"

    def test_free_busy_url(self) -> None:
        fburl = FreeBusyURL(uri="http://www.example.com/busy/janedoe")
        assert fburl.format("4.0") == "FBURL:http://www.example.com/busy/janedoe"
        assert not fburl.supports("3.0")

    def test_instant_messaging_lowercases_platform(self) -> None:
        impp = InstantMessaging(platform="XMPP", handle="alice@example.com")
        assert impp.format("3.0") == "IMPP:xmpp:alice@example.com"
        assert impp.format("4.0") == "IMPP:xmpp:alice@example.com"

    def test_instant_messaging_not_on_v21(self) -> None:
        with pytest.raises(UnsupportedFieldError):
            InstantMessaging(platform="sip", handle="x").format("2.1")

    def test_kind_lowercased(self) -> None:
        assert Kind(value="Organization").format("4.0") == "KIND:organization"

    def test_kind_v4_only(self) -> None:
        assert not Kind(value="group").supports("3.0")

    def test_nickname(self) -> None:
        nickname = Nickname(names=("Jim", "Jimmie"))
        assert nickname.format("3.0") == "NICKNAME:Jim,Jimmie"
        assert not nickname.supports("2.1")
