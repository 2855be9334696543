"""Error taxonomy for card construction, validation, and rendering.

Every error carries a stable ``code`` and a structured ``detail()`` payload
so the service layer can translate it into a ServiceError without parsing
messages.
"""

from __future__ import annotations

from typing import Any, ClassVar

from vcardctl.domain.versions import supported_versions


class VCardError(Exception):
    """Base class for all vCard domain errors."""

    code: ClassVar[str] = "vcard_error"

    def detail(self) -> dict[str, Any]:
        return {}


class UnknownVersionError(VCardError):
    """The requested version is not in the supported set."""

    code = "unknown_version"

    def __init__(self, version: str) -> None:
        self.version = version
        self.supported = supported_versions()
        msg = f"invalid version {version!r}, supported versions: {', '.join(self.supported)}"
        super().__init__(msg)

    def detail(self) -> dict[str, Any]:
        return {"version": self.version, "supported": self.supported}


class UnsupportedFieldError(VCardError):
    """A field kind cannot be rendered for the chosen version."""

    code = "unsupported_field"

    def __init__(self, kind: str, version: str) -> None:
        self.kind = kind
        self.version = version
        super().__init__(f"{kind} is an unsupported field for vCard version {version}")

    def detail(self) -> dict[str, Any]:
        return {"kind": str(self.kind), "version": str(self.version)}


class MissingRequiredFieldError(VCardError):
    """A version mandates a field kind that is absent from the card."""

    code = "missing_required_field"

    def __init__(self, kind: str, version: str) -> None:
        self.kind = kind
        self.version = version
        super().__init__(f"{kind} is a required field for vCard version {version}")

    def detail(self) -> dict[str, Any]:
        return {"kind": str(self.kind), "version": str(self.version)}


class RenderError(VCardError):
    """A field's own formatting step failed.

    Raised ``from`` the underlying error, which stays reachable via
    ``__cause__``.
    """

    code = "render_error"

    def __init__(self, kind: str, version: str, reason: str) -> None:
        self.kind = kind
        self.version = version
        self.reason = reason
        super().__init__(f"failed to render {kind} for vCard version {version}: {reason}")

    def detail(self) -> dict[str, Any]:
        return {"kind": str(self.kind), "version": str(self.version), "reason": self.reason}
