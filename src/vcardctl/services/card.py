"""CardService — validate, render, and QR-export card definitions.

Each operation builds a Card from a definition mapping (see
:mod:`vcardctl.services.definitions`), so validation always runs before
any text is produced.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from qrcode.exceptions import DataOverflowError

from vcardctl.domain.card import Card
from vcardctl.domain.errors import VCardError
from vcardctl.domain.versions import required_kinds, supported_versions
from vcardctl.infrastructure.qr import encode_qr, write_png
from vcardctl.services.base import BaseService
from vcardctl.services.definitions import DefinitionError, card_from_definition
from vcardctl.services.result import ServiceResult
from vcardctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _validation_detail(exc: ValidationError) -> dict[str, Any]:
    """JSON-safe summary of a pydantic ValidationError."""
    return {
        "errors": [
            {
                "loc": [str(part) for part in err["loc"]],
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors(include_url=False)
        ]
    }


class CardService(BaseService):
    """Card operations driven by definition mappings."""

    def _build(self, op: str, definition: Mapping[str, Any]) -> Card | ServiceResult:
        """Build a validated Card, or a failed result explaining why not."""
        default_version = str(self._settings.card.default_version)
        with trace_span("build_card") as span:
            try:
                card = card_from_definition(definition, default_version=default_version)
            except DefinitionError as exc:
                return ServiceResult.failure(op, exc.code, str(exc), exc.detail)
            except ValidationError as exc:
                return ServiceResult.failure(
                    op,
                    "invalid_field",
                    f"Invalid field attributes: {exc.error_count()} error(s)",
                    _validation_detail(exc),
                )
            except VCardError as exc:
                return self._domain_failure(op, exc)
            if span:
                span.annotate("fields", len(card))
        return card

    @traced
    def list_versions(self) -> ServiceResult:
        """List supported versions with the field kinds each requires."""
        versions = [
            {"version": v, "required": [k.value for k in required_kinds(v)]}
            for v in supported_versions()
        ]
        return ServiceResult(
            ok=True,
            op="list_versions",
            data={"versions": versions, "default": str(self._settings.card.default_version)},
        )

    @traced
    def validate(self, definition: Mapping[str, Any]) -> ServiceResult:
        """Check a definition without rendering it."""
        built = self._build("validate_card", definition)
        if isinstance(built, ServiceResult):
            return built
        counts = built.kind_counts()
        return ServiceResult(
            ok=True,
            op="validate_card",
            data={
                "version": str(built.version),
                "field_count": len(built),
                "kinds": {str(kind): n for kind, n in counts.items()},
            },
        )

    @traced
    def render(self, definition: Mapping[str, Any]) -> ServiceResult:
        """Render a definition to vCard text."""
        return self._render(definition)

    def _render(self, definition: Mapping[str, Any]) -> ServiceResult:
        """Untraced body of :meth:`render`; its spans nest under the caller's."""
        built = self._build("render_card", definition)
        if isinstance(built, ServiceResult):
            return built
        try:
            with trace_span("serialize"):
                text = built.serialize()
        except VCardError as exc:
            return self._domain_failure("render_card", exc)
        return ServiceResult(
            ok=True,
            op="render_card",
            data={"version": str(built.version), "text": text},
        )

    @traced
    def export_qr(
        self,
        definition: Mapping[str, Any],
        output: Path,
        *,
        width: int | None = None,
        height: int | None = None,
    ) -> ServiceResult:
        """Render a definition and write it as a QR-code PNG to *output*."""
        op = "export_qr"
        rendered = self._render(definition)
        if not rendered.ok:
            return rendered.model_copy(update={"op": op})

        qr = self._settings.qr
        width = width or qr.width
        height = height or qr.height
        text = rendered.data["text"]
        try:
            with trace_span("encode_qr"):
                image = encode_qr(
                    text,
                    width,
                    height,
                    error_correction=qr.error_correction,
                    border=qr.border,
                )
        except (ValueError, DataOverflowError) as exc:
            return ServiceResult.failure(
                op, "qr_encode_failed", str(exc) or type(exc).__name__, {"chars": len(text)}
            )

        try:
            with trace_span("write_png"):
                size = write_png(image, output)
        except OSError as exc:
            return ServiceResult.failure(
                op, "write_failed", f"Cannot write {output}: {exc}", {"path": str(output)}
            )

        logger.debug("Wrote QR code to %s (%d bytes)", output, size)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(output),
                "version": rendered.data["version"],
                "width": width,
                "height": height,
                "bytes": size,
            },
        )
