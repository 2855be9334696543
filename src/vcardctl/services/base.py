"""BaseService — shared foundation for vcardctl services.

Every service receives the resolved :class:`VcardSettings` at construction
time and reads its defaults (card version, QR geometry) from there.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vcardctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from vcardctl.config.settings import VcardSettings
    from vcardctl.domain.errors import VCardError

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class CardService(BaseService):
            def render(self, definition: dict) -> ServiceResult:
                version = self._settings.card.default_version
                ...
    """

    def __init__(self, settings: VcardSettings) -> None:
        self._settings = settings

    @staticmethod
    def _domain_failure(op: str, exc: VCardError) -> ServiceResult:
        """Translate a domain error into a failed result."""
        logger.debug("%s failed: %s", op, exc, exc_info=True)
        return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))
