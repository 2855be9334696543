"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, vcardctl.toml only contains overrides.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from vcardctl.domain.versions import VCardVersion

# --- vcardctl.toml sections ---


class CardConfig(BaseModel):
    """[card] section."""

    model_config = {"frozen": True}

    default_version: VCardVersion = VCardVersion.V4_0


class QrConfig(BaseModel):
    """[qr] section."""

    model_config = {"frozen": True}

    width: int = Field(default=500, gt=0)
    height: int = Field(default=500, gt=0)
    error_correction: Literal["L", "M", "Q", "H"] = "M"
    border: int = Field(default=4, ge=0)

