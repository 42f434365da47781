"""Pydantic request models for the Logosmith API.

FastAPI uses these models for request validation and OpenAPI schema
generation.  Validation failures are answered with HTTP 400 by the
handler registered in :mod:`logosmith.api.main`.

Models
------
LogoSettings
    Optional style values (``logoColor``, ``backgroundColor``,
    ``typography``, ``shape``).  JSON keys use the camelCase wire names;
    Python attributes are snake_case.
GenerateLogoRequest
    Payload for ``POST /api/generate-logo``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_PROMPT_LENGTH = 1000

_HEX_COLOUR = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class LogoSettings(BaseModel):
    """Style values applied to the composed prompt.

    Attributes:
        logo_color: Primary brand colour as a hex string.
        background_color: Background colour as a hex string.
        typography: Typeface or typography style name.
        shape: Geometric motif to incorporate.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    logo_color: str = Field(
        default="#3b82f6",
        alias="logoColor",
        pattern=_HEX_COLOUR,
        description="Primary brand colour (hex).",
    )
    background_color: str = Field(
        default="#ffffff",
        alias="backgroundColor",
        pattern=_HEX_COLOUR,
        description="Background colour (hex).",
    )
    typography: str = Field(
        default="Arial",
        min_length=1,
        max_length=100,
        description="Typography style, e.g. 'Arial' or 'serif'.",
    )
    shape: str = Field(
        default="circle",
        min_length=1,
        max_length=100,
        description="Geometric motif, e.g. 'circle' or 'hexagon'.",
    )


class GenerateLogoRequest(BaseModel):
    """Request body for the ``POST /api/generate-logo`` endpoint.

    Attributes:
        prompt: What the logo is for.  Must be a string that is non-empty
            after trimming and at most 1000 characters long.
        logo_settings: Optional style values; defaults apply when omitted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt: str = Field(
        default=None,
        validate_default=True,
        description="Logo subject, 1-1000 characters.",
    )
    logo_settings: LogoSettings | None = Field(
        default=None,
        alias="logoSettings",
        description="Optional style values.",
    )

    @field_validator("prompt", mode="before")
    @classmethod
    def _check_prompt(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Prompt is required and must be a non-empty string")
        if len(value) > MAX_PROMPT_LENGTH:
            raise ValueError(f"Prompt too long. Maximum {MAX_PROMPT_LENGTH} characters.")
        return value

    @property
    def clean_prompt(self) -> str:
        """The prompt with surrounding whitespace removed."""
        return self.prompt.strip()
