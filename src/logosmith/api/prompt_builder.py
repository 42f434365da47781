"""Logo prompt template compilation.

The provider prompt is composed from the user's subject, four style values
and two fixed guideline sections that establish a consistent corporate-logo
aesthetic.

Template Structure::

    [Brief: subject, "LOGO" text, colour, typography, shape, background]

    Design requirements:
    - [Fixed design requirement bullets]

    Style guidelines:
    - [Fixed style guideline bullets]

Absent style values fall back to :class:`~logosmith.api.models.LogoSettings`
defaults, so the function is total for any subject string.

Usage
-----
::

    compiled = build_logo_prompt(
        "Acme Bakery",
        LogoSettings(logo_color="#ff5500", shape="hexagon"),
    )
"""

from __future__ import annotations

from logosmith.api.models import LogoSettings

# ---------------------------------------------------------------------------
# Fixed guideline sections.
# These are constants rather than configuration because they define the
# baseline look of every generated logo.  Users control variation through
# the subject and the four style values.
# ---------------------------------------------------------------------------

_DESIGN_REQUIREMENTS = (
    "Modern, clean, and minimalist aesthetic",
    "Vector-style with crisp edges and clean geometry",
    "Professional appearance suitable for corporate branding",
    "High contrast and excellent readability",
    "Scalable design that works from business cards to billboards",
    "Memorable and distinctive visual identity",
    "Appropriate negative space usage",
    "Balanced composition and visual hierarchy",
)

_STYLE_GUIDELINES = (
    "Avoid overly complex details or photorealistic elements",
    "Use flat design principles with subtle depth if needed",
    "Ensure the logo works in both color and monochrome versions",
    "Create a timeless design that won't quickly become dated",
    "Focus on symbolic representation rather than literal imagery",
)


def _bullets(title: str, lines: tuple[str, ...]) -> str:
    return "\n".join([f"{title}:", *(f"- {line}" for line in lines)])


def build_logo_prompt(subject: str, settings: LogoSettings | None = None) -> str:
    """Compile the provider prompt for a logo.

    Args:
        subject: What the logo is for (e.g. a business name).  Embedded
            verbatim; callers pass the trimmed user prompt.
        settings: Style values.  ``None`` means all defaults.

    Returns:
        The compiled prompt, sections separated by double newlines.
    """
    settings = settings or LogoSettings()

    brief = (
        f'Create a professional business logo for "{subject}". '
        'Include the text "LOGO" prominently in the logo design. '
        f"Use {settings.logo_color} (hex: {settings.logo_color}) as the primary brand color. "
        f"Apply {settings.typography} typography style. "
        f"Incorporate {settings.shape} geometric shapes or elements. "
        f"Place on a clean {settings.background_color} background."
    )

    return "\n\n".join(
        [
            brief,
            _bullets("Design requirements", _DESIGN_REQUIREMENTS),
            _bullets("Style guidelines", _STYLE_GUIDELINES),
        ]
    )
