"""Error taxonomy for logo generation.

Per-variation failures are raised by the image client as
:class:`ProviderError` and summarised by the fan-out aggregator.  Only a
total failure (:class:`AllAttemptsFailed`) or an unexpected exception
reaches the HTTP layer, where :func:`classify_failure` reduces it to one
member of the closed :class:`ErrorKind` variant.

Classification Rules
--------------------
========================================  ==============  ====================
Provider signal                           Kind            HTTP status / tag
========================================  ==============  ====================
HTTP 401                                  ``AUTH``        500 ``auth_error``
quota / billing code, or "billing" text   ``BILLING``     500 ``billing_error``
HTTP 429                                  ``RATE_LIMIT``  429 ``rate_limit``
anything else                             ``GENERATION``  500 ``generation_error``
========================================  ==============  ====================

Billing is checked before the rate-limit rule because OpenAI reports
``insufficient_quota`` with status 429.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from logosmith.core.fanout import VariationFailure

BILLING_CODES = frozenset({"insufficient_quota", "billing_hard_limit_reached"})


class ErrorKind(Enum):
    """Client-facing failure categories.

    Each member carries ``(precedence, status_code, type tag, message)``.
    Lower precedence values win when several failures are combined.
    """

    AUTH = (0, 500, "auth_error", "Authentication failed with OpenAI service.")
    BILLING = (1, 500, "billing_error", "OpenAI billing limit reached. Please contact administrator.")
    RATE_LIMIT = (2, 429, "rate_limit", "OpenAI rate limit exceeded. Please try again later.")
    GENERATION = (3, 500, "generation_error", "Failed to generate logo. Please try again.")

    def __init__(self, precedence: int, status_code: int, tag: str, message: str) -> None:
        self.precedence = precedence
        self.status_code = status_code
        self.tag = tag
        self.message = message


class LogosmithError(Exception):
    """Base class for all gateway errors."""


class ProviderError(LogosmithError):
    """A single provider call failed or returned no usable image.

    Attributes:
        status_code: HTTP status reported by the provider, or ``None`` for
            connection failures and empty responses.
        code: Provider error code (e.g. ``"insufficient_quota"``), if any.
        message: Human-readable provider message.
    """

    def __init__(self, message: str, *, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def __repr__(self) -> str:
        return f"ProviderError(status_code={self.status_code!r}, code={self.code!r}, message={self.message!r})"


class AllAttemptsFailed(LogosmithError):
    """Every variation in a fan-out failed."""

    def __init__(self, failures: Sequence[VariationFailure]):
        super().__init__(f"All {len(failures)} logo generation attempts failed")
        self.failures = list(failures)


def classify_provider_error(error: ProviderError) -> ErrorKind:
    """Decode a provider error into an :class:`ErrorKind`."""
    if error.status_code == 401:
        return ErrorKind.AUTH
    if error.code in BILLING_CODES or "billing" in error.message.lower():
        return ErrorKind.BILLING
    if error.status_code == 429:
        return ErrorKind.RATE_LIMIT
    return ErrorKind.GENERATION


def classify_failure(exc: BaseException) -> ErrorKind:
    """Reduce any failure raised while generating to a single :class:`ErrorKind`.

    For :class:`AllAttemptsFailed` every per-variation error is classified
    and the highest-precedence kind wins, so a batch that failed entirely
    because of throttling still reports ``RATE_LIMIT``.
    """
    if isinstance(exc, ProviderError):
        return classify_provider_error(exc)
    if isinstance(exc, AllAttemptsFailed):
        kinds = [classify_failure(failure.error) for failure in exc.failures]
        return min(kinds, key=lambda kind: kind.precedence, default=ErrorKind.GENERATION)
    return ErrorKind.GENERATION
