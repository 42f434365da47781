"""Concurrent fan-out of logo variations.

:func:`generate_variations` starts a fixed number of image requests at once
and waits for *all* of them to settle.  A failing variation never cancels
the others; partial success is an acceptable result.

Outcome Model
-------------
Each call produces exactly one outcome:

- :class:`VariationSuccess` holding the image URL, or
- :class:`VariationFailure` holding the exception.

Successful URLs are returned in call-index order, independent of the order
in which the calls completed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, Union

from logosmith.core.errors import AllAttemptsFailed

logger = logging.getLogger(__name__)


class ImageGenerator(Protocol):
    async def generate(self, prompt: str, style: str) -> str: ...


@dataclass(frozen=True)
class VariationSuccess:
    index: int
    style: str
    image_url: str


@dataclass(frozen=True)
class VariationFailure:
    index: int
    style: str
    error: BaseException


VariationOutcome = Union[VariationSuccess, VariationFailure]


@dataclass(frozen=True)
class GenerationResult:
    """Aggregated outcome of one fan-out.

    Attributes:
        images: Successful image URLs in call-index order.
        failures: Failed variations in call-index order.
        requested: Number of variations that were started.
    """

    images: list[str]
    failures: list[VariationFailure]
    requested: int

    def __post_init__(self) -> None:
        if len(self.images) + len(self.failures) != self.requested:
            raise ValueError(
                f"{len(self.images)} successes and {len(self.failures)} failures "
                f"do not add up to {self.requested} requested variations"
            )

    @property
    def success_count(self) -> int:
        return len(self.images)

    @property
    def failure_count(self) -> int:
        return len(self.failures)


def style_for_index(index: int, styles: Sequence[str]) -> str:
    """Return the style selector for call *index*, cycling through *styles*."""
    return styles[index % len(styles)]


def collect_outcomes(
    results: Sequence[object],
    styles: Sequence[str],
) -> list[VariationOutcome]:
    """Turn ``asyncio.gather(..., return_exceptions=True)`` results into outcomes."""
    outcomes: list[VariationOutcome] = []
    for index, result in enumerate(results):
        style = style_for_index(index, styles)
        if isinstance(result, BaseException):
            outcomes.append(VariationFailure(index=index, style=style, error=result))
        else:
            outcomes.append(VariationSuccess(index=index, style=style, image_url=str(result)))
    return outcomes


async def generate_variations(
    client: ImageGenerator,
    prompt: str,
    *,
    count: int,
    styles: Sequence[str],
) -> GenerationResult:
    """Generate *count* variations of *prompt* concurrently.

    Args:
        client: Object with an async ``generate(prompt, style)`` method.
        prompt: Composed provider prompt, shared by every variation.
        count: Number of concurrent calls to start.
        styles: Style selectors; call ``i`` uses ``styles[i % len(styles)]``.

    Returns:
        :class:`GenerationResult` with at least one image.

    Raises:
        ValueError: If *count* is below 1 or *styles* is empty.
        AllAttemptsFailed: If no variation succeeded.
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    if not styles:
        raise ValueError("styles must not be empty")

    calls = [client.generate(prompt, style_for_index(i, styles)) for i in range(count)]
    results = await asyncio.gather(*calls, return_exceptions=True)
    outcomes = collect_outcomes(results, styles)

    images = [o.image_url for o in outcomes if isinstance(o, VariationSuccess)]
    failures = [o for o in outcomes if isinstance(o, VariationFailure)]

    if failures:
        logger.warning(
            "%d logo generations failed, got %d successful results",
            len(failures),
            len(images),
        )
        for failure in failures:
            logger.debug("Variation %d (%s) failed: %r", failure.index, failure.style, failure.error)

    if not images:
        raise AllAttemptsFailed(failures)

    return GenerationResult(images=images, failures=failures, requested=count)
