"""OpenAI Images API client for single logo variations.

Wraps ``client.images.generate()`` for exactly one image per call.  There
is no retry loop here: the :class:`~openai.AsyncOpenAI` instance built by
:func:`build_openai_client` has ``max_retries=0``, so every call to
:meth:`OpenAIImageClient.generate` makes at most one provider request.

Any SDK failure, or a response without a URL, is converted into
:class:`~logosmith.core.errors.ProviderError` so callers only deal with one
exception type.
"""

from __future__ import annotations

import logging

from openai import APIStatusError, AsyncOpenAI, OpenAIError

from logosmith.core.config import LogosmithConfig
from logosmith.core.errors import ProviderError

logger = logging.getLogger(__name__)


def build_openai_client(config: LogosmithConfig) -> AsyncOpenAI:
    """Create the shared async SDK client with SDK-level retries disabled."""
    return AsyncOpenAI(
        api_key=config.openai_api_key.get_secret_value(),
        timeout=config.request_timeout,
        max_retries=0,
    )


def _error_code(error: APIStatusError) -> str | None:
    code = getattr(error, "code", None)
    if code:
        return str(code)
    body = error.body
    if isinstance(body, dict):
        # Some responses nest the payload under "error".
        nested = body.get("error", body)
        if isinstance(nested, dict) and nested.get("code"):
            return str(nested["code"])
    return None


class OpenAIImageClient:
    """Async client that requests one logo image per call.

    Args:
        client: AsyncOpenAI client instance (or a compatible mock).
        model: Image generation model name.
        size: Output resolution, e.g. ``"1024x1024"``.
        quality: Quality tier, ``"standard"`` or ``"hd"``.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = "dall-e-3",
        size: str = "1024x1024",
        quality: str = "standard",
    ) -> None:
        self._client = client
        self._model = model
        self._size = size
        self._quality = quality

    @classmethod
    def from_config(cls, client: AsyncOpenAI, config: LogosmithConfig) -> OpenAIImageClient:
        return cls(
            client,
            model=config.image_model,
            size=config.image_size,
            quality=config.image_quality,
        )

    async def generate(self, prompt: str, style: str) -> str:
        """Generate one image and return its URL.

        Args:
            prompt: Fully composed provider prompt.
            style: Rendering style selector (``"vivid"`` or ``"natural"``).

        Returns:
            The provider-hosted image URL.

        Raises:
            ProviderError: If the provider call fails or returns no URL.
        """
        try:
            response = await self._client.images.generate(
                model=self._model,
                prompt=prompt,
                n=1,
                size=self._size,  # type: ignore[arg-type]
                style=style,  # type: ignore[arg-type]
                quality=self._quality,  # type: ignore[arg-type]
                response_format="url",
            )
        except APIStatusError as e:
            raise ProviderError(
                e.message,
                status_code=e.status_code,
                code=_error_code(e),
            ) from e
        except OpenAIError as e:
            # Connection errors and timeouts carry no HTTP status.
            raise ProviderError(str(e) or type(e).__name__) from e

        image_url = response.data[0].url if response.data else None
        if not image_url:
            raise ProviderError("No image URL returned from OpenAI")

        logger.debug("Variation (%s) generated: %s", style, image_url)
        return image_url
