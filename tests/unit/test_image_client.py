"""Tests for the single-variation OpenAI image client."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from openai import APIConnectionError, AuthenticationError, BadRequestError, RateLimitError

from logosmith.core.errors import ErrorKind, ProviderError, classify_failure
from logosmith.core.image_client import OpenAIImageClient, build_openai_client


def _status_response(status_code: int) -> MagicMock:
    return MagicMock(status_code=status_code, headers={})


class TestOpenAIImageClient:
    @pytest.mark.asyncio
    async def test_generate_returns_url(self, client_factory, image_response) -> None:
        mock_client = client_factory(response=image_response("https://cdn.example.com/a.png"))

        client = OpenAIImageClient(mock_client)
        url = await client.generate("A logo", "vivid")

        assert url == "https://cdn.example.com/a.png"

    @pytest.mark.asyncio
    async def test_request_parameters(self, client_factory) -> None:
        """Exactly one URL-format image at the configured size and quality."""
        mock_client = client_factory()

        client = OpenAIImageClient(mock_client, model="test-model", size="1024x1024", quality="hd")
        await client.generate("A logo", "natural")

        call_kwargs = mock_client.images.generate.call_args.kwargs
        assert call_kwargs == {
            "model": "test-model",
            "prompt": "A logo",
            "n": 1,
            "size": "1024x1024",
            "style": "natural",
            "quality": "hd",
            "response_format": "url",
        }

    @pytest.mark.asyncio
    async def test_from_config(self, client_factory, config_factory) -> None:
        mock_client = client_factory()
        config = config_factory(image_model="dall-e-3", image_quality="hd")

        client = OpenAIImageClient.from_config(mock_client, config)
        await client.generate("A logo", "vivid")

        call_kwargs = mock_client.images.generate.call_args.kwargs
        assert call_kwargs["model"] == "dall-e-3"
        assert call_kwargs["quality"] == "hd"

    @pytest.mark.asyncio
    async def test_single_attempt_on_rate_limit(self, client_factory) -> None:
        rate_err = RateLimitError(
            message="Rate limit",
            response=_status_response(429),
            body=None,
        )
        mock_client = client_factory(side_effect=rate_err)

        client = OpenAIImageClient(mock_client)
        with pytest.raises(ProviderError) as excinfo:
            await client.generate("prompt", "vivid")

        assert excinfo.value.status_code == 429
        assert classify_failure(excinfo.value) is ErrorKind.RATE_LIMIT
        assert mock_client.images.generate.call_count == 1

    @pytest.mark.asyncio
    async def test_authentication_error(self, client_factory) -> None:
        auth_err = AuthenticationError(
            message="Incorrect API key provided",
            response=_status_response(401),
            body=None,
        )
        mock_client = client_factory(side_effect=auth_err)

        client = OpenAIImageClient(mock_client)
        with pytest.raises(ProviderError) as excinfo:
            await client.generate("prompt", "vivid")

        assert excinfo.value.status_code == 401
        assert classify_failure(excinfo.value) is ErrorKind.AUTH

    @pytest.mark.asyncio
    async def test_quota_code_is_kept(self, client_factory) -> None:
        quota_err = RateLimitError(
            message="You exceeded your current quota",
            response=_status_response(429),
            body={"code": "insufficient_quota", "message": "You exceeded your current quota"},
        )
        mock_client = client_factory(side_effect=quota_err)

        client = OpenAIImageClient(mock_client)
        with pytest.raises(ProviderError) as excinfo:
            await client.generate("prompt", "vivid")

        assert excinfo.value.code == "insufficient_quota"
        assert classify_failure(excinfo.value) is ErrorKind.BILLING

    @pytest.mark.asyncio
    async def test_bad_request(self, client_factory) -> None:
        bad_err = BadRequestError(
            message="Your request was rejected by the safety system",
            response=_status_response(400),
            body=None,
        )
        mock_client = client_factory(side_effect=bad_err)

        client = OpenAIImageClient(mock_client)
        with pytest.raises(ProviderError) as excinfo:
            await client.generate("prompt", "vivid")

        assert excinfo.value.status_code == 400
        assert classify_failure(excinfo.value) is ErrorKind.GENERATION

    @pytest.mark.asyncio
    async def test_connection_error_has_no_status(self, client_factory) -> None:
        mock_client = client_factory(side_effect=APIConnectionError(request=MagicMock()))

        client = OpenAIImageClient(mock_client)
        with pytest.raises(ProviderError) as excinfo:
            await client.generate("prompt", "vivid")

        assert excinfo.value.status_code is None
        assert isinstance(excinfo.value.__cause__, APIConnectionError)

    @pytest.mark.asyncio
    async def test_missing_url_raises(self, client_factory, image_response) -> None:
        mock_client = client_factory(response=image_response(url=None))

        client = OpenAIImageClient(mock_client)
        with pytest.raises(ProviderError, match="No image URL returned"):
            await client.generate("prompt", "vivid")

    @pytest.mark.asyncio
    async def test_empty_data_raises(self, client_factory) -> None:
        response = MagicMock()
        response.data = []
        mock_client = client_factory(response=response)

        client = OpenAIImageClient(mock_client)
        with pytest.raises(ProviderError, match="No image URL returned"):
            await client.generate("prompt", "vivid")


class TestBuildOpenAIClient:
    def test_sdk_retries_disabled(self, config_factory) -> None:
        client = build_openai_client(config_factory(request_timeout=30.0))

        assert client.max_retries == 0
        assert client.timeout == 30.0
        assert client.api_key == "sk-test-0123456789"
