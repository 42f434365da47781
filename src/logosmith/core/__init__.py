"""Core functionality for logo generation.

- **LogosmithConfig**: Configuration management using Pydantic Settings
- **OpenAIImageClient**: One provider call per logo variation
- **generate_variations**: Concurrent fan-out with partial-failure tolerance
- **ErrorKind**: Closed classification of provider failures

Usage Example
-------------
    from logosmith.core import LogosmithConfig, OpenAIImageClient, generate_variations
    from logosmith.core.image_client import build_openai_client

    config = LogosmithConfig()
    client = OpenAIImageClient.from_config(build_openai_client(config), config)
    result = await generate_variations(client, "A logo for Acme Bakery")
"""

from logosmith.core.config import LogosmithConfig
from logosmith.core.errors import (
    AllAttemptsFailed,
    ErrorKind,
    LogosmithError,
    ProviderError,
    classify_failure,
)
from logosmith.core.fanout import GenerationResult, generate_variations
from logosmith.core.image_client import OpenAIImageClient

__all__ = [
    "AllAttemptsFailed",
    "ErrorKind",
    "GenerationResult",
    "LogosmithConfig",
    "LogosmithError",
    "OpenAIImageClient",
    "ProviderError",
    "classify_failure",
    "generate_variations",
]
