"""Primary/fallback text generation provider selection.

Every verification component depends on a single capability:

    await llm.generate(system_instruction, user_prompt,
                       temperature=..., max_output_tokens=...) -> str

FallbackLLMProvider exposes exactly that, trying the primary provider and
falling back to the secondary when the primary raises or times out. Callers
never learn which provider answered.
"""

import asyncio
from typing import Any, Optional, Sequence

from claim_verifier.config.logging import get_logger
from claim_verifier.config.settings import Settings, settings as default_settings

logger = get_logger("llm.provider")


class FallbackLLMProvider:
    """
    Ordered chain of text generation providers.

    Attributes:
        providers: Providers in the order they are tried
        timeout: Per-provider call timeout in seconds
    """

    def __init__(self, providers: Sequence[Any], timeout: Optional[float] = None):
        """
        Args:
            providers: Objects exposing an async generate() (primary first)
            timeout: Per-provider timeout (defaults to settings.llm_timeout_seconds)
        """
        self.providers = list(providers)
        self.timeout = timeout or default_settings.llm_timeout_seconds

    @property
    def available(self) -> bool:
        return bool(self.providers)

    @property
    def provider_names(self) -> list[str]:
        return [getattr(p, "name", type(p).__name__) for p in self.providers]

    async def generate(
        self,
        system_instruction: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_output_tokens: int = 1000,
    ) -> str:
        """
        Generate text with the first provider that succeeds.

        Raises:
            RuntimeError: If no provider is configured
            Exception: The last provider's error when every provider failed
        """
        if not self.providers:
            raise RuntimeError("No text generation provider configured")

        last_error: Optional[BaseException] = None
        for index, provider in enumerate(self.providers):
            name = getattr(provider, "name", type(provider).__name__)
            try:
                return await asyncio.wait_for(
                    provider.generate(
                        system_instruction,
                        user_prompt,
                        temperature=temperature,
                        max_output_tokens=max_output_tokens,
                    ),
                    timeout=self.timeout,
                )
            except Exception as e:
                last_error = e
                logger.error(f"Error with {name}: {e!r}")
                if index + 1 < len(self.providers):
                    next_name = getattr(
                        self.providers[index + 1],
                        "name",
                        type(self.providers[index + 1]).__name__,
                    )
                    logger.info(f"Falling back to {next_name}...")

        raise last_error

    async def aclose(self) -> None:
        for provider in self.providers:
            closer = getattr(provider, "aclose", None)
            if closer is not None:
                await closer()


def build_llm_provider(config: Optional[Settings] = None) -> FallbackLLMProvider:
    """
    Build the provider chain from settings.

    The provider named by primary_llm goes first. Providers whose credentials
    are missing are skipped, so the chain may hold one or zero providers.

    Args:
        config: Settings override (defaults to the global settings)

    Returns:
        FallbackLLMProvider, possibly empty
    """
    config = config or default_settings
    providers: dict[str, Any] = {}

    if config.gemini_api_key:
        from claim_verifier.llm.gemini_client import GeminiClient

        providers["gemini"] = GeminiClient(
            api_key=config.gemini_api_key,
            model_name=config.gemini_model,
            timeout=config.llm_timeout_seconds,
        )
    if config.hf_token:
        from claim_verifier.llm.huggingface_client import HuggingFaceClient

        providers["huggingface"] = HuggingFaceClient(
            token=config.hf_token,
            model_name=config.hf_model,
            base_url=config.hf_base_url,
            timeout=config.llm_timeout_seconds,
        )

    primary = config.primary_llm.lower()
    ordered = sorted(providers.items(), key=lambda item: item[0] != primary)
    chain = FallbackLLMProvider(
        [provider for _, provider in ordered],
        timeout=config.llm_timeout_seconds,
    )

    if chain.available:
        logger.info(f"Text generation providers: {', '.join(chain.provider_names)}")
    else:
        logger.warning(
            "No text generation provider configured; set GEMINI_API_KEY or HF_TOKEN"
        )
    return chain


__all__ = ["FallbackLLMProvider", "build_llm_provider"]
