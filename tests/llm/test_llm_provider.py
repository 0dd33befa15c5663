"""Tests for FallbackLLMProvider and build_llm_provider."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from claim_verifier.config.settings import Settings, settings
from claim_verifier.llm.huggingface_client import HuggingFaceClient
from claim_verifier.llm.provider import FallbackLLMProvider, build_llm_provider


def _provider(name: str, result: str = "ok", error: Exception | None = None) -> MagicMock:
    provider = MagicMock()
    provider.name = name
    if error is not None:
        provider.generate = AsyncMock(side_effect=error)
    else:
        provider.generate = AsyncMock(return_value=result)
    provider.aclose = AsyncMock()
    return provider


class _HangingProvider:
    name = "hanging"

    async def generate(self, system_instruction, user_prompt, **kwargs) -> str:
        await asyncio.sleep(5)
        return "too late"


class TestFallbackLLMProvider:
    @pytest.mark.asyncio
    async def test_primary_answers(self):
        primary = _provider("gemini", "primary answer")
        secondary = _provider("huggingface", "secondary answer")
        chain = FallbackLLMProvider([primary, secondary], timeout=1.0)

        result = await chain.generate("system", "user", temperature=0.2, max_output_tokens=500)

        assert result == "primary answer"
        primary.generate.assert_awaited_once_with(
            "system", "user", temperature=0.2, max_output_tokens=500
        )
        secondary.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_on_error(self):
        primary = _provider("gemini", error=RuntimeError("503"))
        secondary = _provider("huggingface", "secondary answer")
        chain = FallbackLLMProvider([primary, secondary], timeout=1.0)

        assert await chain.generate("system", "user") == "secondary answer"

    @pytest.mark.asyncio
    async def test_falls_back_on_timeout(self):
        secondary = _provider("huggingface", "secondary answer")
        chain = FallbackLLMProvider([_HangingProvider(), secondary], timeout=0.05)

        assert await chain.generate("system", "user") == "secondary answer"

    @pytest.mark.asyncio
    async def test_raises_last_error_when_all_fail(self):
        chain = FallbackLLMProvider(
            [
                _provider("gemini", error=RuntimeError("primary down")),
                _provider("huggingface", error=ValueError("secondary down")),
            ],
            timeout=1.0,
        )

        with pytest.raises(ValueError, match="secondary down"):
            await chain.generate("system", "user")

    @pytest.mark.asyncio
    async def test_empty_chain_raises(self):
        chain = FallbackLLMProvider([], timeout=1.0)

        assert chain.available is False
        with pytest.raises(RuntimeError, match="No text generation provider configured"):
            await chain.generate("system", "user")

    @pytest.mark.asyncio
    async def test_aclose_closes_providers(self):
        primary = _provider("gemini")
        chain = FallbackLLMProvider([primary], timeout=1.0)

        await chain.aclose()

        primary.aclose.assert_awaited_once()


class TestBuildLLMProvider:
    def test_no_credentials_gives_empty_chain(self):
        chain = build_llm_provider(Settings(gemini_api_key=None, hf_token=None))

        assert chain.available is False
        assert chain.provider_names == []

    def test_huggingface_only(self):
        chain = build_llm_provider(Settings(gemini_api_key=None, hf_token="hf_test"))

        assert chain.provider_names == ["huggingface"]

    def test_primary_goes_first(self):
        config = Settings(gemini_api_key="g-test", hf_token="hf_test", primary_llm="huggingface")

        chain = build_llm_provider(config)

        assert chain.provider_names == ["huggingface", "gemini"]

    def test_default_primary_is_gemini(self):
        config = Settings(gemini_api_key="g-test", hf_token="hf_test", primary_llm="gemini")

        assert build_llm_provider(config).provider_names == ["gemini", "huggingface"]

    def test_explicit_none_token_ignores_global_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "hf_token", "hf_global")

        with pytest.raises(ValueError, match="HF_TOKEN not configured"):
            HuggingFaceClient(token=None)

    def test_keyless_config_ignores_global_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "gemini_api_key", "g-global")
        monkeypatch.setattr(settings, "hf_token", "hf_global")

        assert build_llm_provider(Settings(gemini_api_key=None, hf_token=None)).provider_names == []
