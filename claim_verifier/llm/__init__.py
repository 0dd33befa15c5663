"""Text generation providers.

Provider clients (GeminiClient, HuggingFaceClient) are constructed by
build_llm_provider only when their credentials are configured.
"""

from claim_verifier.llm.provider import FallbackLLMProvider, build_llm_provider

__all__ = ["FallbackLLMProvider", "build_llm_provider"]
