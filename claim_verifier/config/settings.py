"""Application settings using Pydantic BaseSettings for environment variable management."""

from typing import Any

from pydantic_settings import BaseSettings
from pydantic import Field

# Default for credential arguments: only an omitted argument falls back to
# settings, an explicit None leaves the provider unconfigured
UNSET: Any = object()


class Settings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Every credential is optional. A missing key disables the provider that
    needs it instead of failing at import time.

    Attributes:
        gemini_api_key: Google Gemini API key (primary text generation)
        gemini_model: Gemini model identifier
        hf_token: HuggingFace router token (fallback text generation)
        hf_model: Model served through the HuggingFace router
        hf_base_url: OpenAI-compatible base URL of the HuggingFace router
        primary_llm: Which provider is tried first (gemini or huggingface)
        serpapi_key: SerpAPI key for Google News search
        rapidapi_key: RapidAPI key for Google/Bing search APIs
        rapidapi_realtime_key: RapidAPI key for Real-Time News Data
        tavily_api_key: Tavily search API key
        trust_score_threshold: Minimum fused trust score for evidence inclusion
        chroma_host: Chroma server host for the knowledge store
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
    """

    # Generative model providers
    gemini_api_key: str | None = Field(default=None, description="Google Gemini API key")
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Default Gemini model identifier"
    )
    hf_token: str | None = Field(default=None, description="HuggingFace router token")
    hf_model: str = Field(
        default="meta-llama/Llama-3.3-70B-Instruct:novita",
        description="Model name on the HuggingFace router"
    )
    hf_base_url: str = Field(
        default="https://router.huggingface.co/v1",
        description="OpenAI-compatible HuggingFace router URL"
    )
    primary_llm: str = Field(
        default="gemini",
        description="Primary text generation provider: gemini or huggingface"
    )

    # Search providers
    serpapi_key: str | None = Field(default=None, description="SerpAPI key")
    serpapi_search_engine: str = Field(
        default="google",
        description="SerpAPI engine used for news search"
    )
    serpapi_news_results_limit: int = Field(
        default=10,
        description="Default number of news results requested from SerpAPI"
    )
    trust_score_threshold: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Minimum fused trust score (0-100) for evidence inclusion"
    )
    rapidapi_key: str | None = Field(default=None, description="RapidAPI key")
    rapidapi_realtime_key: str | None = Field(
        default=None,
        description="RapidAPI key for the Real-Time News Data API"
    )
    tavily_api_key: str | None = Field(default=None, description="Tavily API key")

    # Knowledge store
    chroma_host: str = Field(default="localhost", description="Chroma server host")
    chroma_port: int = Field(default=8000, description="Chroma server port")
    chroma_collection_name: str = Field(
        default="fact_check_sources",
        description="Chroma collection holding pre-ingested background facts"
    )

    # Per-call timeouts (seconds)
    search_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout for a single search provider call"
    )
    llm_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single text generation call"
    )
    knowledge_store_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a knowledge store similarity query"
    )

    # Application
    max_claims_per_message: int = Field(
        default=3,
        description="Maximum claims extracted from a single message"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance - import this throughout the application
settings = Settings()


def resolve_credential(value: Any, field: str) -> Any:
    """Return value, or the global setting named field when value is UNSET."""
    if value is UNSET:
        return getattr(settings, field)
    return value
