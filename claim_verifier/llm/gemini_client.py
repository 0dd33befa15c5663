"""Gemini API client with exponential backoff and per-call timeouts."""

from typing import Optional

import google.generativeai as genai
from google.generativeai.types.generation_types import BlockedPromptException
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from claim_verifier.config.logging import get_logger
from claim_verifier.config.settings import UNSET, resolve_credential, settings

logger = get_logger("llm.gemini")


class GeminiClient:
    """
    Google Gemini text generation provider.

    Retries transient failures with exponential backoff. Blocked prompts are
    not retried: the same prompt would be blocked again.

    Attributes:
        name: Provider label used in logs and fallback ordering
        model_name: Gemini model identifier
        timeout: Per-request timeout in seconds
    """

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = UNSET,
        model_name: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize Gemini client with API key from settings.

        Args:
            api_key: Gemini API key override (defaults to settings)
            model_name: Model override (defaults to settings)
            timeout: Request timeout override in seconds

        Raises:
            ValueError: If API key is not configured
        """
        api_key = resolve_credential(api_key, "gemini_api_key")
        if not api_key:
            raise ValueError("GEMINI_API_KEY not configured in environment")

        genai.configure(api_key=api_key)

        self.model_name = model_name or settings.gemini_model
        self.timeout = timeout or settings.llm_timeout_seconds

        logger.info(f"Gemini client initialized with model {self.model_name}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_not_exception_type(BlockedPromptException),
        reraise=True,
    )
    async def generate(
        self,
        system_instruction: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_output_tokens: int = 1000,
    ) -> str:
        """
        Generate text from Gemini.

        Args:
            system_instruction: Fixed instruction set for the task
            user_prompt: Task-specific prompt
            temperature: Sampling temperature (0.0-1.0). Lower = more deterministic
            max_output_tokens: Upper bound on generated tokens

        Returns:
            Generated text content

        Raises:
            BlockedPromptException: If prompt violates safety policies
            Exception: For other API errors after retries exhausted
        """
        model = genai.GenerativeModel(
            self.model_name,
            system_instruction=system_instruction,
        )
        try:
            response = await model.generate_content_async(
                user_prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
                request_options={"timeout": self.timeout},
            )
        except BlockedPromptException as e:
            logger.error(f"Prompt blocked by safety filters: {e}")
            raise

        text = response.text
        logger.debug(
            "Gemini completion generated",
            model=self.model_name,
            response_length=len(text),
        )
        return text
