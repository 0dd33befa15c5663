"""HuggingFace router client (OpenAI-compatible chat completions)."""

from typing import Optional

import openai
from tenacity import retry, stop_after_attempt, wait_exponential

from claim_verifier.config.logging import get_logger
from claim_verifier.config.settings import UNSET, resolve_credential, settings

logger = get_logger("llm.huggingface")


class HuggingFaceClient:
    """
    Text generation through the HuggingFace inference router.

    The router speaks the OpenAI chat completions protocol, so the official
    openai SDK is used with a custom base URL.

    Attributes:
        name: Provider label used in logs and fallback ordering
        model_name: Model served by the router
    """

    name = "huggingface"

    def __init__(
        self,
        token: Optional[str] = UNSET,
        model_name: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the router client.

        Args:
            token: HuggingFace token override (defaults to settings)
            model_name: Model override (defaults to settings)
            base_url: Router URL override (defaults to settings)
            timeout: Request timeout override in seconds

        Raises:
            ValueError: If no token is configured
        """
        token = resolve_credential(token, "hf_token")
        if not token:
            raise ValueError("HF_TOKEN not configured in environment")

        self.model_name = model_name or settings.hf_model
        self.client = openai.AsyncOpenAI(
            base_url=base_url or settings.hf_base_url,
            api_key=token,
            timeout=timeout or settings.llm_timeout_seconds,
            max_retries=0,
        )

        logger.info(f"HuggingFace client initialized with model {self.model_name}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
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
        Generate a chat completion.

        Args:
            system_instruction: Sent as the system message
            user_prompt: Sent as the user message
            temperature: Sampling temperature
            max_output_tokens: Upper bound on generated tokens

        Returns:
            Generated text content (empty string if the router returned none)
        """
        completion = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_output_tokens,
        )

        text = completion.choices[0].message.content or ""
        usage = getattr(completion, "usage", None)
        logger.debug(
            "HuggingFace completion generated",
            model=self.model_name,
            tokens_used=getattr(usage, "total_tokens", None),
        )
        return text

    async def aclose(self) -> None:
        await self.client.close()
