"""
OpenAI chat collaborator with retry and timeout handling.

Provides a cached async client and OpenAIChatModel, whose chat() never
raises: transient API errors are retried with tenacity and anything left
over (including the wall-clock timeout) degrades to an empty string.
"""

import logging
import os
from typing import Optional

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from dotenv import load_dotenv

from tripflow.shared.concurrency import with_timeout

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = os.environ.get("TRIPFLOW_LLM_MODEL", "gpt-4.1-mini")
DEFAULT_TIMEOUT = float(os.environ.get("TRIPFLOW_LLM_TIMEOUT", "20"))

_RETRYABLE_ERRORS = (
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)

# Module-level cache for the OpenAI client
_client: Optional[AsyncOpenAI] = None


def get_cached_client() -> AsyncOpenAI:
    """
    Returns a cached instance of the async OpenAI client.

    Uses the OPENAI_API_KEY environment variable for authentication.
    The client is created once and reused for all subsequent calls.
    """
    global _client
    if _client is None:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is not set. "
                "Please set it to your OpenAI API key."
            )
        _client = AsyncOpenAI(api_key=api_key)
    return _client


class OpenAIChatModel:
    """
    Single-turn chat collaborator backed by the OpenAI Chat Completion API.

    Args:
        model: Model identifier (default: TRIPFLOW_LLM_MODEL or gpt-4.1-mini)
        timeout: Wall-clock budget per chat() call in seconds
        client: Optional client instance. If not provided, uses cached client.
        system_prompt: Optional system message sent with every prompt
    """

    def __init__(
        self,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
        system_prompt: Optional[str] = None,
    ):
        self.model = model or DEFAULT_MODEL
        self.timeout = DEFAULT_TIMEOUT if timeout is None else timeout
        self._client = client
        self.system_prompt = system_prompt

    async def chat(self, prompt: str) -> str:
        """
        Send a prompt and return the response text.

        Returns:
            The assistant's response, or "" on timeout or failure.
        """
        try:
            return await with_timeout(
                self._complete(prompt),
                self.timeout,
                fallback="",
                label=f"chat[{self.model}]",
            )
        except Exception as e:
            logger.error(f"Chat call failed after retries: {type(e).__name__}: {e}")
            return ""

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(_RETRYABLE_ERRORS),
        reraise=True,
    )
    async def _complete(self, prompt: str) -> str:
        client = self._client or get_cached_client()

        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = await client.chat.completions.create(
            model=self.model,
            messages=messages,
        )
        content = response.choices[0].message.content or ""
        return content.strip()
