"""LiteLLM adapter — implements LLMPort using LiteLLM for provider-agnostic LLM calls."""

import logging

import litellm
from litellm import acompletion

from port.llm import LLMAuthError, LLMError, LLMRateLimitError, LLMTimeoutError

# Suppress LiteLLM's verbose logging (proxy server warnings, etc.)
litellm.suppress_debug_info = True
logging.getLogger("LiteLLM").setLevel(logging.CRITICAL)

logger = logging.getLogger(__name__)


class LiteLLMAdapter:
    """Adapter that implements LLMPort on top of litellm.acompletion."""

    async def call(
        self,
        messages: list[dict[str, str]],
        model: str = "openai/gpt-4.1-mini",
        timeout: float = 30.0,
        **kwargs,
    ) -> str:
        """Call the LLM and return the stripped message content.

        Raises:
            ValueError: If messages list is empty.
            LLMTimeoutError / LLMAuthError / LLMRateLimitError / LLMError:
                Provider failures, translated from litellm exceptions.
            RuntimeError: If no content is returned from the API.
        """
        if not messages:
            raise ValueError("messages list cannot be empty")

        try:
            response = await acompletion(
                model=model,
                messages=messages,
                timeout=timeout,
                **kwargs,
            )
        except litellm.Timeout as e:
            raise LLMTimeoutError(str(e)) from e
        except litellm.AuthenticationError as e:
            raise LLMAuthError(str(e)) from e
        except litellm.RateLimitError as e:
            raise LLMRateLimitError(str(e)) from e
        except litellm.APIError as e:
            raise LLMError(str(e)) from e

        content = ""
        if response.choices:
            message = response.choices[0].message
            if message and message.content:
                content = message.content.strip()

        if not content:
            logger.error("No content in LLM response", extra={
                "model": model,
                "response_id": getattr(response, "id", None),
            })
            raise RuntimeError("No content returned from LLM")

        usage = getattr(response, "usage", None)
        logger.debug("LLM API call completed", extra={
            "model": model,
            "total_tokens": usage.total_tokens if usage else 0,
        })
        return content
