"""Single-shot chat completion calls against an OpenAI-compatible endpoint."""

import logging
from typing import List, Optional

import openai
from openai import OpenAI

from .config import AIConfig
from .errors import ResponseFormatError, UpstreamError
from .prompts import RESPONSE_FORMAT

logger = logging.getLogger(__name__)


class GeneratorClient:
    """Sends one request per call; failures are never retried."""

    def __init__(self, config: AIConfig, client: Optional[OpenAI] = None):
        self.config = config
        if client is None:
            kwargs = {
                "api_key": config.require_api_key(),
                "base_url": config.base_url,
                "max_retries": 0,  # the SDK retries twice by default
            }
            if config.timeout is not None:
                kwargs["timeout"] = config.timeout
            client = OpenAI(**kwargs)
        self.client = client

    def complete(self, messages: List[dict], temperature: float, max_tokens: int) -> str:
        """Return the raw text of the first completion choice."""
        logger.info(
            "Requesting completion from %s (%d messages, max_tokens=%d)",
            self.config.model, len(messages), max_tokens,
        )
        try:
            resp = self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=RESPONSE_FORMAT,
            )
        except openai.APIStatusError as e:
            logger.error("Completion endpoint returned %s: %s", e.status_code, e.message)
            raise UpstreamError(
                f"The completion endpoint returned HTTP {e.status_code}.",
                status_code=e.status_code,
            ) from e
        except openai.APIConnectionError as e:
            logger.error("Could not reach completion endpoint: %s", e)
            raise UpstreamError("Could not reach the completion endpoint.") from e

        choices = getattr(resp, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raise ResponseFormatError("The model returned no message content.")
        return content
