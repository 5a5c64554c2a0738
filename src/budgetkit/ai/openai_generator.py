"""OpenAI-backed text generator."""

from typing import Optional

from openai import OpenAI

from budgetkit.ai.base import TextGenerator
from budgetkit.logging_setup import get_logger

_logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
_MAX_OUTPUT_TOKENS = 1024


class OpenAITextGenerator(TextGenerator):
    """Calls the Responses API and returns its aggregated ``output_text``.

    The client is created on first use, so constructing the generator does
    not require ``OPENAI_API_KEY`` to be set.
    """

    def __init__(self, model: str = DEFAULT_MODEL, client: Optional[OpenAI] = None):
        self.model = model
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI()
        return self._client

    def generate(self, prompt: str) -> str:
        client = self._get_client()
        _logger.debug("openai:request model=%s prompt_chars=%d", self.model, len(prompt))
        resp = client.responses.create(
            model=self.model,
            input=prompt,
            max_output_tokens=_MAX_OUTPUT_TOKENS,
        )
        text = getattr(resp, "output_text", None) or ""
        _logger.debug("openai:response model=%s chars=%d", self.model, len(text))
        return text
