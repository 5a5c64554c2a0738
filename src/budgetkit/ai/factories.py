"""Text generator factory functions."""

import os
from typing import Optional

from budgetkit.ai.openai_generator import DEFAULT_MODEL, OpenAITextGenerator

ENV_OPENAI_MODEL = "BUDGETKIT_OPENAI_MODEL"


def create_text_generator(model: Optional[str] = None) -> OpenAITextGenerator:
    """Create the production text generator.

    Args:
        model: Model name. If None, checks BUDGETKIT_OPENAI_MODEL environment
            variable, then defaults to gpt-4o-mini

    Returns:
        OpenAITextGenerator for the resolved model
    """
    if model is None:
        model = os.environ.get(ENV_OPENAI_MODEL) or DEFAULT_MODEL
    return OpenAITextGenerator(model=model)
