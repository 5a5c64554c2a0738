"""Text generation collaborators."""

from budgetkit.ai.base import TextGenerator
from budgetkit.ai.factories import create_text_generator

__all__ = ["TextGenerator", "create_text_generator"]
