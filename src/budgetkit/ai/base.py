"""Abstract text generation interface used by tag suggestion."""

from abc import ABC, abstractmethod


class TextGenerator(ABC):
    """Turns a prompt into free-form model output."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return the model's text response for prompt.

        Implementations may raise on transport or API errors; callers that
        treat generation as best effort catch those themselves.
        """
        pass
