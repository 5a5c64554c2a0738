"""Tests for the OpenAI text generator. No network calls are made."""

from types import SimpleNamespace

from budgetkit.ai import openai_generator
from budgetkit.ai.factories import ENV_OPENAI_MODEL, create_text_generator
from budgetkit.ai.openai_generator import DEFAULT_MODEL, OpenAITextGenerator


class _FakeResponses:
    def __init__(self, output_text):
        self.output_text = output_text
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(output_text=self.output_text)


class _FakeClient:
    def __init__(self, output_text="[]"):
        self.responses = _FakeResponses(output_text)


def test_generate_calls_responses_api():
    client = _FakeClient('[{"index": 1, "tags": ["Groceries"]}]')
    generator = OpenAITextGenerator(model="gpt-test", client=client)

    text = generator.generate("categorize this")

    assert text == '[{"index": 1, "tags": ["Groceries"]}]'
    call = client.responses.calls[0]
    assert call["model"] == "gpt-test"
    assert call["input"] == "categorize this"
    assert call["max_output_tokens"] > 0


def test_generate_missing_output_text_is_empty():
    generator = OpenAITextGenerator(client=_FakeClient(output_text=None))
    assert generator.generate("x") == ""


def test_client_created_lazily(monkeypatch):
    created = []

    def fake_openai():
        client = _FakeClient("ok")
        created.append(client)
        return client

    monkeypatch.setattr(openai_generator, "OpenAI", fake_openai)
    generator = OpenAITextGenerator()
    assert created == []

    assert generator.generate("a") == "ok"
    assert generator.generate("b") == "ok"
    assert len(created) == 1


def test_factory_default_model(monkeypatch):
    monkeypatch.delenv(ENV_OPENAI_MODEL, raising=False)
    assert create_text_generator().model == DEFAULT_MODEL


def test_factory_model_from_env(monkeypatch):
    monkeypatch.setenv(ENV_OPENAI_MODEL, "gpt-env")
    assert create_text_generator().model == "gpt-env"
    assert create_text_generator(model="gpt-arg").model == "gpt-arg"
