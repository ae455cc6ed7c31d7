"""Tests for the Gemini intent parser (model calls are mocked)."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.agents import IntentParserAgent
from src.config import GeminiSettings
from src.models.ledger import IntentKind


@pytest.fixture
def agent(catalog):
    agent = IntentParserAgent(catalog, settings=GeminiSettings(api_key="test-key"))
    agent._model = MagicMock()
    return agent


def answer(agent, text):
    agent._model.generate_content_async = AsyncMock(return_value=SimpleNamespace(text=text))


class TestExtractJson:

    def test_fenced_response(self):
        text = '```json\n{"intent": "sale", "items": []}\n```'
        assert IntentParserAgent.extract_json(text) == {"intent": "sale", "items": []}

    def test_no_object(self):
        assert IntentParserAgent.extract_json("sorry, I can't help") is None

    def test_object_inside_other_text(self):
        assert IntentParserAgent.extract_json('[{"intent": "sale"}]') == {"intent": "sale"}


class TestPrompt:

    def test_lists_menu_and_message(self, agent):
        prompt = agent.build_prompt("sold a latte")
        assert "- matcha latte: 20 AED" in prompt
        assert "- latte: 25 AED" in prompt
        assert prompt.endswith("User message: sold a latte")


class TestParse:
    """parse() returns a guess or None, never raises."""

    def test_parses_response(self, agent):
        answer(agent, '{"intent": "debt", "items": [{"name": "latte", "qty": 1}], '
                      '"customer": "Ahmed", "paid": 15}')

        parsed = asyncio.run(agent.parse("Ahmed got a latte, paid 15"))

        assert parsed.intent == IntentKind.DEBT
        assert parsed.items[0].name == "latte"
        assert parsed.customer == "Ahmed"
        assert parsed.paid == 15

    def test_model_error(self, agent):
        agent._model.generate_content_async = AsyncMock(side_effect=RuntimeError("quota"))
        assert asyncio.run(agent.parse("sold a latte")) is None

    def test_garbage_response(self, agent):
        answer(agent, "not json at all")
        assert asyncio.run(agent.parse("sold a latte")) is None

    def test_broken_json(self, agent):
        answer(agent, '{"intent": "sale", ')
        assert asyncio.run(agent.parse("sold a latte")) is None
