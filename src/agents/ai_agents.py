"""
AI Agents for Coffee Bar Bookkeeper

CRITICAL BOUNDARIES:

INTENT PARSER AGENT:
   - CAN: Guess what a message is about (sale, debt, settle, ...)
   - CAN: Guess item names, quantities, customer and amount paid
   - CANNOT: Price anything or decide what is owed
   - CANNOT: Write to the ledger

The LLM is a TRANSLATOR, not an ACCOUNTANT.
Everything it returns is re-checked by deterministic heuristics before
any money is recorded, and any failure simply means "could not
interpret", never a crash.
"""

import json
from typing import Optional

import google.generativeai as genai
from pydantic import ValidationError

from src.catalog import Catalog
from src.config import GeminiSettings, get_settings
from src.config.logging import get_logger
from src.models.ledger import ParsedIntent


logger = get_logger(__name__)


class IntentParserAgent:
    """
    Gemini-backed natural language parser.

    RESPONSIBILITIES:
    - Turn a free-text message into a ParsedIntent guess

    BOUNDARIES:
    - Returns None on any failure
    - NEVER persists data
    """

    def __init__(
        self,
        catalog: Catalog,
        settings: Optional[GeminiSettings] = None,
    ):
        self._catalog = catalog
        self._settings = settings or get_settings().gemini
        self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
                "response_mime_type": "application/json",
            }
        )

    def build_prompt(self, message: str) -> str:
        """Prompt listing the menu and the exact JSON shape we expect."""
        menu_list = "\n".join(
            f"- {item.name}: {item.unit_price} AED" for item in self._catalog
        )

        return f"""You are a coffee shop bookkeeping assistant. Parse the user message and return JSON only.

Menu:
{menu_list}

Return this exact JSON structure:
{{"intent": "sale"|"debt"|"settle"|"summary"|"debts"|"menu"|"help"|"clearall"|"unknown", "items": [{{"name": "exact menu item name", "qty": 1}}], "customer": "name or null", "paid": number or null}}

Rules:
- "sale": paid in full. "debt": paid partially or nothing. "settle": paying off a debt.
- "paid" = amount handed over now. If the user mentions payment, always set "paid".
- "latte" and "matcha latte" are different items. If user says only "latte", choose "latte".
- Match item names exactly from the menu. Default qty = 1. customer = null if not mentioned.

User message: {message}"""

    @staticmethod
    def extract_json(text: str) -> Optional[dict]:
        """Find the outermost JSON object in a model response."""
        start = text.find("{")
        end = text.rfind("}") + 1
        if start < 0 or end <= start:
            return None
        data = json.loads(text[start:end])
        return data if isinstance(data, dict) else None

    async def parse(self, message: str) -> Optional[ParsedIntent]:
        """
        Best-effort structured reading of a message.

        Returns None if the model is unreachable or answers with something
        we can't read.
        """
        try:
            response = await self._model.generate_content_async(
                self.build_prompt(message)
            )
            data = self.extract_json(response.text.strip())
        except Exception as e:
            logger.error("intent_parser_failed", error=str(e))
            return None

        if data is None:
            logger.warning("intent_parser_no_json")
            return None

        try:
            return ParsedIntent(**data)
        except ValidationError as e:
            logger.warning("intent_parser_invalid", error=str(e))
            return None
