"""AI Agents package."""

from src.agents.ai_agents import IntentParserAgent

__all__ = [
    "IntentParserAgent",
]
