"""Pytest configuration and fixtures."""

from datetime import datetime
from typing import Optional

import pytest

from src.catalog import Catalog
from src.config import AppSettings
from src.models.ledger import ParsedIntent
from src.orchestrator import BookkeepingFlow
from src.services.storage import InMemoryRowStore, LedgerRepository


FIXED_NOW = datetime(2026, 10, 18, 9, 30, 0)


class StubParser:
    """Stands in for the Gemini parser; returns whatever it was given."""

    def __init__(self, result: Optional[ParsedIntent] = None):
        self.result = result
        self.calls: list[str] = []

    async def parse(self, message: str) -> Optional[ParsedIntent]:
        self.calls.append(message)
        return self.result


@pytest.fixture
def catalog() -> Catalog:
    return Catalog.default()


@pytest.fixture
def store() -> InMemoryRowStore:
    return InMemoryRowStore()


@pytest.fixture
def repository(store) -> LedgerRepository:
    return LedgerRepository(store)


@pytest.fixture
def parser() -> StubParser:
    return StubParser()


@pytest.fixture
def flow(catalog, repository, parser) -> BookkeepingFlow:
    return BookkeepingFlow(
        catalog=catalog,
        repository=repository,
        parser=parser,
        app_settings=AppSettings(),
        clock=lambda: FIXED_NOW,
    )
