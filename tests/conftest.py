"""Shared fixtures: settings on a temp database, both scenario stores."""
import random

import pytest
import pytest_asyncio

from decision_journal.core.config import Settings
from decision_journal.db.base import Base
from decision_journal.db.session import create_engine, create_sessionmaker
from decision_journal.models.user import User
from decision_journal.services.generation.generators import SimulatedAlternativeGenerator
from decision_journal.services.storage import JsonFileScenarioStore, SqlScenarioStore
from tests.helpers import OTHER_OWNER_ID, OWNER_ID


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        storage_backend="database",
        generator_backend="simulated",
        local_store_path=tmp_path / "scenarios.json",
        ai_gateway_api_key="test-key",
        ai_gateway_url="https://gateway.test/v1/chat/completions",
    )


@pytest.fixture
def simulated_generator() -> SimulatedAlternativeGenerator:
    return SimulatedAlternativeGenerator(rng=random.Random(7))


@pytest_asyncio.fixture(params=["sql", "json"])
async def store(request, settings, tmp_path):
    """Each store-level test runs against both backends."""
    if request.param == "json":
        yield JsonFileScenarioStore(tmp_path / "scenarios.json")
        return

    engine = create_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    sessionmaker = create_sessionmaker(engine)
    async with sessionmaker() as db:
        db.add_all([
            User(id=OWNER_ID, email="owner@example.com", hashed_password="x"),
            User(id=OTHER_OWNER_ID, email="other@example.com", hashed_password="x"),
        ])
        await db.commit()
    yield SqlScenarioStore(sessionmaker)
    await engine.dispose()
