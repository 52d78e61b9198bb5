from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from decision_journal.core.config import Settings
from decision_journal.services.storage.base import AlternativeRecord, ScenarioRecord, ScenarioStore
from decision_journal.services.storage.local import JsonFileScenarioStore
from decision_journal.services.storage.sql import SqlScenarioStore


def build_store(settings: Settings, sessionmaker: async_sessionmaker[AsyncSession]) -> ScenarioStore:
    """Pick the storage strategy from settings.storage_backend."""
    if settings.storage_backend == "local":
        return JsonFileScenarioStore(settings.local_store_path)
    return SqlScenarioStore(sessionmaker)


__all__ = [
    "AlternativeRecord",
    "JsonFileScenarioStore",
    "ScenarioRecord",
    "ScenarioStore",
    "SqlScenarioStore",
    "build_store",
]
