"""Scenario store interface and the records it trades in."""
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class AlternativeRecord:
    text: str
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class ScenarioRecord:
    owner_id: int
    title: str
    description: str | None = None
    alternatives: list[AlternativeRecord] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


class ScenarioStore(ABC):
    """Persistence for scenarios and their alternatives.

    Per-alternative mutations write the owning scenario's ``updated_at`` in the
    same write, so a reader never sees one without the other. Mutations on a
    scenario or alternative that does not exist return False / None instead of
    raising; the service turns that into a not-found error.
    """

    @abstractmethod
    async def list_by_owner(self, owner_id: int) -> list[ScenarioRecord]:
        """Scenarios of one owner, most recently updated first."""

    @abstractmethod
    async def get(self, scenario_id: str) -> ScenarioRecord | None:
        ...

    @abstractmethod
    async def upsert(self, scenario: ScenarioRecord) -> ScenarioRecord:
        """Insert or fully replace a scenario, alternatives included."""

    @abstractmethod
    async def remove(self, scenario_id: str) -> bool:
        ...

    @abstractmethod
    async def insert_alternatives(
        self, scenario_id: str, alternatives: list[AlternativeRecord], updated_at: datetime
    ) -> bool:
        """Append alternatives in order, all in one write."""

    @abstractmethod
    async def update_alternative(
        self, scenario_id: str, alternative_id: str, text: str, updated_at: datetime
    ) -> bool:
        ...

    @abstractmethod
    async def remove_alternative(self, scenario_id: str, alternative_id: str, updated_at: datetime) -> bool:
        ...
