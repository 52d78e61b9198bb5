"""Scenario operations: create with generated alternatives, edit, delete, regenerate.

The service owns the rules the store does not know about: a scenario keeps at
least one alternative, every mutation refreshes ``updated_at``, and rows are
only visible to their owner.
"""
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from decision_journal.core.errors import (
    AlternativeNotFound,
    EmptyAlternativeText,
    GenerationFailure,
    InvalidContext,
    LastAlternativeError,
    MissingTitle,
    ScenarioNotFound,
)
from decision_journal.services.context_validator import validate_context
from decision_journal.services.generation.generators import AlternativeGenerator
from decision_journal.services.storage.base import AlternativeRecord, ScenarioRecord, ScenarioStore, utcnow

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 3


class ScenarioService:
    def __init__(
        self,
        store: ScenarioStore,
        generator: AlternativeGenerator,
        default_count: int = DEFAULT_COUNT,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.generator = generator
        self.default_count = default_count
        self.clock = clock

    # ---------- helpers ----------

    def _now(self, scenario: ScenarioRecord | None = None) -> datetime:
        now = self.clock()
        # updated_at always advances, even if the clock stalls or goes back
        if scenario is not None and now <= scenario.updated_at:
            return scenario.updated_at + timedelta(microseconds=1)
        return now

    async def _generate(self, title: str, description: str | None, count: int) -> list[AlternativeRecord]:
        generated = await self.generator.generate(title, description or "", count)
        if not generated:
            raise GenerationFailure("Não foi possível gerar alternativas")
        created_at = self.clock()
        return [AlternativeRecord(text=alt.text, created_at=created_at) for alt in generated]

    @staticmethod
    def _clean_text(text: str | None) -> str:
        text = (text or "").strip()
        if not text:
            raise EmptyAlternativeText()
        return text

    async def _reload(self, scenario_id: str) -> ScenarioRecord:
        scenario = await self.store.get(scenario_id)
        if scenario is None:
            raise ScenarioNotFound()
        return scenario

    # ---------- reads ----------

    async def list_scenarios(self, owner_id: int) -> list[ScenarioRecord]:
        """Owner's scenarios, newest activity first. A failing store degrades to []."""
        try:
            return await self.store.list_by_owner(owner_id)
        except Exception:
            logger.exception("Failed to load scenarios for user %s", owner_id)
            return []

    async def get_scenario(self, owner_id: int, scenario_id: str) -> ScenarioRecord:
        scenario = await self.store.get(scenario_id)
        if scenario is None or scenario.owner_id != owner_id:
            raise ScenarioNotFound()
        return scenario

    # ---------- scenario mutations ----------

    async def create_scenario(
        self,
        owner_id: int,
        title: str,
        description: str | None = "",
        count: int | None = None,
        enforce_context: bool = True,
    ) -> ScenarioRecord:
        """Generate the first batch of alternatives, then store scenario and batch together."""
        title = (title or "").strip()
        if not title:
            raise MissingTitle()
        if enforce_context:
            check = validate_context(description)
            if not check.valid:
                raise InvalidContext(check.message)

        alternatives = await self._generate(title, description, count or self.default_count)
        now = self.clock()
        scenario = ScenarioRecord(
            owner_id=owner_id,
            title=title,
            description=description,
            alternatives=alternatives,
            created_at=now,
            updated_at=now,
        )
        await self.store.upsert(scenario)
        logger.info("Created scenario %s with %d alternatives", scenario.id, len(alternatives))
        return scenario

    async def update_scenario(
        self,
        owner_id: int,
        scenario_id: str,
        title: str | None = None,
        description: str | None = None,
    ) -> ScenarioRecord:
        scenario = await self.get_scenario(owner_id, scenario_id)
        if title is not None:
            title = title.strip()
            if not title:
                raise MissingTitle()
            scenario.title = title
        if description is not None:
            scenario.description = description
        scenario.updated_at = self._now(scenario)
        return await self.store.upsert(scenario)

    async def delete_scenario(self, owner_id: int, scenario_id: str) -> None:
        await self.get_scenario(owner_id, scenario_id)
        if not await self.store.remove(scenario_id):
            raise ScenarioNotFound()

    # ---------- alternative mutations ----------

    async def add_alternative(self, owner_id: int, scenario_id: str, text: str) -> ScenarioRecord:
        scenario = await self.get_scenario(owner_id, scenario_id)
        alternative = AlternativeRecord(text=self._clean_text(text), created_at=self.clock())
        if not await self.store.insert_alternatives(scenario_id, [alternative], self._now(scenario)):
            raise ScenarioNotFound()
        return await self._reload(scenario_id)

    async def update_alternative(
        self, owner_id: int, scenario_id: str, alternative_id: str, text: str
    ) -> ScenarioRecord:
        scenario = await self.get_scenario(owner_id, scenario_id)
        if not any(alt.id == alternative_id for alt in scenario.alternatives):
            raise AlternativeNotFound()
        if not await self.store.update_alternative(
            scenario_id, alternative_id, self._clean_text(text), self._now(scenario)
        ):
            raise AlternativeNotFound()
        return await self._reload(scenario_id)

    async def delete_alternative(self, owner_id: int, scenario_id: str, alternative_id: str) -> ScenarioRecord:
        """Remove one alternative; refuses to remove the last one.

        The check reads the current state before deleting, so two sessions
        deleting different alternatives at once can still empty a scenario.
        """
        scenario = await self.get_scenario(owner_id, scenario_id)
        if not any(alt.id == alternative_id for alt in scenario.alternatives):
            raise AlternativeNotFound()
        if len(scenario.alternatives) <= 1:
            raise LastAlternativeError()
        if not await self.store.remove_alternative(scenario_id, alternative_id, self._now(scenario)):
            raise AlternativeNotFound()
        return await self._reload(scenario_id)

    async def regenerate_alternatives(
        self, owner_id: int, scenario_id: str, count: int | None = None
    ) -> ScenarioRecord:
        """Generate a fresh batch and append it after the existing alternatives."""
        scenario = await self.get_scenario(owner_id, scenario_id)
        alternatives = await self._generate(scenario.title, scenario.description, count or self.default_count)
        if not await self.store.insert_alternatives(scenario_id, alternatives, self._now(scenario)):
            raise ScenarioNotFound()
        return await self._reload(scenario_id)
