"""Hosted relational backend: scenarios and alternatives tables via SQLAlchemy."""
from datetime import datetime, timezone

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from decision_journal.models.alternative import Alternative
from decision_journal.models.scenario import Scenario
from decision_journal.services.storage.base import AlternativeRecord, ScenarioRecord, ScenarioStore


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for DateTime(timezone=True)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(row: Scenario) -> ScenarioRecord:
    return ScenarioRecord(
        id=row.id,
        owner_id=row.user_id,
        title=row.title,
        description=row.description,
        alternatives=[
            AlternativeRecord(id=alt.id, text=alt.content, created_at=_aware(alt.created_at))
            for alt in row.alternatives
        ],
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlScenarioStore(ScenarioStore):
    """Each operation runs in its own session and commits once."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self.sessionmaker = sessionmaker

    @staticmethod
    async def _load(db: AsyncSession, scenario_id: str) -> Scenario | None:
        result = await db.execute(
            select(Scenario)
            .options(selectinload(Scenario.alternatives))
            .where(Scenario.id == scenario_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _touch(db: AsyncSession, scenario_id: str, updated_at: datetime) -> None:
        await db.execute(update(Scenario).where(Scenario.id == scenario_id).values(updated_at=updated_at))

    async def list_by_owner(self, owner_id: int) -> list[ScenarioRecord]:
        async with self.sessionmaker() as db:
            result = await db.execute(
                select(Scenario)
                .options(selectinload(Scenario.alternatives))
                .where(Scenario.user_id == owner_id)
                .order_by(Scenario.updated_at.desc())
            )
            return [_to_record(row) for row in result.scalars().all()]

    async def get(self, scenario_id: str) -> ScenarioRecord | None:
        async with self.sessionmaker() as db:
            row = await self._load(db, scenario_id)
            return _to_record(row) if row else None

    async def upsert(self, scenario: ScenarioRecord) -> ScenarioRecord:
        async with self.sessionmaker() as db:
            row = await self._load(db, scenario.id)
            if row is None:
                row = Scenario(id=scenario.id, user_id=scenario.owner_id, created_at=scenario.created_at)
                row.alternatives = []
                db.add(row)
            existing = {alt.id: alt for alt in row.alternatives}

            row.title = scenario.title
            row.description = scenario.description
            row.updated_at = scenario.updated_at

            alternatives = []
            for position, record in enumerate(scenario.alternatives):
                alt = existing.get(record.id)
                if alt is None:
                    alt = Alternative(id=record.id, created_at=record.created_at)
                alt.content = record.text
                alt.position = position
                alternatives.append(alt)
            # delete-orphan drops rows no longer listed
            row.alternatives = alternatives

            await db.commit()
        return scenario

    async def remove(self, scenario_id: str) -> bool:
        async with self.sessionmaker() as db:
            result = await db.execute(delete(Scenario).where(Scenario.id == scenario_id))
            await db.commit()
            return result.rowcount > 0

    async def insert_alternatives(
        self, scenario_id: str, alternatives: list[AlternativeRecord], updated_at: datetime
    ) -> bool:
        async with self.sessionmaker() as db:
            exists = await db.scalar(select(Scenario.id).where(Scenario.id == scenario_id))
            if exists is None:
                return False
            last = await db.scalar(
                select(func.max(Alternative.position)).where(Alternative.scenario_id == scenario_id)
            )
            start = -1 if last is None else last
            for offset, record in enumerate(alternatives, start=1):
                db.add(
                    Alternative(
                        id=record.id,
                        scenario_id=scenario_id,
                        content=record.text,
                        position=start + offset,
                        created_at=record.created_at,
                    )
                )
            await self._touch(db, scenario_id, updated_at)
            await db.commit()
            return True

    async def update_alternative(
        self, scenario_id: str, alternative_id: str, text: str, updated_at: datetime
    ) -> bool:
        async with self.sessionmaker() as db:
            result = await db.execute(
                update(Alternative)
                .where(Alternative.id == alternative_id, Alternative.scenario_id == scenario_id)
                .values(content=text)
            )
            if result.rowcount == 0:
                await db.rollback()
                return False
            await self._touch(db, scenario_id, updated_at)
            await db.commit()
            return True

    async def remove_alternative(self, scenario_id: str, alternative_id: str, updated_at: datetime) -> bool:
        async with self.sessionmaker() as db:
            result = await db.execute(
                delete(Alternative).where(
                    Alternative.id == alternative_id,
                    Alternative.scenario_id == scenario_id,
                )
            )
            if result.rowcount == 0:
                await db.rollback()
                return False
            await self._touch(db, scenario_id, updated_at)
            await db.commit()
            return True
