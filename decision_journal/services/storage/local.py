"""Local persistence: every scenario in one JSON document on disk."""
import asyncio
import json
import os
import tempfile
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from decision_journal.services.storage.base import AlternativeRecord, ScenarioRecord, ScenarioStore


def _to_json(scenario: ScenarioRecord) -> dict:
    data = asdict(scenario)
    data["created_at"] = scenario.created_at.isoformat()
    data["updated_at"] = scenario.updated_at.isoformat()
    for alt, raw in zip(scenario.alternatives, data["alternatives"]):
        raw["created_at"] = alt.created_at.isoformat()
    return data


def _from_json(data: dict) -> ScenarioRecord:
    return ScenarioRecord(
        id=data["id"],
        owner_id=data["owner_id"],
        title=data["title"],
        description=data.get("description"),
        alternatives=[
            AlternativeRecord(
                id=alt["id"],
                text=alt["text"],
                created_at=datetime.fromisoformat(alt["created_at"]),
            )
            for alt in data.get("alternatives", [])
        ],
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


class JsonFileScenarioStore(ScenarioStore):
    """Reads the whole file on every call and rewrites it atomically on change.

    File access runs in a worker thread; the lock serialises read-modify-write
    cycles within one process only.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> list[ScenarioRecord]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return [_from_json(item) for item in data.get("scenarios", [])]

    def _write(self, scenarios: list[ScenarioRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"scenarios": [_to_json(s) for s in scenarios]}, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    async def _mutate(self, scenario_id: str, apply) -> bool:
        async with self._lock:
            scenarios = await asyncio.to_thread(self._read)
            for scenario in scenarios:
                if scenario.id == scenario_id:
                    if apply(scenario) is False:
                        return False
                    await asyncio.to_thread(self._write, scenarios)
                    return True
            return False

    async def list_by_owner(self, owner_id: int) -> list[ScenarioRecord]:
        async with self._lock:
            stored = await asyncio.to_thread(self._read)
        scenarios = [s for s in stored if s.owner_id == owner_id]
        return sorted(scenarios, key=lambda s: s.updated_at, reverse=True)

    async def get(self, scenario_id: str) -> ScenarioRecord | None:
        async with self._lock:
            stored = await asyncio.to_thread(self._read)
        return next((s for s in stored if s.id == scenario_id), None)

    async def upsert(self, scenario: ScenarioRecord) -> ScenarioRecord:
        async with self._lock:
            scenarios = await asyncio.to_thread(self._read)
            for index, existing in enumerate(scenarios):
                if existing.id == scenario.id:
                    scenarios[index] = scenario
                    break
            else:
                scenarios.append(scenario)
            await asyncio.to_thread(self._write, scenarios)
        return scenario

    async def remove(self, scenario_id: str) -> bool:
        async with self._lock:
            scenarios = await asyncio.to_thread(self._read)
            kept = [s for s in scenarios if s.id != scenario_id]
            if len(kept) == len(scenarios):
                return False
            await asyncio.to_thread(self._write, kept)
            return True

    async def insert_alternatives(
        self, scenario_id: str, alternatives: list[AlternativeRecord], updated_at: datetime
    ) -> bool:
        def apply(scenario: ScenarioRecord) -> None:
            scenario.alternatives.extend(alternatives)
            scenario.updated_at = updated_at

        return await self._mutate(scenario_id, apply)

    async def update_alternative(
        self, scenario_id: str, alternative_id: str, text: str, updated_at: datetime
    ) -> bool:
        def apply(scenario: ScenarioRecord) -> bool:
            for alt in scenario.alternatives:
                if alt.id == alternative_id:
                    alt.text = text
                    scenario.updated_at = updated_at
                    return True
            return False

        return await self._mutate(scenario_id, apply)

    async def remove_alternative(self, scenario_id: str, alternative_id: str, updated_at: datetime) -> bool:
        def apply(scenario: ScenarioRecord) -> bool:
            kept = [alt for alt in scenario.alternatives if alt.id != alternative_id]
            if len(kept) == len(scenario.alternatives):
                return False
            scenario.alternatives = kept
            scenario.updated_at = updated_at
            return True

        return await self._mutate(scenario_id, apply)
