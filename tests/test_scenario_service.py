"""Scenario service rules, exercised against both stores."""
import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import func, select

from decision_journal.core.errors import (
    AlternativeNotFound,
    EmptyAlternativeText,
    GenerationFailure,
    InvalidContext,
    LastAlternativeError,
    MissingTitle,
    ScenarioNotFound,
)
from decision_journal.models.alternative import Alternative
from decision_journal.services.generation.generators import AlternativeGenerator, GeneratedAlternative
from decision_journal.services.scenarios import ScenarioService
from decision_journal.services.storage import JsonFileScenarioStore, SqlScenarioStore
from decision_journal.services.storage.base import AlternativeRecord, ScenarioRecord
from tests.helpers import OTHER_OWNER_ID, OWNER_ID, FakeClock

CONTEXT = "Time pequeno, prazo de 2 meses"  # 30 chars


class ScriptedGenerator(AlternativeGenerator):
    """Returns prepared batches in order; raises when given an exception."""

    def __init__(self, *batches):
        self.batches = list(batches)
        self.calls = []

    async def generate(self, title, description, count):
        self.calls.append((title, description, count))
        batch = self.batches.pop(0)
        if isinstance(batch, Exception):
            raise batch
        return [GeneratedAlternative(text=text) for text in batch][:count]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(store, simulated_generator, clock):
    return ScenarioService(store, simulated_generator, clock=clock)


async def make_scenario(service, *texts, owner_id=OWNER_ID):
    service.generator = ScriptedGenerator(list(texts))
    return await service.create_scenario(owner_id, "Escolher stack", CONTEXT, count=len(texts))


# ---------- create ----------

@pytest.mark.asyncio
async def test_create_end_to_end(service):
    description = "x" * 25

    scenario = await service.create_scenario(OWNER_ID, "Escolher stack", description, count=3)

    stored = await service.get_scenario(OWNER_ID, scenario.id)
    assert stored.title == "Escolher stack"
    assert stored.description == description
    assert len(stored.alternatives) == 3
    assert all(alt.text.strip() for alt in stored.alternatives)
    assert stored.updated_at >= stored.created_at


@pytest.mark.asyncio
async def test_create_uses_default_count(service):
    service.generator = ScriptedGenerator(["A", "B", "C", "D"])

    scenario = await service.create_scenario(OWNER_ID, "Escolher stack", CONTEXT)

    assert service.generator.calls == [("Escolher stack", CONTEXT, 3)]
    assert [alt.text for alt in scenario.alternatives] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_create_rejects_thin_context(service, store):
    with pytest.raises(InvalidContext):
        await service.create_scenario(OWNER_ID, "Escolher stack", "curto")

    assert await store.list_by_owner(OWNER_ID) == []


@pytest.mark.asyncio
async def test_create_title_only_path_skips_context_gate(service):
    scenario = await service.create_scenario(OWNER_ID, "Escolher stack", "", enforce_context=False)

    assert len(scenario.alternatives) == 3


@pytest.mark.asyncio
async def test_create_accepts_missing_description(service, store):
    scenario = await service.create_scenario(OWNER_ID, "Escolher stack", None, enforce_context=False)

    stored = await store.get(scenario.id)
    assert stored.description is None
    assert len(stored.alternatives) == 3


@pytest.mark.asyncio
async def test_create_requires_title(service):
    with pytest.raises(MissingTitle):
        await service.create_scenario(OWNER_ID, "   ", CONTEXT)


@pytest.mark.asyncio
async def test_failed_generation_stores_nothing(service, store):
    service.generator = ScriptedGenerator(GenerationFailure("Créditos insuficientes."))

    with pytest.raises(GenerationFailure):
        await service.create_scenario(OWNER_ID, "Escolher stack", CONTEXT)

    assert await store.list_by_owner(OWNER_ID) == []


@pytest.mark.asyncio
async def test_empty_generation_is_a_failure(service):
    service.generator = ScriptedGenerator([])

    with pytest.raises(GenerationFailure):
        await service.create_scenario(OWNER_ID, "Escolher stack", CONTEXT)


# ---------- reads ----------

@pytest.mark.asyncio
async def test_list_is_per_owner_and_most_recent_first(service):
    first = await make_scenario(service, "A")
    second = await make_scenario(service, "B")
    await make_scenario(service, "C", owner_id=OTHER_OWNER_ID)
    await service.update_scenario(OWNER_ID, first.id, title="Renomeado")

    listed = await service.list_scenarios(OWNER_ID)

    assert [s.id for s in listed] == [first.id, second.id]


@pytest.mark.asyncio
async def test_list_degrades_to_empty_on_store_failure(service, monkeypatch):
    async def broken(owner_id):
        raise RuntimeError("database is gone")

    monkeypatch.setattr(service.store, "list_by_owner", broken)

    assert await service.list_scenarios(OWNER_ID) == []


@pytest.mark.asyncio
async def test_other_owner_cannot_see_scenario(service):
    scenario = await make_scenario(service, "A")

    with pytest.raises(ScenarioNotFound):
        await service.get_scenario(OTHER_OWNER_ID, scenario.id)
    with pytest.raises(ScenarioNotFound):
        await service.delete_scenario(OTHER_OWNER_ID, scenario.id)


# ---------- scenario edits ----------

@pytest.mark.asyncio
async def test_update_scenario_refreshes_updated_at(service):
    scenario = await make_scenario(service, "A", "B")

    updated = await service.update_scenario(OWNER_ID, scenario.id, description="Novo contexto")

    assert updated.description == "Novo contexto"
    assert updated.title == "Escolher stack"
    assert updated.updated_at > scenario.updated_at
    assert [alt.text for alt in updated.alternatives] == ["A", "B"]


@pytest.mark.asyncio
async def test_update_scenario_rejects_blank_title(service):
    scenario = await make_scenario(service, "A")

    with pytest.raises(MissingTitle):
        await service.update_scenario(OWNER_ID, scenario.id, title="  ")


@pytest.mark.asyncio
async def test_delete_scenario_removes_it_with_alternatives(service, store):
    scenario = await make_scenario(service, "A", "B")

    await service.delete_scenario(OWNER_ID, scenario.id)

    assert await store.get(scenario.id) is None
    with pytest.raises(ScenarioNotFound):
        await service.delete_scenario(OWNER_ID, scenario.id)


@pytest.mark.asyncio
async def test_sql_delete_cascades_to_alternatives(store):
    if not isinstance(store, SqlScenarioStore):
        pytest.skip("cascade is a database concern")
    service = ScenarioService(store, ScriptedGenerator(["A", "B", "C"]), clock=FakeClock())
    scenario = await service.create_scenario(OWNER_ID, "Escolher stack", CONTEXT)

    assert await store.remove(scenario.id) is True

    async with store.sessionmaker() as db:
        remaining = await db.scalar(
            select(func.count()).select_from(Alternative).where(Alternative.scenario_id == scenario.id)
        )
    assert remaining == 0


# ---------- alternatives ----------

@pytest.mark.asyncio
async def test_add_alternative_appends_in_order(service):
    scenario = await make_scenario(service, "A", "B")

    updated = await service.add_alternative(OWNER_ID, scenario.id, "  C  ")

    assert [alt.text for alt in updated.alternatives] == ["A", "B", "C"]
    assert updated.updated_at > scenario.updated_at


@pytest.mark.asyncio
async def test_add_alternative_rejects_blank_text(service):
    scenario = await make_scenario(service, "A")

    with pytest.raises(EmptyAlternativeText):
        await service.add_alternative(OWNER_ID, scenario.id, "   ")


@pytest.mark.asyncio
async def test_edit_to_same_text_only_touches_updated_at(service):
    scenario = await make_scenario(service, "A", "B", "C")
    target = scenario.alternatives[1]

    updated = await service.update_alternative(OWNER_ID, scenario.id, target.id, target.text)

    assert [alt.id for alt in updated.alternatives] == [alt.id for alt in scenario.alternatives]
    assert [alt.text for alt in updated.alternatives] == ["A", "B", "C"]
    assert updated.updated_at > scenario.updated_at


@pytest.mark.asyncio
async def test_edit_alternative_text(service):
    scenario = await make_scenario(service, "A", "B")

    updated = await service.update_alternative(OWNER_ID, scenario.id, scenario.alternatives[0].id, "A2")

    assert [alt.text for alt in updated.alternatives] == ["A2", "B"]
    assert updated.alternatives[0].created_at == scenario.alternatives[0].created_at


@pytest.mark.asyncio
async def test_edit_unknown_alternative(service):
    scenario = await make_scenario(service, "A")

    with pytest.raises(AlternativeNotFound):
        await service.update_alternative(OWNER_ID, scenario.id, "missing", "text")


@pytest.mark.asyncio
async def test_cannot_delete_last_alternative(service, store):
    scenario = await make_scenario(service, "A")

    with pytest.raises(LastAlternativeError):
        await service.delete_alternative(OWNER_ID, scenario.id, scenario.alternatives[0].id)

    unchanged = await store.get(scenario.id)
    assert [alt.text for alt in unchanged.alternatives] == ["A"]
    assert unchanged.updated_at == scenario.updated_at


@pytest.mark.asyncio
async def test_delete_one_of_two_alternatives(service):
    scenario = await make_scenario(service, "A", "B")

    updated = await service.delete_alternative(OWNER_ID, scenario.id, scenario.alternatives[0].id)

    assert [alt.text for alt in updated.alternatives] == ["B"]
    assert updated.updated_at > scenario.updated_at


@pytest.mark.asyncio
async def test_delete_unknown_alternative(service):
    scenario = await make_scenario(service, "A", "B")

    with pytest.raises(AlternativeNotFound):
        await service.delete_alternative(OWNER_ID, scenario.id, "missing")


# ---------- regenerate ----------

@pytest.mark.asyncio
async def test_regenerate_appends_new_batch(service):
    scenario = await make_scenario(service, "A", "B")
    service.generator = ScriptedGenerator(["C", "D", "E"])

    updated = await service.regenerate_alternatives(OWNER_ID, scenario.id)

    assert service.generator.calls == [("Escolher stack", CONTEXT, 3)]
    assert [alt.text for alt in updated.alternatives] == ["A", "B", "C", "D", "E"]
    assert updated.updated_at > scenario.updated_at


@pytest.mark.asyncio
async def test_regenerate_failure_leaves_scenario_untouched(service, store):
    scenario = await make_scenario(service, "A")
    service.generator = ScriptedGenerator(GenerationFailure("Resposta vazia da IA"))

    with pytest.raises(GenerationFailure):
        await service.regenerate_alternatives(OWNER_ID, scenario.id)

    unchanged = await store.get(scenario.id)
    assert [alt.text for alt in unchanged.alternatives] == ["A"]


# ---------- store round trip ----------

@pytest.mark.asyncio
async def test_upsert_replaces_alternative_list(store, clock):
    scenario = ScenarioRecord(
        owner_id=OWNER_ID,
        title="Onde morar",
        alternatives=[AlternativeRecord(text="A", created_at=clock()), AlternativeRecord(text="B", created_at=clock())],
        created_at=clock(),
        updated_at=clock(),
    )
    await store.upsert(scenario)

    scenario.alternatives = [scenario.alternatives[1], AlternativeRecord(text="C", created_at=clock())]
    await store.upsert(scenario)

    stored = await store.get(scenario.id)
    assert [alt.text for alt in stored.alternatives] == ["B", "C"]
    assert stored.description is None


# ---------- clock ----------

@pytest.mark.asyncio
async def test_updated_at_advances_when_clock_stalls(store, simulated_generator):
    service = ScenarioService(store, simulated_generator, clock=FakeClock(step=timedelta(0)))
    scenario = await service.create_scenario(OWNER_ID, "Escolher stack", CONTEXT, count=2)

    added = await service.add_alternative(OWNER_ID, scenario.id, "Usar Rails")
    edited = await service.update_alternative(OWNER_ID, scenario.id, added.alternatives[0].id, "Usar Django")

    assert added.updated_at > scenario.updated_at
    assert edited.updated_at > added.updated_at


@pytest.mark.asyncio
async def test_json_store_serialises_concurrent_writes(store, service):
    if not isinstance(store, JsonFileScenarioStore):
        pytest.skip("file store only")
    scenario = await make_scenario(service, "A")

    await asyncio.gather(*(service.add_alternative(OWNER_ID, scenario.id, f"Opção {i}") for i in range(5)))

    stored = await store.get(scenario.id)
    assert sorted(alt.text for alt in stored.alternatives) == ["A"] + [f"Opção {i}" for i in range(5)]
