"""API routes: JSON for scenarios, alternatives and context validation."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from decision_journal.models.user import User
from decision_journal.routers.auth import get_current_user
from decision_journal.schemas.scenario import (
    AlternativeTextSchema,
    ContextValidateSchema,
    ContextValidationOutSchema,
    RegenerateSchema,
    ScenarioCreateSchema,
    ScenarioOutSchema,
    ScenarioUpdateSchema,
)
from decision_journal.services.context_validator import validate_context
from decision_journal.services.scenarios import ScenarioService

router = APIRouter(prefix="/api", tags=["api"])

CurrentUser = Annotated[User, Depends(get_current_user)]


def get_scenario_service(request: Request) -> ScenarioService:
    return request.app.state.scenario_service


Service = Annotated[ScenarioService, Depends(get_scenario_service)]


@router.post("/context/validate", response_model=ContextValidationOutSchema)
async def validate_context_route(body: ContextValidateSchema):
    """Advisory check of the decision description; the caller decides whether to block."""
    check = validate_context(body.description)
    return ContextValidationOutSchema(valid=check.valid, message=check.message)


@router.get("/scenarios", response_model=list[ScenarioOutSchema])
async def list_scenarios(user: CurrentUser, service: Service):
    return await service.list_scenarios(user.id)


@router.post("/scenarios", response_model=ScenarioOutSchema, status_code=201)
async def create_scenario(body: ScenarioCreateSchema, user: CurrentUser, service: Service):
    """Create a scenario together with its first batch of generated alternatives."""
    return await service.create_scenario(
        user.id,
        body.title,
        body.description,
        count=body.count,
        enforce_context=not body.allow_short_context,
    )


@router.get("/scenarios/{scenario_id}", response_model=ScenarioOutSchema)
async def get_scenario(scenario_id: str, user: CurrentUser, service: Service):
    return await service.get_scenario(user.id, scenario_id)


@router.patch("/scenarios/{scenario_id}", response_model=ScenarioOutSchema)
async def update_scenario(scenario_id: str, body: ScenarioUpdateSchema, user: CurrentUser, service: Service):
    return await service.update_scenario(user.id, scenario_id, title=body.title, description=body.description)


@router.delete("/scenarios/{scenario_id}", status_code=204, response_class=Response)
async def delete_scenario(scenario_id: str, user: CurrentUser, service: Service):
    await service.delete_scenario(user.id, scenario_id)
    return Response(status_code=204)


@router.post("/scenarios/{scenario_id}/alternatives", response_model=ScenarioOutSchema, status_code=201)
async def add_alternative(scenario_id: str, body: AlternativeTextSchema, user: CurrentUser, service: Service):
    return await service.add_alternative(user.id, scenario_id, body.text)


@router.patch("/scenarios/{scenario_id}/alternatives/{alternative_id}", response_model=ScenarioOutSchema)
async def update_alternative(
    scenario_id: str,
    alternative_id: str,
    body: AlternativeTextSchema,
    user: CurrentUser,
    service: Service,
):
    return await service.update_alternative(user.id, scenario_id, alternative_id, body.text)


@router.delete("/scenarios/{scenario_id}/alternatives/{alternative_id}", response_model=ScenarioOutSchema)
async def delete_alternative(scenario_id: str, alternative_id: str, user: CurrentUser, service: Service):
    """Remove one alternative; 409 when it is the last one left."""
    return await service.delete_alternative(user.id, scenario_id, alternative_id)


@router.post("/scenarios/{scenario_id}/regenerate", response_model=ScenarioOutSchema)
async def regenerate_alternatives(
    scenario_id: str,
    user: CurrentUser,
    service: Service,
    body: RegenerateSchema | None = None,
):
    """Append a freshly generated batch of alternatives."""
    return await service.regenerate_alternatives(user.id, scenario_id, count=body.count if body else None)
