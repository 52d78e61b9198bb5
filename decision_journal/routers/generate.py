"""Generation proxy endpoint. Errors leave as {"error": ...} via the app's handler."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from decision_journal.core.errors import MissingTitle, UnknownError
from decision_journal.schemas.generation import ErrorSchema, GenerationRequestSchema, GenerationResponseSchema
from decision_journal.services.generation.proxy import AlternativeProxy

router = APIRouter(tags=["generation"])


def get_alternative_proxy(request: Request) -> AlternativeProxy:
    return request.app.state.alternative_proxy


async def read_generation_request(request: Request) -> GenerationRequestSchema:
    """Parse the body by hand: a bad payload is a proxy error (400/500), never a 422."""
    try:
        payload = await request.json()
    except ValueError as exc:
        raise UnknownError(f"Corpo da requisição inválido: {exc}") from exc
    try:
        return GenerationRequestSchema.model_validate(payload)
    except ValidationError as exc:
        if any(error["loc"][:1] == ("title",) for error in exc.errors()):
            raise MissingTitle() from exc
        raise UnknownError("Corpo da requisição inválido") from exc


@router.post(
    "/generate-alternatives",
    response_model=GenerationResponseSchema,
    responses={code: {"model": ErrorSchema} for code in (400, 402, 429, 500)},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": GenerationRequestSchema.model_json_schema()}},
        }
    },
)
async def generate_alternatives(
    body: Annotated[GenerationRequestSchema, Depends(read_generation_request)],
    proxy: Annotated[AlternativeProxy, Depends(get_alternative_proxy)],
):
    """Ask the AI gateway for `count` concrete alternatives to the decision."""
    alternatives = await proxy.generate(body.title, body.description, body.count)
    return GenerationResponseSchema(alternatives=alternatives)
