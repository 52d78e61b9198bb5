from decision_journal.schemas.auth import CredentialsSchema, TokenOutSchema, UserOutSchema
from decision_journal.schemas.generation import ErrorSchema, GenerationRequestSchema, GenerationResponseSchema
from decision_journal.schemas.scenario import (
    AlternativeOutSchema,
    AlternativeTextSchema,
    ContextValidateSchema,
    ContextValidationOutSchema,
    RegenerateSchema,
    ScenarioCreateSchema,
    ScenarioOutSchema,
    ScenarioUpdateSchema,
)

__all__ = [
    "AlternativeOutSchema",
    "AlternativeTextSchema",
    "ContextValidateSchema",
    "ContextValidationOutSchema",
    "CredentialsSchema",
    "ErrorSchema",
    "GenerationRequestSchema",
    "GenerationResponseSchema",
    "RegenerateSchema",
    "ScenarioCreateSchema",
    "ScenarioOutSchema",
    "ScenarioUpdateSchema",
    "TokenOutSchema",
    "UserOutSchema",
]
