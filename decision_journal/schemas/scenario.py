"""Pydantic schemas for scenarios and alternatives."""
from datetime import datetime

from pydantic import BaseModel, Field


class AlternativeOutSchema(BaseModel):
    id: str
    text: str
    created_at: datetime

    class Config:
        from_attributes = True


class ScenarioOutSchema(BaseModel):
    id: str
    owner_id: int
    title: str
    description: str | None
    alternatives: list[AlternativeOutSchema]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ScenarioCreateSchema(BaseModel):
    title: str
    description: str | None = ""
    count: int | None = Field(default=None, ge=1, le=10)
    # title-only path: skip the context richness gate
    allow_short_context: bool = False


class ScenarioUpdateSchema(BaseModel):
    title: str | None = None
    description: str | None = None


class AlternativeTextSchema(BaseModel):
    text: str = Field(min_length=1)


class RegenerateSchema(BaseModel):
    count: int | None = Field(default=None, ge=1, le=10)


class ContextValidateSchema(BaseModel):
    description: str | None = None


class ContextValidationOutSchema(BaseModel):
    valid: bool
    message: str | None = None
