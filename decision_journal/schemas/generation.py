"""Pydantic schemas for the generation proxy endpoint."""
from pydantic import BaseModel, Field


class GenerationRequestSchema(BaseModel):
    # title is checked by the proxy itself so a blank one maps to MissingTitle (400)
    title: str | None = None
    description: str | None = None
    count: int = Field(default=3, ge=1)


class GenerationResponseSchema(BaseModel):
    alternatives: list[str]


class ErrorSchema(BaseModel):
    error: str
