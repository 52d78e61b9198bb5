"""Pydantic schemas for register / login."""
from pydantic import BaseModel


class CredentialsSchema(BaseModel):
    email: str
    password: str


class UserOutSchema(BaseModel):
    id: int
    email: str

    class Config:
        from_attributes = True


class TokenOutSchema(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOutSchema
