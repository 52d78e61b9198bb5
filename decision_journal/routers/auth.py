"""Auth routes: register, login, logout, me. Signed cookie or bearer token."""
from __future__ import annotations

import re
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from decision_journal.core.config import Settings
from decision_journal.core.errors import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    InvalidRegistration,
    NotAuthenticated,
)
from decision_journal.core.security import (
    create_access_token,
    create_session_token,
    hash_password,
    user_id_from_access_token,
    verify_password,
    verify_session_token,
)
from decision_journal.db.session import get_db
from decision_journal.models.user import User
from decision_journal.schemas.auth import CredentialsSchema, TokenOutSchema, UserOutSchema

router = APIRouter(prefix="/auth", tags=["auth"])

# Simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt hard limit


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


# ---------- dependencies ----------

async def get_current_user_optional(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> User | None:
    """Return current user from the auth cookie or a bearer token; else None."""
    user_id = None

    cookie = request.cookies.get(settings.auth_cookie_name)
    if cookie:
        user_id = verify_session_token(cookie, settings)
    if user_id is None:
        token = _bearer_token(request)
        if token:
            user_id = user_id_from_access_token(token, settings)
    if user_id is None:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_current_user(
    current_user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    if current_user is None:
        raise NotAuthenticated()
    return current_user


def _login_response(response: Response, user: User, settings: Settings) -> TokenOutSchema:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=create_session_token(user.id, settings),
        max_age=settings.auth_cookie_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return TokenOutSchema(
        access_token=create_access_token(user.id, settings=settings),
        user=UserOutSchema.model_validate(user),
    )


# ---------- routes ----------

@router.post("/register", response_model=TokenOutSchema, status_code=201)
async def register(
    body: CredentialsSchema,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Create user and log in."""
    email = _normalize_email(body.email)
    password = body.password or ""

    if not email or not EMAIL_RE.match(email):
        raise InvalidRegistration("Email inválido")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidRegistration(f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidRegistration("Senha longa demais")

    existing = await db.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none():
        raise EmailAlreadyRegistered()

    user = User(email=email, hashed_password=hash_password(password))
    db.add(user)
    await db.commit()
    await db.refresh(user)

    return _login_response(response, user, settings)


@router.post("/login", response_model=TokenOutSchema)
async def login(
    body: CredentialsSchema,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Authenticate, set auth cookie and return a bearer token."""
    result = await db.execute(select(User).where(User.email == _normalize_email(body.email)))
    user = result.scalar_one_or_none()
    if not user or not verify_password(body.password, user.hashed_password):
        raise InvalidCredentials()
    return _login_response(response, user, settings)


@router.post("/logout", status_code=204, response_class=Response)
async def logout(settings: Annotated[Settings, Depends(get_app_settings)]):
    """Clear auth cookie. Bearer tokens simply expire."""
    response = Response(status_code=204)
    # path must match the one used in set_cookie()
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return response


@router.get("/me", response_model=UserOutSchema)
async def me(current_user: Annotated[User, Depends(get_current_user)]):
    return current_user
