"""Password hashing, session cookie signing and bearer access tokens."""
import base64
import hmac
import hashlib
import time
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from decision_journal.core.config import Settings, get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_TOKEN_MAX_AGE = 14 * 24 * 3600  # 14 days


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def _signature(payload: bytes, settings: Settings) -> str:
    return hmac.new(settings.secret_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


# Session token: base64(user_id:timestamp).hmac
def create_session_token(user_id: int, settings: Settings | None = None) -> str:
    """Create a signed session token for the user (for auth cookie)."""
    settings = settings or get_settings()
    payload = f"{user_id}:{int(time.time())}".encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + _signature(payload, settings)


def verify_session_token(token: str, settings: Settings | None = None) -> int | None:
    """Verify signed token and return user_id if valid; None otherwise."""
    settings = settings or get_settings()
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not hmac.compare_digest(_signature(payload, settings), sig):
            return None
        user_id, ts = payload.decode("utf-8").split(":", 1)
        if abs(time.time() - int(ts)) > SESSION_TOKEN_MAX_AGE:
            return None
        return int(user_id)
    except (ValueError, IndexError):
        return None


def create_access_token(
    subject: str | int, extra: dict[str, Any] | None = None, settings: Settings | None = None
) -> str:
    """Bearer token for API clients that do not keep cookies."""
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {"sub": str(subject), "exp": expire, "type": "access"}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> dict | None:
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def user_id_from_access_token(token: str, settings: Settings | None = None) -> int | None:
    claims = decode_access_token(token, settings)
    if not claims or claims.get("type") != "access":
        return None
    try:
        return int(claims["sub"])
    except (KeyError, ValueError):
        return None
