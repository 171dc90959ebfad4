"""JWT verification for user-facing endpoints."""

from fastapi import Cookie, HTTPException, Header
from jose import JWTError, jwt

from fatfit.config import settings


async def verify_token(
    token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> dict:
    """Validate a JWT taken from the `token` cookie or Authorization: Bearer.

    If JWT_SECRET is not set, passes through (no auth) with empty claims.
    If set, requires a token signed with it or raises 401.
    """
    if settings.jwt_secret is None:
        return {}

    raw = token
    if raw is None and authorization and authorization.startswith("Bearer "):
        raw = authorization[7:].strip()

    if not raw:
        raise HTTPException(status_code=401, detail="JWT missing")

    try:
        return jwt.decode(raw, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid JWT")
