import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from passlib.context import CryptContext

from photoshare.utils.config import settings
from photoshare.utils.errors import AuthError


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# The raw signed token is sent as the Authorization header value
token_header = APIKeyHeader(name="Authorization", auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def issue_token(username: str, now: Optional[datetime] = None) -> str:
    """Sign a token carrying ``username`` that expires TOKEN_TTL_HOURS after ``now``."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "username": username,
        "exp": now + timedelta(hours=settings.TOKEN_TTL_HOURS),
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def validate_token(token: str, now: Optional[datetime] = None) -> str:
    """Return the username embedded in ``token``.

    Raises AuthError when the token cannot be decoded, the signature does not
    match, a claim is missing, or ``now`` is past the expiry.
    """
    now = now or datetime.now(timezone.utc)
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            # iat is checked against the wall clock by PyJWT; expiry is checked below against `now`
            options={"require": ["exp", "username"], "verify_exp": False, "verify_iat": False},
        )
    except jwt.PyJWTError as exc:
        logger.info("Rejected token: %s", exc)
        raise AuthError("invalid token")

    if now.timestamp() > payload["exp"]:
        logger.info("Rejected expired token for %s", payload["username"])
        raise AuthError("invalid token")

    username = payload["username"]
    if not isinstance(username, str) or not username:
        raise AuthError("invalid token")
    return username


def _strip_scheme(raw: str) -> str:
    scheme, _, rest = raw.partition(" ")
    if rest and scheme.lower() == "bearer":
        return rest.strip()
    return raw.strip()


def require_token(request: Request, authorization: Optional[str] = Depends(token_header)) -> str:
    """Gate a route on a valid token and expose the caller as request.state.username."""
    if not authorization or not authorization.strip():
        raise AuthError("token not found")

    username = validate_token(_strip_scheme(authorization))
    request.state.username = username
    return username
