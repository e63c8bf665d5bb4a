# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Central security module.  Password and session primitives and the auth
guards live here.  TOTP / backup codes live in :mod:`rauta.core.two_factor`.

Responsibilities
----------------
1. Password hashing / verification          (passlib pbkdf2_sha256, bcrypt legacy)
2. Session tokens                           (PyJWT / HS256, cookie borne)
3. FastAPI dependency guards                (get_current_user, require_admin)
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

import jwt as _jwt        # PyJWT
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from rauta.core.config import ONE_YEAR_SECONDS, settings
from rauta.core.logger import logger
from rauta.database import get_db
from rauta.models.user import User

# ---------------------------------------------------------------------------
# 1.  Password hashing
# ---------------------------------------------------------------------------
# New hashes are pbkdf2_sha256.  bcrypt ($2a$/$2b$) hashes carried over from
# earlier deployments still verify and are marked deprecated, so a successful
# login hands back a pbkdf2 replacement.  The salt is random per call and
# embedded in the hash string.
# ---------------------------------------------------------------------------

_pwd_context = CryptContext(
    schemes=["pbkdf2_sha256", "bcrypt"],
    deprecated=["bcrypt"],
    pbkdf2_sha256__rounds=settings.password_hash_rounds,
)


def hash_password(plain: str) -> str:
    """
    Hash a plaintext password with PBKDF2-SHA256.

    Returns the full passlib hash string, e.g. ``"$pbkdf2-sha256$600000$..."``.
    The iteration count comes from ``settings.password_hash_rounds``.
    """
    return _pwd_context.hash(plain)


def verify_and_update_password(
    plain: str, stored_hash: Optional[str]
) -> Tuple[bool, Optional[str]]:
    """
    Verify *plain* against *stored_hash* (pbkdf2_sha256 or bcrypt).

    Returns ``(valid, new_hash)``; ``new_hash`` is set only when the password
    matched and the stored hash is deprecated or uses other rounds.  Never
    raises: a missing or unrecognisable hash is a failed check.
    """
    if not stored_hash:
        return False, None
    try:
        return _pwd_context.verify_and_update(plain, stored_hash)
    except (ValueError, TypeError):
        logger.warning("Stored password hash is malformed")
        return False, None


def verify_password(plain: str, stored_hash: Optional[str]) -> bool:
    """Constant-time check of *plain* against a stored hash."""
    valid, _ = verify_and_update_password(plain, stored_hash)
    return valid


# ---------------------------------------------------------------------------
# 2.  Session tokens
# ---------------------------------------------------------------------------


class SessionIssuer:
    """
    Mints and verifies self-contained session tokens.

    The payload is exactly ``{"userId", "email"}`` plus an ``exp`` claim.
    Nothing is stored server side, so a token stays valid until it expires
    even after logout.
    """

    algorithm = "HS256"

    def __init__(self, secret: str, ttl_seconds: int = ONE_YEAR_SECONDS):
        if not secret:
            raise ValueError("Session signing secret must not be empty")
        self._secret = secret
        self.ttl_seconds = ttl_seconds

    def issue(
        self,
        user_id: str,
        email: str,
        ttl_seconds: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> str:
        issued_at = int((now or datetime.now(timezone.utc)).timestamp())
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        payload = {"userId": user_id, "email": email, "exp": issued_at + ttl}
        return _jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Optional[dict]:
        """
        Return ``{"userId": ..., "email": ...}`` or None when the token is
        missing, malformed, signed with another key, expired, or lacks a
        non-empty string in either field.
        """
        if not token:
            logger.warning("Missing session cookie")
            return None

        try:
            payload = _jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except _jwt.InvalidTokenError as exc:
            logger.warning("Session verification failed: %s", exc)
            return None

        user_id = payload.get("userId")
        email = payload.get("email")
        if not _is_non_empty_str(user_id) or not _is_non_empty_str(email):
            logger.warning("Session payload missing required fields")
            return None

        return {"userId": user_id, "email": email}


def _is_non_empty_str(value) -> bool:
    return isinstance(value, str) and len(value) > 0


def get_session_issuer() -> SessionIssuer:
    """
    Dependency: the issuer used by every endpoint.  Tests override this
    with ``app.dependency_overrides`` to sign with their own secret.
    """
    return SessionIssuer(settings.cookie_secret, settings.session_ttl_seconds)


def session_cookie_options(request: Request) -> dict:
    """
    Cookie attributes for the session cookie, keyed off the request.
    ``secure`` is set for https requests (directly or behind a TLS-terminating
    proxy) or when forced by configuration.
    """
    forwarded_proto = request.headers.get("X-Forwarded-Proto", "")
    is_https = (
        request.url.scheme == "https"
        or forwarded_proto.split(",")[0].strip().lower() == "https"
    )
    return {
        "path": "/",
        "httponly": True,
        "samesite": "lax",
        "secure": is_https or settings.cookie_secure,
    }


# ---------------------------------------------------------------------------
# 3.  FastAPI dependency guards
# ---------------------------------------------------------------------------

_FORBIDDEN_LOGIN = "Please login"


def _resolve_user(request: Request, db: Session, issuer: SessionIssuer) -> Optional[User]:
    session = issuer.verify(request.cookies.get(settings.session_cookie_name))
    if session is None:
        return None
    return db.query(User).filter(User.id == session["userId"]).first()


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> User:
    """
    Dependency: verify the session cookie and load the User row.

    Raises 403 if the cookie is absent or invalid, or the user no longer
    exists.
    """
    user = _resolve_user(request, db, issuer)
    if user is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=_FORBIDDEN_LOGIN)
    return user


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Optional[User]:
    """Like :func:`get_current_user` but yields None instead of raising."""
    return _resolve_user(request, db, issuer)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Dependency: wraps :func:`get_current_user` and additionally asserts
    ``role == 'admin'`` on the stored user row.  Raises 403 otherwise.
    """
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


# -- IP Address extraction ----------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from the request.
    Checks X-Forwarded-For header first (for proxies), then falls back to client host.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
