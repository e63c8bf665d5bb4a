# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – login, logout, current-user info, and the admin-only
account creation / password reset.

Security notes
--------------
* Login returns the *same* error message whether the email doesn't exist,
  the account has no password, or the password is wrong.  This prevents
  user-enumeration attacks.
* Sessions are stateless signed cookies.  Logout only tells the browser to
  drop the cookie; a copied token stays valid until it expires.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from rauta.database import generate_id, get_db
from rauta.core.config import settings
from rauta.core.logger import logger
from rauta.core.security import (
    SessionIssuer,
    get_client_ip,
    get_optional_user,
    get_session_issuer,
    hash_password,
    require_admin,
    session_cookie_options,
    verify_and_update_password,
)
from rauta.models.user import User
from rauta.models.audit_log import AuditLog
from rauta.auth.schemas import (
    CreateUserRequest,
    LoginRequest,
    LoginResponse,
    SuccessResponse,
    UpdatePasswordRequest,
    UserInfoResponse,
    UserSummary,
)

router = APIRouter(prefix="/auth", tags=["auth"])

# Generic message used for both "no such email" and "wrong password"
_LOGIN_FAIL = "Invalid email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Check the credentials and set the signed session cookie."""
    user = db.query(User).filter(User.email == normalize_email(body.email)).first()

    # Unified failure path – no information leaks about whether the email exists
    valid, new_hash = verify_and_update_password(
        body.password, user.password_hash if user else None
    )
    if not user or not valid:
        logger.info("Failed login attempt | client=%s", get_client_ip(request))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_LOGIN_FAIL)

    if new_hash:
        user.password_hash = new_hash
        logger.info("Password hash upgraded | user=%s", user.id)

    user.last_signed_in = datetime.now(timezone.utc)
    db.add(AuditLog(actor_id=user.id, target_user_id=user.id, action="user_login",
                    request_ip=get_client_ip(request)))
    db.commit()

    token = issuer.issue(user.id, user.email or "")
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=issuer.ttl_seconds,
        **session_cookie_options(request),
    )
    return LoginResponse(success=True, user=UserSummary.model_validate(user))


# ---------------------------------------------------------------------------
# POST /auth/logout
# ---------------------------------------------------------------------------


@router.post("/logout", response_model=SuccessResponse)
def logout(request: Request, response: Response):
    """Instruct the client to discard the session cookie."""
    opts = session_cookie_options(request)
    response.delete_cookie(
        settings.session_cookie_name,
        path=opts["path"],
        secure=opts["secure"],
        httponly=opts["httponly"],
        samesite=opts["samesite"],
    )
    return SuccessResponse(success=True)


# ---------------------------------------------------------------------------
# GET /auth/me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=Optional[UserInfoResponse])
def me(current_user: Optional[User] = Depends(get_optional_user)):
    """Return the session's user profile (no secrets), or null when anonymous."""
    return current_user


# ---------------------------------------------------------------------------
# POST /auth/users  – admin creates an email/password account
# ---------------------------------------------------------------------------


@router.post("/users", response_model=UserInfoResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: CreateUserRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    email = normalize_email(body.email)

    # Uniqueness check
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = User(
        id=generate_id("user"),
        email=email,
        password_hash=hash_password(body.password),
        name=body.name,
        role=body.role,
        login_method="email",
    )
    db.add(user)
    db.flush()
    db.add(AuditLog(actor_id=admin.id, target_user_id=user.id, action="create_user",
                    detail=f"role={body.role}", request_ip=get_client_ip(request)))
    db.commit()
    db.refresh(user)
    logger.info("User %s created by %s", user.id, admin.id)
    return user


# ---------------------------------------------------------------------------
# PUT /auth/users/{user_id}/password  – admin sets another user's password
# ---------------------------------------------------------------------------


@router.put("/users/{user_id}/password", response_model=SuccessResponse)
def update_password(
    user_id: str,
    body: UpdatePasswordRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    target.password_hash = hash_password(body.password)
    db.add(AuditLog(actor_id=admin.id, target_user_id=user_id, action="update_password",
                    request_ip=get_client_ip(request)))
    db.commit()

    return SuccessResponse(success=True)
