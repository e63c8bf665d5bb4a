# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Two-factor endpoints – status, enrolment, confirmation, disable, and
backup-code recovery.

Lifecycle of the stored credential
----------------------------------
    NOT_CONFIGURED --secret--> PENDING --verify ok--> ENABLED
    ENABLED --disable ok--> NOT_CONFIGURED   (row deleted)

A failed code never changes state.  Generating again while PENDING replaces
the pending secret; while ENABLED it is refused so that a stolen session
cannot silently reset the second factor.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rauta.database import generate_id, get_db
from rauta.core.logger import logger
from rauta.core.security import get_client_ip, get_current_user
from rauta.core.two_factor import (
    TotpProvisioning,
    TwoFactorState,
    consume_backup_code,
    generate_secret,
    two_factor_state,
    verify_totp,
)
from rauta.models.user import User
from rauta.models.two_factor import TwoFactorCredential
from rauta.models.audit_log import AuditLog
from rauta.auth.schemas import SuccessResponse
from rauta.two_factor.schemas import (
    BackupCodeRequest,
    GenerateSecretResponse,
    TokenRequest,
    TwoFactorStatusResponse,
)

router = APIRouter(prefix="/two-factor", tags=["two-factor"])

_INVALID_CODE = "Invalid verification code"
_NOT_ENABLED = "2FA is not enabled"


def _credential_for(user_id: str, db: Session) -> TwoFactorCredential | None:
    return db.query(TwoFactorCredential).filter(TwoFactorCredential.user_id == user_id).first()


def _store_pending(
    user_id: str,
    provisioning: TotpProvisioning,
    db: Session,
    credential: TwoFactorCredential | None,
) -> TwoFactorCredential:
    """
    Write *provisioning* as the user's pending credential.  *credential* is
    the row the caller read; when it was None but a concurrent request has
    since inserted one, the unique ``user_id`` rejects the insert and the
    existing row is overwritten instead (last write wins).
    """
    if credential is None:
        credential = TwoFactorCredential(id=generate_id("2fa"), user_id=user_id)
        db.add(credential)
        _apply_provisioning(credential, provisioning)
        try:
            db.flush()
            return credential
        except IntegrityError:
            db.rollback()
            logger.info("Concurrent 2FA enrolment | user=%s – overwriting", user_id)
            credential = _credential_for(user_id, db)

    _apply_provisioning(credential, provisioning)
    db.flush()
    return credential


def _apply_provisioning(credential: TwoFactorCredential, provisioning: TotpProvisioning) -> None:
    credential.secret = provisioning.secret
    credential.is_enabled = False
    credential.set_backup_codes(provisioning.backup_codes)


# ---------------------------------------------------------------------------
# GET /two-factor/status
# ---------------------------------------------------------------------------


@router.get("/status", response_model=TwoFactorStatusResponse)
def get_status(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    credential = _credential_for(current_user.id, db)
    state = two_factor_state(credential)
    return TwoFactorStatusResponse(
        is_enabled=state is TwoFactorState.ENABLED,
        backup_code_count=len(credential.get_backup_codes()) if credential else 0,
        state=state,
    )


# ---------------------------------------------------------------------------
# POST /two-factor/secret  – start enrolment
# ---------------------------------------------------------------------------


@router.post("/secret", response_model=GenerateSecretResponse)
def create_secret(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Generate a TOTP secret and ten backup codes and store them disabled.
    The secret only becomes active after ``POST /two-factor/verify``.
    """
    credential = _credential_for(current_user.id, db)
    if two_factor_state(credential) is TwoFactorState.ENABLED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="2FA is already enabled. Disable it first.",
        )

    provisioning = generate_secret(current_user.email or current_user.id)

    _store_pending(current_user.id, provisioning, db, credential)
    db.add(AuditLog(actor_id=current_user.id, target_user_id=current_user.id,
                    action="2fa_generate", request_ip=get_client_ip(request)))
    db.commit()

    return GenerateSecretResponse(
        secret=provisioning.secret,
        provisioning_uri=provisioning.provisioning_uri,
        qr_code_url=provisioning.qr_code_url,
        backup_codes=provisioning.backup_codes,
    )


# ---------------------------------------------------------------------------
# POST /two-factor/verify  – confirm enrolment
# ---------------------------------------------------------------------------


@router.post("/verify", response_model=SuccessResponse)
def verify(
    body: TokenRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    credential = _credential_for(current_user.id, db)
    if credential is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="2FA secret not found. Generate one first.",
        )

    if not verify_totp(credential.secret, body.token):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_INVALID_CODE)

    if not credential.is_enabled:
        credential.is_enabled = True
        db.add(AuditLog(actor_id=current_user.id, target_user_id=current_user.id,
                        action="2fa_enable", request_ip=get_client_ip(request)))
        db.commit()
        logger.info("2FA enabled for user %s", current_user.id)

    return SuccessResponse(success=True)


# ---------------------------------------------------------------------------
# POST /two-factor/disable
# ---------------------------------------------------------------------------


@router.post("/disable", response_model=SuccessResponse)
def disable(
    body: TokenRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Turn 2FA off.  Requires a valid current code; drops secret and backup codes."""
    credential = _credential_for(current_user.id, db)
    if two_factor_state(credential) is not TwoFactorState.ENABLED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_NOT_ENABLED)

    if not verify_totp(credential.secret, body.token):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_INVALID_CODE)

    db.delete(credential)
    db.add(AuditLog(actor_id=current_user.id, target_user_id=current_user.id,
                    action="2fa_disable", request_ip=get_client_ip(request)))
    db.commit()
    logger.info("2FA disabled for user %s", current_user.id)

    return SuccessResponse(success=True)


# ---------------------------------------------------------------------------
# POST /two-factor/backup-codes/verify  – public recovery path
# ---------------------------------------------------------------------------


@router.post("/backup-codes/verify", response_model=SuccessResponse)
def verify_backup_code(
    body: BackupCodeRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Accept one backup code in place of a TOTP code.  Each code works once;
    the remaining codes are written back immediately.
    """
    credential = _credential_for(body.user_id, db)
    if two_factor_state(credential) is not TwoFactorState.ENABLED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_NOT_ENABLED)

    check = consume_backup_code(credential.get_backup_codes(), body.code)
    if not check.valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid backup code")

    credential.set_backup_codes(check.remaining_codes)
    db.add(AuditLog(actor_id=None, target_user_id=body.user_id, action="2fa_backup_code",
                    detail=f"remaining={len(check.remaining_codes)}",
                    request_ip=get_client_ip(request)))
    db.commit()

    return SuccessResponse(success=True)
