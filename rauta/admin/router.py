# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Admin endpoints – user lifecycle management and the audit trail.

Every endpoint in this router is guarded by ``require_admin``.  The role is
read from the caller's stored user row, never from anything the client
sends, so a ``user`` cannot promote themselves.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from rauta.database import get_db
from rauta.core.logger import logger
from rauta.core.security import get_client_ip, require_admin
from rauta.models.user import User
from rauta.models.audit_log import AuditLog
from rauta.auth.schemas import SuccessResponse
from rauta.admin.schemas import (
    AuditLogListResponse,
    AuditLogRow,
    ChangeRoleRequest,
    UserListResponse,
    UserRow,
)

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# GET /admin/users  – list all users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=UserListResponse)
def list_users(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Return every user row (no password data – handled by the schema)."""
    users = db.query(User).order_by(User.created_at, User.id).all()
    return UserListResponse(users=users)


# ---------------------------------------------------------------------------
# PUT /admin/users/{id}/role  – promote or demote a user
# ---------------------------------------------------------------------------


@router.put("/users/{user_id}/role", response_model=UserRow)
def update_role(
    user_id: str,
    body: ChangeRoleRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Change the role of an existing user.  An admin cannot change their own
    role (prevents accidental self-lockout).
    """
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot change your own role",
        )

    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    target.role = body.role
    db.add(AuditLog(actor_id=admin.id, target_user_id=user_id, action="change_role",
                    detail=f"new_role={body.role}", request_ip=get_client_ip(request)))
    db.commit()
    db.refresh(target)
    logger.info("Role of %s set to %s by %s", user_id, body.role, admin.id)

    return target


# ---------------------------------------------------------------------------
# DELETE /admin/users/{id}  – hard delete
# ---------------------------------------------------------------------------


@router.delete("/users/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: str,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Remove the user row and its 2FA credential.  Sessions already issued to
    that user stop resolving because the id no longer exists.

    Guard: an admin cannot delete their own account.
    """
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete yourself",
        )

    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    email = target.email
    db.delete(target)
    db.add(AuditLog(actor_id=admin.id, action="delete_user",
                    detail=f"email={email}", request_ip=get_client_ip(request)))
    db.commit()

    return SuccessResponse(success=True)


# ---------------------------------------------------------------------------
# GET /admin/audit-logs  – audit trail with optional filters
# ---------------------------------------------------------------------------


@router.get("/audit-logs", response_model=AuditLogListResponse)
def list_audit_logs(
    action: str | None = Query(None, description="Filter by exact action name"),
    since: datetime | None = Query(None, description="ISO-8601 start of time window"),
    until: datetime | None = Query(None, description="ISO-8601 end of time window"),
    limit: int = Query(200, ge=1, le=1000),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Return audit log rows newest-first."""
    q = db.query(AuditLog)
    if action:
        q = q.filter(AuditLog.action == action)
    if since:
        q = q.filter(AuditLog.created_at >= since)
    if until:
        q = q.filter(AuditLog.created_at <= until)

    rows = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()

    # Resolve every referenced user in one query
    user_ids = {r.actor_id for r in rows} | {r.target_user_id for r in rows}
    user_ids.discard(None)
    emails = {
        u.id: u.email
        for u in db.query(User).filter(User.id.in_(user_ids)).all()
    } if user_ids else {}

    return AuditLogListResponse(logs=[
        AuditLogRow(
            id=row.id,
            actor_email=emails.get(row.actor_id),
            target_email=emails.get(row.target_user_id),
            action=row.action,
            detail=row.detail,
            request_ip=row.request_ip,
            created_at=row.created_at,
        )
        for row in rows
    ])
