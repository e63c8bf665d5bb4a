# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
TOTP and backup-code primitives for account two-factor authentication.

Responsibilities
----------------
1. Secret provisioning: base32 seed, otpauth:// URI and its QR image   (pyotp, qrcode)
2. TOTP verification with a ±2 step (±60 s) clock-skew window
3. One-time backup codes: generation and single-use consumption
4. The three-state lifecycle of a stored credential
"""

import base64
import enum
import io
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

import pyotp
import qrcode

from rauta.core.config import settings
from rauta.core.logger import logger

# 32 base32 characters = 160-bit seed, the RFC 4226 recommended length
SECRET_LENGTH = 32

# Steps accepted on either side of the current 30-second step
VALID_WINDOW = 2

BACKUP_CODE_COUNT = 10
BACKUP_CODE_LENGTH = 8
_BACKUP_CODE_ALPHABET = string.digits + string.ascii_uppercase


class TwoFactorState(str, enum.Enum):
    NOT_CONFIGURED = "not_configured"
    # Secret stored, waiting for the first successful code
    PENDING = "pending"
    ENABLED = "enabled"


def two_factor_state(credential) -> TwoFactorState:
    """Map a stored ``TwoFactorCredential`` (or None) to its lifecycle state."""
    if credential is None:
        return TwoFactorState.NOT_CONFIGURED
    if credential.is_enabled:
        return TwoFactorState.ENABLED
    return TwoFactorState.PENDING


# ---------------------------------------------------------------------------
# 1.  Provisioning
# ---------------------------------------------------------------------------


@dataclass
class TotpProvisioning:
    secret: str
    provisioning_uri: str
    qr_code_url: str                 # data:image/png;base64,...
    backup_codes: list = field(default_factory=list)


def render_qr_data_url(uri: str) -> str:
    """Render *uri* as a PNG QR code and return it as a data URL."""
    buf = io.BytesIO()
    qrcode.make(uri).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def generate_secret(label: str, issuer: Optional[str] = None) -> TotpProvisioning:
    """
    Create a fresh TOTP seed for *label* (normally the account email) plus a
    new batch of backup codes.  Nothing is persisted here.
    """
    issuer = issuer or settings.totp_issuer
    secret = pyotp.random_base32(length=SECRET_LENGTH)
    uri = pyotp.TOTP(secret).provisioning_uri(name=label, issuer_name=issuer)
    return TotpProvisioning(
        secret=secret,
        provisioning_uri=uri,
        qr_code_url=render_qr_data_url(uri),
        backup_codes=generate_backup_codes(),
    )


# ---------------------------------------------------------------------------
# 2.  Verification
# ---------------------------------------------------------------------------


def verify_totp(
    secret: str,
    code: str,
    for_time: Optional[datetime] = None,
    valid_window: int = VALID_WINDOW,
) -> bool:
    """
    True if *code* matches the TOTP for the current step or any step within
    *valid_window* of it.  A malformed secret or code is a failed check,
    never an exception.
    """
    if not secret or not code:
        return False
    code = code.strip()
    if len(code) != 6 or not code.isdigit():
        return False
    try:
        return pyotp.TOTP(secret).verify(code, for_time=for_time, valid_window=valid_window)
    except (ValueError, TypeError) as exc:
        logger.warning("TOTP verification error: %s", exc)
        return False


# ---------------------------------------------------------------------------
# 3.  Backup codes
# ---------------------------------------------------------------------------


def generate_backup_codes(count: int = BACKUP_CODE_COUNT) -> list[str]:
    """Return *count* distinct upper-case alphanumeric codes."""
    codes: list[str] = []
    while len(codes) < count:
        code = "".join(secrets.choice(_BACKUP_CODE_ALPHABET) for _ in range(BACKUP_CODE_LENGTH))
        if code not in codes:
            codes.append(code)
    return codes


@dataclass
class BackupCodeCheck:
    valid: bool
    remaining_codes: list


def consume_backup_code(codes: Sequence[str], submitted: str) -> BackupCodeCheck:
    """
    Match *submitted* case-insensitively against *codes*.  On a hit the
    returned list has exactly that one entry removed; otherwise the original
    codes come back unchanged.
    """
    candidate = (submitted or "").strip().upper()
    remaining = list(codes)
    if not candidate or candidate not in remaining:
        return BackupCodeCheck(valid=False, remaining_codes=remaining)
    remaining.remove(candidate)
    return BackupCodeCheck(valid=True, remaining_codes=remaining)
