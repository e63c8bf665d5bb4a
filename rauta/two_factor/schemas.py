# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the two-factor endpoints."""

from typing import List

from pydantic import BaseModel

from rauta.core.two_factor import TwoFactorState


# -- Requests --------------------------------------------------------------


class TokenRequest(BaseModel):
    token: str  # 6-digit code from the authenticator app


class BackupCodeRequest(BaseModel):
    user_id: str
    code: str


# -- Responses -------------------------------------------------------------


class TwoFactorStatusResponse(BaseModel):
    is_enabled: bool
    backup_code_count: int
    state: TwoFactorState


class GenerateSecretResponse(BaseModel):
    secret: str
    provisioning_uri: str
    qr_code_url: str          # data:image/png;base64,...
    backup_codes: List[str]   # shown once; the user must store them
