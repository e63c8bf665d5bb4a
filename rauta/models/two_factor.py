# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""TwoFactorCredential ORM model – one TOTP secret per user."""

import json

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from rauta.database import Base


class TwoFactorCredential(Base):
    __tablename__ = "two_factor_auth"

    id = Column(String(64), primary_key=True)
    user_id = Column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    # base32 TOTP seed
    secret = Column(String(255), nullable=False)
    # False while the secret is pending its first successful verification
    is_enabled = Column(Boolean, nullable=False, default=False)
    # JSON array of upper-case one-time codes, e.g. '["K3J9X0A2", ...]'
    backup_codes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="two_factor")

    def get_backup_codes(self) -> list[str]:
        if not self.backup_codes:
            return []
        return json.loads(self.backup_codes)

    def set_backup_codes(self, codes: list[str]) -> None:
        self.backup_codes = json.dumps(list(codes))
