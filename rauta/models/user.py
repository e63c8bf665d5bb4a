# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""User ORM model."""

from sqlalchemy import Column, String, Text, Enum, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from rauta.database import Base


class User(Base):
    __tablename__ = "users"

    # Opaque string id, e.g. "user_1760870400000_k3j9x0a2b1"
    id = Column(String(64), primary_key=True)
    name = Column(Text, nullable=True)
    email = Column(String(320), unique=True, nullable=True, index=True)
    # NULL for accounts authenticated elsewhere; such accounts cannot log in
    # with a password.
    password_hash = Column(String(255), nullable=True)
    login_method = Column(String(64), nullable=True)
    role = Column(Enum("user", "admin", name="user_role"), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_signed_in = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    # One-to-one; removed together with the user on hard delete.
    two_factor = relationship(
        "TwoFactorCredential",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
