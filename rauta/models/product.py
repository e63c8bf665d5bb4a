# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Product ORM model."""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func

from rauta.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # Price in cents
    price = Column(Integer, nullable=False)
    category_id = Column(String(64), nullable=False, index=True)
    tag_id = Column(String(64), nullable=True, index=True)
    image_url = Column(Text, nullable=True)
    # Message prefilled in the customer's WhatsApp chat
    custom_message = Column(Text, nullable=True)
    # Soft-delete flag; inactive products are hidden from the catalog
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
