"""ORM models.  Importing the package registers every table on ``Base``."""

from rauta.models.user import User
from rauta.models.two_factor import TwoFactorCredential
from rauta.models.category import Category, ProductTag
from rauta.models.product import Product
from rauta.models.audit_log import AuditLog

__all__ = ["User", "TwoFactorCredential", "Category", "ProductTag", "Product", "AuditLog"]
