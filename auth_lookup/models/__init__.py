"""
SQLAlchemy ORM models package.

All models are imported here so that Base.metadata knows every table
(create_all in development and tests relies on it) and other modules can
import from auth_lookup.models directly.
"""

from auth_lookup.models.user import User  # noqa: F401
from auth_lookup.models.document_detail import DocumentDetail  # noqa: F401
