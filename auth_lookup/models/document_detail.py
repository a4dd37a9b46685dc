"""
DocumentDetail model — read-only reference data about identity documents.

Only the lookup key is mapped here. Real deployments add whatever columns
describe a document (requirements, validity, issuing authority, ...); the
lookup service selects every column of the row and returns it verbatim, so
unmapped columns still reach the client.

(country, document_type) is indexed but deliberately NOT unique: the schema
does not guarantee one row per pair, and when several rows match the lookup
returns the first one the database yields.
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from auth_lookup.database import Base


class DocumentDetail(Base):
    __tablename__ = "document_details"
    __table_args__ = (
        Index("ix_document_details_country_type", "country", "document_type"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    country: Mapped[str] = mapped_column(String(100), nullable=False)

    document_type: Mapped[str] = mapped_column(String(100), nullable=False)
