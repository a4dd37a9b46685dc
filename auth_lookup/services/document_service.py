"""
Document service — lookup of reference document details.

The query selects every column so that whatever fields a deployment keeps in
document_details come back unchanged. If several rows share the same
(country, document_type) the first one returned by the database is used.
"""

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth_lookup.exceptions import InternalError, NotFoundError
from auth_lookup.schemas.document import DocumentRecord

logger = logging.getLogger(__name__)

DOCUMENT_QUERY = text(
    "SELECT * FROM document_details "
    "WHERE country = :country AND document_type = :document_type"
)


async def get_document(
    db: AsyncSession,
    country: str,
    document_type: str,
) -> DocumentRecord:
    """
    Fetch the document record for ``(country, document_type)``.

    Raises:
        NotFoundError: no row matches.
        InternalError: the database call failed.
    """
    try:
        result = await db.execute(
            DOCUMENT_QUERY,
            {"country": country, "document_type": document_type},
        )
        row = result.mappings().first()
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("Error fetching document details")
        raise InternalError("Internal server error fetching document details.") from exc

    if row is None:
        raise NotFoundError("Document not found for the specified country and type.")

    return dict(row)
