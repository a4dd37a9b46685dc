"""
Documents router — read-only lookup of document details.

Endpoints:
  GET /documents/{country}/{document_type}  — Fetch one document record
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth_lookup.database import get_db
from auth_lookup.schemas.document import DocumentRecord
from auth_lookup.services import document_service

router = APIRouter()


@router.get(
    "/{country}/{document_type}",
    response_model=DocumentRecord,
    summary="Get document details for a country and document type",
)
async def get_document(
    country: str,
    document_type: str,
    db: AsyncSession = Depends(get_db),
):
    """Return the stored record for this country and document type, or 404."""
    return await document_service.get_document(
        db=db,
        country=country,
        document_type=document_type,
    )
