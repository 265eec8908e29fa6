"""Geocoding proxy endpoint."""

import logging

from fastapi import APIRouter, Query

from app.core.errors import GeocodingError, to_http_exception
from app.schemas.places import GeocodeResponse
from app.services import geocoding_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geocode", tags=["geocode"])


@router.get("", response_model=GeocodeResponse)
async def geocode(
    q: str = Query(..., min_length=1, description="Free-text place name"),
    limit: int = Query(5, ge=1, le=50),
) -> GeocodeResponse:
    """Resolve a place name to coordinates (best match first)."""
    try:
        results = await geocoding_client.search(q, limit=limit)
    except GeocodingError as e:
        logger.error(f"Geocoding failed for q={q!r}: {e}")
        raise to_http_exception(e) from e
    return GeocodeResponse(results=results)
