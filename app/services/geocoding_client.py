"""Nominatim client for free-text place lookup."""

import logging
import traceback
from typing import Optional

import httpx

from app.core.config import settings
from app.core.errors import GeocodingError
from app.schemas.places import GeocodeResult

logger = logging.getLogger(__name__)


async def _get(client: httpx.AsyncClient, params: dict) -> list:
    try:
        response = await client.get(
            settings.nominatim_url,
            params=params,
            headers={"User-Agent": settings.http_user_agent},
        )
    except httpx.TimeoutException as e:
        logger.error(f"Nominatim timeout\nTraceback:\n{traceback.format_exc()}")
        raise GeocodingError("request timed out", timeout=True) from e
    except httpx.RequestError as e:
        logger.error(f"Nominatim request error: {e}\nTraceback:\n{traceback.format_exc()}")
        raise GeocodingError(f"request failed: {e}") from e

    body = response.text
    truncated_body = body[:500] if body else "(empty)"
    logger.info(f"Nominatim response: status={response.status_code}")

    if response.status_code != 200:
        raise GeocodingError(
            f"HTTP {response.status_code}",
            status_code=response.status_code,
            body_preview=truncated_body,
        )

    try:
        data = response.json()
    except ValueError as e:
        raise GeocodingError(
            f"invalid JSON: {e}",
            status_code=response.status_code,
            body_preview=truncated_body,
        ) from e

    if not isinstance(data, list):
        raise GeocodingError(
            "expected a JSON array",
            status_code=response.status_code,
            body_preview=truncated_body,
        )
    return data


async def search(
    query: str,
    limit: int = 5,
    client: Optional[httpx.AsyncClient] = None,
) -> list[GeocodeResult]:
    """
    Look up a free-text place name.

    Returns matches best-first; an empty list when nothing matched.
    Raises GeocodingError when the service could not be queried.
    """
    params = {"format": "json", "q": query, "limit": limit}
    logger.info(f"Geocoding query={query!r}")

    if client is not None:
        data = await _get(client, params)
    else:
        async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as owned:
            data = await _get(owned, params)

    return parse_results(data)


def parse_results(data: list) -> list[GeocodeResult]:
    """Normalize Nominatim items; entries without coordinates are skipped."""
    results = []
    for item in data:
        try:
            if item.get("lat") is None or item.get("lon") is None:
                continue
            # Nominatim returns coordinates as strings
            results.append(GeocodeResult(
                display_name=item.get("display_name", ""),
                lat=float(item["lat"]),
                lon=float(item["lon"]),
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Nominatim malformed result: {str(item)[:200]}")
            raise GeocodingError(
                f"malformed result: {e}",
                status_code=200,
                body_preview=str(item)[:500],
            ) from e
    return results
