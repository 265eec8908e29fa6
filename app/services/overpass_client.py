"""Overpass API client: points of interest around a location."""

import logging
import traceback
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.errors import PoiServiceError
from app.schemas.places import Poi

logger = logging.getLogger(__name__)

BODY_PREVIEW_CHARS = 500


def build_around_query(lat: float, lon: float, around_m: float, amenity: str = "restaurant") -> str:
    """Overpass QL for amenity nodes within around_m meters of (lat, lon)."""
    return (
        "[out:json][timeout:25];\n"
        "(\n"
        f'  node["amenity"="{amenity}"](around:{around_m},{lat},{lon});\n'
        ");\n"
        "out body;\n"
    )


def parse_elements(data: dict[str, Any]) -> list[Poi]:
    """Keep node elements that carry coordinates. Malformed elements raise PoiServiceError."""
    elements = data.get("elements") or []
    if not isinstance(elements, list):
        raise PoiServiceError("malformed response: elements is not a list", status_code=200)

    pois = []
    for e in elements:
        try:
            if e.get("type") != "node" or e.get("lat") is None or e.get("lon") is None:
                continue
            pois.append(Poi(id=e["id"], lat=e["lat"], lon=e["lon"], tags=e.get("tags") or {}))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            # pydantic's ValidationError is a ValueError
            raise PoiServiceError(
                f"malformed element: {exc}",
                status_code=200,
                body_preview=str(e)[:BODY_PREVIEW_CHARS],
            ) from exc
    return pois


async def _post_query(client: httpx.AsyncClient, query: str) -> dict[str, Any]:
    """POST an Overpass QL query. Returns parsed JSON or raises PoiServiceError."""
    logger.info(f"Calling Overpass: url={settings.overpass_url}")

    try:
        response = await client.post(
            settings.overpass_url,
            data={"data": query},
            headers={
                "Accept": "application/json",
                "User-Agent": settings.http_user_agent,
            },
        )
    except httpx.TimeoutException as e:
        logger.error(f"Overpass timeout\nTraceback:\n{traceback.format_exc()}")
        raise PoiServiceError("request timed out", timeout=True) from e
    except httpx.RequestError as e:
        logger.error(f"Overpass request error: {e}\nTraceback:\n{traceback.format_exc()}")
        raise PoiServiceError(f"request failed: {e}") from e

    body = response.text
    truncated_body = body[:BODY_PREVIEW_CHARS] if body else "(empty)"
    logger.info(f"Overpass response: status={response.status_code}, body_preview={truncated_body[:200]}")

    # Overpass answers rate limiting and overload with HTML/XML pages
    if response.status_code != 200:
        raise PoiServiceError(
            f"HTTP {response.status_code}",
            status_code=response.status_code,
            body_preview=truncated_body,
        )

    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        raise PoiServiceError(
            f"unexpected content-type={content_type}",
            status_code=response.status_code,
            body_preview=truncated_body,
        )

    try:
        data = response.json()
    except ValueError as e:
        raise PoiServiceError(
            f"invalid JSON: {e}",
            status_code=response.status_code,
            body_preview=truncated_body,
        ) from e

    if not isinstance(data, dict):
        raise PoiServiceError(
            "expected a JSON object",
            status_code=response.status_code,
            body_preview=truncated_body,
        )
    return data


async def fetch_pois(
    lat: float,
    lon: float,
    around_m: float,
    amenity: str = "restaurant",
    client: Optional[httpx.AsyncClient] = None,
) -> list[Poi]:
    """
    Fetch amenity nodes within around_m meters of (lat, lon).

    Args:
        lat, lon: Search center in degrees
        around_m: Search radius in meters
        amenity: OSM amenity tag value (e.g. "restaurant", "cafe")
        client: Optional shared httpx client; a short-lived one is created otherwise

    Raises:
        PoiServiceError: on any transport, HTTP or decoding failure. An empty
        list always means the service answered with no matches.
    """
    query = build_around_query(lat, lon, around_m, amenity)

    if client is not None:
        data = await _post_query(client, query)
    else:
        async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as owned:
            data = await _post_query(owned, query)

    pois = parse_elements(data)
    logger.info(f"Overpass returned {len(pois)} {amenity} nodes around {lat},{lon} r={around_m}m")
    return pois
