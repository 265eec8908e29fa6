"""Schemas for geocoding and point-of-interest lookups."""

from pydantic import BaseModel


class Poi(BaseModel):
    """Point of interest returned by Overpass (node elements only)."""
    id: int
    lat: float
    lon: float
    tags: dict[str, str] = {}


class GeocodeResult(BaseModel):
    """Normalized Nominatim match. Nominatim sends lat/lon as strings; parsed to float."""
    display_name: str
    lat: float
    lon: float


class GeocodeResponse(BaseModel):
    """Response for geocode endpoint."""
    results: list[GeocodeResult]
