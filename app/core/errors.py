"""Exceptions raised by upstream (geocoding / POI) service clients."""

from typing import Optional

from fastapi import HTTPException


class UpstreamServiceError(Exception):
    """An upstream HTTP service failed; the original exception is chained as __cause__."""

    def __init__(
        self,
        service: str,
        message: str,
        status_code: Optional[int] = None,
        body_preview: Optional[str] = None,
        timeout: bool = False,
    ):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message
        self.status_code = status_code
        self.body_preview = body_preview
        self.timeout = timeout


class PoiServiceError(UpstreamServiceError):
    """Point-of-interest retrieval (Overpass) failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__("overpass", message, **kwargs)


class GeocodingError(UpstreamServiceError):
    """Free-text place lookup (Nominatim) failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__("nominatim", message, **kwargs)


def to_http_exception(exc: UpstreamServiceError) -> HTTPException:
    """504 for upstream timeouts, 502 for any other upstream failure."""
    if exc.timeout:
        return HTTPException(
            status_code=504,
            detail={"error": f"{exc.service}_timeout", "message": exc.message},
        )
    return HTTPException(
        status_code=502,
        detail={
            "error": f"{exc.service}_error",
            "message": exc.message,
            "status": exc.status_code,
            "body": exc.body_preview,
        },
    )
