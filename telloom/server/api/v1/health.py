"""Liveness and version endpoints. Neither touches the database or an upstream API."""

from fastapi import APIRouter

from telloom import __version__

router = APIRouter()

API_SCHEMA_VERSION = "v1"


@router.get("/health", summary="Health Check", response_description="Always ``{\"status\": \"ok\"}`` while serving.")
async def health_check():
    return {"status": "ok"}


@router.get("/version", summary="Get Version")
async def version():
    """Package version and the API schema generation served under ``/api/v1``."""
    return {"version": __version__, "schema_version": API_SCHEMA_VERSION}
