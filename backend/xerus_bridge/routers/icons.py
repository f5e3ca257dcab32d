"""
Tool icon proxy.

Serves ``/api/tools/icons/{icon_name}`` by fetching the file from the backend
with the service credentials and returning it with a content type inferred
from the extension and a 24 hour cache header. Upstream failures become a
generic 404; anything unexpected becomes a generic 500. Details are only
logged.
"""

import logging
from collections.abc import AsyncGenerator
from pathlib import PurePosixPath

import httpx
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from ..config import settings
from ..config.constants import DEFAULT_ICON_CONTENT_TYPE, ICON_CONTENT_TYPES, KNOWN_ICON_NAMES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools/icons", tags=["tools"])


def content_type_for(icon_name: str) -> str:
    """Map an icon file name to its image content type (PNG when unknown)."""
    suffix = PurePosixPath(icon_name).suffix.lower()
    return ICON_CONTENT_TYPES.get(suffix, DEFAULT_ICON_CONTENT_TYPE)


def upstream_icon_url(icon_name: str) -> str:
    return f"{settings.backend_api_url}/tools/icons/{icon_name}"


def generate_static_params() -> list[dict[str, str]]:
    """Icon names that must be resolvable ahead of time for static export."""
    return [{"icon_name": name} for name in KNOWN_ICON_NAMES]


async def get_icon_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Dependency providing the client used for upstream icon fetches."""
    async with httpx.AsyncClient(timeout=settings.backend_timeout) as client:
        yield client


@router.get("/{icon_name}")
async def get_icon(icon_name: str, client: httpx.AsyncClient = Depends(get_icon_http_client)):
    try:
        upstream = await client.get(
            upstream_icon_url(icon_name),
            headers={
                "Authorization": f"Bearer {settings.backend_token}",
                "X-User-ID": settings.admin_user_id,
            },
        )
        if not upstream.is_success:
            logger.warning(f"Icon {icon_name} not found upstream: {upstream.status_code}")
            return JSONResponse(status_code=404, content={"error": "Icon not found"})

        return Response(
            content=upstream.content,
            media_type=content_type_for(icon_name),
            headers={"Cache-Control": f"public, max-age={settings.icon_cache_max_age}"},
        )
    except Exception as e:
        logger.error(f"Error proxying icon {icon_name}: {type(e).__name__}: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to load icon"})
