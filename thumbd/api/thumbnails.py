"""
Thumbnail endpoint: GET /<name>.<sourceExt>.<targetFormat>.
"""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from ..core.service import ThumbnailService

router = APIRouter(tags=["thumbnails"])


def get_service(request: Request) -> ThumbnailService:
    return request.app.state.thumbnails


@router.get("/{image_path:path}")
async def get_thumbnail(image_path: str, request: Request) -> Response:
    # NotRecognized / RawAssetMissing / GenerationError are mapped in main.py
    thumb = await get_service(request).get(f"/{image_path}")
    return Response(content=thumb.content, media_type=thumb.media_type)
