import asyncio

from fastapi import APIRouter, Request, status

from ..core.artifact_store import ArtifactStore

router = APIRouter(tags=["health"])


def _store_status(store: ArtifactStore) -> dict:
    online = store.is_available()
    return {
        "status": "online" if online else "offline",
        "path": str(store.root),
    }


@router.get("/health", status_code=status.HTTP_200_OK)
async def health() -> dict:
    return {"status": "ok"}


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
async def detailed_health(request: Request) -> dict:
    """Reachability of the raw and thumbnail directories plus generation load."""
    service = request.app.state.thumbnails
    raw, thumbs = await asyncio.gather(
        asyncio.to_thread(_store_status, service.raw_store),
        asyncio.to_thread(_store_status, service.cache_store),
    )

    # The thumbnail directory is created on first write, so only raw is required.
    system_status = "online" if raw["status"] == "online" else "offline"
    if system_status == "online" and thumbs["status"] != "online" and service.cache_store.root.exists():
        system_status = "degraded"

    return {
        "status": system_status,
        "target_format": service.target_format.value,
        "bounding_box": [service.resolver.max_width, service.resolver.max_height],
        "in_flight": len(service.coordinator),
        "generated": service.generator.generated,
        "services": {
            "raw": raw,
            "thumbnails": thumbs,
        },
    }
