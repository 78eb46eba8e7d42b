"""
Recent log records, filterable by component tag and minimum level.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Query

from ..core.log_buffer import clear_log_entries, get_log_entries

router = APIRouter(prefix="/logs", tags=["logs"])

# Bracketed prefixes used by thumbd loggers, e.g. "[store] wrote ...".
COMPONENT_TAGS = ("thumbnails", "coordinator", "store")


def _at_least(entry: Dict[str, object], min_level: int) -> bool:
    level = logging.getLevelName(str(entry.get("level") or ""))
    return isinstance(level, int) and level >= min_level


@router.get("")
async def get_logs(
    since_id: int | None = Query(None, ge=0),
    limit: int = Query(200, ge=1, le=2000),
    tag: str | None = Query(None, pattern=f"^({'|'.join(COMPONENT_TAGS)})$"),
    level: str = Query("DEBUG", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"),
) -> Dict[str, Any]:
    items, last_id = get_log_entries(since_id, 0)
    min_level = logging.getLevelName(level)
    items = [entry for entry in items if _at_least(entry, min_level)]
    if tag:
        prefix = f"[{tag}]"
        items = [entry for entry in items if str(entry.get("message") or "").startswith(prefix)]
    return {"items": items[-limit:], "last_id": last_id}


@router.delete("")
async def clear_logs() -> Dict[str, Any]:
    return {"cleared": clear_log_entries()}
