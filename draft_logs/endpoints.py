from fastapi import APIRouter, Query, HTTPException
from fastapi.responses import PlainTextResponse
from pathlib import Path
from datetime import datetime
from itertools import islice
import os

router = APIRouter(prefix="/admin/logs", tags=["logs"])

LOG_DIR = Path(os.getenv("DRAFT_LOG_DIR", "logs"))
ALLOWED_LOG_TYPES = {"server", "draft", "reveal", "results"}
LOG_TYPE_PATTERN = "^(server|draft|reveal|results)$"


def get_log_path(log_type: str) -> Path:
    return LOG_DIR / f"{log_type}.log"


def _missing(log_type: str) -> dict:
    return {"lines": [], "error": f"No {log_type} log file", "log_type": log_type}


@router.get("/tail")
async def tail_logs(
    log_type: str = Query("server", pattern=LOG_TYPE_PATTERN),
    lines: int = Query(50, le=500)
):
    """Last N lines of a log file"""
    log_path = get_log_path(log_type)
    if not log_path.exists():
        return _missing(log_type)

    all_lines = log_path.read_text().splitlines(keepends=True)
    return {"lines": all_lines[-lines:], "count": len(all_lines), "log_type": log_type}


@router.get("/head")
async def head_logs(
    log_type: str = Query("server", pattern=LOG_TYPE_PATTERN),
    lines: int = Query(50, le=500)
):
    """First N lines of a log file"""
    log_path = get_log_path(log_type)
    if not log_path.exists():
        return _missing(log_type)

    with open(log_path) as f:
        return {"lines": list(islice(f, lines)), "log_type": log_type}


@router.get("/search")
async def search_logs(
    log_type: str = Query("server", pattern=LOG_TYPE_PATTERN),
    level: str = None,
    contains: str = None,
    limit: int = Query(100, le=1000)
):
    """Filter file log lines by level (INFO/WARN/ERROR/DEBUG) and substring"""
    log_path = get_log_path(log_type)
    if not log_path.exists():
        return _missing(log_type)

    level_marker = f'"level": "{level}"' if level else None
    needle = contains.lower() if contains else None

    def matches(line: str) -> bool:
        if level_marker and level_marker not in line:
            return False
        return not needle or needle in line.lower()

    with open(log_path) as f:
        results = [line.strip() for line in islice((l for l in f if matches(l)), limit)]
    return {"lines": results, "count": len(results), "log_type": log_type}


@router.get("/available")
async def list_available_logs():
    """Log files on disk with size and mtime"""
    if not LOG_DIR.exists():
        return {"logs": []}

    return {"logs": [
        {
            "name": f.stem,
            "size_bytes": f.stat().st_size,
            "modified": datetime.fromtimestamp(f.stat().st_mtime).isoformat()
        }
        for f in sorted(LOG_DIR.glob("*.log"))
    ]}


@router.get("/raw/{log_type}")
async def get_raw_log(log_type: str):
    if log_type not in ALLOWED_LOG_TYPES:
        raise HTTPException(400, f"Invalid log type. Allowed: {sorted(ALLOWED_LOG_TYPES)}")

    log_path = get_log_path(log_type)
    if not log_path.exists():
        raise HTTPException(404, f"No {log_type} log file")

    return PlainTextResponse(log_path.read_text())
