"""
Health Check Endpoints

- /health       - Liveness (app is running)
- /health/ready - Readiness (upload storage writable, user directory reachable)
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Any, Dict
import asyncio
import time

from staffhub.core.config import settings
from staffhub.core.exceptions import StaffHubError
from staffhub.core.logging_config import logger
from staffhub.services.storage_service import UploadStorage, get_upload_storage
from staffhub.services.user_directory import UserDirectory, get_user_directory


router = APIRouter(prefix="/health", tags=["Health"])


async def check_storage(storage: UploadStorage) -> Dict[str, Any]:
    """Check that the upload directory exists and accepts writes"""
    upload_dir = storage.upload_dir
    probe = upload_dir / ".health_check"
    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
        probe.write_text("ok")
        probe.unlink()
        return {"status": "healthy", "path": str(upload_dir)}
    except OSError as e:
        logger.error(f"[HealthCheck] Upload storage check failed: {e}")
        return {"status": "unhealthy", "path": str(upload_dir), "error": str(e)}


async def check_user_directory(directory: UserDirectory) -> Dict[str, Any]:
    start = time.time()
    try:
        users = await directory.list_users()
        latency = (time.time() - start) * 1000
        return {"status": "healthy", "latency_ms": round(latency, 2), "users": len(users)}
    except StaffHubError as e:
        latency = (time.time() - start) * 1000
        logger.warning(f"[HealthCheck] User directory check failed: {e}")
        return {"status": "unhealthy", "latency_ms": round(latency, 2), "error": str(e)}


@router.get("")
async def health_check():
    """Simple liveness check"""
    return {"status": "OK", "message": "Server is running"}


@router.get("/ready")
async def readiness_check(
    storage: UploadStorage = Depends(get_upload_storage),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    Readiness probe.

    Returns 200 only when uploads can be stored. The user directory is
    reported for diagnostics; an outage there degrades auth but the service
    still answers.
    """
    storage_check, directory_check = await asyncio.gather(
        check_storage(storage),
        check_user_directory(directory),
    )

    is_ready = storage_check["status"] == "healthy"
    response = {
        "status": "ready" if is_ready else "not_ready",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat(),
        "checks": {
            "storage": storage_check,
            "user_directory": directory_check,
        },
    }

    if not is_ready:
        logger.warning(f"[HealthCheck] Readiness check failed: {response}")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=response)

    return response
