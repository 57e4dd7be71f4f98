"""
Health and readiness endpoints.

- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (is the remote store reachable?)

No authentication required.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from symptom_svc.core.dependencies import get_symptom_service
from symptom_svc.schemas import ConnectionStatus
from symptom_svc.services import SymptomService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class ReadyResponse(BaseModel):
    status: str  # "ready" or "degraded"
    connection_status: ConnectionStatus
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    """Returns immediately without touching the remote store."""
    return HealthResponse(status="healthy", version=VERSION, timestamp=_now())


@router.get("/ready", response_model=ReadyResponse, summary="Readiness probe")
async def readiness_check(
    response: Response,
    service: SymptomService = Depends(get_symptom_service)
) -> ReadyResponse:
    """
    Probe the remote store.

    The service still answers from the local cache while the store is down,
    so an unreachable store reports "degraded" with a 503. Session state
    (connection_status, error) is not changed by this check.
    """
    connection_status = await service.check_store()
    if connection_status == ConnectionStatus.connected:
        status = "ready"
    else:
        status = "degraded"
        response.status_code = 503
    return ReadyResponse(status=status, connection_status=connection_status, timestamp=_now())


@router.get("/", summary="API root")
async def root() -> Dict[str, Any]:
    return {
        "service": "Symptom Tracker API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
    }
