"""Liveness and readiness probes."""

from fastapi import APIRouter, Depends
from starlette.responses import PlainTextResponse

from bookstore.api.http.deps import get_health_checker
from bookstore.api.http.responses import status_text_response
from bookstore.core.services import ConnectionChecker

router = APIRouter(tags=["health"])


@router.get("/healthz", response_class=PlainTextResponse)
def health(checker: ConnectionChecker = Depends(get_health_checker)) -> PlainTextResponse:
    """Liveness probe: 200 when the database answers ``SELECT 1``."""
    checker.check_connection()
    return status_text_response(200)


@router.get("/readyz", response_class=PlainTextResponse)
def readiness(
    checker: ConnectionChecker = Depends(get_health_checker),
) -> PlainTextResponse:
    """Readiness probe: runs the same database check as /healthz."""
    checker.check_connection()
    return status_text_response(200)
