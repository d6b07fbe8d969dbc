"""dutch_legal_mcp.main

FastAPI entrypoint for the Dutch Legal MCP service.

Endpoints:
  - GET  /api/v1/health
  - POST /api/v1/cases/search
  - GET  /api/v1/cases/{ecli}

The same collector backs the MCP tools; this app exposes it over REST.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from dutch_legal_mcp.config.settings import settings
from dutch_legal_mcp.core.errors import (
    CaseLawError,
    HttpError,
    InvalidTarget,
    MappingError,
    ValidationError,
)
from dutch_legal_mcp.core.registry import ClientRegistry
from dutch_legal_mcp.models.entities import CaseRecord
from dutch_legal_mcp.models.requests import SearchCriteria
from dutch_legal_mcp.pipeline.collectors.case_collector import CaseLawCollector
from dutch_legal_mcp.utils.logger import get_logger

logger = get_logger(__name__)


class CaseSearchResponse(BaseModel):
    results: list[CaseRecord]
    total_count: int
    requested: int
    search_time_ms: float


class CaseDetailResponse(BaseModel):
    case: CaseRecord
    search_time_ms: float


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[dict[str, Any]] = None
    timestamp: str
    request_id: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.registry = ClientRegistry()
    app.state.collector = CaseLawCollector(app.state.registry)
    try:
        yield
    finally:
        await app.state.registry.aclose()


app = FastAPI(
    title="Dutch Legal MCP",
    version=settings.service_version,
    lifespan=lifespan,
)


def get_collector(request: Request) -> CaseLawCollector:
    return request.app.state.collector


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _error_response(
    request: Request,
    *,
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    payload = ErrorResponse(
        error=error,
        message=message,
        details=details,
        timestamp=datetime.now(timezone.utc).isoformat(),
        request_id=getattr(request.state, "request_id", ""),
    ).model_dump()
    return JSONResponse(status_code=status_code, content=payload)


def _status_for(exc: CaseLawError) -> int:
    if isinstance(exc, (ValidationError, InvalidTarget)):
        return 400
    if isinstance(exc, MappingError):
        return 404
    if isinstance(exc, HttpError) and exc.status == 404:
        return 404
    return 502


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(
        request,
        status_code=exc.status_code,
        error="HTTPException",
        message=str(exc.detail),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error_response(
        request,
        status_code=400,
        error="ValidationError",
        message="Request parameter validation failed",
        details={"errors": jsonable_errors(exc)},
    )


@app.exception_handler(CaseLawError)
async def case_law_exception_handler(request: Request, exc: CaseLawError):
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"Upstream failure ({exc.code}): {exc}")
    return _error_response(
        request,
        status_code=status_code,
        error=exc.code,
        message=exc.message,
        details={k: str(v) for k, v in exc.details.items()} or None,
    )


@app.get("/api/v1/health")
async def health(request: Request):
    registry: ClientRegistry = request.app.state.registry
    return {
        "status": "healthy",
        "version": settings.service_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "court_data_api": settings.dutch_legal_api_base_url,
            "transport_clients": len(registry),
        },
    }


@app.post("/api/v1/cases/search", response_model=CaseSearchResponse)
async def case_search(
    body: SearchCriteria,
    collector: CaseLawCollector = Depends(get_collector),
):
    started = time.perf_counter()
    results = await collector.search(body)
    elapsed_ms = (time.perf_counter() - started) * 1000.0

    return CaseSearchResponse(
        results=results,
        total_count=len(results),
        requested=min(body.max_results, collector.max_results_ceiling),
        search_time_ms=elapsed_ms,
    )


@app.get("/api/v1/cases/{ecli}", response_model=CaseDetailResponse)
async def case_detail(
    ecli: str,
    collector: CaseLawCollector = Depends(get_collector),
):
    started = time.perf_counter()
    case = await collector.get_details(ecli)
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    return CaseDetailResponse(case=case, search_time_ms=elapsed_ms)


def main() -> None:
    import uvicorn

    uvicorn.run(
        "dutch_legal_mcp.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
