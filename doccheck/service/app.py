"""FastAPI application entrypoint for docs-check service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import ConfigNotFoundError, DocsCheckError
from ..models import CheckResult
from ..orchestrator import Orchestrator
from ..reporting import to_payload


class CheckRequest(BaseModel):
    config_path: str
    strict: Optional[bool] = None
    jobs: Optional[int] = None


class CheckResponse(BaseModel):
    exit_code: int
    strict: bool
    files: List[str]
    symbol_count: int
    coverage: List[Dict[str, Any]]
    links: List[Dict[str, Any]]
    stale_exemptions: List[str]
    parse_errors: List[Dict[str, str]]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing docs-check runs."""

    app = FastAPI(title="docs-check Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/check", response_model=CheckResponse)
    async def check(
        payload: CheckRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> CheckResponse:
        def _run_check() -> CheckResult:
            return orchestrator.run_path(payload.config_path, strict=payload.strict, jobs=payload.jobs)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_check)
        return CheckResponse(**to_payload(result))

    @app.exception_handler(ConfigNotFoundError)
    async def config_not_found_handler(_: Any, exc: ConfigNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DocsCheckError)
    async def docs_check_error_handler(_: Any, exc: DocsCheckError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["CheckRequest", "CheckResponse", "create_app", "run_service"]
