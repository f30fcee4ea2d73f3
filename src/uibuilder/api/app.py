"""
HTTP transport.

Thin FastAPI layer over ``GenerationPipeline``: parse and validate input,
call the pipeline, map errors to status codes. No pipeline semantics live
here.
"""

from collections.abc import AsyncIterator
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from injector import Injector
from prometheus_client import CONTENT_TYPE_LATEST
from returns.pipeline import is_successful

from uibuilder.core import (
    GenerationError,
    GenerationRequest,
    JSONParseError,
    ReplayRequest,
    RequestValidationError,
    RollbackRequest,
    VersionNotFoundError,
    configure_logging,
    create_container,
    get_logger,
    get_settings,
    loads,
    safe_json_dumps,
)
from uibuilder.monitoring import MetricsCollector
from uibuilder.pipeline import GenerationPipeline, PipelineEvent
from uibuilder.schema import parse_plan_from_code

logger = get_logger(__name__)

NDJSON = "application/x-ndjson; charset=utf-8"


async def _read_body(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = loads(raw)
    except JSONParseError as e:
        raise RequestValidationError("Request body is not valid JSON") from e
    if not isinstance(body, dict):
        raise RequestValidationError("Request body must be a JSON object")
    return body


async def _ndjson(events: AsyncIterator[PipelineEvent]) -> AsyncIterator[bytes]:
    async for event in events:
        yield f"{safe_json_dumps(event.to_dict())}\n".encode("utf-8")


def create_app(container: Injector | None = None) -> FastAPI:
    """Build the application around a container (one store per container)."""
    container = container or create_container()
    pipeline = container.get(GenerationPipeline)
    metrics = container.get(MetricsCollector)

    app = FastAPI(
        title="UI Builder",
        description="Deterministic UI plan synthesis with replayable version history",
    )
    app.state.container = container
    app.state.pipeline = pipeline

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def handle_bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(VersionNotFoundError)
    async def handle_not_found(request: Request, exc: VersionNotFoundError) -> JSONResponse:
        return JSONResponse({"error": str(exc)}, status_code=404)

    @app.exception_handler(GenerationError)
    async def handle_generation_error(request: Request, exc: GenerationError) -> JSONResponse:
        return JSONResponse({"error": str(exc), "stage": exc.stage}, status_code=422)

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    @app.post("/api/agent", response_model=None)
    async def agent(request: Request, stream: str | None = None) -> Response | dict[str, Any]:
        body = await _read_body(request)
        generation = GenerationRequest.parse(body)

        if stream == "1":
            return StreamingResponse(
                _ndjson(pipeline.stream(generation)),
                media_type=NDJSON,
                headers={"Cache-Control": "no-cache"},
            )

        result = await pipeline.run(generation)
        return result.to_dict()

    @app.post("/api/agent/replay")
    async def replay(request: Request) -> dict[str, Any]:
        replay_request = ReplayRequest.parse(await _read_body(request))
        result = await pipeline.replay(replay_request)
        return result.to_dict()

    @app.get("/api/versions")
    async def list_versions() -> dict[str, Any]:
        return {"versions": [v.to_dict() for v in pipeline.list_versions()]}

    @app.post("/api/versions")
    async def rollback(request: Request) -> dict[str, Any]:
        rollback_request = RollbackRequest.parse(await _read_body(request))
        version = pipeline.rollback(rollback_request.id)
        return {"version": version.to_dict()}

    @app.get("/api/versions/compare")
    async def compare(a: str | None = None, b: str | None = None) -> dict[str, Any]:
        if not a or not b:
            raise RequestValidationError("Both version ids (a, b) are required")
        return pipeline.compare(a, b).to_dict()

    @app.post("/api/plan/parse", response_model=None)
    async def parse_plan(request: Request) -> JSONResponse | dict[str, Any]:
        body = await _read_body(request)
        code = body.get("code")
        if not isinstance(code, str) or not code:
            raise RequestValidationError("code is required")

        parsed = parse_plan_from_code(code)
        if not is_successful(parsed):
            return JSONResponse({"valid": False, "error": parsed.failure()}, status_code=422)
        return {"valid": True, "plan": parsed.unwrap().to_dict()}

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "versions": len(pipeline.store)}

    @app.get("/metrics")
    async def prometheus_metrics() -> Response:
        return Response(content=metrics.export(), media_type=CONTENT_TYPE_LATEST)

    return app


def serve() -> None:
    """Console entry point."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.json_logs)
    logger.info("starting", host=settings.host, port=settings.port)
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


__all__ = ["create_app", "serve"]
