"""FastAPI app exposing submit and retrieve."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from nicherank.config import Settings, load_settings
from nicherank.logging import configure_logging, get_logger
from nicherank.models.niche import InvalidNicheError
from nicherank.orchestrator.runner import NicheRanker


class GenerateRequest(BaseModel):
    """Submit request. ``niche`` is validated by the ranker, not by the schema."""

    niche: Any = None


def create_app(settings: Settings | None = None, ranker: NicheRanker | None = None) -> FastAPI:
    """Create FastAPI app."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)

    ranker = ranker if ranker is not None else NicheRanker.from_settings(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        await ranker.aclose()

    app = FastAPI(title="NicheRank", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/generate")
    async def generate(req: GenerateRequest) -> JSONResponse:
        logger.info("API run requested")
        try:
            result = await ranker.submit(req.niche)
        except InvalidNicheError as e:
            return JSONResponse(status_code=400, content={"success": False, "error": str(e)})
        return JSONResponse(content=result.model_dump(mode="json", by_alias=True))

    @app.get("/api/generate")
    async def get_run(
        run: str | None = Query(default=None),
        run_id: str | None = Query(default=None, alias="runId"),
    ) -> JSONResponse:
        wanted = run_id or run
        if not wanted:
            return JSONResponse(
                content={
                    "message": "NicheRank API - POST to generate rankings or provide a run parameter",
                    "usage": {
                        "post": 'POST /api/generate with body { "niche": "your-niche-here" }',
                        "get": "GET /api/generate?run=<run_id>",
                    },
                }
            )

        logger.info("API run lookup", extra={"lookup_run_id": wanted})
        stored = await ranker.retrieve(wanted)
        if stored is None:
            return JSONResponse(status_code=404, content={"success": False, "error": "Run not found"})

        payload = stored.model_dump(mode="json", by_alias=True)
        payload["runId"] = payload.pop("id")
        payload["success"] = True
        payload["totalAnalyzed"] = len(stored.results)
        return JSONResponse(content=payload)

    return app
