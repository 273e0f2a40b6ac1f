"""
HTTP layer — FastAPI app exposing the edit pipeline to the editor panel.

    POST /api/edit     {"instructions", "provider"?, "model"?}
    GET  /api/models   model names per provider
    GET  /api/health
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .config import Config
from .errors import EditRequestError, InvalidRequestError
from .orchestrator import EditOrchestrator

logger = logging.getLogger(__name__)


class EditRequest(BaseModel):
    instructions: str = Field(..., description="Natural-language edit instruction")
    provider: str | None = None
    model: str | None = None


def create_app(cfg: Config | None = None,
               orchestrator: EditOrchestrator | None = None) -> FastAPI:
    cfg = cfg or Config.load()
    orchestrator = orchestrator or EditOrchestrator(cfg)

    app = FastAPI(title="live_editor", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.state.config = cfg
    app.state.orchestrator = orchestrator

    # Plain ``def`` handlers run in FastAPI's threadpool, so a slow provider
    # call never blocks the event loop.
    @app.post("/api/edit")
    def api_edit(req: EditRequest) -> dict:
        try:
            summary = orchestrator.handle_edit_request(
                req.instructions, provider=req.provider, model=req.model)
        except InvalidRequestError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except EditRequestError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
        return summary.as_dict()

    @app.get("/api/models")
    def api_models() -> dict:
        return cfg.MODELS

    @app.get("/api/health")
    def api_health() -> dict:
        return {"status": "ok", "project_root": orchestrator.project_root}

    return app
