"""FastAPI application for the golf league."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from database.connection import db
from database.db_manager import DatabaseManager
from database.notifications import ChangeListener
from league.config import database_url, load_rules
from league.exceptions import (
    CollaboratorError,
    LeagueValidationError,
    StoreReadError,
    UnknownMemberError,
    UnknownRoundError,
)
from league.refresh import SnapshotRefresher
from league.service import LeagueService
from league.store import LeagueStore
from models import LeagueRules

logger = logging.getLogger(__name__)


def create_app(store: Optional[LeagueStore] = None, rules: Optional[LeagueRules] = None) -> FastAPI:
    """Build the app. Without an injected store it connects to PostgreSQL on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        league_rules = rules or load_rules()
        listener = None
        active_store = store
        if active_store is None:
            await db.initialize(dsn=database_url())
            active_store = DatabaseManager(db.pool)

        service = LeagueService(active_store, league_rules)
        refresher = SnapshotRefresher(service.reload, window=league_rules.refresh_window_seconds)
        try:
            await service.reload()
        except StoreReadError:
            logger.warning("Starting with an empty snapshot; POST /api/season/reload to retry")

        if store is None:
            listener = ChangeListener(db.pool, refresher.mark_dirty)
            await listener.start()

        app.state.service = service
        app.state.refresher = refresher
        yield
        await refresher.close()
        if listener is not None:
            await listener.stop()
        if store is None:
            await db.close()

    app = FastAPI(
        title="Golf League API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LeagueValidationError)
    async def validation_error(request: Request, exc: LeagueValidationError):
        status = 404 if isinstance(exc, (UnknownMemberError, UnknownRoundError)) else 422
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def model_validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": exc.errors()[0]["msg"]})

    @app.exception_handler(CollaboratorError)
    async def collaborator_error(request: Request, exc: CollaboratorError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    from api.routers import expenses, members, rounds, season
    app.include_router(season.router, prefix="/api/season", tags=["season"])
    app.include_router(members.router, prefix="/api/members", tags=["members"])
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])
    app.include_router(expenses.router, prefix="/api/expenses", tags=["expenses"])

    @app.get("/api/health")
    async def health(request: Request):
        service: LeagueService = request.app.state.service
        healthy = service.error is None
        if store is None:
            healthy = healthy and await db.health_check()
        return {"status": "ok" if healthy else "degraded", "database": healthy}

    return app


app = create_app()
