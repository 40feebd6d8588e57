# changelog_scribe/server.py
"""
FastAPI application with route registration.

Routes are thin wrappers over changelog_scribe.api; every error response
has the shape ``{"error": "<message>"}`` and never exposes internal detail.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from changelog_scribe import __version__
from changelog_scribe.api.changelogs import check_status, create_changelog, list_changelogs
from changelog_scribe.api.commits import list_commits
from changelog_scribe.background.lifecycle import AppLifecycle
from changelog_scribe.config.schema import ScribeConfig
from changelog_scribe.errors import InvalidDateError, JobNotFoundError
from changelog_scribe.models.responses import (
    CreateChangelogRequest,
    ErrorResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def get_lifecycle(request: Request) -> AppLifecycle:
    """Dependency: the lifecycle attached to the running app."""
    return request.app.state.lifecycle


def configure_cors(app: FastAPI, config: ScribeConfig) -> None:
    """Allow credentialed calls from local dev and the deployed frontend only."""
    origins = config.server.cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"CORS origins: {origins}")


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
            for err in exc.errors()
        )
        return _error(400, f"Invalid request: {details}")

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return _error(500, "Internal server error")


def register_routes(app: FastAPI) -> None:
    @app.get("/health")
    async def health(lifecycle: AppLifecycle = Depends(get_lifecycle)) -> dict:
        """Liveness check with job counts and the startup LLM check."""
        orchestrator = lifecycle.orchestrator
        return HealthResponse(
            pending_jobs=orchestrator.pending,
            tracked_jobs=len(orchestrator.jobs),
            llm_available=lifecycle.llm_available,
        ).model_dump(by_alias=True)

    @app.get("/api/commits")
    async def get_commits(
        page: int = Query(0, ge=0),
        page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
        start_date: str | None = Query(None, alias="startDate"),
        end_date: str | None = Query(None, alias="endDate"),
        lifecycle: AppLifecycle = Depends(get_lifecycle),
    ):
        """List repository commits with page count and hasMore."""
        try:
            return await list_commits(
                page, page_size, start_date, end_date, commit_source=lifecycle.commit_source
            )
        except InvalidDateError as e:
            return _error(400, str(e))
        except Exception:
            logger.exception("Error handling commits request")
            return _error(500, "Failed to fetch commits")

    @app.get("/api/changelogs")
    async def get_changelogs(
        page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
        last_timestamp: str | None = Query(None, alias="lastTimestamp"),
        lifecycle: AppLifecycle = Depends(get_lifecycle),
    ):
        """Page through stored changelogs, newest startDate first."""
        try:
            return await list_changelogs(page_size, last_timestamp, store=lifecycle.store)
        except InvalidDateError as e:
            return _error(400, str(e))
        except Exception:
            logger.exception("Error fetching changelogs")
            return _error(500, "Failed to fetch changelogs")

    @app.post("/api/changelogs")
    async def post_changelog(
        body: CreateChangelogRequest,
        lifecycle: AppLifecycle = Depends(get_lifecycle),
    ):
        """Start changelog generation; poll the status route with the returned id."""
        try:
            return await create_changelog(body, orchestrator=lifecycle.orchestrator)
        except InvalidDateError as e:
            return _error(400, str(e))
        except Exception:
            logger.exception("Error starting changelog generation")
            return _error(500, "Failed to start changelog generation")

    @app.get("/api/changelogs/status/{job_id}")
    async def get_changelog_status(
        job_id: str, lifecycle: AppLifecycle = Depends(get_lifecycle)
    ):
        """Current state of a generation job."""
        try:
            return await check_status(job_id, orchestrator=lifecycle.orchestrator)
        except JobNotFoundError:
            return _error(404, "Job not found")


def create_app(config: ScribeConfig | None = None, lifecycle: AppLifecycle | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Root config (defaults to lifecycle.config, then load_config())
        lifecycle: Pre-built lifecycle (tests pass one with fake collaborators)

    Returns:
        FastAPI app whose lifespan starts and stops the lifecycle
    """
    if lifecycle is None:
        if config is None:
            from changelog_scribe.config.loader import load_config

            config = load_config()
        lifecycle = AppLifecycle(config)
    config = config or lifecycle.config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await lifecycle.startup()
        try:
            yield
        finally:
            await lifecycle.shutdown()

    app = FastAPI(title="changelog-scribe", version=__version__, lifespan=lifespan)
    app.state.lifecycle = lifecycle

    configure_cors(app, config)
    register_error_handlers(app)
    register_routes(app)

    logger.info("HTTP app initialized with 5 routes")
    return app
