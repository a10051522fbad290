"""HTTP API for validating chirps, creating users and serving the Chirpy app."""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

import anyio
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ValidationError

from .chirps import ChirpTooLongError, validate_chirp
from .config import Settings, load_settings
from .database import Database, StoreError
from .metrics import FileServerHitsMiddleware, HitCounter, render_metrics_page
from .models import User
from .responses import respond_with_error, respond_with_json

logger = logging.getLogger("chirpy.service")

GENERIC_ERROR = "Something went wrong"


class ValidateChirpRequest(BaseModel):
    body: str = ""


class ValidateChirpResponse(BaseModel):
    cleaned_body: str


class CreateUserRequest(BaseModel):
    email: str = ""


class UserResponse(BaseModel):
    id: UUID
    created_at: datetime
    updated_at: datetime
    email: str


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        created_at=user.created_at,
        updated_at=user.updated_at,
        email=user.email,
    )


def register_api_routes(app: FastAPI, database: Database) -> None:
    """Expose the public JSON endpoints under ``/api``."""

    @app.get("/api/healthz", response_class=PlainTextResponse)
    async def healthcheck() -> PlainTextResponse:
        return PlainTextResponse("OK")

    @app.post("/api/validate_chirp")
    async def validate_chirp_handler(request: Request) -> Response:
        raw = await request.body()
        try:
            payload = ValidateChirpRequest.model_validate_json(raw)
        except ValidationError:
            return respond_with_error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)

        try:
            cleaned = validate_chirp(payload.body)
        except ChirpTooLongError as exc:
            return respond_with_error(status.HTTP_400_BAD_REQUEST, str(exc))

        return respond_with_json(status.HTTP_200_OK, ValidateChirpResponse(cleaned_body=cleaned))

    @app.post("/api/users")
    async def create_user(request: Request) -> Response:
        raw = await request.body()
        try:
            payload = CreateUserRequest.model_validate_json(raw)
        except ValidationError:
            return respond_with_error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)

        try:
            user = await anyio.to_thread.run_sync(database.create_user, payload.email)
        except StoreError as exc:
            logger.exception("Failed to create user %s", payload.email)
            return respond_with_error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"{GENERIC_ERROR}: {exc}")

        logger.info("Created user %s <%s>", user.id, user.email)
        return respond_with_json(status.HTTP_201_CREATED, _user_to_response(user))


def register_admin_routes(
    app: FastAPI,
    database: Database,
    counter: HitCounter,
    *,
    settings: Settings,
) -> None:
    """Expose the metrics page and the destructive reset endpoint under ``/admin``."""

    @app.get("/admin/metrics", response_class=HTMLResponse)
    async def metrics() -> HTMLResponse:
        return HTMLResponse(render_metrics_page(counter.value))

    @app.post("/admin/reset")
    async def reset() -> Response:
        if not settings.is_privileged:
            logger.warning("Refused reset request on platform %r", settings.platform)
            return respond_with_error(status.HTTP_403_FORBIDDEN, "Not Allowed")

        try:
            deleted = await anyio.to_thread.run_sync(database.delete_all_users)
        except StoreError as exc:
            logger.exception("Failed to delete users during reset")
            return respond_with_error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                f"Error deleting all users: {exc}",
            )

        counter.reset()
        logger.info("Reset hit counter and deleted %d user(s)", deleted)
        return PlainTextResponse("Hits reset to 0")


def mount_file_server(app: FastAPI, counter: HitCounter, *, settings: Settings) -> None:
    """Serve ``settings.filepath_root`` under ``/app`` and count every request to it."""

    root = settings.filepath_root
    if not root.is_dir():
        raise ValueError(f"File server root {root} is not a directory")

    logger.info("Serving static files from %s under /app", root)
    file_server = StaticFiles(directory=str(root), html=True)
    app.mount("/app", FileServerHitsMiddleware(file_server, counter), name="app")


def create_app(
    *,
    settings: Settings | None = None,
    database: Database | None = None,
    counter: HitCounter | None = None,
) -> FastAPI:
    """Instantiate the FastAPI application for the Chirpy API."""

    app_settings = settings or load_settings()
    db = database or Database(app_settings.database_path)
    db.initialize()

    hits = counter or HitCounter()

    app = FastAPI(
        title="Chirpy",
        version="0.1.0",
        description="Chirp validation, user creation and static file serving.",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = app_settings
    app.state.database = db
    app.state.hits = hits

    if not app_settings.is_privileged:
        logger.info("Running with platform %r; /admin/reset is disabled", app_settings.platform)

    register_api_routes(app, db)
    register_admin_routes(app, db, hits, settings=app_settings)
    mount_file_server(app, hits, settings=app_settings)

    return app


__all__ = ["create_app"]
