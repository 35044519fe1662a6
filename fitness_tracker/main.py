import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitness_tracker.config import Settings, load_settings
from fitness_tracker.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    StorageError,
    TrackerError,
    ValidationError,
)
from fitness_tracker.logging_config import setup_logging
from fitness_tracker.routes import activities, auth, users
from fitness_tracker.services.account_service import AccountService
from fitness_tracker.services.session_store import SessionStore
from fitness_tracker.services.store import RelationalStore
from fitness_tracker.utils.security import PasswordHasher

logger = logging.getLogger(__name__)

# 같은 기기의 UI (포트 무관)
LOCAL_ORIGIN_REGEX = r"http://(localhost|127\.0\.0\.1)(:\d+)?"

# 오류 종류 -> HTTP 상태 코드
STATUS_BY_ERROR = {
    ValidationError: 422,
    DuplicateEmail: 409,
    InvalidCredentials: 401,
    NotFound: 404,
    StorageError: 500,
}


def build_service(settings: Settings) -> AccountService:
    store = RelationalStore(settings.database_url)
    store.init_schema()
    return AccountService(
        store=store,
        sessions=SessionStore(settings.session_file),
        hasher=PasswordHasher(settings.password_hash_rounds),
    )


def _error_handler(request: Request, exc: TrackerError):
    status = next((code for cls, code in STATUS_BY_ERROR.items() if isinstance(exc, cls)), 400)
    if isinstance(exc, StorageError):
        logger.exception(f"storage error on {request.method} {request.url.path}")
        return JSONResponse(status_code=status, content={"detail": "Internal storage error"})
    body = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    return JSONResponse(status_code=status, content=body)


def create_app(settings: Optional[Settings] = None, service: Optional[AccountService] = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Fitness Tracker Local API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.service = service or build_service(settings)

    # 같은 기기의 UI 에서만 호출
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=LOCAL_ORIGIN_REGEX,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TrackerError, _error_handler)

    app.include_router(auth.router)
    app.include_router(activities.router)
    app.include_router(users.router)

    @app.get("/")
    def health():
        return {"status": "ok"}

    return app
