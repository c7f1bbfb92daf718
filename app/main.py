from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.rate_limit import limiter
from app.api.v1.ambassadors.router import router as ambassadors_router
from app.api.v1.auth.router import router as auth_router
from app.api.v1.dashboard.router import router as dashboard_router
from app.api.v1.exports.router import router as exports_router
from app.api.v1.leaderboard.router import router as leaderboard_router
from app.api.v1.payouts.router import router as payouts_router
from app.api.v1.portal.router import router as portal_router
from app.api.v1.referrals.router import router as referrals_router
from app.api.v1.settings.router import router as settings_router
from app.api.v1.webhook.router import router as webhook_router
from app.core.config import settings
from app.core.exceptions import ServiceError
from app.core.logging_config import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app_starting", env=settings.env)
    yield
    logger.info("app_shutting_down")


def create_app() -> FastAPI:
    is_production = settings.env == "production"

    app = FastAPI(
        title="Referral Rewards Backend",
        version="1.0.0",
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        lifespan=lifespan,
    )

    # CORS: allow the admin and ambassador frontends to call this API
    allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter

    # Every error leaves as {success: false, error}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(400, _validation_message(exc))

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning("rate_limit_exceeded", path=request.url.path, limit=str(exc.detail))
        return _error(429, "Too many requests. Please try again later.")

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path)
        return _error(500, "Internal server error")

    # Routers
    app.include_router(auth_router)
    app.include_router(webhook_router)
    app.include_router(dashboard_router)
    app.include_router(ambassadors_router)
    app.include_router(referrals_router)
    app.include_router(payouts_router)
    app.include_router(leaderboard_router)
    app.include_router(settings_router)
    app.include_router(exports_router)
    app.include_router(portal_router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "env": settings.env}

    return app


app = create_app()
