from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded

from staffhub.core.config import settings
from staffhub.core.exceptions import StaffHubError, error_response
from staffhub.core.logging_config import logger
from staffhub.core.middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware
from staffhub.core.rate_limiter import limiter, rate_limit_exceeded_handler
from staffhub.api.router import api_router


def validate_config():
    """Log configuration problems at startup; none of them are fatal"""
    warnings = []

    if settings.uses_default_jwt_secret() and not settings.is_dev_mode():
        warnings.append("JWT_SECRET_KEY is using the default value - tokens can be forged")

    if settings.ALLOW_MOCK_TOKENS and not settings.is_dev_mode():
        warnings.append("ALLOW_MOCK_TOKENS is enabled outside development")

    if "*" in settings.CORS_ORIGINS and not settings.is_dev_mode():
        warnings.append("CORS allows every origin")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    if not warnings:
        logger.info("[Startup] Configuration validated")
    return warnings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"User directory: {settings.USER_DIRECTORY_URL}")
    logger.info(f"Upload directory: {settings.UPLOAD_DIR}")
    logger.info("=" * 60)

    validate_config()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Staff, project and task management backend",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # Add rate limiter state and exception handler
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Add middleware (order matters - last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_UPLOAD_SIZE + 1024 * 1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.mount("/uploads", StaticFiles(directory=str(settings.UPLOAD_DIR)), name="uploads")

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": "1.0.0",
            "docs": "/docs",
            "health": f"{settings.API_PREFIX}/health",
        }

    return app


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StaffHubError)
    async def staffhub_error_handler(request: Request, exc: StaffHubError):
        if exc.status_code >= 500:
            logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
        return JSONResponse(status_code=exc.status_code, content=error_response(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": str(exc) if settings.DEBUG else "Internal server error"},
        )


app = create_app()


def main():
    import uvicorn
    uvicorn.run(
        "staffhub.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
