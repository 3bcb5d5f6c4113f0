import os

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from promport import __version__
from promport.api.middleware import RequestLoggingMiddleware
from promport.api.routes import metrics_router, transfer_router
from promport.core.config import Settings, settings
from promport.core.exceptions import PromPortError
from promport.utils.logger import get_logger

logger = get_logger("promport")

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


async def promport_error_handler(request: Request, exc: PromPortError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return _error(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    message = "; ".join(problems) or "Invalid request"
    logger.warning(f"{request.method} {request.url.path} rejected: {message}")
    return _error(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error(exc.status_code, "Not found")
    return _error(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(app_settings: Settings = settings) -> FastAPI:
    app = FastAPI(
        title="PromPort",
        description="Export and import Prometheus TSDB data through promtool",
        version=__version__,
    )

    # Set up CORS
    if app_settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in app_settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(PromPortError, promport_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(metrics_router, prefix=app_settings.API_PREFIX, tags=["metrics"])
    app.include_router(transfer_router, prefix=app_settings.API_PREFIX, tags=["transfer"])

    # Unknown API paths are 404 whatever the method, never the static page's 405
    @app.api_route(
        f"{app_settings.API_PREFIX}/{{path:path}}",
        methods=_ALL_METHODS,
        include_in_schema=False,
    )
    async def api_not_found(path: str):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    # Startup event
    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Starting PromPort on http://{app_settings.HOST}:{app_settings.PORT}")
        for key in app_settings.missing("PROMTOOL_PATH", "PROMETHEUS_URL", "TSDB_PATH"):
            logger.warning(f"{key} is not configured; requests needing it will fail")

    # Shutdown event
    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down PromPort")

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    # The browser page; mounted last so it never shadows the API
    if os.path.isdir(app_settings.STATIC_DIR):
        app.mount(
            "/",
            StaticFiles(directory=app_settings.STATIC_DIR, html=True),
            name="static",
        )

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
