import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routers import files as files_router
from app.api.routers import health as health_router
from app.api.routers import uploads as uploads_router
from app.core.config import Settings, get_settings
from app.core.errors import AppError, ErrorKind
from app.core.logging import configure_logging
from app.services.object_store import ObjectStore
from app.services.uploads import UploadOrchestrator

logger = logging.getLogger(__name__)

_HTTP_STATUS_KINDS = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
}


def _error_response(error: AppError, debug: bool) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_payload(debug))


def install_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.kind in (ErrorKind.STORAGE, ErrorKind.INTERNAL):
            logger.error("Request error on %s %s: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("Request error on %s %s: %s", request.method, request.url.path, exc.message)
        return _error_response(exc, settings.debug)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {
                "path": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        error = AppError.validation("Validation failed", details=details)
        return _error_response(error, settings.debug)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        default_kind = ErrorKind.VALIDATION if exc.status_code < 500 else ErrorKind.INTERNAL
        kind = _HTTP_STATUS_KINDS.get(exc.status_code, default_kind)
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        error = AppError(kind, message)
        return JSONResponse(
            status_code=exc.status_code,
            content={**error.to_payload(settings.debug), "statusCode": exc.status_code},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = AppError.internal(str(exc) or exc.__class__.__name__)
        return _error_response(error, settings.debug)


def create_app(
    settings: Settings | None = None,
    store: ObjectStore | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json, settings.service_name)

    app = FastAPI(
        debug=settings.debug,
        title="Presigned Upload API",
    )
    app.state.settings = settings
    app.state.orchestrator = UploadOrchestrator.from_settings(settings, store)

    install_error_handlers(app, settings)

    app.include_router(health_router.router)
    app.include_router(uploads_router.router)
    app.include_router(files_router.router)

    logger.info(
        "Application configured env=%s bucket=%s prefix=%s",
        settings.env,
        settings.s3_bucket,
        settings.s3_prefix,
    )
    return app


app = create_app()
