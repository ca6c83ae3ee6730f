import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, settings
from app.core.exceptions import QuizGeneratorError
from app.db.store import RecordStore
from app.routes import documents, downloads, questions
from app.services.document_renderer import DocumentRenderer
from app.services.openai_service import OpenAIService

logger = logging.getLogger("app.main")


def _error_body(message: str, errors=None) -> dict:
    body = {"message": message}
    if errors:
        body["errors"] = errors
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """Every error response is JSON with a `message` field."""

    @app.exception_handler(QuizGeneratorError)
    async def pipeline_error_handler(request: Request, exc: QuizGeneratorError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Invalid request", errors),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Unexpected server error"),
        )


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    ai_service: Optional[OpenAIService] = None,
    renderer: Optional[DocumentRenderer] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Collaborators default to instances built from `app_settings`; tests pass
    their own (e.g. an OpenAIService around a fake client).

    Raises:
        RuntimeError: OPENAI_API_KEY is empty
    """
    app_settings = app_settings or settings

    if not logging.getLogger().handlers:
        logging.basicConfig(level=app_settings.LOG_LEVEL)

    if not app_settings.OPENAI_API_KEY:
        logger.error("OPENAI_API_KEY is not configured. Set the OPENAI_API_KEY env var.")
        raise RuntimeError("OPENAI_API_KEY is not configured. Set the OPENAI_API_KEY env var.")

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        description="Generate quiz question papers and answer keys from PDF documents",
        debug=app_settings.DEBUG
    )

    app.state.store = store or RecordStore.from_url(app_settings.DATABASE_URL)
    app.state.ai_service = ai_service or OpenAIService(
        api_key=app_settings.OPENAI_API_KEY,
        model=app_settings.OPENAI_MODEL,
        temperature=app_settings.OPENAI_TEMPERATURE,
        timeout=app_settings.OPENAI_TIMEOUT_SECONDS
    )
    app.state.renderer = renderer or DocumentRenderer()

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routers
    app.include_router(documents.router)
    app.include_router(questions.router)
    app.include_router(downloads.router)

    @app.on_event("startup")
    async def startup_event():
        logger.info("%s v%s starting...", app_settings.APP_NAME, app_settings.APP_VERSION)
        logger.info("OpenAI model: %s", app.state.ai_service.model)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
