"""
FastAPI application for the Exam Tutor Backend.
"""

from typing import Optional
from fastapi import FastAPI, File, Form, UploadFile, Body, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from .config import Settings, get_settings, validate_api_key_shape
from .errors import ErrorKind, TutorError
from .models import AnswerResponse, ChatRequest, ErrorResponse, HealthResponse, RootResponse
from .services import TutorService
from .utils import redact_secret

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def create_app(settings: Optional[Settings] = None, tutor_service: Optional[TutorService] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration, read from the environment when omitted
        tutor_service: Request handler, built from ``settings`` when omitted

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    tutor_service = tutor_service or TutorService(settings)

    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Answers exam questions through Google Gemini, optionally grounded in a PDF",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def log_configuration_diagnostics():
        for warning in validate_api_key_shape(settings):
            logger.warning(warning)
        logger.info(
            f"{settings.app_name} {settings.app_version} ready: model={settings.gemini_model}, "
            f"api_key_loaded={settings.api_key_loaded}, max_document_chars={settings.max_document_chars}"
        )

    @app.exception_handler(TutorError)
    async def tutor_error_handler(request: Request, exc: TutorError):
        """Map a tagged request failure to its HTTP response."""
        detail = redact_secret(exc.detail or exc.message, settings.gemini_api_key)
        if exc.kind is ErrorKind.INVALID_INPUT:
            logger.warning(f"[{request.url.path}] {exc.kind.value}: {detail}")
        else:
            logger.error(f"[{request.url.path}] {exc.kind.value}: {detail}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"[{request.url.path}] invalid request body: {exc.errors()}")
        return _error_response(400, "Invalid request body.")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error(
            f"[{request.url.path}] Unhandled exception: {redact_secret(exc, settings.gemini_api_key)}",
            exc_info=exc
        )
        return _error_response(500, "An unexpected error occurred")

    @app.get("/", response_model=RootResponse)
    def root():
        """Root endpoint."""
        return RootResponse(message=f"{settings.app_name} is running", version=settings.app_version)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Report whether the Gemini key is loaded."""
        return tutor_service.health()

    @app.post("/chat", response_model=AnswerResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
    def chat(payload: Optional[ChatRequest] = Body(default=None)):
        """Answer a general question without document context."""
        logger.info("[/chat] Request received.")
        answer = tutor_service.chat(payload.question if payload else None)
        return AnswerResponse(answer=answer)

    @app.post("/ask", response_model=AnswerResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
    def ask_pdf(
        pdf: Optional[UploadFile] = File(default=None),
        question: Optional[str] = Form(default=None)
    ):
        """
        Answer a question from an uploaded PDF.

        The PDF is read in memory and never stored on disk.
        """
        logger.info("[/ask] Request received.")
        content = pdf.file.read() if pdf is not None else None
        answer = tutor_service.ask(question, content, pdf.filename if pdf is not None else None)
        return AnswerResponse(answer=answer)

    return app


app = create_app()


def run() -> None:
    """Start the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    logger.info(f"Server listening on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
