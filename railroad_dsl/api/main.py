"""
FastAPI Application
==================

Main FastAPI application with REST endpoints for railroad DSL validation and
rendering.
"""

from contextlib import asynccontextmanager
import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator, Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from railroad_dsl.config.settings import get_settings
from railroad_dsl.config.logging import get_logger
from railroad_dsl.core.dsl.builder import DiagramBuildError
from railroad_dsl.core.dsl.compiler import compile_diagram
from railroad_dsl.core.dsl.grammar import get_parser, grammar_loaded
from railroad_dsl.core.rendering.railroad_renderer import RenderingError, TextOutputUnavailable
from railroad_dsl.models.schemas import (
    DSLRenderRequest,
    DSLValidationRequest,
    DSLValidationResponse,
    RenderResponse,
    HealthStatus,
    ErrorResponse,
    OutputFormat,
    ParseFailure,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting FastAPI application")

    # Build the grammar up front so the first request does not pay for it
    get_parser()
    logger.info("Grammar parser initialized")

    try:
        yield
    finally:
        logger.info("Shutting down FastAPI application")


# Create FastAPI app
settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    description="Compile railroad diagram DSL source into SVG and text diagrams",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_hosts,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> JSONResponse:  # type: ignore
    """Add request ID to all requests."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)  # type: ignore
    response.headers["X-Request-ID"] = request_id  # type: ignore

    return response  # type: ignore


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Custom HTTP exception handler with structured error response."""
    error_response = ErrorResponse(
        error=exc.detail,
        error_code=str(exc.status_code),
        details=None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=error_response.request_id,
    )

    return JSONResponse(status_code=exc.status_code, content=error_response.model_dump(mode="json"))


@app.exception_handler(DiagramBuildError)
async def diagram_build_exception_handler(request: Request, exc: DiagramBuildError) -> JSONResponse:
    """Handle defects in converting a matched tree into a diagram."""
    error_response = ErrorResponse(
        error="Diagram construction failed due to an internal error.",
        error_code="DIAGRAM_BUILD_ERROR",
        details={"message": str(exc)} if settings.debug else None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error(
        "Diagram build error",
        error_message=str(exc),
        request_id=error_response.request_id,
    )

    return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))


@app.exception_handler(TextOutputUnavailable)
async def text_output_unavailable_handler(request: Request, exc: TextOutputUnavailable) -> JSONResponse:
    """Report that this deployment cannot produce text diagrams."""
    error_response = ErrorResponse(
        error=str(exc),
        error_code="TEXT_OUTPUT_UNAVAILABLE",
        details={"supported_formats": [OutputFormat.SVG.value]},
        request_id=getattr(request.state, "request_id", None),
    )

    logger.warning("Text output unavailable", request_id=error_response.request_id)

    return JSONResponse(status_code=501, content=error_response.model_dump(mode="json"))


@app.exception_handler(RenderingError)
async def rendering_exception_handler(request: Request, exc: RenderingError) -> JSONResponse:
    """Handle failures handing a diagram tree to the layout engine."""
    error_response = ErrorResponse(
        error="Diagram rendering failed due to an internal error.",
        error_code="RENDERING_ERROR",
        details={"message": str(exc)} if settings.debug else None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error(
        "Rendering error",
        error_message=str(exc),
        request_id=error_response.request_id,
    )

    return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """General exception handler for unexpected errors."""
    error_response = ErrorResponse(
        error="Internal server error",
        error_code="INTERNAL_ERROR",
        details={"exception": str(exc)} if settings.debug else None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error(
        "Unhandled exception",
        exception=str(exc),
        request_id=error_response.request_id,
        exc_info=True,
    )

    return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))


# Health check endpoint
@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    """
    Get application health status.

    The service is healthy once the grammar parser has been built.
    """
    logger.info("Health check requested")

    loaded = grammar_loaded()
    health_status = HealthStatus(
        status="healthy" if loaded else "degraded",
        version=settings.app_version,
        grammar_loaded=loaded,
        environment=settings.environment,
    )

    logger.info("Health check completed", status=health_status.status)
    return health_status


# DSL validation endpoint
@app.post("/validate", response_model=DSLValidationResponse, tags=["DSL"])
async def validate_dsl(request: DSLValidationRequest) -> DSLValidationResponse:
    """
    Check that DSL source compiles without returning the rendered output.

    Args:
        request: DSL validation request

    Returns:
        Validation result with the diagnostic for invalid source
    """
    logger.info("DSL validation requested", content_length=len(request.dsl_content))

    result = compile_diagram(request.dsl_content)

    if isinstance(result, ParseFailure):
        response = DSLValidationResponse(valid=False, diagnostic=result, diagram_count=0)
    else:
        response = DSLValidationResponse(valid=True, diagnostic=None, diagram_count=result.diagram_count)

    logger.info("DSL validation completed", valid=response.valid, diagrams=response.diagram_count)
    return response


# Synchronous rendering endpoint
@app.post("/render", response_model=RenderResponse, tags=["Rendering"])
async def render_dsl(request: DSLRenderRequest) -> RenderResponse:
    """
    Render DSL source as SVG or text.

    Args:
        request: DSL render request

    Returns:
        Render result with the serialized diagram or a diagnostic
    """
    start_time = datetime.now(timezone.utc)
    options = request.options

    logger.info(
        "Render requested",
        content_length=len(request.dsl_content),
        output_format=options.output_format.value,
        custom_css=request.css is not None,
    )

    result = compile_diagram(request.dsl_content, request.css)

    if isinstance(result, ParseFailure):
        processing_time = (datetime.now(timezone.utc) - start_time).total_seconds()
        return RenderResponse(
            success=False,
            output_format=options.output_format,
            diagnostic=result,
            processing_time=processing_time,
        )

    if options.output_format == OutputFormat.TEXT:
        output = result.to_text()
    else:
        output = result.to_svg()

    processing_time = (datetime.now(timezone.utc) - start_time).total_seconds()

    response = RenderResponse(
        success=True,
        output=output,
        output_format=options.output_format,
        width=result.width,
        height=result.height,
        tree=result.root if options.include_tree else None,
        processing_time=processing_time,
    )

    logger.info(
        "Render completed successfully",
        output_size=len(output),
        processing_time=processing_time,
    )

    return response


# Root endpoint
@app.get("/", tags=["General"])
async def root() -> dict[str, Any]:
    """
    Root endpoint with basic API information.
    """
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Compile railroad diagram DSL source into SVG and text diagrams",
        "docs_url": "/docs" if settings.debug else None,
        "health_check": "/health",
        "endpoints": {
            "validate_dsl": "POST /validate",
            "render": "POST /render",
        },
    }


# Development server runner
def run_development_server() -> None:
    """Run development server with auto-reload."""
    uvicorn.run(
        "railroad_dsl.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        log_config=None,  # keep the dictConfig from railroad_dsl.config.logging
        access_log=True,
    )


def create_app() -> FastAPI:
    """
    Application factory function for creating FastAPI app instance.
    Used by integration tests and external deployment scripts.

    Returns:
        FastAPI application instance
    """
    return app


if __name__ == "__main__":
    run_development_server()
