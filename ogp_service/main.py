"""
OGP Image Service FastAPI application entry point.
This service renders social preview images and the share pages that point to them.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import InvalidRenderRequest
from .core.logging import setup_logging
from .routes.og_routes import INVALID_ENDPOINT, router as og_router
from .utils.debug import print_step


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application for the OGP service.

    Returns:
        Configured FastAPI application
    """
    setup_logging()

    app = FastAPI(
        title="Sakura OGP Image Service",
        version="1.0.0",
        description="Dynamic Open Graph preview images rendered from text",
        debug=settings.DEBUG
    )

    print_step("CORS Configuration", {"origins": settings.ALL_CORS_ORIGINS}, "input")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALL_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            print_step("Unknown Endpoint", request.url.path, "error")
            return PlainTextResponse(INVALID_ENDPOINT, status_code=400)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        print_step("Invalid Request Parameters", {"path": request.url.path, "errors": exc.errors()}, "error")
        return PlainTextResponse(INVALID_ENDPOINT, status_code=400)

    @app.exception_handler(InvalidRenderRequest)
    async def invalid_render_request_handler(request: Request, exc: InvalidRenderRequest):
        print_step("Invalid Render Request", str(exc), "error")
        return PlainTextResponse(INVALID_ENDPOINT, status_code=400)

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": "ogp"}

    app.include_router(og_router)
    print_step("FastAPI App Initialization", "FastAPI app, CORS middleware and routes configured", "output")

    return app


# Create the app instance
app = create_app()
