import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from ..client import AuthenticationError
from ..toasts import push_toast
from .deps import NotAuthenticated, get_settings
from .routes import router as pages_router
from .templating import templates

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings["log_level"])

    app = FastAPI(
        title="Workshop Dashboard",
        description="Admin dashboard for the workshop job-management API",
        version="0.1.0",
    )

    # Signed cookie session: bearer token, user, pending toasts
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings["session_secret"],
        same_site="lax",
    )

    # Add exception handlers
    @app.exception_handler(NotAuthenticated)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
        return RedirectResponse(url="/login", status_code=303)

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        logger.warning(f"Workshop API rejected the session token on {request.url.path}")
        request.session.clear()
        push_toast(request, "error", "Your session has expired. Please sign in again.")
        return RedirectResponse(url="/login", status_code=303)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        if request.method == "POST":
            # Form posts go back to the page that owns the form
            push_toast(request, "error", "Please fill in all required fields.")
            page = "/" + request.url.path.strip("/").split("/")[0]
            return RedirectResponse(url=page, status_code=303)
        return JSONResponse(
            status_code=422,
            content={"detail": exc.errors()},
        )

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return templates.TemplateResponse(
                request, "not_found.html", {"path": request.url.path}, status_code=404
            )
        return await http_exception_handler(request, exc)

    # Include page routes
    app.include_router(pages_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
