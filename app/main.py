# main.py
# Main application file for the FastAPI recipe service.

import logging
import logging.config
import os
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from fastapi.middleware.cors import CORSMiddleware

from app import models
from app import schemas
from app.api import auth, recipes, users
from app.api.deps import get_current_user
from app.core.config import Settings, settings as default_settings
from app.core.context import AppContext
from app.core.errors import RecipeAPIError, StoreUnavailable
from app.core.logging_middleware import StructuredLoggingMiddleware

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every response. Outside production the CSP also
    admits the CDN assets of the /api-docs page.
    """

    def __init__(self, app, environment: str = "production"):
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if self.environment != "production":
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "img-src 'self' data: https://fastapi.tiangolo.com; "
                "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net"
            )
        else:
            response.headers["Content-Security-Policy"] = "default-src 'self'"
        return response


# --- Exception Handlers ---
# Every failure is rendered as {"error": ..., "message": ...}

def error_response(status_code: int, error: str, message: str, headers=None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, **extra},
        headers=headers,
    )


async def recipe_api_error_handler(request: Request, exc: RecipeAPIError):
    return error_response(exc.status_code, exc.error, exc.message, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(
        422,
        "ValidationError",
        "Request body or parameters are invalid",
        detail=jsonable_encoder(exc.errors()),
    )


async def store_unavailable_handler(request: Request, exc: OperationalError):
    # Driver detail stays in the logs
    logger.error(f"Database unavailable: {exc}")
    error = StoreUnavailable()
    return error_response(error.status_code, error.error, error.message)


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Unexpected database error")
    return error_response(500, "StoreError", "An internal storage error occurred")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Routing failures such as 404 and 405, e.g. "Method Not Allowed" -> "MethodNotAllowed"
    error = HTTPStatus(exc.status_code).phrase.replace(" ", "").replace("-", "")
    return error_response(exc.status_code, error, str(exc.detail), headers=getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "InternalError", "An internal server error occurred")


def configure_logging(config_path: str) -> None:
    if os.path.exists(config_path):
        logging.config.fileConfig(config_path, disable_existing_loggers=False)
    else:
        logging.basicConfig(level=logging.INFO)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Builds the application and the single AppContext it shares between requests.
    """
    settings = settings or default_settings
    context = AppContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create all database tables if they don't exist
        models.Base.metadata.create_all(bind=context.engine)
        logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
        yield
        context.engine.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="API for managing recipes with JWT authentication.",
        version="1.0.0",
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_exception_handler(RecipeAPIError, recipe_api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(OperationalError, store_unavailable_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )
    app.add_middleware(SecurityHeadersMiddleware, environment=settings.ENVIRONMENT)

    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    app.include_router(recipes.router, prefix="/recipes", tags=["Recipes"])

    @app.get("/", tags=["Root"])
    async def read_root():
        """
        Root endpoint to check if the API is running.
        """
        logger.debug("Root endpoint accessed")
        return {"message": "Welcome to the Recipe API!"}

    @app.get("/protected", tags=["Authentication"])
    def read_protected(current_user: models.User = Depends(get_current_user)):
        """
        Protected route for checking that a token works.
        """
        return {
            "message": "Welcome to the protected route!",
            "user": schemas.User.model_validate(current_user).model_dump(mode="json"),
        }

    return app


configure_logging(default_settings.LOGGING_CONFIG)

app = create_app()


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=default_settings.HOST, port=default_settings.PORT, reload=True)
