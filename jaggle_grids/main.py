"""
FastAPI application for the Jaggle Grids spreadsheet backend
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jaggle_grids.api import auth, spreadsheets
from jaggle_grids.config import Settings, settings as default_settings
from jaggle_grids.core.database import create_db_engine, create_session_factory, create_tables

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application with its own database engine.

    Tests pass their own Settings (e.g. an in-memory SQLite URL) to get an
    isolated store.
    """
    settings = settings or default_settings

    logging.basicConfig(level=settings.LOG_LEVEL)

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION}...")
        create_tables(engine)
        logger.info("Application startup complete")
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")
        engine.dispose()

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        version=settings.APP_VERSION,
        description="Save, list and edit spreadsheets behind a mock token login",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Request timing middleware
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        endpoint = request.scope.get("endpoint")
        message = getattr(endpoint, "bad_request_message", "Invalid request")
        return JSONResponse(status_code=400, content={"detail": message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    # Routes
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(spreadsheets.router, prefix="/api/spreadsheets", tags=["Spreadsheets"])

    @app.get("/api/health")
    def health():
        return {
            "status": "ok",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION
        }

    @app.get("/")
    def root():
        return {
            "message": f"{settings.APP_NAME} API",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/api/health"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "jaggle_grids.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower()
    )
