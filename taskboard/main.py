import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import CORS_ORIGINS
from .database import Database
from .errors import InternalFailure, TaskboardError
from .logging_setup import setup_logging
from .routers import auth, notifications, tasks, users

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskboardError)
    async def taskboard_error_handler(request: Request, exc: TaskboardError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %r", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
            headers=exc.headers,
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Store failure on %s %s", request.method, request.url.path)
        failure = InternalFailure()
        return JSONResponse(status_code=failure.status_code, content={"detail": failure.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "An unknown error occurred!"})


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the API around one store client.

    The client is created here when not supplied, its tables are created on
    startup and its engine is disposed on shutdown.
    """
    database = database if database is not None else Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        database.create_tables()
        logger.info("Store ready at %s", database.engine.url.render_as_string(hide_password=True))
        yield
        database.dispose()

    app = FastAPI(
        title="Taskboard API",
        description="Task management API with group assignment and completion notifications",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.database = database

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix="/api/users", tags=["auth"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])

    @app.get("/")
    def read_root():
        return {"message": "Taskboard API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
