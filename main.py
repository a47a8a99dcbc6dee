import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from company_employees.config import settings
from company_employees.database import Base, engine
from company_employees.exception_handlers import register_exception_handlers
from company_employees.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from company_employees.routes import companies, employees

setup_structured_logging(log_level=settings.log_level, json_format=settings.json_logs)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Tasks to run at application startup and shutdown."""
    logger.info("Starting up the application...")
    if settings.debug:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created (if not existing).")
    yield
    logger.info("Shutting down the application...")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Companies and their employees, with paging and field selection",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Pagination", "X-Request-ID", "Location"],
    )
    app.add_middleware(StructuredLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(companies.router, prefix="/api")
    app.include_router(employees.router, prefix="/api")

    @app.get("/", tags=["Root"])
    async def root():
        return {"message": "Welcome to the Company Employees API"}

    @app.get("/health", tags=["Root"])
    async def health():
        return {"status": "ok"}

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
