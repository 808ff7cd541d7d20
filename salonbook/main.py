# salonbook/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from salonbook.catalog import seed_service_categories
from salonbook.config import settings
from salonbook.db import create_db_and_tables, new_session
from salonbook.deps import get_memory_store
from salonbook.errors import SalonBookError, UnauthenticatedError
from salonbook.logging_config import setup_logging
from salonbook.routers import (
    appointments_routes,
    auth_routes,
    offers_routes,
    reviews_routes,
    salons_routes,
    services_routes,
    users_routes,
)
from salonbook.store import SqlStore

logger = logging.getLogger(__name__)


def _seed():
    if settings.store_backend == "memory":
        seed_service_categories(get_memory_store())
        return
    with new_session() as session:
        seed_service_categories(SqlStore(session))


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.store_backend != "memory":
        create_db_and_tables()
    if settings.seed_categories:
        _seed()
    logger.info("%s started with %s store", settings.project_name, settings.store_backend)
    yield


async def salonbook_error_handler(request: Request, exc: SalonBookError):
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


def create_app() -> FastAPI:
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.add_exception_handler(SalonBookError, salonbook_error_handler)

    for module in (
        auth_routes,
        users_routes,
        salons_routes,
        services_routes,
        offers_routes,
        appointments_routes,
        reviews_routes,
    ):
        app.include_router(module.router, prefix="/api")

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("salonbook.main:app", host="0.0.0.0", port=8000)
