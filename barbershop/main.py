# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import config
from .core import AvailabilityService
from .db import engine as default_engine, init_db
from .errors import DataFetchError
from .repository import BarbershopRepository
from .routers import (
    admin_routes,
    appointments_routes,
    availability_routes,
    barbers_routes,
    reviews_routes,
    services_routes,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(engine=None, availability: AvailabilityService = None) -> FastAPI:
    """Build the API around an engine; tests pass their own."""
    engine = engine if engine is not None else default_engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info("%s booking API ready", config.BUSINESS_NAME)
        yield

    app = FastAPI(title=f"{config.BUSINESS_NAME} booking API", lifespan=lifespan)
    app.state.engine = engine
    app.state.availability = availability or AvailabilityService(BarbershopRepository(engine))

    @app.exception_handler(DataFetchError)
    async def data_fetch_error_handler(request: Request, exc: DataFetchError):
        # never answer "available" when the data could not be read
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(availability_routes.router)
    app.include_router(appointments_routes.router)
    app.include_router(barbers_routes.router)
    app.include_router(admin_routes.router)
    app.include_router(services_routes.router)
    app.include_router(reviews_routes.router)
    return app


app = create_app()
