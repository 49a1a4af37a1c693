# backend/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, get_settings
from database import Database
from errors import RepositoryError

# Routers
from routes.export import router as export_router
from routes.logs import router as logs_router
from routes.products import router as products_router
from routes.stats import router as stats_router
from routes.stock import router as stock_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    database = Database(settings)
    database.create_all()

    app = FastAPI(title="Inventory API", version="1.0.0")
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RepositoryError)
    async def repository_error_handler(request: Request, exc: RepositoryError):
        if exc.http_status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content={"detail": exc.message})

    # Router registration
    app.include_router(products_router)
    app.include_router(stats_router)
    app.include_router(export_router)
    app.include_router(logs_router)
    app.include_router(stock_router, prefix="/stock")

    @app.get("/")
    def read_root():
        return {"message": "Inventory API is running"}

    logger.info("Inventory API ready on %s", database.engine.url.render_as_string(hide_password=True))
    return app
