import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from category_api import config
from category_api.db.base_class import Base
from category_api.db.database import engine, check_db_initialized
from category_api.db.models import *  # noqa: F401,F403  (register tables)
from category_api.routers.category import router as category_router
from category_api.routers.category.helpers import INVALID_IMAGE_MESSAGE
from category_api.services.categories import CategoryNotFoundError
from category_api.utils.image import InvalidImageError
from category_api.utils.storage import DerivativeStorageError, DerivativeStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup / shutdown handler.

    • Create tables.
    • Make sure the upload folder exists.
    """
    if check_db_initialized():
        logger.info("Database already initialised – skipping table creation.")
    else:
        logger.info("Creating database tables…")
        Base.metadata.create_all(bind=engine)

    os.makedirs(app.state.derivative_store.upload_dir, exist_ok=True)

    yield


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CategoryNotFoundError)
    async def category_not_found(request: Request, exc: CategoryNotFoundError):
        return JSONResponse(status_code=404, content={"detail": "Category not found"})

    @app.exception_handler(InvalidImageError)
    async def invalid_image(request: Request, exc: InvalidImageError):
        logger.info("Rejected upload on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=400, content={"image": [INVALID_IMAGE_MESSAGE]})

    @app.exception_handler(DerivativeStorageError)
    async def storage_failed(request: Request, exc: DerivativeStorageError):
        logger.error("Storage failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Failed to store category image"},
        )


def create_app(upload_dir: Optional[str] = None) -> FastAPI:
    configure_logging()

    app = FastAPI(title="Category API", lifespan=lifespan)
    app.state.derivative_store = DerivativeStore(upload_dir or config.UPLOAD_DIR)

    # ------------------------------------------------------------------ #
    # CORS                                                               #
    # ------------------------------------------------------------------ #
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ------------------------------------------------------------------ #
    # Health check                                                       #
    # ------------------------------------------------------------------ #
    @app.get("/ping")
    async def ping():
        return {"message": "pong"}

    # ------------------------------------------------------------------ #
    # Routers                                                            #
    # ------------------------------------------------------------------ #
    app.include_router(category_router, tags=["category"])

    # ------------------------------------------------------------------ #
    # Static file serving – /uploads/<width>_<image>                     #
    # ------------------------------------------------------------------ #
    app.mount(
        "/uploads",
        StaticFiles(directory=app.state.derivative_store.upload_dir, check_dir=False),
        name="uploads",
    )

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("category_api.main:app", host="127.0.0.1", port=8000, reload=True)
