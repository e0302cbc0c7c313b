import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from core import db, settings
from core.errors import register_error_handlers
from core.logging_config import setup_logging
from products import router as products_router

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@health_router.get("/health/ready")
async def ready(database: db.Database = Depends(db.get_database)) -> dict:
    if not await database.ping():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="database unavailable")
    return {"status": "ready"}


@health_router.get("/")
def root() -> dict:
    return {"message": "products api"}


def create_app(database: db.Database | None = None) -> FastAPI:
    """
    Build the API. Pass `database` to reuse an existing handle (tests, embedding
    hosts); otherwise the pool is created on startup from environment settings.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.db is None
        if owned:
            # Connect eagerly; DatabaseInitError propagates to the server.
            app.state.db = await db.connect(
                settings.database_url(),
                min_size=settings.pool_min_size(),
                max_size=settings.pool_max_size(),
                command_timeout=settings.command_timeout(),
            )
        try:
            yield
        finally:
            if owned:
                logger.info("db_pool_closing")
                await app.state.db.close()
                app.state.db = None

    app = FastAPI(title="Products API", lifespan=lifespan)
    app.state.db = database

    # Browser clients on other origins; the allowlist comes from CORS_ORIGINS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(products_router.router, tags=["products"])
    app.include_router(health_router, tags=["health"])
    return app


setup_logging(settings.log_level())
app = create_app()


def run() -> None:
    uvicorn.run(app, host=settings.app_host(), port=settings.app_port(), log_level=settings.log_level().lower())


if __name__ == "__main__":
    run()
