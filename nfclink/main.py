# nfclink/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from nfclink.api.v1.router import api_router
from nfclink.core.config import settings
from nfclink.core.errors import register_exception_handlers
from nfclink.core.logging import configure_logging
from nfclink.db.base import Base
from nfclink.db.session import create_engine_from_settings, create_session_factory

# --- Import models so Base.metadata knows every table ---
import nfclink.models  # noqa: F401

logger = logging.getLogger(__name__)


# --- LIFESPAN: build the store handle, create tables, dispose on shutdown ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)

    if not settings.store_configured:
        logger.warning("DATABASE_URL / DATABASE_KEY not set; store-backed endpoints will answer 503")
        app.state.session_factory = None
        yield
        return

    engine = create_engine_from_settings(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.session_factory = create_session_factory(engine)
    logger.info("Record store ready (%s)", engine.url.render_as_string(hide_password=True))

    yield

    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    return {"message": "Welcome to the NFC Link Manager API"}
