import asyncio
import logging
import sys

from nfclink.core.config import get_settings
from nfclink.core.logging import configure_logging
from nfclink.db.base import Base
from nfclink.db.session import create_engine_from_settings

logger = logging.getLogger(__name__)


async def init_models() -> None:
    # Register every table on Base.metadata
    import nfclink.models  # noqa: F401

    engine = create_engine_from_settings(get_settings())
    try:
        async with engine.begin() as conn:
            logger.info("Creating tables...")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables created")
    except Exception:
        logger.exception("Table creation failed")
        raise
    finally:
        await engine.dispose()


def main() -> None:
    configure_logging(get_settings())
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(init_models())
