"""Database initialization utilities."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select, text

from socialhub.infrastructure.database.connection import load_models
from socialhub.infrastructure.database.session import get_engine, get_session_maker

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


async def create_tables() -> None:
    """Create all tables directly from model metadata."""
    base = load_models()
    async with get_engine().begin() as conn:
        await conn.run_sync(base.metadata.create_all)
    logger.info("Database tables created")


async def init_database(use_migrations: bool = True) -> None:
    """
    Initialize database schema.

    Args:
        use_migrations: Run Alembic migrations instead of ``create_all``
    """
    try:
        if use_migrations:
            logger.info("Running database migrations...")
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, run_alembic_migrations)
            logger.info("Database migrations completed successfully")
        else:
            await create_tables()
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def get_alembic_config() -> Config:
    """Build Alembic config pointing at the project's migration scripts."""
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return alembic_cfg


def run_alembic_migrations() -> None:
    """Run all pending Alembic migrations."""
    command.upgrade(get_alembic_config(), "head")


async def check_database_health() -> bool:
    """Check database connectivity and health."""
    try:
        session_maker = get_session_maker()
        async with session_maker() as session:
            await session.execute(text("SELECT 1"))
            return True
    except Exception:
        logger.warning("Database health check failed", exc_info=True)
        return False


async def get_database_info() -> Dict[str, Any]:
    """Get database row counts per table."""
    base = load_models()
    try:
        session_maker = get_session_maker()
        async with session_maker() as session:
            tables = {}
            for name, table in base.metadata.tables.items():
                result = await session.execute(select(func.count()).select_from(table))
                tables[name] = result.scalar_one()

            return {
                "healthy": True,
                "tables": tables,
                "engine_info": get_engine().url.render_as_string(hide_password=True),
            }
    except Exception as e:
        return {
            "healthy": False,
            "error": str(e),
        }
