"""
Database module.

This module is part of the Mail Admin Panel project.
"""

# database.py
import logging

from sqlalchemy import MetaData
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from config import AdminConfig

logger = logging.getLogger(__name__)

# database_type -> SQLAlchemy async driver
DRIVERS = {
    'mysql': 'mysql+aiomysql',
    'mysqli': 'mysql+aiomysql',
    'pgsql': 'postgresql+asyncpg',
}


def database_url(config: AdminConfig) -> URL:
    db = config.database
    return URL.create(
        drivername=DRIVERS[db.type],
        username=db.user,
        password=db.password or None,
        host=db.host,
        database=db.name,
    )


def create_engine(config: AdminConfig, echo: bool = False) -> AsyncEngine:
    url = database_url(config)
    logger.info("Creating database engine for %s", url.render_as_string(hide_password=True))
    return create_async_engine(url, echo=echo, future=True)


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


async def init_db(engine: AsyncEngine, metadata: MetaData):
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Database tables ensured: %s", ', '.join(sorted(metadata.tables)))
