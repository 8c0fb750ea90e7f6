"""
Database connection management.

Provides async SQLAlchemy engine and session factory creation for the job
state store. SQLite URLs (aiosqlite) get no pool sizing; server databases
get a pre-pinged pool.

Dependencies: sqlalchemy
System role: Database connection lifecycle management
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from bgupload.boundary.db.base import Base


def create_engine_for_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        database_url: SQLAlchemy async URL (sqlite+aiosqlite://, postgresql+asyncpg://)
        echo: Echo SQL statements to logs
        pool_size: Connection pool size (ignored for SQLite)
        max_overflow: Maximum overflow connections (ignored for SQLite)

    Returns:
        AsyncEngine: Configured async engine

    Raises:
        ArgumentError: If database URL is invalid
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)

    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,  # Verify connections before using
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory bound to an engine.

    Args:
        engine: Async engine

    Returns:
        async_sessionmaker: Session factory with explicit transaction control

    Usage:
        SessionFactory = get_async_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_all_tables(engine: AsyncEngine) -> None:
    """
    Create all tables registered on Base.metadata.

    Idempotent: existing tables are left unchanged.

    Args:
        engine: Async engine
    """
    # Import models to register them with Base.metadata
    from bgupload.boundary.db.models.job_state_model import JobStateModel  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
