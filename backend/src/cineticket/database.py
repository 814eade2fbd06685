"""Database engine and session factory construction."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from cineticket.config import Settings, settings


def create_engine(config: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database.

    Pool options only apply to server databases; SQLite URLs are left on the
    dialect defaults.
    """
    options: dict = {"echo": config.database_echo, "pool_pre_ping": True}
    if not config.database_url.startswith("sqlite"):
        options["pool_size"] = config.database_pool_size
        options["pool_timeout"] = config.database_pool_timeout
        options["connect_args"] = {"timeout": config.database_pool_timeout}
    return create_async_engine(config.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory handed to the booking services; one session per operation."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Default handles for the HTTP application and scripts. Services never import
# these directly; they receive a session factory through their constructor.
engine = create_engine(settings)
AsyncSessionLocal = create_session_factory(engine)
