import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("app.db.session")


def build_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for `database_url`.

    The default ``sqlite://`` URL is an in-memory database; it is held on a
    single shared connection so every thread sees the same tables.
    """
    logger.info("Initializing DB engine (checking configuration)")

    if not database_url:
        logger.error("DATABASE_URL is not configured. Set the DATABASE_URL env var.")
        raise RuntimeError("DATABASE_URL is not configured. Set the DATABASE_URL env var.")

    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    # enable pool_pre_ping to avoid stale/closed connections
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)
