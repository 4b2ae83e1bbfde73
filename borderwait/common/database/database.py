import os
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Default to a local SQLite file if not specified
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///borderwait.db")

Base = declarative_base()

def make_engine(url: str = DATABASE_URL) -> Engine:
    kwargs = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Sessions are used from FastAPI's worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # Single shared connection, otherwise each session gets its own empty database
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)

def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db(bind: Engine):
    """Initialize database tables."""
    # Import models here to ensure they are registered with Base
    from . import models
    Base.metadata.create_all(bind=bind)
