# backend/database.py
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def normalize_database_url(url: str) -> str:
    # Hosted Postgres often hands out postgres://, SQLAlchemy wants postgresql://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def make_engine(url: str) -> Engine:
    url = normalize_database_url(url)

    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        # In-memory SQLite only lives as long as its single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(url, connect_args=connect_args)

    return create_engine(url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine) -> None:
    # Register every model on Base.metadata before creating tables
    import models.log  # noqa: F401
    import models.position  # noqa: F401
    import models.product  # noqa: F401
    import models.users  # noqa: F401
    import models.warehouse  # noqa: F401

    Base.metadata.create_all(bind=engine)
