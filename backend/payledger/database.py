"""
Database Engine & Session Management
SQLAlchemy setup for the durable ledger backend.
"""
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite files get their directory created first."""
    if database_url.startswith("sqlite"):
        path = database_url.replace("sqlite:///", "", 1)
        if database_url.startswith("sqlite:///") and path not in ("", ":memory:"):
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},  # Required for SQLite
                echo=echo,
            )
        # In-memory SQLite: one shared connection for every session
        return create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables. Called once when the SQL ledger starts."""
    from payledger.models import payment as _payment_model   # noqa: F401

    Base.metadata.create_all(bind=engine)
