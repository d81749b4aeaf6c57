import os
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from .core.config import settings


def create_engine_for(db_url: str) -> Engine:
    # Choose engine options based on database scheme
    engine_kwargs = {}
    if db_url.startswith("sqlite"):
        engine_kwargs.update({
            "connect_args": {"check_same_thread": False}
        })
        _ensure_sqlite_dir(db_url)
    else:
        engine_kwargs.update({
            "pool_pre_ping": True,
            "pool_recycle": 300,
        })
    return create_engine(db_url, echo=settings.DEBUG, **engine_kwargs)


def _ensure_sqlite_dir(db_url: str) -> None:
    if db_url.startswith("sqlite:///"):
        db_path = db_url.replace("sqlite:///", "", 1)
    else:
        db_path = db_url.replace("sqlite://", "", 1)
    if not db_path or db_path == ":memory:":
        return
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def create_db_and_tables(engine: Engine) -> None:
    # import registers the table on SQLModel.metadata
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)
