# salonbook/db.py

from sqlmodel import SQLModel, create_engine, Session

from salonbook.config import settings
from salonbook import models  # noqa: F401  registers the tables on SQLModel.metadata

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}  # required for SQLite + FastAPI

# Engine = connection to the database
engine = create_engine(
    settings.database_url,
    echo=settings.sql_echo,
    connect_args=connect_args,
)


def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)


def new_session(bind=None) -> Session:
    # keep attribute values readable after commit; responses are serialised later
    return Session(bind or engine, expire_on_commit=False)
