# backend/database.py
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from config import Settings, get_settings

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    url = settings.database_url

    # Connection arguments depend on the backend
    if "sqlite" in url:
        connect_args = {"check_same_thread": False}  # SQLite only
    else:
        connect_args = {}

    # Every operation opens and closes its own connection, nothing is pooled
    return create_engine(url, connect_args=connect_args, poolclass=NullPool)


class Database:
    """Active storage target plus the session factory bound to it.

    The settings are read again whenever :meth:`configure` is called, so the
    target can be swapped between operations without touching the repositories
    that hold this object.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.configure(settings or get_settings())

    def configure(self, settings: Settings) -> None:
        self.settings = settings
        self.engine = create_db_engine(settings)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on any error."""
        db = self.session()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def create_all(self) -> None:
        # Imported for their side effect of registering tables on Base.metadata
        import models.product  # noqa: F401
        import models.movement  # noqa: F401
        import models.log  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)


def get_database(request: Request) -> Database:
    return request.app.state.database
