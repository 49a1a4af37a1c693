# ==============================================================================
# GENERIC REPOSITORY CONTRACT
# ==============================================================================
# Every entity type gets one concrete repository implementing the four
# operations below. Repositories receive the Database explicitly; there are
# no module-level instances.
#
# Unit of work:
#   - called without ``db``: the operation opens a session, runs, commits and
#     closes before returning
#   - called with ``db``: the operation joins the caller's open session and
#     leaves commit/rollback to the caller (multi-step flows)
# ==============================================================================

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generic, Iterator, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import Database
from errors import StorageError

T = TypeVar("T")

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into StorageError, keeping the driver message."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Storage failure in %s", operation)
        raise StorageError(f"In {operation}: {exc}") from exc


class Repository(ABC, Generic[T]):
    """
    Data-access contract for one entity type.

    ``select`` takes a filter prototype: a partially populated entity whose
    populated fields become search criteria. ``flag`` carries a per-repository
    extra switch (critical-only for products).
    """

    def __init__(self, database: Database):
        self.database = database

    @abstractmethod
    def select(self, prototype: Optional[T] = None, flag: bool = False) -> List[T]:
        """Entities matching the prototype; all of them when it is None."""

    @abstractmethod
    def get(self, entity_id: int) -> T:
        """Entity with the given id, NotFoundError otherwise."""

    @abstractmethod
    def insert(self, entity: T, db: Optional[Session] = None) -> int:
        """Persist a new entity and return the generated id (-1 if none)."""

    @abstractmethod
    def update(self, entity: T, db: Optional[Session] = None) -> None:
        """Overwrite the stored entity identified by ``entity.id``."""

    @abstractmethod
    def delete(self, entity: T, db: Optional[Session] = None) -> None:
        """Remove the stored entity identified by ``entity.id``."""

    @contextmanager
    def _session(self, operation: str, db: Optional[Session] = None) -> Iterator[Session]:
        if db is not None:
            with storage_errors(operation):
                yield db
            return

        session = self.database.session()
        try:
            with storage_errors(operation):
                yield session
                session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
