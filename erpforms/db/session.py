"""Engine, session factory and unit-of-work scope.

Each process serves one tenant database; ``database_url`` selects it.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Type

from sqlalchemy import Integer, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.types import TypeDecorator

from erpforms.core.config import get_settings

settings = get_settings()

engine = create_engine(settings.database_url, echo=settings.database_echo, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class StatusType(TypeDecorator):
    """Persist a form status enum as a nullable integer.

    NULL in the database is exposed as the enum's ``UNSET`` member, so a
    status read back is never None.
    """

    impl = Integer
    cache_ok = True

    def __init__(self, enum_class: Type, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value, dialect) -> Optional[int]:
        if value is None or value == self.enum_class.UNSET:
            return None
        return int(self.enum_class(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return self.enum_class.UNSET
        return self.enum_class(value)


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """
    Scope a block of persistence calls as one atomic unit.

    Commits on success and rolls back on any exception. When the caller
    already owns a transaction the block runs inside a SAVEPOINT, so a failure
    leaves the caller's pending state exactly as it was.
    """
    if session.in_transaction():
        with session.begin_nested():
            yield session
    else:
        with session.begin():
            yield session
