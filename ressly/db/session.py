from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from loguru import logger
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, create_engine

from ressly.core.errors import ConflictError, PersistenceError


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class Database:
    """Owns the engine (and its connection pool) for the lifetime of the app.

    Built once at startup, handed to the app through ``app.state`` and
    disposed at shutdown.
    """

    def __init__(self, url: str, **engine_kwargs) -> None:
        self.url = url
        if url.startswith('sqlite'):
            engine_kwargs.setdefault('connect_args', {'check_same_thread': False})
        else:
            engine_kwargs.setdefault('pool_pre_ping', True)
        self.engine: Engine = create_engine(url, **engine_kwargs)
        if url.startswith('sqlite'):
            event.listen(self.engine, 'connect', _enable_sqlite_foreign_keys)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_session(request: Request) -> Iterator[Session]:
    with get_database(request).session() as session:
        yield session


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Commit on success, roll back on every failure.

    Uniqueness violations surface as ``ConflictError`` so callers can tell them
    apart from generic storage failures, which become ``PersistenceError``.
    """
    try:
        yield session
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        logger.info("integrity violation, rolled back: {}", exc.orig)
        raise ConflictError('Record conflicts with an existing one', kind='conflict') from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.warning("database error, rolled back: {}", exc)
        raise PersistenceError('Database operation failed') from exc
    except BaseException:
        session.rollback()
        raise
