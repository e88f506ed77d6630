from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.app.repositories.errors import DuplicateKeyError, StorageError


@contextmanager
def storage_errors(entity: str, key: str):
    """Translate SQLAlchemy failures into StorageError carrying entity and key"""
    try:
        yield
    except IntegrityError as exc:
        raise DuplicateKeyError(entity, key) from exc
    except SQLAlchemyError as exc:
        raise StorageError(entity, key, type(exc).__name__) from exc
