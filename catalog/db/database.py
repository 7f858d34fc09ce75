"""
Конфигурация базы данных.

Содержит движок SQLAlchemy, фабрику сессий и границу транзакции,
переводящую ошибки драйвера в ошибки каталога.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from catalog.core.config import settings
from catalog.core.errors import ConflictError, DependencyError, ValidationError

logger = logging.getLogger(__name__)

# SQLSTATE unique_violation
_UNIQUE_VIOLATION = "23505"


def _engine_options(url: str) -> dict:
    """Параметры create_engine в зависимости от диалекта."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    options = {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    }
    if settings.DB_SSL:
        options["connect_args"] = {"sslmode": "require"}
    return options


# Создание движка SQLAlchemy
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Проверка соединения перед использованием
    echo=bool(settings.DEBUG),  # Логирование SQL запросов в режиме отладки
    **_engine_options(settings.database_url),
)


# Фабрика сессий базы данных
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def _is_unique_violation(error: IntegrityError) -> bool:
    """Отличает нарушение уникальности от прочих ограничений (FK, CHECK, NOT NULL)."""
    pgcode = getattr(error.orig, "pgcode", None)
    if pgcode is not None:
        return pgcode == _UNIQUE_VIOLATION
    return "unique" in str(error.orig).lower()


def get_db() -> Generator:
    """
    Dependency для получения сессии базы данных.

    Yields:
        Session: Сессия SQLAlchemy

    Note:
        Автоматически закрывает сессию после использования
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Граница транзакции для многошаговых операций записи.

    Фиксирует изменения при успешном завершении блока и откатывает
    их при любой ошибке.

    Raises:
        ConflictError: Нарушено ограничение уникальности
        ValidationError: Нарушено другое ограничение целостности,
            например ссылка на несуществующую запись
        DependencyError: Ошибка драйвера или недоступность БД
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Integrity violation: %s", e.orig)
        if _is_unique_violation(e):
            raise ConflictError("Operation conflicts with existing data") from e
        raise ValidationError("Operation violates data integrity constraints") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database operation failed")
        raise DependencyError("Database operation failed") from e
    except Exception:
        db.rollback()
        raise
