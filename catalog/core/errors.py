"""
Типизированные ошибки слоя репозиториев.

Сервисы выбрасывают эти исключения, а HTTP слой (catalog.main)
переводит их в коды ответа.
"""


class CatalogError(Exception):
    """Базовая ошибка каталога."""

    status_code = 500
    kind = "CatalogError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


class ValidationError(CatalogError):
    """Отсутствуют или некорректны обязательные поля."""

    status_code = 400
    kind = "ValidationError"


class NotFoundError(CatalogError):
    """Запрошенная сущность не существует."""

    status_code = 404
    kind = "NotFound"


class ConflictError(CatalogError):
    """Нарушение уникальности (например, повторяющийся slug)."""

    status_code = 409
    kind = "Conflict"


class DependencyError(CatalogError):
    """БД недоступна или запрос завершился ошибкой."""

    status_code = 500
    kind = "DependencyError"
