"""
Схемы для пагинации.
"""

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PageMeta(BaseModel):
    """
    Метаданные постраничной выдачи.

    Attributes:
        page: Номер текущей страницы
        page_size: Размер страницы
        total: Общее количество записей
        total_pages: Общее количество страниц
    """

    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def create(cls, page: int, page_size: int, total: int) -> "PageMeta":
        """
        Создает экземпляр PageMeta с автоматическим расчетом total_pages.

        Args:
            page: Номер текущей страницы
            page_size: Размер страницы
            total: Общее количество записей

        Returns:
            PageMeta: Экземпляр с рассчитанными метаданными
        """
        total_pages = math.ceil(total / page_size) if total > 0 else 0
        return cls(page=page, page_size=page_size, total=total, total_pages=total_pages)


class OffsetPagination(BaseModel):
    """
    Пагинация по смещению.

    Attributes:
        index_from: Смещение первой записи
        limit: Количество записей на странице
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    index_from: int = Field(0, ge=0)
    limit: int = Field(10, ge=1)

    @property
    def current_page(self) -> int:
        """Номер страницы (с 1), на которую попадает index_from."""
        return self.index_from // self.limit + 1

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)
