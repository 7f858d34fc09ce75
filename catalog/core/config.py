"""
Конфигурация приложения.

Содержит настройки подключения к БД, пула соединений, логирования
и начальной учетной записи администратора.
"""

from typing import List, Optional

from pydantic import Field
from sqlalchemy.engine import URL
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Настройки приложения, загружаемые из переменных окружения.

    Attributes:
        DATABASE_URL: Полный URL подключения (перекрывает DB_* параметры)
        DB_HOST: Хост PostgreSQL
        DB_PORT: Порт PostgreSQL
        DB_USER: Пользователь БД
        DB_PASSWORD: Пароль пользователя БД
        DB_NAME: Имя базы данных
        DB_SSL: Требовать SSL при подключении
        DB_POOL_SIZE: Размер пула соединений
        DB_MAX_OVERFLOW: Дополнительные соединения сверх пула
        DEBUG: Режим отладки (логирование SQL)
        LOG_LEVEL: Уровень логирования
    """

    DATABASE_URL: Optional[str] = Field(
        default=None, description="URL подключения (перекрывает DB_*)"
    )
    DB_HOST: str = Field(default="localhost", description="Хост PostgreSQL")
    DB_PORT: int = Field(default=5432, description="Порт PostgreSQL")
    DB_USER: str = Field(default="postgres", description="Пользователь БД")
    DB_PASSWORD: str = Field(default="postgres", description="Пароль БД")
    DB_NAME: str = Field(default="ecommerce", description="Имя базы данных")
    DB_SSL: bool = Field(default=False, description="Подключение по SSL")

    # Пул соединений
    DB_POOL_SIZE: int = Field(default=5, description="Размер пула соединений")
    DB_MAX_OVERFLOW: int = Field(
        default=10, description="Соединения сверх размера пула"
    )

    DEBUG: bool = Field(default=False, description="Режим отладки")
    LOG_LEVEL: str = Field(default="INFO", description="Уровень логирования")
    CORS_ORIGINS: List[str] = Field(
        default=["*"], description="Разрешенные источники для CORS"
    )

    DEFAULT_PAGE_LIMIT: int = Field(
        default=10, description="Размер страницы товаров по умолчанию"
    )
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=False, description="Применять миграции при запуске"
    )

    # Начальный администратор (создается миграцией, если задан пароль)
    ADMIN_USERNAME: str = Field(default="admin", description="Логин администратора")
    ADMIN_EMAIL: str = Field(
        default="admin@example.com", description="Email администратора"
    )
    ADMIN_PASSWORD: Optional[str] = Field(
        default=None, description="Пароль администратора"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def database_url(self) -> str:
        """URL подключения к БД с учетом DATABASE_URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)


# Глобальный экземпляр настроек
settings = Settings()
