"""
Главный модуль FastAPI приложения Catalog API.

Содержит конфигурацию приложения, middleware, обработчики ошибок
и роутеры.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from catalog.api.v1.routers import api_router
from catalog.core.config import settings
from catalog.core.errors import CatalogError, DependencyError, ValidationError
from catalog.core.logging_config import setup_logging
from catalog.db.database import SessionLocal
from catalog.db.migrations import run_migrations

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Catalog API",
    description="API каталога товаров, иерархии коллекций, мега-меню и заказов",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)


# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    error = ValidationError(errors or "Invalid request")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        "Database error on %s %s", request.method, request.url.path, exc_info=exc
    )
    error = DependencyError("Database operation failed")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Catalog API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
def startup_event():
    """
    Событие запуска приложения.

    Применяет миграции, если включен RUN_MIGRATIONS_ON_STARTUP.
    """
    if not settings.RUN_MIGRATIONS_ON_STARTUP:
        return
    db = SessionLocal()
    try:
        applied = run_migrations(db)
    finally:
        db.close()
    logger.info("Startup migrations applied: %s", applied or "none")
