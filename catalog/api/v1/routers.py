"""
Основной роутер API.

Подключает все endpoint'ы приложения.
"""

from fastapi import APIRouter

from catalog.api.v1.endpoints import collections, currency, mega_menu, orders, payments, products

# Создание основного роутера API
api_router = APIRouter()

# Подключение роутеров для различных ресурсов
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(collections.router, prefix="/collections", tags=["collections"])
api_router.include_router(mega_menu.router, prefix="/mega-menu", tags=["mega-menu"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(currency.router, prefix="/currency", tags=["currency"])
