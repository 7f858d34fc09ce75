#!/usr/bin/env python3
"""
Скрипт для инициализации и миграции базы данных
"""

import sys
from pathlib import Path

# Добавляем путь к модулю catalog
sys.path.insert(0, str(Path(__file__).parent))

from catalog.core.config import settings
from catalog.core.errors import CatalogError
from catalog.core.logging_config import setup_logging
from catalog.db.database import SessionLocal
from catalog.db.migrations import MIGRATIONS, run_migrations


def init_database() -> bool:
    """Применяет все непримененные миграции."""
    print("🗄️ Миграция базы данных...")

    db = SessionLocal()
    try:
        applied = run_migrations(db)
    except CatalogError as e:
        print(f"❌ Ошибка миграции: {e.message}")
        return False
    finally:
        db.close()

    if not applied:
        print("✅ База данных в актуальном состоянии")
        return True

    print(f"✅ Применено миграций: {len(applied)}")
    descriptions = {m.version: m.description for m in MIGRATIONS}
    for version in applied:
        print(f"  - {version}: {descriptions[version]}")
    return True


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    success = init_database()
    if not success:
        sys.exit(1)
