#!/usr/bin/env python3
"""
Entrypoint для Bus Tracker API.

Запуск:
    python entrypoints/entrypoint_api.py

Хост и порт берутся из config.json (API_HOST, API_PORT).
"""

import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

import uvicorn

from src.config import settings


def main() -> None:
    """Запустить Bus Tracker API."""
    uvicorn.run(
        "src.services.api.app:create_app",
        factory=True,
        host=settings.deployment.API_HOST,
        port=settings.deployment.API_PORT,
        reload=settings.system.DEBUG,
        log_level=settings.system.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
