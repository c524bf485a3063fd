#!/usr/bin/env python3
# main.py
"""
Главная точка входа Bus Tracker.
Запускает API, воркер очистки или применение схемы в зависимости от аргументов.
"""

from __future__ import annotations

import asyncio
import os
import sys

from src.config import settings
from src.config.loader import get_project_root
from src.common.logger import setup_logging, log_info, log_error
from src.common.constants import TypeMsg
from src.infra.database import DatabaseManager


VALID_MODES = ("api", "sweep", "sweep_once", "schema")


async def run_api() -> None:
    """Запускает HTTP/WebSocket API (uvicorn)."""
    import uvicorn

    await log_info(
        f"Запуск API на {settings.deployment.API_HOST}:{settings.deployment.API_PORT}...",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.api.app:create_app",
        factory=True,
        host=settings.deployment.API_HOST,
        port=settings.deployment.API_PORT,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info("API: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


async def run_sweep(once: bool) -> None:
    """Запускает воркер удаления просроченной геолокации."""
    from src.worker.runner import run_sweeper

    await run_sweeper(once=once)


async def run_schema() -> None:
    """Применяет migrations/init.sql и выходит."""
    db = DatabaseManager.from_settings(settings.database)
    await db.connect()
    try:
        await db.apply_schema(get_project_root() / "migrations" / "init.sql")
    finally:
        await db.disconnect()


async def main(mode: str) -> None:
    """
    Главная функция запуска.

    Args:
        mode: Режим запуска (api, sweep, sweep_once, schema)
    """
    setup_logging()

    await log_info(
        f"Bus Tracker v{settings.system.VERSION}: запуск в режиме '{mode}'",
        type_msg=TypeMsg.INFO,
    )

    try:
        if mode == "api":
            await run_api()
        elif mode == "sweep":
            await run_sweep(once=False)
        elif mode == "sweep_once":
            await run_sweep(once=True)
        elif mode == "schema":
            await run_schema()
        else:
            await log_error(f"Неизвестный режим: {mode}")
            print_usage()
    except asyncio.CancelledError:
        await log_info("Задача отменена, выполняется graceful shutdown", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка: {e}", exc_info=True)
        raise
    finally:
        await log_info("Приложение остановлено", type_msg=TypeMsg.INFO)


def print_usage() -> None:
    """Выводит справку по использованию."""
    print("""
Bus Tracker: отслеживание автобусов в реальном времени

Использование:
    python main.py [mode]

Режимы:
    api          HTTP/WebSocket API (по умолчанию)
    sweep        воркер удаления геолокации старше срока хранения
    sweep_once   один цикл удаления и выход
    schema       применить migrations/init.sql и выйти

Режим по умолчанию можно задать переменной окружения COMPONENT_MODE.

Примеры:
    python main.py
    python main.py sweep_once
    """)


if __name__ == "__main__":
    mode = os.getenv("COMPONENT_MODE", "api")

    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        elif arg in VALID_MODES:
            mode = arg
        else:
            print(f"Неизвестный режим: {arg}")
            print_usage()
            sys.exit(1)

    try:
        asyncio.run(main(mode))
    except KeyboardInterrupt:
        pass
