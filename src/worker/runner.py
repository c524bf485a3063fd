# src/worker/runner.py
"""
Запуск воркера очистки вне API-процесса.
"""

from __future__ import annotations

import asyncio

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info, setup_logging
from src.config import settings
from src.core.tracking.repository import LocationRepository
from src.infra.database import DatabaseManager
from src.worker.expiry import ExpirySweeper


async def run_sweeper(once: bool = False) -> int:
    """
    Запускает ExpirySweeper.

    Args:
        once: Выполнить один цикл и выйти

    Returns:
        Количество удалённых точек
    """
    setup_logging()
    await log_info("Запуск воркера очистки геолокации...", type_msg=TypeMsg.INFO)

    db = DatabaseManager.from_settings(settings.database)
    await db.connect()

    sweeper = ExpirySweeper.from_settings(LocationRepository(db), settings.tracking)

    try:
        if once:
            await sweeper.run_once()
        else:
            await sweeper.start()
            await sweeper.wait()
    except asyncio.CancelledError:
        await log_info("Получен сигнал остановки", type_msg=TypeMsg.INFO)
    except Exception as e:
        await log_error(f"Критическая ошибка: {e}", exc_info=True)
        raise
    finally:
        await sweeper.stop()
        await db.disconnect()
        await log_info(f"Воркер очистки остановлен, удалено {sweeper.total_deleted}", type_msg=TypeMsg.INFO)

    return sweeper.total_deleted


def main(once: bool = False) -> None:
    """Точка входа."""
    try:
        asyncio.run(run_sweeper(once=once))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
