#!/usr/bin/env python3
"""
Entrypoint для воркера очистки геолокации.

Запуск:
    python entrypoints/entrypoint_worker.py [--once]
"""

import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

from src.worker.runner import main


if __name__ == "__main__":
    main(once="--once" in sys.argv[1:])
