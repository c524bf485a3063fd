# src/shared/__init__.py
"""
Общий код между модулями.

Модули:
- models: базовые Pydantic-модели и ответы API
"""

__all__: list[str] = []
