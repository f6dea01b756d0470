# __init__.py для пакета detection
"""
Пакет detection: применение правил и отчётность.

- SchemaDoctor - orchestrator конвейера
- Reporter - формирование и экспорт отчётов
"""

from .orchestrator import SchemaDoctor
from .reporter import Reporter

__all__ = [
    "SchemaDoctor",
    "Reporter",
]
