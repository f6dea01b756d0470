"""
Координатор всего процесса сверки схемы и моделей.
"""

import logging
import time
from typing import Any, Dict, Optional, Sequence

from schema_doctor.config import merge_config
from schema_doctor.core.orm import ModelDescriptor
from schema_doctor.introspection import SchemaIntrospector, DDLIntrospector
from schema_doctor.rules import RuleRegistry, DEFAULT_RULES

from .reporter import Reporter

logger = logging.getLogger(__name__)


class SchemaDoctor:
    """
    Основной класс: применяет правила к моделям и схеме и собирает отчёт.
    Ошибки интроспекции и правил пробрасываются вызывающему.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = merge_config(config)

        self.registry = RuleRegistry(self.config)
        self.registry.register_rules(DEFAULT_RULES)
        self.reporter = Reporter(self.config.get("report", {}))

        self.stats: Dict[str, float] = {
            "parsing_time": 0.0,
            "rule_application_time": 0.0,
            "total_time": 0.0,
        }

    # ==========================================================
    # PUBLIC API
    # ==========================================================

    def run(
        self,
        models: Sequence[ModelDescriptor],
        introspector: SchemaIntrospector,
        parsing_time: float = 0.0,
    ) -> Dict[str, Any]:
        total_start = time.perf_counter()
        self.stats["parsing_time"] = parsing_time

        t0 = time.perf_counter()
        result = self.registry.apply_all(models, introspector)
        self.stats["rule_application_time"] = time.perf_counter() - t0

        self.stats["total_time"] = self.stats["parsing_time"] + time.perf_counter() - total_start

        report = self.reporter.build_report(
            result=result,
            models=models,
            schema=introspector.describe(),
            performance=dict(self.stats),
        )
        logger.info("Проверено моделей: %d, находок: %d",
                    len(models), report["summary"]["total_findings"])
        return report

    def run_sql(self, models: Sequence[ModelDescriptor], sql_text: str) -> Dict[str, Any]:
        """
        Схема из DDL-текста.
        """
        t0 = time.perf_counter()
        introspector = DDLIntrospector.from_sql(sql_text, name="schema")
        return self.run(models, introspector, parsing_time=time.perf_counter() - t0)
