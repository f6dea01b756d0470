"""
Реестр правил.
Управляет регистрацией, конфигурацией и применением правил.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Type

from .base import BaseRule, FindingLevel
from ..core.exceptions import ConfigurationError
from ..core.orm import ModelDescriptor
from ..introspection.base import SchemaIntrospector

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Реестр для управления правилами.

    Ошибки правил (в том числе ошибки интроспекции схемы) не перехватываются:
    частичного результата прогона не бывает.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = dict(config or {})
        self._rules: Dict[str, BaseRule] = {}
        self._init_defaults()

    def _init_defaults(self) -> None:
        defaults = {
            "rule_order": "by_id",  # by_id | by_criticality | custom
            "max_total_findings": None,
            "rules": {},
        }
        for k, v in defaults.items():
            self.config.setdefault(k, v)

    def register_rule(self, rule_class: Type[BaseRule], rule_config: Optional[Dict[str, Any]] = None) -> None:
        if not issubclass(rule_class, BaseRule):
            raise TypeError(f"{rule_class} должен быть подклассом BaseRule")

        rule_id = rule_class.RULE_ID
        config = rule_config or {}

        # глобальная конфигурация под правило
        if rule_id in self.config.get("rules", {}):
            config = {**self.config["rules"][rule_id], **config}

        instance = rule_class(config)
        if not instance.validate():
            raise ConfigurationError(f"Правило {rule_id} не прошло валидацию", config_key=rule_id)

        self._rules[rule_id] = instance

    def register_rules(self, rules: List[Type[BaseRule]], configs: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        configs = configs or {}
        for rc in rules:
            self.register_rule(rc, configs.get(rc.RULE_ID, {}))

    def get_rule(self, rule_id: str) -> Optional[BaseRule]:
        return self._rules.get(rule_id)

    def get_enabled_rules(self) -> List[BaseRule]:
        return [r for r in self._rules.values() if r.is_enabled()]

    def _order_rules(self, rules: List[BaseRule]) -> List[BaseRule]:
        order = self.config.get("rule_order", "by_id")

        if order == "by_id":
            return sorted(rules, key=lambda r: r.RULE_ID)

        if order == "by_criticality":
            priority = {
                FindingLevel.CRITICAL.value: 0,
                FindingLevel.HIGH.value: 1,
                FindingLevel.MEDIUM.value: 2,
                FindingLevel.LOW.value: 3,
            }
            return sorted(rules, key=lambda r: priority.get(r.config.get("level", r.DEFAULT_LEVEL.value), 99))

        # custom: порядок задаётся списком ids
        if order == "custom":
            custom = self.config.get("custom_order", [])
            index = {rid: i for i, rid in enumerate(custom)}
            return sorted(rules, key=lambda r: index.get(r.RULE_ID, 10_000))

        raise ConfigurationError(f"Неизвестный порядок правил: {order}", "rule_order", str(order))

    def apply_all(
        self,
        models: Sequence[ModelDescriptor],
        introspector: SchemaIntrospector,
    ) -> Dict[str, Any]:
        """
        Применяет включённые правила.

        summary.total_findings - число нарушений до любых лимитов,
        summary.reported_findings - сколько из них попало в findings.
        """
        enabled = self.get_enabled_rules()
        ordered = self._order_rules(enabled)

        all_findings: List[Dict[str, Any]] = []
        stats: List[Dict[str, Any]] = []

        for rule in ordered:
            raw = rule.apply(models, introspector) or []
            processed = rule.post_process_conflicts(raw)

            logger.debug("%s: находок %d", rule.RULE_ID, len(raw))
            all_findings.extend(processed)

            stats.append({
                "rule_id": rule.RULE_ID,
                "rule_name": rule.RULE_NAME,
                "level": rule.level,
                "findings": len(raw),
                "details": {
                    "total_raw": len(raw),
                    "total_reported": len(processed),
                },
            })

        total = sum(s["details"]["total_raw"] for s in stats)

        max_total = self.config.get("max_total_findings")
        reported = all_findings
        if max_total is not None and len(all_findings) > int(max_total):
            reported = all_findings[:int(max_total)]
            logger.info("Обнаружено %d находок, в отчёт попадут первые %d", total, len(reported))

        summary = {
            "total_findings": total,
            "reported_findings": len(reported),
            "truncated": len(reported) < total,
            "total_rules": len(self._rules),
            "enabled_rules": len(enabled),
        }

        return {"findings": reported, "statistics": stats, "summary": summary}
