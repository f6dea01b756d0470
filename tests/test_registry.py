"""Тесты реестра правил: регистрация, порядок, лимиты."""

import pytest

from conftest import StaticIntrospector, column
from schema_doctor.core.exceptions import ConfigurationError
from schema_doctor.core.orm import ModelDescriptor
from schema_doctor.rules import BaseRule, FindingLevel, MissingPresenceValidation, RuleRegistry


class NoIdRule(BaseRule):
    def apply(self, models, introspector):
        return []

    def message(self, **details):
        return ""


class EveryModelRule(BaseRule):
    RULE_ID = "every_model"
    RULE_NAME = "Every model"
    RULE_DESCRIPTION = "Reports each model once"
    DEFAULT_LEVEL = FindingLevel.HIGH

    def apply(self, models, introspector):
        return [self.problem(model=m.name) for m in models]

    def message(self, *, model, **_):
        return f"model {model}"


@pytest.fixture
def wide_schema():
    return StaticIntrospector({
        "things": [column(f"col_{i}") for i in range(5)],
    })


@pytest.fixture
def things():
    return [ModelDescriptor(name="Thing", table_name="things")]


class TestRegistration:

    def test_global_rule_config_applied(self):
        registry = RuleRegistry({"rules": {"missing_presence_validation": {"level": "high"}}})
        registry.register_rule(MissingPresenceValidation)
        assert registry.get_rule("missing_presence_validation").level == "high"

    def test_explicit_config_overrides_global(self):
        registry = RuleRegistry({"rules": {"missing_presence_validation": {"level": "high"}}})
        registry.register_rule(MissingPresenceValidation, {"level": "low"})
        assert registry.get_rule("missing_presence_validation").level == "low"

    def test_invalid_rule_rejected(self):
        with pytest.raises(ConfigurationError):
            RuleRegistry().register_rule(NoIdRule)

    def test_not_a_rule(self):
        with pytest.raises(TypeError):
            RuleRegistry().register_rule(dict)


class TestApplyAll:

    def test_empty_registry(self, wide_schema, things):
        result = RuleRegistry().apply_all(things, wide_schema)
        assert result["findings"] == []
        assert result["summary"]["total_findings"] == 0

    def test_disabled_rule_skipped(self, wide_schema, things):
        registry = RuleRegistry({"rules": {"missing_presence_validation": {"enabled": False}}})
        registry.register_rule(MissingPresenceValidation)
        result = registry.apply_all(things, wide_schema)
        assert result["findings"] == []
        assert result["summary"] == {
            "total_findings": 0,
            "reported_findings": 0,
            "truncated": False,
            "total_rules": 1,
            "enabled_rules": 0,
        }

    def test_statistics(self, wide_schema, things):
        registry = RuleRegistry()
        registry.register_rule(MissingPresenceValidation)
        result = registry.apply_all(things, wide_schema)
        assert len(result["findings"]) == 5
        assert result["statistics"] == [{
            "rule_id": "missing_presence_validation",
            "rule_name": "Missing presence validation",
            "level": "medium",
            "findings": 5,
            "details": {"total_raw": 5, "total_reported": 5},
        }]

    def test_no_limits_by_default(self):
        """Без настроек лимитов в отчёт попадает каждое нарушение."""
        schema = StaticIntrospector({"wide": [column(f"c{i}") for i in range(150)]})
        registry = RuleRegistry()
        registry.register_rule(MissingPresenceValidation)
        result = registry.apply_all([ModelDescriptor(name="Wide", table_name="wide")], schema)
        assert len(result["findings"]) == 150
        assert result["findings"][-1]["details"] == {"model": "Wide", "column": "c149"}
        assert result["summary"]["truncated"] is False

    def test_per_rule_limit(self, wide_schema, things):
        """Лимит правила усекает список, но не подмешивает служебных записей."""
        registry = RuleRegistry()
        registry.register_rule(MissingPresenceValidation, {"max_reports_per_rule": 2})
        result = registry.apply_all(things, wide_schema)
        assert [f["details"]["column"] for f in result["findings"]] == ["col_0", "col_1"]
        assert result["statistics"][0]["details"] == {"total_raw": 5, "total_reported": 2}
        assert result["summary"]["total_findings"] == 5
        assert result["summary"]["reported_findings"] == 2
        assert result["summary"]["truncated"] is True

    def test_total_limit(self, wide_schema, things):
        registry = RuleRegistry({"max_total_findings": 3})
        registry.register_rule(MissingPresenceValidation)
        result = registry.apply_all(things, wide_schema)
        assert len(result["findings"]) == 3
        assert all(f["rule"] == "missing_presence_validation" for f in result["findings"])
        assert result["summary"]["total_findings"] == 5
        assert result["summary"]["truncated"] is True

    def test_details_can_be_dropped(self, wide_schema, things):
        registry = RuleRegistry()
        registry.register_rule(MissingPresenceValidation, {"include_details": False})
        findings = registry.apply_all(things, wide_schema)["findings"]
        assert all("details" not in f for f in findings)

    def test_order_by_criticality(self, wide_schema, things):
        registry = RuleRegistry({"rule_order": "by_criticality"})
        registry.register_rules([MissingPresenceValidation, EveryModelRule])
        findings = registry.apply_all(things, wide_schema)["findings"]
        assert findings[0]["rule"] == "every_model"

    def test_custom_order(self, wide_schema, things):
        registry = RuleRegistry({
            "rule_order": "custom",
            "custom_order": ["missing_presence_validation", "every_model"],
        })
        registry.register_rules([EveryModelRule, MissingPresenceValidation])
        findings = registry.apply_all(things, wide_schema)["findings"]
        assert findings[0]["rule"] == "missing_presence_validation"
        assert findings[-1]["rule"] == "every_model"

    def test_unknown_order(self, wide_schema, things):
        registry = RuleRegistry({"rule_order": "random"})
        registry.register_rule(MissingPresenceValidation)
        with pytest.raises(ConfigurationError):
            registry.apply_all(things, wide_schema)
