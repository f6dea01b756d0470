from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Sequence

from schema_doctor.core.constants import (
    FINDING_MESSAGE_TEMPLATE,
    SCHEMA_MIGRATIONS_TABLE,
    TIMESTAMP_COLUMNS,
)
from schema_doctor.core.models import Column, Finding
from schema_doctor.core.orm import ModelDescriptor, ValidatorKind
from schema_doctor.introspection.base import SchemaIntrospector
from schema_doctor.rules.base import BaseRule, FindingLevel

logger = logging.getLogger(__name__)


class MissingPresenceValidation(BaseRule):
    """
    Колонки NOT NULL, для которых в модели нет эквивалентной проверки присутствия.

    Для булевых колонок присутствие выражается через inclusion без NULL
    или exclusion с NULL: false - допустимое значение, а presence
    считает его пустым.
    """

    RULE_ID = "missing_presence_validation"
    RULE_NAME = "Missing presence validation"
    RULE_DESCRIPTION = "Detect non-NULL columns without a presence validator"
    DEFAULT_LEVEL = FindingLevel.MEDIUM

    def message(self, *, model: str, column: str, **_: Any) -> str:
        return FINDING_MESSAGE_TEMPLATE.format(model=model, column=column)

    def apply(
        self,
        models: Sequence[ModelDescriptor],
        introspector: SchemaIntrospector,
    ) -> List[Dict[str, Any]]:
        return [
            self.problem(model=f.model_name, column=f.column_name)
            for f in self.detect(models, introspector)
        ]

    def detect(
        self,
        models: Sequence[ModelDescriptor],
        introspector: SchemaIntrospector,
    ) -> List[Finding]:
        findings: List[Finding] = []

        for model in self._candidate_models(models, introspector):
            missing = [
                column.name
                for column in introspector.columns(model.table_name)
                if self.validator_needed(model, column)
                and not self.validator_present(model, column)
                and not self.is_attribute_ignored(model.name, column.name)
            ]
            findings.extend(Finding(model.name, name) for name in missing)

        return findings

    # ==========================================================
    # STEP 1: модели
    # ==========================================================

    def _candidate_models(
        self,
        models: Sequence[ModelDescriptor],
        introspector: SchemaIntrospector,
    ) -> Iterator[ModelDescriptor]:
        for model in models:
            if not model.table_name or model.table_name == SCHEMA_MIGRATIONS_TABLE:
                logger.debug("%s: нет таблицы, модель пропущена", model.name)
                continue
            if self.is_model_ignored(model.name):
                logger.debug("%s: модель в ignore_models", model.name)
                continue
            if not introspector.table_exists(model.table_name):
                logger.debug("%s: таблица %s отсутствует в схеме", model.name, model.table_name)
                continue
            yield model

    # ==========================================================
    # STEP 2: колонки
    # ==========================================================

    def validator_needed(self, model: ModelDescriptor, column: Column) -> bool:
        if column.name == model.primary_key or column.name in TIMESTAMP_COLUMNS:
            return False
        return not column.is_nullable

    # ==========================================================
    # STEP 3: валидаторы
    # ==========================================================

    def validator_present(self, model: ModelDescriptor, column: Column) -> bool:
        if column.is_boolean:
            return (
                self.inclusion_validator_present(model, column)
                or self.exclusion_validator_present(model, column)
            )
        return self.presence_validator_present(model, column)

    def inclusion_validator_present(self, model: ModelDescriptor, column: Column) -> bool:
        return any(
            v.governs(column.name) and not v.allows_null()
            for v in model.validators_of(ValidatorKind.INCLUSION)
        )

    def exclusion_validator_present(self, model: ModelDescriptor, column: Column) -> bool:
        # пустой список in: NULL не запрещён, проверка недостаточна
        return any(
            v.governs(column.name) and v.forbids_null()
            for v in model.validators_of(ValidatorKind.EXCLUSION)
        )

    def presence_validator_present(self, model: ModelDescriptor, column: Column) -> bool:
        allowed_attributes = {column.name}

        belongs_to = model.belongs_to_for(column.name)
        if belongs_to is not None:
            allowed_attributes.add(belongs_to.name)

        return any(
            v.attributes & allowed_attributes
            for v in model.validators_of(ValidatorKind.PRESENCE)
        )
