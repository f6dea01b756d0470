"""
Загрузка описаний моделей ORM (JSON / YAML).

Сырые объявления валидаторов переводятся в закрытый набор вариантов
из schema_doctor.core.orm. Всё, что не presence/inclusion/exclusion,
становится OtherValidator и правилами присутствия игнорируется.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from schema_doctor.core.constants import DEFAULT_PRIMARY_KEY, JSON_SUFFIXES, YAML_SUFFIXES
from schema_doctor.core.exceptions import CatalogError, SchemaFileNotFoundError
from schema_doctor.core.orm import (
    BelongsTo,
    ExclusionValidator,
    InclusionValidator,
    ModelDescriptor,
    OtherValidator,
    PresenceValidator,
    Validator,
    ValidatorKind,
)

logger = logging.getLogger(__name__)


def load_models(path: Union[str, Path]) -> List[ModelDescriptor]:
    """Читает каталог моделей из файла .json / .yaml / .yml."""
    document = read_document(path)
    return models_from_document(document)


def read_document(path: Union[str, Path]) -> Any:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in JSON_SUFFIXES + YAML_SUFFIXES:
        raise CatalogError(f"Неподдерживаемый формат файла: {path.name} (ожидается .json, .yaml, .yml)")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaFileNotFoundError(str(path), str(e)) from e

    try:
        if suffix in JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogError(f"Не удалось разобрать {path.name}: {e}") from e


def models_from_document(document: Any) -> List[ModelDescriptor]:
    if document is None:
        return []
    if isinstance(document, dict):
        document = document.get("models", [])
    if not isinstance(document, list):
        raise CatalogError("Ожидается список моделей или объект с ключом 'models'", field="models")
    return models_from_dicts(document)


def models_from_dicts(items: List[Dict[str, Any]]) -> List[ModelDescriptor]:
    models = [model_from_dict(item) for item in items]
    logger.debug("Загружено моделей: %d", len(models))
    return models


def model_from_dict(data: Dict[str, Any]) -> ModelDescriptor:
    if not isinstance(data, dict):
        raise CatalogError(f"Описание модели должно быть объектом, получено: {data!r}")

    name = data.get("name")
    if not name or not isinstance(name, str):
        raise CatalogError("У модели отсутствует имя", field="name")

    associations = [
        _belongs_to_from_dict(name, raw)
        for raw in _as_list(data.get("belongs_to"), name, "belongs_to")
    ]
    validators = [
        validator_from_dict(raw, model_name=name)
        for raw in _as_list(data.get("validators"), name, "validators")
    ]

    return ModelDescriptor(
        name=name,
        table_name=data.get("table_name"),
        primary_key=data.get("primary_key", DEFAULT_PRIMARY_KEY),
        associations=associations,
        validators=validators,
    )


def validator_from_dict(data: Dict[str, Any], model_name: str = "") -> Validator:
    if not isinstance(data, dict):
        raise CatalogError(f"Валидатор должен быть объектом: {data!r}", model_name=model_name)

    kind = str(data.get("kind", "")).strip().lower()
    if not kind:
        raise CatalogError("У валидатора не указан kind", model_name=model_name, field="kind")

    attributes = frozenset(_attribute_names(data.get("attributes"), model_name))
    values = data.get("in", [])
    if not isinstance(values, (list, tuple)):
        raise CatalogError("Опция 'in' должна быть списком", model_name=model_name, field="in")

    if kind == ValidatorKind.PRESENCE.value:
        return PresenceValidator(attributes=attributes)
    if kind == ValidatorKind.INCLUSION.value:
        return InclusionValidator(attributes=attributes, allowed_values=tuple(values))
    if kind == ValidatorKind.EXCLUSION.value:
        return ExclusionValidator(attributes=attributes, forbidden_values=tuple(values))
    return OtherValidator(attributes=attributes, name=kind)


def _belongs_to_from_dict(model_name: str, raw: Any) -> BelongsTo:
    if isinstance(raw, str):
        return BelongsTo(name=raw)
    if not isinstance(raw, dict) or not raw.get("name"):
        raise CatalogError(f"Некорректная ассоциация belongs_to: {raw!r}",
                           model_name=model_name, field="belongs_to")
    return BelongsTo(name=str(raw["name"]), foreign_key=str(raw.get("foreign_key") or ""))


def _attribute_names(raw: Any, model_name: str) -> List[str]:
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, (list, tuple)) and all(isinstance(a, str) for a in raw):
        return list(raw)
    raise CatalogError(f"Атрибуты валидатора должны быть строкой или списком строк: {raw!r}",
                       model_name=model_name, field="attributes")


def _as_list(raw: Any, model_name: str, field: str) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise CatalogError(f"Поле '{field}' должно быть списком", model_name=model_name, field=field)
    return raw
