"""
Загрузка конфигурации schema_doctor (JSON / YAML).

Пример (.schema_doctor.yml):

    rule_order: by_id
    rules:
      missing_presence_validation:
        level: high
        ignore_models: [LegacyImport]
        ignore_attributes: [User.legacy_token]
    report:
      max_findings_in_report: 50
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from schema_doctor.core.constants import DEFAULT_CONFIG, JSON_SUFFIXES, YAML_SUFFIXES
from schema_doctor.core.exceptions import ConfigurationError


def default_config() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Накладывает пользовательские значения на значения по умолчанию (на один уровень вглубь)."""
    config = default_config()
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key] = {**config[key], **value}
        else:
            config[key] = value
    return config


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    if path is None:
        return default_config()

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in JSON_SUFFIXES + YAML_SUFFIXES:
        raise ConfigurationError(f"Неподдерживаемый формат конфигурации: {path.name}",
                                 config_key="path", config_value=str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Не удалось прочитать конфигурацию {path}: {e}",
                                 config_key="path", config_value=str(path)) from e

    try:
        data = json.loads(text) if suffix in JSON_SUFFIXES else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Не удалось разобрать конфигурацию {path.name}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Конфигурация должна быть объектом", config_key="<root>")

    rules = data.get("rules", {})
    if not isinstance(rules, dict) or not all(isinstance(v, dict) for v in rules.values()):
        raise ConfigurationError("Секция 'rules' должна сопоставлять id правила и объект настроек",
                                 config_key="rules")

    return merge_config(data)
