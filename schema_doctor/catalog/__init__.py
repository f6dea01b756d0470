"""
Пакет catalog: реестр описаний моделей ORM.
"""

from .loader import (
    load_models,
    read_document,
    models_from_document,
    models_from_dicts,
    model_from_dict,
    validator_from_dict,
)

__all__ = [
    "load_models",
    "read_document",
    "models_from_document",
    "models_from_dicts",
    "model_from_dict",
    "validator_from_dict",
]
