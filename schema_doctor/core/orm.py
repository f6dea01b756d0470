"""
Описание моделей ORM, с которыми сверяется схема.

Валидаторы представлены закрытым набором вариантов (Presence / Inclusion /
Exclusion / Other). Правила сопоставляют тег ValidatorKind, а не класс
исходного фреймворка.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Tuple, Union

from schema_doctor.core.constants import DEFAULT_PRIMARY_KEY


class ValidatorKind(str, Enum):
    PRESENCE = "presence"
    INCLUSION = "inclusion"
    EXCLUSION = "exclusion"
    OTHER = "other"


@dataclass(frozen=True)
class PresenceValidator:
    attributes: FrozenSet[str]
    kind: ValidatorKind = field(default=ValidatorKind.PRESENCE, init=False)

    def governs(self, attribute: str) -> bool:
        return attribute in self.attributes


@dataclass(frozen=True)
class InclusionValidator:
    attributes: FrozenSet[str]
    # None в наборе = NULL допустим
    allowed_values: Tuple[Any, ...] = ()
    kind: ValidatorKind = field(default=ValidatorKind.INCLUSION, init=False)

    def governs(self, attribute: str) -> bool:
        return attribute in self.attributes

    def allows_null(self) -> bool:
        return any(v is None for v in self.allowed_values)


@dataclass(frozen=True)
class ExclusionValidator:
    attributes: FrozenSet[str]
    forbidden_values: Tuple[Any, ...] = ()
    kind: ValidatorKind = field(default=ValidatorKind.EXCLUSION, init=False)

    def governs(self, attribute: str) -> bool:
        return attribute in self.attributes

    def forbids_null(self) -> bool:
        return any(v is None for v in self.forbidden_values)


@dataclass(frozen=True)
class OtherValidator:
    """Любой валидатор, не влияющий на проверку присутствия (length, format, ...)."""
    attributes: FrozenSet[str]
    name: str = ""
    kind: ValidatorKind = field(default=ValidatorKind.OTHER, init=False)

    def governs(self, attribute: str) -> bool:
        return attribute in self.attributes


Validator = Union[PresenceValidator, InclusionValidator, ExclusionValidator, OtherValidator]


@dataclass(frozen=True)
class BelongsTo:
    name: str
    foreign_key: str = ""

    def __post_init__(self):
        # соглашение: belongs_to :author -> author_id
        if not self.foreign_key:
            object.__setattr__(self, "foreign_key", f"{self.name}_id")


@dataclass
class ModelDescriptor:
    name: str
    table_name: Optional[str] = None
    primary_key: Optional[str] = DEFAULT_PRIMARY_KEY
    associations: List[BelongsTo] = field(default_factory=list)
    validators: List[Validator] = field(default_factory=list)

    def belongs_to_for(self, foreign_key: str) -> Optional[BelongsTo]:
        for assoc in self.associations:
            if assoc.foreign_key == foreign_key:
                return assoc
        return None

    def validators_of(self, kind: ValidatorKind) -> List[Validator]:
        return [v for v in self.validators if v.kind == kind]

    def __repr__(self) -> str:
        return f"<Model {self.name} table={self.table_name!r}>"
