from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
from enum import Enum

from schema_doctor.core.constants import FINDING_MESSAGE_TEMPLATE
from schema_doctor.utils.type_categories import TypeCategory, TypeCategorizer


class ObjectType(Enum):
    TABLE = "table"
    COLUMN = "column"


@dataclass
class DatabaseObject:
    type: ObjectType
    name: str
    schema: str = "public"
    attributes: Any = field(default_factory=dict)

    def __post_init__(self):
        # ГАРАНТИЯ: attributes ВСЕГДА dict
        if self.attributes is None:
            self.attributes = {}
        elif not isinstance(self.attributes, dict):
            self.attributes = {
                "value": self.attributes
            }

    def __eq__(self, other):
        return (
                isinstance(other, DatabaseObject)
                and self.type == other.type
                and self.schema == other.schema
                and self.name == other.name
        )

    def __hash__(self):
        return hash((self.type, self.schema, self.name))


class Column(DatabaseObject):
    def __init__(
        self,
        *,
        name: str,
        table: str | None = None,
        schema: str = "public",
        data_type: str = "",
        is_nullable: bool = True,
        default_value: Optional[str] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            type=ObjectType.COLUMN,
            name=name,
            schema=schema,
            attributes=attributes or {},
        )

        self.data_type = data_type
        self.is_nullable = is_nullable
        self.default_value = default_value

        self.attributes.setdefault("table", table)
        self.attributes.setdefault("data_type", self.data_type)

    @property
    def type_category(self) -> TypeCategory:
        return TypeCategorizer.get_type_category(self.data_type)

    @property
    def is_boolean(self) -> bool:
        return self.type_category == TypeCategory.BOOLEAN

    def __repr__(self) -> str:
        null = "NULL" if self.is_nullable else "NOT NULL"
        return f"<Column {self.name} {self.data_type} {null}>"


class Table(DatabaseObject):
    def __init__(
        self,
        *,
        name: str,
        schema: str = "public",
        columns: Optional[Dict[str, Column]] = None,
        primary_key: Optional[List[str]] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            type=ObjectType.TABLE,
            name=name,
            schema=schema,
            attributes=attributes or {},
        )

        # порядок колонок = порядок объявления в DDL
        self.columns: Dict[str, Column] = columns or {}
        self.primary_key: List[str] = primary_key or []


@dataclass(frozen=True)
class Finding:
    """
    Результат правила: колонка NOT NULL модели без валидатора присутствия.
    """
    model_name: str
    column_name: str

    @property
    def message(self) -> str:
        return FINDING_MESSAGE_TEMPLATE.format(
            model=self.model_name,
            column=self.column_name,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "model": self.model_name,
            "column": self.column_name,
            "message": self.message,
        }
