"""Общие фикстуры тестов schema_doctor."""

from typing import Dict, List

import pytest

from schema_doctor.core.models import Column
from schema_doctor.introspection import SchemaIntrospector


class StaticIntrospector(SchemaIntrospector):
    """Схема в памяти: имя таблицы -> колонки."""

    def __init__(self, tables: Dict[str, List[Column]]):
        self.tables = tables
        self.columns_calls: List[str] = []

    def table_exists(self, table_name):
        return table_name in self.tables

    def columns(self, table_name):
        self.columns_calls.append(table_name)
        return list(self.tables[table_name])


def column(name, data_type="TEXT", nullable=False):
    return Column(name=name, data_type=data_type, is_nullable=nullable)


@pytest.fixture
def users_schema():
    return StaticIntrospector({
        "users": [
            column("id", "BIGINT"),
            column("email", "VARCHAR(255)"),
            column("nickname", "TEXT", nullable=True),
            column("created_at", "TIMESTAMP"),
            column("updated_at", "TIMESTAMP"),
        ],
    })


SAMPLE_DDL = """
-- application schema
CREATE TABLE users (
    id BIGSERIAL PRIMARY KEY,
    email VARCHAR(255) NOT NULL,
    nickname TEXT,
    active BOOLEAN NOT NULL DEFAULT true,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

CREATE TABLE comments (
    id SERIAL PRIMARY KEY,
    author_id INTEGER NOT NULL REFERENCES users(id),
    body TEXT NOT NULL,
    approved BOOLEAN NOT NULL,
    created_at TIMESTAMP NOT NULL
);

CREATE TABLE schema_migrations (
    version VARCHAR NOT NULL
);
"""


@pytest.fixture
def sample_ddl():
    return SAMPLE_DDL


SAMPLE_MODELS = [
    {
        "name": "User",
        "table_name": "users",
        "validators": [
            {"kind": "presence", "attributes": ["email"]},
            {"kind": "inclusion", "attributes": ["active"], "in": [True, False]},
        ],
    },
    {
        "name": "Comment",
        "table_name": "comments",
        "belongs_to": [{"name": "author"}],
        "validators": [
            {"kind": "presence", "attributes": ["author"]},
            {"kind": "length", "attributes": ["body"]},
        ],
    },
    {"name": "SchemaMigration", "table_name": "schema_migrations"},
    {"name": "ApplicationRecord"},
]


@pytest.fixture
def sample_models_data():
    return [dict(m) for m in SAMPLE_MODELS]
