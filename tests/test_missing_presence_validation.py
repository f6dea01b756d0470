"""Тесты правила missing_presence_validation."""

import pytest

from conftest import StaticIntrospector, column
from schema_doctor.core.exceptions import IntrospectionError
from schema_doctor.core.models import Finding
from schema_doctor.core.orm import (
    BelongsTo,
    ExclusionValidator,
    InclusionValidator,
    ModelDescriptor,
    OtherValidator,
    PresenceValidator,
)
from schema_doctor.rules import MissingPresenceValidation


def presence(*attrs):
    return PresenceValidator(attributes=frozenset(attrs))


def inclusion(attr, values):
    return InclusionValidator(attributes=frozenset([attr]), allowed_values=tuple(values))


def exclusion(attr, values):
    return ExclusionValidator(attributes=frozenset([attr]), forbidden_values=tuple(values))


def detect(models, introspector, config=None):
    return MissingPresenceValidation(config).detect(models, introspector)


class TestModelFiltering:
    """Модели без пригодной таблицы пропускаются."""

    def test_model_without_table_name(self, users_schema):
        """Модель без таблицы ничего не даёт, колонки не запрашиваются."""
        model = ModelDescriptor(name="ApplicationRecord", table_name=None)
        assert detect([model], users_schema) == []
        assert users_schema.columns_calls == []

    def test_model_with_missing_table(self, users_schema):
        """Таблицы нет в схеме: находок нет."""
        model = ModelDescriptor(name="Ghost", table_name="ghosts")
        assert detect([model], users_schema) == []
        assert users_schema.columns_calls == []

    def test_schema_migrations_table_is_skipped(self):
        """Служебная таблица миграций не проверяется."""
        schema = StaticIntrospector({"schema_migrations": [column("version", "VARCHAR")]})
        model = ModelDescriptor(name="SchemaMigration", table_name="schema_migrations")
        assert detect([model], schema) == []
        assert schema.columns_calls == []

    def test_ignore_models_config(self, users_schema):
        """Модели из ignore_models пропускаются."""
        model = ModelDescriptor(name="User", table_name="users")
        assert detect([model], users_schema, {"ignore_models": ["User"]}) == []


class TestColumnCandidacy:
    """Каким колонкам нужен валидатор."""

    def test_primary_key_and_timestamps_never_reported(self, users_schema):
        """id, created_at и updated_at не сообщаются даже без валидаторов."""
        model = ModelDescriptor(name="User", table_name="users")
        findings = detect([model], users_schema)
        assert findings == [Finding("User", "email")]

    def test_nullable_column_not_reported(self, users_schema):
        """Колонкам, допускающим NULL, валидатор не нужен."""
        model = ModelDescriptor(name="User", table_name="users", validators=[presence("email")])
        assert detect([model], users_schema) == []

    def test_custom_primary_key(self):
        """Исключается собственный первичный ключ модели, id тогда обычная колонка."""
        schema = StaticIntrospector({"accounts": [column("uuid", "UUID"), column("id", "INTEGER")]})
        model = ModelDescriptor(name="Account", table_name="accounts", primary_key="uuid")
        assert detect([model], schema) == [Finding("Account", "id")]

    def test_ignore_attributes_config(self, users_schema):
        """Пары Model.column из ignore_attributes пропускаются."""
        model = ModelDescriptor(name="User", table_name="users")
        config = {"ignore_attributes": ["User.email"]}
        assert detect([model], users_schema, config) == []


class TestPresenceValidators:
    """Небулевым колонкам нужен presence."""

    def test_presence_on_column(self, users_schema):
        """presence на самой колонке."""
        model = ModelDescriptor(name="User", table_name="users", validators=[presence("email")])
        assert detect([model], users_schema) == []

    def test_no_validators_reports_message(self, users_schema):
        """Без валидаторов колонка сообщается фиксированным текстом."""
        model = ModelDescriptor(name="User", table_name="users")
        findings = detect([model], users_schema)
        assert len(findings) == 1
        assert findings[0].message == (
            "add a presence validator to User.email - it's NOT NULL but lacks a validator"
        )

    def test_presence_on_other_attribute(self, users_schema):
        """presence на другом атрибуте не засчитывается."""
        model = ModelDescriptor(name="User", table_name="users", validators=[presence("nickname")])
        assert detect([model], users_schema) == [Finding("User", "email")]

    def test_other_validator_kinds_ignored(self, users_schema):
        """length/format и прочие не заменяют presence."""
        model = ModelDescriptor(
            name="User",
            table_name="users",
            validators=[OtherValidator(attributes=frozenset(["email"]), name="format")],
        )
        assert detect([model], users_schema) == [Finding("User", "email")]

    def test_attribute_names_are_case_sensitive(self, users_schema):
        """Имя атрибута сравнивается с именем колонки с учётом регистра."""
        model = ModelDescriptor(name="User", table_name="users", validators=[presence("Email")])
        assert detect([model], users_schema) == [Finding("User", "email")]


class TestBelongsTo:
    """presence на ассоциации belongs_to покрывает её внешний ключ."""

    @pytest.fixture
    def comments_schema(self):
        return StaticIntrospector({
            "comments": [column("id", "INTEGER"), column("author_id", "INTEGER")],
        })

    def test_presence_on_association_name(self, comments_schema):
        """presence на author покрывает author_id."""
        model = ModelDescriptor(
            name="Comment",
            table_name="comments",
            associations=[BelongsTo(name="author")],
            validators=[presence("author")],
        )
        assert detect([model], comments_schema) == []

    def test_presence_on_foreign_key_column(self, comments_schema):
        """presence на самом author_id тоже подходит."""
        model = ModelDescriptor(
            name="Comment",
            table_name="comments",
            associations=[BelongsTo(name="author")],
            validators=[presence("author_id")],
        )
        assert detect([model], comments_schema) == []

    def test_association_with_custom_foreign_key(self):
        """Ассоциация ищется по объявленному внешнему ключу."""
        schema = StaticIntrospector({"posts": [column("id", "INTEGER"), column("writer_id", "INTEGER")]})
        model = ModelDescriptor(
            name="Post",
            table_name="posts",
            associations=[BelongsTo(name="author", foreign_key="writer_id")],
            validators=[presence("author")],
        )
        assert detect([model], schema) == []

    def test_association_presence_without_association(self, comments_schema):
        """Без объявленной ассоциации presence на author не покрывает author_id."""
        model = ModelDescriptor(name="Comment", table_name="comments", validators=[presence("author")])
        assert detect([model], comments_schema) == [Finding("Comment", "author_id")]


class TestBooleanColumns:
    """Для булевых колонок вместо presence нужны inclusion/exclusion."""

    @pytest.fixture
    def flags_schema(self):
        return StaticIntrospector({"users": [column("id", "INTEGER"), column("active", "BOOLEAN")]})

    def _model(self, *validators):
        return ModelDescriptor(name="User", table_name="users", validators=list(validators))

    def test_inclusion_without_null(self, flags_schema):
        assert detect([self._model(inclusion("active", [True, False]))], flags_schema) == []

    def test_inclusion_with_null(self, flags_schema):
        model = self._model(inclusion("active", [True, False, None]))
        assert detect([model], flags_schema) == [Finding("User", "active")]

    def test_inclusion_with_empty_list(self, flags_schema):
        """inclusion без значений не допускает NULL, этого достаточно."""
        assert detect([self._model(inclusion("active", []))], flags_schema) == []

    def test_exclusion_of_null(self, flags_schema):
        assert detect([self._model(exclusion("active", [None]))], flags_schema) == []

    def test_exclusion_with_empty_list(self, flags_schema):
        model = self._model(exclusion("active", []))
        assert detect([model], flags_schema) == [Finding("User", "active")]

    def test_presence_does_not_cover_boolean(self, flags_schema):
        """presence считает false пустым, для булевых колонок не подходит."""
        model = self._model(presence("active"))
        assert detect([model], flags_schema) == [Finding("User", "active")]

    def test_bool_alias(self):
        """BOOL распознаётся как булев тип."""
        schema = StaticIntrospector({"users": [column("active", "bool")]})
        model = ModelDescriptor(
            name="User", table_name="users", validators=[inclusion("active", [True, False])]
        )
        assert detect([model], schema) == []

    def test_inclusion_on_other_attribute(self, flags_schema):
        model = self._model(inclusion("admin", [True, False]))
        assert detect([model], flags_schema) == [Finding("User", "active")]


class TestDetect:
    """Поведение прогона целиком."""

    def test_idempotent(self, users_schema):
        rule = MissingPresenceValidation()
        models = [ModelDescriptor(name="User", table_name="users")]
        assert set(rule.detect(models, users_schema)) == set(rule.detect(models, users_schema))

    def test_fully_validated_model_produces_no_entry(self):
        schema = StaticIntrospector({
            "users": [column("id", "INTEGER"), column("email")],
            "posts": [column("id", "INTEGER"), column("title")],
        })
        models = [
            ModelDescriptor(name="User", table_name="users", validators=[presence("email")]),
            ModelDescriptor(name="Post", table_name="posts"),
        ]
        findings = detect(models, schema)
        assert findings == [Finding("Post", "title")]
        assert all(f.model_name != "User" for f in findings)

    def test_registry_order_preserved(self):
        schema = StaticIntrospector({
            "b_table": [column("name")],
            "a_table": [column("name")],
        })
        models = [
            ModelDescriptor(name="Zebra", table_name="b_table"),
            ModelDescriptor(name="Aardvark", table_name="a_table"),
        ]
        assert [f.model_name for f in detect(models, schema)] == ["Zebra", "Aardvark"]

    def test_introspection_failure_propagates(self):
        class BrokenIntrospector(StaticIntrospector):
            def columns(self, table_name):
                raise IntrospectionError("connection lost", table_name=table_name)

        schema = BrokenIntrospector({"users": []})
        with pytest.raises(IntrospectionError):
            detect([ModelDescriptor(name="User", table_name="users")], schema)

    def test_apply_reports_problems(self, users_schema):
        rule = MissingPresenceValidation()
        problems = rule.apply([ModelDescriptor(name="User", table_name="users")], users_schema)
        assert problems == [{
            "rule": "missing_presence_validation",
            "rule_name": "Missing presence validation",
            "level": "medium",
            "message": "add a presence validator to User.email - it's NOT NULL but lacks a validator",
            "details": {"model": "User", "column": "email"},
        }]
