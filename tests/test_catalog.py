"""Тесты загрузки описаний моделей."""

import json

import pytest

from schema_doctor.catalog import load_models, model_from_dict, validator_from_dict
from schema_doctor.core.exceptions import CatalogError, SchemaFileNotFoundError
from schema_doctor.core.orm import (
    BelongsTo,
    ExclusionValidator,
    InclusionValidator,
    OtherValidator,
    PresenceValidator,
    ValidatorKind,
)


MODELS_YAML = """
models:
  - name: User
    table_name: users
    validators:
      - kind: presence
        attributes: [email, name]
      - kind: inclusion
        attributes: active
        in: [true, false]
  - name: Comment
    table_name: comments
    belongs_to:
      - author
      - name: post
        foreign_key: article_id
    validators:
      - kind: exclusion
        attributes: [approved]
        in: [null]
  - name: ApplicationRecord
"""


class TestLoadModels:

    def test_yaml(self, tmp_path):
        path = tmp_path / "models.yml"
        path.write_text(MODELS_YAML, encoding="utf-8")
        user, comment, base = load_models(path)

        assert user.name == "User"
        assert user.primary_key == "id"
        assert user.validators[0] == PresenceValidator(attributes=frozenset(["email", "name"]))
        assert user.validators[1] == InclusionValidator(
            attributes=frozenset(["active"]), allowed_values=(True, False)
        )

        assert comment.associations == [
            BelongsTo(name="author", foreign_key="author_id"),
            BelongsTo(name="post", foreign_key="article_id"),
        ]
        assert comment.validators[0].forbids_null()

        assert base.table_name is None
        assert base.validators == []

    def test_json_bare_list(self, tmp_path, sample_models_data):
        path = tmp_path / "models.json"
        path.write_text(json.dumps(sample_models_data), encoding="utf-8")
        models = load_models(path)
        assert [m.name for m in models] == ["User", "Comment", "SchemaMigration", "ApplicationRecord"]
        assert models[1].validators_of(ValidatorKind.OTHER) == [
            OtherValidator(attributes=frozenset(["body"]), name="length")
        ]

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "models.yaml"
        path.write_text("", encoding="utf-8")
        assert load_models(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaFileNotFoundError):
            load_models(tmp_path / "missing.yml")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "models.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_models(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_models(path)

    def test_models_must_be_a_list(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text(json.dumps({"models": {"name": "User"}}), encoding="utf-8")
        with pytest.raises(CatalogError):
            load_models(path)


class TestValidatorFromDict:

    def test_inclusion_without_values(self):
        validator = validator_from_dict({"kind": "inclusion", "attributes": "active"})
        assert validator == InclusionValidator(attributes=frozenset(["active"]))
        assert not validator.allows_null()

    def test_exclusion_without_values(self):
        validator = validator_from_dict({"kind": "exclusion", "attributes": "active"})
        assert validator == ExclusionValidator(attributes=frozenset(["active"]))
        assert not validator.forbids_null()

    def test_kind_is_case_insensitive(self):
        assert validator_from_dict({"kind": "Presence", "attributes": "email"}).kind == ValidatorKind.PRESENCE

    def test_unknown_kind_becomes_other(self):
        validator = validator_from_dict({"kind": "uniqueness", "attributes": ["email"]})
        assert validator.kind == ValidatorKind.OTHER
        assert validator.name == "uniqueness"

    def test_missing_kind(self):
        with pytest.raises(CatalogError):
            validator_from_dict({"attributes": ["email"]}, model_name="User")

    def test_bad_attributes(self):
        with pytest.raises(CatalogError) as exc:
            validator_from_dict({"kind": "presence", "attributes": [1, 2]}, model_name="User")
        assert exc.value.details == {"model_name": "User", "field": "attributes"}

    def test_in_must_be_a_list(self):
        with pytest.raises(CatalogError):
            validator_from_dict({"kind": "inclusion", "attributes": "a", "in": "yes"})


class TestModelFromDict:

    def test_missing_name(self):
        with pytest.raises(CatalogError):
            model_from_dict({"table_name": "users"})

    def test_custom_primary_key(self):
        assert model_from_dict({"name": "Account", "primary_key": "uuid"}).primary_key == "uuid"

    def test_null_primary_key(self):
        assert model_from_dict({"name": "Event", "primary_key": None}).primary_key is None

    def test_bad_belongs_to(self):
        with pytest.raises(CatalogError):
            model_from_dict({"name": "Comment", "belongs_to": [{"foreign_key": "x_id"}]})
