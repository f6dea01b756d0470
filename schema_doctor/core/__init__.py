# schema_doctor/core/__init__.py

from .models import (
    DatabaseObject,
    Table,
    Column,
    ObjectType,
    Finding,
)

from .orm import (
    ValidatorKind,
    PresenceValidator,
    InclusionValidator,
    ExclusionValidator,
    OtherValidator,
    Validator,
    BelongsTo,
    ModelDescriptor,
)

from .exceptions import (
    SchemaDoctorError,
    ParsingError,
    IntrospectionError,
    CatalogError,
    ConfigurationError,
    SchemaFileNotFoundError,
)

__all__ = [
    # models
    "DatabaseObject",
    "Table",
    "Column",
    "ObjectType",
    "Finding",

    # orm
    "ValidatorKind",
    "PresenceValidator",
    "InclusionValidator",
    "ExclusionValidator",
    "OtherValidator",
    "Validator",
    "BelongsTo",
    "ModelDescriptor",

    # exceptions
    "SchemaDoctorError",
    "ParsingError",
    "IntrospectionError",
    "CatalogError",
    "ConfigurationError",
    "SchemaFileNotFoundError",
]
