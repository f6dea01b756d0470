"""
parser package - модуль парсинга DDL
"""

from .normalizer import SQLNormalizer
from .sql_parser import SQLParser
from .tokenizer import SQLTokenizer, Token, TokenType

from .ddl_operations import (
    OperationType,
    DDLOperation,
    CreateTableOperation,
    DropTableOperation,
    AddColumnOperation,
    DropColumnOperation,
    AlterColumnOperation,
    AddConstraintOperation,
    RenameTableOperation,
    RenameColumnOperation,
)

__all__ = [
    "SQLNormalizer",
    "SQLParser",
    "SQLTokenizer",
    "Token",
    "TokenType",
    "OperationType",
    "DDLOperation",
    "CreateTableOperation",
    "DropTableOperation",
    "AddColumnOperation",
    "DropColumnOperation",
    "AlterColumnOperation",
    "AddConstraintOperation",
    "RenameTableOperation",
    "RenameColumnOperation",
]
