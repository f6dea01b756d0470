"""
Основной парсер DDL-скриптов PostgreSQL.

Понимает подмножество DDL, влияющее на nullability колонок:
- CREATE TABLE (колонки, NOT NULL, PRIMARY KEY на уровне колонки и таблицы)
- ALTER TABLE: ADD/DROP COLUMN, ALTER COLUMN SET/DROP NOT NULL, ALTER COLUMN TYPE,
  ADD PRIMARY KEY, RENAME TO, RENAME COLUMN
- DROP TABLE

Остальные операторы пропускаются.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from schema_doctor.core.models import Column, Table
from schema_doctor.core.exceptions import ParsingError
from schema_doctor.utils.naming import DEFAULT_SCHEMA

from .normalizer import SQLNormalizer
from .tokenizer import SQLTokenizer, Token, TokenType, find_keyword_sequence
from .ddl_operations import (
    DDLOperation,
    TableCatalog,
    CreateTableOperation,
    DropTableOperation,
    AddColumnOperation,
    DropColumnOperation,
    AlterColumnOperation,
    AddConstraintOperation,
    RenameTableOperation,
    RenameColumnOperation,
)

logger = logging.getLogger(__name__)

# ключевые слова, с которых начинается ограничение колонки (конец типа данных)
_COLUMN_CONSTRAINT_START = {
    "CONSTRAINT", "NOT", "NULL", "PRIMARY", "UNIQUE", "CHECK",
    "DEFAULT", "REFERENCES", "GENERATED", "COLLATE",
}

_TABLE_CONSTRAINT_START = {"CONSTRAINT", "PRIMARY", "FOREIGN", "UNIQUE", "CHECK", "EXCLUDE", "LIKE"}


def _ident(tok: Token) -> str:
    if tok.type == TokenType.QUOTED_IDENTIFIER:
        return tok.value[1:-1].replace('""', '"')
    return tok.value.lower()


def _word(tok: Token) -> str:
    return tok.value.upper() if tok.type != TokenType.QUOTED_IDENTIFIER else ""


class SQLParser:
    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.normalizer = SQLNormalizer()
        self.tokenizer = SQLTokenizer()

    # ==========================================================
    # PUBLIC API
    # ==========================================================

    def parse_operations(self, sql_text: str) -> List[DDLOperation]:
        operations: List[DDLOperation] = []

        for stmt in self.normalizer.split_statements(sql_text):
            stmt_type = self.normalizer.get_statement_type(stmt)
            tokens = [t for t in self.tokenizer.tokenize(stmt) if t.type != TokenType.EOF]

            if stmt_type == "CREATE_TABLE":
                operations.append(self._parse_create_table(stmt, tokens))
            elif stmt_type == "ALTER_TABLE":
                operations.extend(self._parse_alter_table(stmt, tokens))
            elif stmt_type == "DROP_TABLE":
                operations.extend(self._parse_drop_table(stmt, tokens))
            elif self.verbose:
                logger.debug("Пропущен оператор: %s", stmt[:80])

        return operations

    def parse_to_tables(self, sql_text: str) -> List[Table]:
        """
        Применяет операции по порядку и возвращает итоговые таблицы.
        """
        catalog: TableCatalog = {}
        for op in self.parse_operations(sql_text):
            op.apply(catalog)
        return list(catalog.values())

    # ==========================================================
    # CREATE TABLE
    # ==========================================================

    def _parse_create_table(self, stmt: str, tokens: List[Token]) -> CreateTableOperation:
        i = 1
        while i < len(tokens) and not tokens[i].is_keyword("TABLE"):
            i += 1
        i += 1

        if_not_exists = False
        if self._match_keywords(tokens, i, "IF", "NOT", "EXISTS"):
            if_not_exists = True
            i += 3

        schema, table_name, i = self._read_qualified_name(tokens, i, stmt)

        # CREATE TABLE ... AS SELECT - колонки неизвестны без выполнения запроса
        if i < len(tokens) and tokens[i].is_keyword("AS"):
            logger.warning("CREATE TABLE %s AS ... не поддерживается, таблица пропущена", table_name)
            return CreateTableOperation(schema=schema, table_name=table_name, raw_sql=stmt)

        if i >= len(tokens) or tokens[i].type != TokenType.LPAREN:
            raise ParsingError(f"Cannot parse CREATE TABLE: {stmt}", sql_fragment=stmt)

        body, _ = self._read_parenthesized(tokens, i, stmt)

        table = Table(name=table_name, schema=schema, attributes={"raw_sql": stmt})

        for element in self._split_top_level(body):
            if not element:
                continue
            head = _word(element[0])

            # TABLE-LEVEL CONSTRAINT
            if head in _TABLE_CONSTRAINT_START:
                constraint_type, columns = self._parse_table_constraint(element)
                if constraint_type == "PRIMARY KEY":
                    table.primary_key = columns
                continue

            column = self._parse_column(element, table_name, schema)
            table.columns[column.name] = column
            if column.attributes.get("is_primary_key"):
                table.primary_key = [column.name]

        # PRIMARY KEY подразумевает NOT NULL
        for name in table.primary_key:
            if name in table.columns:
                table.columns[name].is_nullable = False

        return CreateTableOperation(
            schema=schema,
            table_name=table_name,
            raw_sql=stmt,
            table=table,
            if_not_exists=if_not_exists,
        )

    # ==========================================================
    # ALTER TABLE
    # ==========================================================

    def _parse_alter_table(self, stmt: str, tokens: List[Token]) -> List[DDLOperation]:
        i = 2
        if self._match_keywords(tokens, i, "IF", "EXISTS"):
            i += 2
        if self._match_keywords(tokens, i, "ONLY"):
            i += 1

        schema, table_name, i = self._read_qualified_name(tokens, i, stmt)

        operations: List[DDLOperation] = []
        for action in self._split_top_level(tokens[i:]):
            op = self._parse_alter_action(action, schema, table_name, stmt)
            if op is not None:
                operations.append(op)
        return operations

    def _parse_alter_action(
        self,
        action: List[Token],
        schema: str,
        table_name: str,
        stmt: str,
    ) -> Optional[DDLOperation]:
        if not action:
            return None

        common = {"schema": schema, "table_name": table_name, "raw_sql": stmt}
        head = _word(action[0])
        rest = action[1:]

        if head == "ADD":
            if rest and _word(rest[0]) in _TABLE_CONSTRAINT_START:
                constraint_type, columns = self._parse_table_constraint(rest)
                return AddConstraintOperation(constraint_type=constraint_type, columns=columns, **common)
            rest = self._skip_keywords(rest, "COLUMN")
            if self._match_keywords(rest, 0, "IF", "NOT", "EXISTS"):
                rest = rest[3:]
            column = self._parse_column(rest, table_name, schema)
            return AddColumnOperation(column=column, **common)

        if head == "DROP":
            if rest and rest[0].is_keyword("CONSTRAINT"):
                return None
            rest = self._skip_keywords(rest, "COLUMN")
            if self._match_keywords(rest, 0, "IF", "EXISTS"):
                rest = rest[2:]
            if not rest:
                raise ParsingError(f"Cannot parse DROP COLUMN: {stmt}", sql_fragment=stmt)
            return DropColumnOperation(column_name=_ident(rest[0]), **common)

        if head == "ALTER":
            rest = self._skip_keywords(rest, "COLUMN")
            if not rest:
                raise ParsingError(f"Cannot parse ALTER COLUMN: {stmt}", sql_fragment=stmt)
            column_name = _ident(rest[0])
            change = rest[1:]
            if self._match_keywords(change, 0, "SET", "NOT", "NULL"):
                return AlterColumnOperation(column_name=column_name, not_null=True, **common)
            if self._match_keywords(change, 0, "DROP", "NOT", "NULL"):
                return AlterColumnOperation(column_name=column_name, not_null=False, **common)
            if change and change[0].is_keyword("SET") and len(change) > 1 and change[1].normalize() == "data":
                change = change[2:]
            if change and change[0].is_keyword("TYPE"):
                type_tokens = self._take_until(change[1:], {"USING", "COLLATE"})
                return AlterColumnOperation(
                    column_name=column_name,
                    new_type=self.normalizer.render(type_tokens),
                    **common,
                )
            return None

        if head == "RENAME":
            if rest and rest[0].is_keyword("TO"):
                return RenameTableOperation(new_name=_ident(rest[1]), **common)
            if rest and rest[0].is_keyword("CONSTRAINT"):
                return None
            rest = self._skip_keywords(rest, "COLUMN")
            if len(rest) >= 3 and rest[1].is_keyword("TO"):
                return RenameColumnOperation(old_name=_ident(rest[0]), new_name=_ident(rest[2]), **common)
            raise ParsingError(f"Cannot parse RENAME: {stmt}", sql_fragment=stmt)

        logger.debug("Пропущено действие ALTER TABLE %s: %s", table_name, head)
        return None

    # ==========================================================
    # DROP TABLE
    # ==========================================================

    def _parse_drop_table(self, stmt: str, tokens: List[Token]) -> List[DDLOperation]:
        i = 2
        if_exists = False
        if self._match_keywords(tokens, i, "IF", "EXISTS"):
            if_exists = True
            i += 2

        names = self._take_until(tokens[i:], {"CASCADE", "RESTRICT"})
        operations: List[DDLOperation] = []
        for part in self._split_top_level(names):
            schema, table_name, _ = self._read_qualified_name(part, 0, stmt)
            operations.append(DropTableOperation(
                schema=schema,
                table_name=table_name,
                raw_sql=stmt,
                if_exists=if_exists,
            ))
        return operations

    # ==========================================================
    # COLUMN
    # ==========================================================

    def _parse_column(self, element: List[Token], table_name: str, schema: str) -> Column:
        if not element:
            raise ParsingError(f"Пустое определение колонки в таблице {table_name}")

        name = _ident(element[0])
        type_tokens = self._take_until(element[1:], _COLUMN_CONSTRAINT_START)
        constraints = element[1 + len(type_tokens):]

        data_type = self.normalizer.render(type_tokens) or "UNKNOWN"
        is_primary_key = find_keyword_sequence(constraints, "PRIMARY", "KEY") is not None
        not_null = find_keyword_sequence(constraints, "NOT", "NULL") is not None

        default_value = None
        default_at = find_keyword_sequence(constraints, "DEFAULT")
        if default_at is not None:
            default_tokens = self._take_until(constraints[default_at + 1:], _COLUMN_CONSTRAINT_START)
            default_value = self.normalizer.render(default_tokens) or None

        return Column(
            name=name,
            table=table_name,
            schema=schema,
            data_type=data_type,
            is_nullable=not (not_null or is_primary_key),
            default_value=default_value,
            attributes={
                "definition": self.normalizer.render(element),
                "is_primary_key": is_primary_key,
            },
        )

    def _parse_table_constraint(self, element: List[Token]) -> Tuple[str, List[str]]:
        rest = element
        if rest and rest[0].is_keyword("CONSTRAINT"):
            rest = rest[2:]
        if not rest:
            return "", []

        if self._match_keywords(rest, 0, "PRIMARY", "KEY"):
            constraint_type = "PRIMARY KEY"
            rest = rest[2:]
        elif self._match_keywords(rest, 0, "FOREIGN", "KEY"):
            constraint_type = "FOREIGN KEY"
            rest = rest[2:]
        else:
            constraint_type = _word(rest[0])
            rest = rest[1:]

        columns: List[str] = []
        if rest and rest[0].type == TokenType.LPAREN:
            inner, _ = self._read_parenthesized(rest, 0, self.normalizer.render(element))
            columns = [_ident(t) for t in inner if t.type != TokenType.COMMA]
        return constraint_type, columns

    # ==========================================================
    # HELPERS
    # ==========================================================

    def _read_qualified_name(self, tokens: List[Token], i: int, stmt: str) -> Tuple[str, str, int]:
        if i >= len(tokens):
            raise ParsingError(f"Ожидалось имя таблицы: {stmt}", sql_fragment=stmt)

        first = _ident(tokens[i])
        if i + 2 < len(tokens) and tokens[i + 1].type == TokenType.DOT:
            return first or DEFAULT_SCHEMA, _ident(tokens[i + 2]), i + 3
        return DEFAULT_SCHEMA, first, i + 1

    def _read_parenthesized(self, tokens: List[Token], i: int, stmt: str) -> Tuple[List[Token], int]:
        """tokens[i] == '(' -> (содержимое без внешних скобок, индекс после ')')."""
        depth = 0
        for j in range(i, len(tokens)):
            if tokens[j].type == TokenType.LPAREN:
                depth += 1
            elif tokens[j].type == TokenType.RPAREN:
                depth -= 1
                if depth == 0:
                    return tokens[i + 1:j], j + 1
        raise ParsingError(f"Несбалансированные скобки: {stmt}", sql_fragment=stmt)

    def _split_top_level(self, tokens: List[Token]) -> List[List[Token]]:
        parts: List[List[Token]] = []
        depth = 0
        current: List[Token] = []

        for tok in tokens:
            if tok.type == TokenType.LPAREN:
                depth += 1
            elif tok.type == TokenType.RPAREN:
                depth -= 1

            if tok.type == TokenType.COMMA and depth == 0:
                if current:
                    parts.append(current)
                current = []
            else:
                current.append(tok)

        if current:
            parts.append(current)

        return parts

    def _take_until(self, tokens: List[Token], stop_words: set) -> List[Token]:
        depth = 0
        taken: List[Token] = []
        for tok in tokens:
            if tok.type == TokenType.LPAREN:
                depth += 1
            elif tok.type == TokenType.RPAREN:
                depth -= 1
            elif depth == 0 and tok.type == TokenType.KEYWORD and tok.value.upper() in stop_words:
                break
            taken.append(tok)
        return taken

    def _match_keywords(self, tokens: List[Token], i: int, *words: str) -> bool:
        window = tokens[i:i + len(words)]
        return len(window) == len(words) and all(t.is_keyword(w) for t, w in zip(window, words))

    def _skip_keywords(self, tokens: List[Token], *words: str) -> List[Token]:
        while tokens and tokens[0].type == TokenType.KEYWORD and tokens[0].value.upper() in words:
            tokens = tokens[1:]
        return tokens
