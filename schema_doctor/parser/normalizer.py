"""
Нормализатор SQL для PostgreSQL DDL.
Приводит SQL к канонической форме для упрощения парсинга.

Гибридный подход:
- разбиение на операторы выполняется через sqlparse (учитывает строки и комментарии)
- токенная реконструкция через SQLTokenizer: комментарии удаляются,
  ключевые слова и типы -> верхний регистр, неquoted идентификаторы -> нижний
"""
import re
from typing import List

import sqlparse

from .tokenizer import SQLTokenizer, Token, TokenType


_NO_SPACE_BEFORE = (TokenType.COMMA, TokenType.RPAREN, TokenType.DOT,
                    TokenType.SEMICOLON, TokenType.ARRAY_SUFFIX)
_NO_SPACE_AFTER = (TokenType.LPAREN, TokenType.DOT)


class SQLNormalizer:
    """
    Нормализатор SQL для PostgreSQL DDL.
    """

    STATEMENT_PREFIXES = {
        "CREATE TABLE": "CREATE_TABLE",
        "CREATE TEMPORARY TABLE": "CREATE_TABLE",
        "CREATE TEMP TABLE": "CREATE_TABLE",
        "CREATE UNLOGGED TABLE": "CREATE_TABLE",
        "ALTER TABLE": "ALTER_TABLE",
        "DROP TABLE": "DROP_TABLE",
        "CREATE INDEX": "CREATE_INDEX",
        "CREATE UNIQUE INDEX": "CREATE_INDEX",
        "CREATE VIEW": "CREATE_VIEW",
    }

    def __init__(self, uppercase_keywords: bool = True):
        self.uppercase_keywords = uppercase_keywords
        self.tokenizer = SQLTokenizer(preserve_case=not uppercase_keywords)

    def normalize(self, sql_text: str) -> str:
        if not sql_text or not sql_text.strip():
            return ""
        tokens = self.tokenizer.tokenize(sql_text)
        return self.render(tokens)

    def render(self, tokens: List[Token]) -> str:
        tokens = [t for t in tokens if t.type != TokenType.EOF]
        if not tokens:
            return ""

        parts: List[str] = []
        for i, tok in enumerate(tokens):
            parts.append(tok.value)

            if i == len(tokens) - 1:
                continue

            next_tok = tokens[i + 1]
            if next_tok.type in _NO_SPACE_BEFORE:
                continue
            if tok.type in _NO_SPACE_AFTER:
                continue
            # VARCHAR(255), NUMERIC(10, 2)
            if tok.type == TokenType.TYPE and next_tok.type == TokenType.LPAREN:
                continue
            parts.append(" ")

        return re.sub(r"\s+", " ", "".join(parts)).strip()

    def split_statements(self, sql_text: str) -> List[str]:
        """
        Делит SQL на операторы и нормализует каждый.
        Завершающая ';' отбрасывается.
        """
        if not sql_text or not sql_text.strip():
            return []

        statements: List[str] = []
        for raw in sqlparse.split(sql_text):
            stmt = self.normalize(raw).rstrip(";").strip()
            if stmt:
                statements.append(stmt)
        return statements

    def get_statement_type(self, sql_text: str) -> str:
        normalized = self.normalize(sql_text).upper()
        for prefix, stmt_type in self.STATEMENT_PREFIXES.items():
            if normalized.startswith(prefix + " "):
                return stmt_type
        return "UNKNOWN"
