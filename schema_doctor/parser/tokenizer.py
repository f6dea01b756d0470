from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class TokenType(str, Enum):
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    QUOTED_IDENTIFIER = "QUOTED_IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    TYPE = "TYPE"

    OPERATOR = "OPERATOR"
    COMMA = "COMMA"
    DOT = "DOT"
    SEMICOLON = "SEMICOLON"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    ARRAY_SUFFIX = "ARRAY_SUFFIX"

    WHITESPACE = "WHITESPACE"
    NEWLINE = "NEWLINE"
    COMMENT = "COMMENT"

    EOF = "EOF"


@dataclass
class Token:
    type: TokenType
    value: str
    line: int
    column: int
    position: int

    def normalize(self) -> str:
        return self.value.lower()

    def is_keyword(self, *words: str) -> bool:
        if self.type != TokenType.KEYWORD:
            return False
        return not words or self.value.upper() in words


class SQLTokenizer:
    """
    Лексический анализатор DDL
    Делает токены + позиционную разметку (line/column/position).
    """

    KEYWORDS = {
        "CREATE", "ALTER", "DROP", "TABLE", "SCHEMA", "COLUMN",
        "CONSTRAINT", "PRIMARY", "KEY", "FOREIGN", "REFERENCES",
        "UNIQUE", "CHECK", "DEFAULT", "NOT", "NULL",
        "ADD", "RENAME", "TO", "IF", "EXISTS",
        "ON", "DELETE", "UPDATE", "CASCADE", "RESTRICT", "SET",
        "TYPE", "USING", "GENERATED", "ALWAYS", "AS", "IDENTITY",
        "COLLATE", "TEMPORARY", "TEMP", "UNLOGGED", "ONLY",
    }

    TYPE_KEYWORDS = {
        "SMALLINT", "INTEGER", "INT", "INT2", "INT4", "INT8", "BIGINT",
        "SERIAL", "BIGSERIAL", "SMALLSERIAL",
        "REAL", "DOUBLE", "PRECISION", "FLOAT", "FLOAT4", "FLOAT8",
        "NUMERIC", "DECIMAL",
        "CHAR", "CHARACTER", "VARCHAR", "TEXT", "VARYING", "CITEXT",
        "BOOLEAN", "BOOL",
        "DATE", "TIME", "TIMESTAMP", "TIMESTAMPTZ", "TIMETZ", "INTERVAL",
        "WITH", "WITHOUT", "ZONE",
        "JSON", "JSONB", "UUID", "XML",
        "BYTEA", "OID", "MONEY",
    }

    # NEWLINE ДО WHITESPACE, иначе \s+ “съест” \n и NEWLINE никогда не появится
    _TOKEN_SPECS: List[Tuple[str, TokenType]] = [
        (r"--[^\n]*", TokenType.COMMENT),
        (r"/\*[\s\S]*?\*/", TokenType.COMMENT),
        (r"\r\n|\r|\n", TokenType.NEWLINE),
        (r"[ \t\f\v]+", TokenType.WHITESPACE),

        (r"'(?:[^']|'')*'", TokenType.STRING),
        (r'"(?:[^"]|"")*"', TokenType.QUOTED_IDENTIFIER),

        (r"\d+\.\d+", TokenType.NUMBER),
        (r"\d+", TokenType.NUMBER),

        (r"\[\s*\d*\s*\]", TokenType.ARRAY_SUFFIX),

        (r"::|<=|>=|<>|!=|\|\|", TokenType.OPERATOR),
        (r"[=<>!@#%^&|*/+\-:]", TokenType.OPERATOR),

        (r",", TokenType.COMMA),
        (r"\.", TokenType.DOT),
        (r";", TokenType.SEMICOLON),
        (r"\(", TokenType.LPAREN),
        (r"\)", TokenType.RPAREN),

        (r"[A-Za-z_][A-Za-z0-9_$]*", TokenType.IDENTIFIER),
    ]

    def __init__(self, preserve_case: bool = False):
        self.preserve_case = preserve_case

        parts = []
        for i, (pat, _) in enumerate(self._TOKEN_SPECS):
            parts.append(f"(?P<T{i}>{pat})")
        self._master = re.compile("|".join(parts), re.IGNORECASE)

        # отображение group name -> TokenType
        self._group_to_type = {f"T{i}": t for i, (_, t) in enumerate(self._TOKEN_SPECS)}

    def tokenize(self, sql_text: str) -> List[Token]:
        """
        Токенизация в один проход.
        Возвращает токены без WHITESPACE/COMMENT/NEWLINE, последним идёт EOF.
        """
        tokens: List[Token] = []
        line = 1
        col = 1

        pos = 0
        n = len(sql_text)

        while pos < n:
            m = self._master.match(sql_text, pos)
            if not m:
                # гарантируем прогресс: 1 символ как OPERATOR
                tokens.append(Token(TokenType.OPERATOR, sql_text[pos], line, col, pos))
                pos += 1
                col += 1
                continue

            group = m.lastgroup
            assert group is not None
            base_type = self._group_to_type[group]
            value = m.group(group)
            start_col, start_pos = col, pos

            if base_type == TokenType.NEWLINE:
                line += 1
                col = 1
            elif base_type == TokenType.COMMENT and "\n" in value:
                line += value.count("\n")
                col = len(value) - value.rfind("\n")
            else:
                col += len(value)

            pos = m.end()

            # фильтрация шума
            if base_type in (TokenType.WHITESPACE, TokenType.COMMENT, TokenType.NEWLINE):
                continue

            precise = self._determine_token_type(base_type, value)

            if not self.preserve_case:
                if precise == TokenType.IDENTIFIER:
                    value = value.lower()
                elif precise in (TokenType.KEYWORD, TokenType.TYPE):
                    value = value.upper()

            tokens.append(Token(precise, value, line, start_col, start_pos))

        tokens.append(Token(TokenType.EOF, "", line, col, pos))
        return tokens

    def _determine_token_type(self, base_type: TokenType, value: str) -> TokenType:
        if base_type != TokenType.IDENTIFIER:
            return base_type

        u = value.upper()

        if u in self.KEYWORDS:
            return TokenType.KEYWORD

        if u in self.TYPE_KEYWORDS:
            return TokenType.TYPE

        return TokenType.IDENTIFIER


def find_keyword_sequence(tokens: List[Token], *words: str, start: int = 0) -> Optional[int]:
    """
    Индекс первого токена последовательности ключевых слов (например NOT NULL)
    на верхнем уровне скобок, либо None.
    """
    depth = 0
    n = len(words)
    for i in range(start, len(tokens)):
        tok = tokens[i]
        if tok.type == TokenType.LPAREN:
            depth += 1
            continue
        if tok.type == TokenType.RPAREN:
            depth -= 1
            continue
        if depth != 0:
            continue
        window = tokens[i:i + n]
        if len(window) == n and all(t.is_keyword(w) for t, w in zip(window, words)):
            return i
    return None
