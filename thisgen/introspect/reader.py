"""A lazy tokenizer and cursor for the small grammars thisgen reads.

Only three token shapes exist: identifiers, double-quoted string literals and
single punctuation characters (``::`` is the one two-character token).  Line
and block comments are skipped.  Tokens are produced on demand from a start
offset, so whatever follows the region being read is never tokenized.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..errors import StructuralMismatchError


class TokenKind(str, Enum):
    IDENT = "identifier"
    STRING = "string literal"
    PUNCT = "punctuation"
    EOF = "end of input"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    offset: int
    line: int
    column: int

    def describe(self) -> str:
        if self.kind is TokenKind.EOF:
            return "end of input"
        if self.kind is TokenKind.STRING:
            return f'"{self.value}"'
        return f"'{self.value}'"


_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_STRING = re.compile(r'"((?:[^"\\\n]|\\.)*)"')
_WHITESPACE = re.compile(r"\s+")

CLOSERS = {"(": ")", "[": "]", "{": "}", "<": ">"}


class Cursor:
    """Recursive-descent cursor over *text* starting at *offset*."""

    def __init__(self, text: str, offset: int = 0, *, path: str = "") -> None:
        self.text = text
        self.pos = offset
        self.path = path
        self._peeked: Token | None = None

    # -- Position helpers --------------------------------------------------

    def _line_col(self, offset: int) -> tuple[int, int]:
        line = self.text.count("\n", 0, offset) + 1
        line_start = self.text.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1

    def _skip_trivia(self) -> None:
        while self.pos < len(self.text):
            match = _WHITESPACE.match(self.text, self.pos)
            if match:
                self.pos = match.end()
                continue
            if self.text.startswith("//", self.pos):
                newline = self.text.find("\n", self.pos)
                self.pos = len(self.text) if newline < 0 else newline + 1
                continue
            if self.text.startswith("/*", self.pos):
                end = self.text.find("*/", self.pos + 2)
                if end < 0:
                    raise self.mismatch_at(self.pos, "'*/' closing the block comment", "unterminated comment")
                self.pos = end + 2
                continue
            break

    def _scan(self) -> Token:
        self._skip_trivia()
        start = self.pos
        line, column = self._line_col(start)
        if start >= len(self.text):
            return Token(TokenKind.EOF, "", start, line, column)

        match = _IDENT.match(self.text, start)
        if match:
            self.pos = match.end()
            return Token(TokenKind.IDENT, match.group(0), start, line, column)

        if self.text[start] == '"':
            match = _STRING.match(self.text, start)
            if not match:
                raise self.mismatch_at(start, "a closing '\"'", "unterminated string literal")
            self.pos = match.end()
            return Token(TokenKind.STRING, match.group(1), start, line, column)

        if self.text.startswith("::", start):
            self.pos = start + 2
            return Token(TokenKind.PUNCT, "::", start, line, column)

        self.pos = start + 1
        return Token(TokenKind.PUNCT, self.text[start], start, line, column)

    # -- Token access ------------------------------------------------------

    def peek(self) -> Token:
        if self._peeked is None:
            self._peeked = self._scan()
        return self._peeked

    def advance(self) -> Token:
        token = self.peek()
        self._peeked = None
        return token

    def at(self, value: str) -> bool:
        token = self.peek()
        return token.kind is TokenKind.PUNCT and token.value == value

    def accept(self, value: str) -> bool:
        """Consume the punctuation *value* if it is next."""
        if self.at(value):
            self.advance()
            return True
        return False

    def expect(self, value: str, what: str) -> Token:
        """Consume the punctuation *value* or fail with *what* as the expectation."""
        token = self.peek()
        if token.kind is TokenKind.PUNCT and token.value == value:
            return self.advance()
        raise self.mismatch(token, f"'{value}' {what}")

    def expect_kind(self, kind: TokenKind, what: str) -> Token:
        token = self.peek()
        if token.kind is kind:
            return self.advance()
        raise self.mismatch(token, f"{kind.value} {what}")

    def skip_balanced(self, closer: str) -> None:
        """Consume tokens up to and including *closer*, honouring nesting.

        Raises:
            StructuralMismatchError: On an unbalanced or mismatched bracket.
        """
        stack = [closer]
        while stack:
            token = self.advance()
            if token.kind is TokenKind.EOF:
                raise self.mismatch(token, f"'{stack[-1]}' closing the open bracket")
            if token.kind is not TokenKind.PUNCT:
                continue
            if token.value in CLOSERS and token.value != "<":
                stack.append(CLOSERS[token.value])
            elif token.value in (")", "]", "}"):
                if token.value != stack[-1]:
                    raise self.mismatch(token, f"'{stack[-1]}' closing the open bracket")
                stack.pop()

    # -- Errors ------------------------------------------------------------

    def mismatch(self, token: Token, expected: str) -> StructuralMismatchError:
        return self.mismatch_at(token.offset, expected, f"found {token.describe()}")

    def mismatch_at(self, offset: int, expected: str, found: str) -> StructuralMismatchError:
        line, column = self._line_col(offset)
        lines = self.text.splitlines()
        source_line = lines[line - 1] if line <= len(lines) else ""
        hint = "\n".join([
            f"@@ line {line}, column {column} @@",
            f"- expected {expected}",
            f"+ {source_line.rstrip()}",
            f"+ {' ' * (column - 1)}^ {found}",
        ])
        return StructuralMismatchError(
            f"expected {expected}, {found}",
            path=self.path,
            line=line,
            column=column,
            hint=hint,
        )
