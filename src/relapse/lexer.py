"""Trivia-preserving tokenizer for Relapse source text.

Whitespace and comments are not discarded: every run is collected into the
``Space`` attached to the token that follows it, so the parser can rebuild the
lexical wrappers the AST keeps for fidelity.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .constants import LONG_SYMBOLS, SINGLE_SYMBOLS, VARIABLE_TYPES
from .errors import ParseError
from .models import Space

_WHITESPACE = re.compile(r"\s+")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER = re.compile(r"-?[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?")
_STRING = re.compile(r'"(?:[^"\\\n]|\\.)*"')
_RAW_STRING = re.compile(r"`[^`]*`")


@dataclass
class Token:
    """Single lexical token.

    ``kind`` is one of ident, string, int, double, variable, eof, or the
    symbol spelling itself for punctuation and operators.
    """
    kind: str
    text: str
    before: Space | None
    line: int
    column: int


class Lexer:
    """Hand-written scanner producing tokens with leading trivia."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.length = len(source)
        self.index = 0
        self.line = 1
        self.column = 1

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            before = self._consume_space()
            if self.index >= self.length:
                tokens.append(Token("eof", "", before, self.line, self.column))
                return tokens
            tokens.append(self._consume_token(before))

    def _advance(self, text: str) -> None:
        self.index += len(text)
        newlines = text.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(text) - text.rfind("\n")
        else:
            self.column += len(text)

    def _consume_space(self) -> Space | None:
        parts: list[str] = []
        while self.index < self.length:
            match = _WHITESPACE.match(self.source, self.index)
            if match:
                parts.append(match.group())
                self._advance(match.group())
                continue
            if self.source.startswith("//", self.index):
                end = self.source.find("\n", self.index)
                text = self.source[self.index:] if end < 0 else self.source[self.index:end]
                parts.append(text)
                self._advance(text)
                continue
            if self.source.startswith("/*", self.index):
                end = self.source.find("*/", self.index + 2)
                if end < 0:
                    raise ParseError("unterminated block comment", self.line, self.column)
                text = self.source[self.index:end + 2]
                parts.append(text)
                self._advance(text)
                continue
            break
        return Space(parts) if parts else None

    def _consume_token(self, before: Space | None) -> Token:
        line, column = self.line, self.column
        source, index = self.source, self.index

        def emit(kind: str, text: str) -> Token:
            self._advance(text)
            return Token(kind, text, before, line, column)

        ch = source[index]
        if ch == "$" and not source.startswith("$=", index):
            for spelling in sorted(VARIABLE_TYPES, key=len, reverse=True):
                if source.startswith(spelling, index + 1) and not _continues_ident(source, index + 1 + len(spelling)):
                    return emit("variable", "$" + spelling)
            raise ParseError("unknown variable type", line, column)
        if ch == "-" and index + 1 < self.length and source[index + 1].isdigit():
            match = _NUMBER.match(source, index)
            return emit("double" if match.group(1) or match.group(2) else "int", match.group())
        for symbol in LONG_SYMBOLS:
            if source.startswith(symbol, index):
                return emit(symbol, symbol)
        if ch.isdigit():
            match = _NUMBER.match(source, index)
            return emit("double" if match.group(1) or match.group(2) else "int", match.group())
        if ch == '"':
            match = _STRING.match(source, index)
            if not match:
                raise ParseError("unterminated string literal", line, column)
            return emit("string", match.group())
        if ch == "`":
            match = _RAW_STRING.match(source, index)
            if not match:
                raise ParseError("unterminated raw string literal", line, column)
            return emit("string", match.group())
        match = _IDENT.match(source, index)
        if match:
            text = match.group()
            # a lone underscore is the any-name wildcard
            return emit("_" if text == "_" else "ident", text)
        if ch in SINGLE_SYMBOLS:
            return emit(ch, ch)
        raise ParseError(f"unexpected character {ch!r}", line, column)


def _continues_ident(source: str, index: int) -> bool:
    return index < len(source) and (source[index].isalnum() or source[index] == "_")


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source``; the last token is always of kind ``eof``."""
    return Lexer(source).tokenize()
