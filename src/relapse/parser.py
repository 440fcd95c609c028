"""Recursive-descent parser for Relapse grammars.

The parser keeps every punctuation token as a ``Keyword`` and every run of
whitespace or comments as a ``Space`` so the resulting AST can be rendered in
full, trivia included. Multi-operand or/and/concat/interleave patterns and
name choices nest to the right; only the outermost node owns the brackets.
"""

from __future__ import annotations

import logging
import string
from dataclasses import replace
from typing import Callable, TypeVar

from .constants import (
    BOOL_LITERALS,
    BUILTIN_SYMBOLS,
    CAST_NAMES,
    HEX_ESCAPES,
    LIST_TYPES,
    OCTAL_DIGITS,
    STRING_ESCAPES,
    VARIABLE_TYPES,
)
from .errors import ParseError
from .lexer import Token, tokenize
from .models import (
    And,
    AnyName,
    AnyNameExcept,
    BuiltIn,
    Concat,
    Contains,
    Empty,
    Expr,
    Function,
    Grammar,
    Interleave,
    Keyword,
    LeafNode,
    List,
    Name,
    NameChoice,
    NameExpr,
    Not,
    Optional,
    Or,
    Pattern,
    PatternDecl,
    Reference,
    Terminal,
    TreeNode,
    Variable,
    ZAny,
    ZeroOrMore,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Tokens that may start a name expression
_NAME_START = {"ident", "string", "int", "double", "_", "(", "!", "["}


class Parser:
    """Parses a token stream into a ``Grammar``."""

    def __init__(self, source: str) -> None:
        self.tokens = tokenize(source)
        self.pos = 0

    # ------------------------------------------------------------------
    # Token helpers

    def _peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _at(self, *kinds: str) -> bool:
        return self._peek().kind in kinds

    def _next(self) -> Token:
        token = self._peek()
        if token.kind != "eof":
            self.pos += 1
        return token

    def _error(self, message: str, token: Token | None = None) -> ParseError:
        token = token or self._peek()
        found = "end of input" if token.kind == "eof" else repr(token.text)
        return ParseError(f"{message}, found {found}", token.line, token.column)

    def _expect(self, kind: str) -> Token:
        if not self._at(kind):
            raise self._error(f"expected {kind!r}")
        return self._next()

    def _keyword(self, kind: str) -> Keyword:
        token = self._expect(kind)
        return Keyword(before=token.before, value=token.text)

    def _optional_keyword(self, kind: str) -> Keyword | None:
        return self._keyword(kind) if self._at(kind) else None

    def _attempt(self, rule: Callable[[], T]) -> T | None:
        """Run ``rule``; rewind and return None when it fails."""
        saved = self.pos
        try:
            return rule()
        except ParseError:
            self.pos = saved
            return None

    # ------------------------------------------------------------------
    # Grammar

    def parse_grammar(self) -> Grammar:
        top_pattern = None
        if not self._at("#", "eof"):
            top_pattern = self.parse_pattern()
        decls = []
        while self._at("#"):
            decls.append(self._parse_pattern_decl())
        end = self._peek()
        if end.kind != "eof":
            raise self._error("expected pattern declaration or end of input")
        if top_pattern is None and not decls:
            raise self._error("empty grammar")
        return Grammar(top_pattern=top_pattern, pattern_decls=decls, after=end.before)

    def _parse_pattern_decl(self) -> PatternDecl:
        hash_ = self._keyword("#")
        name = self._expect("ident")
        eq = self._keyword("=")
        return PatternDecl(
            hash=hash_,
            before=name.before,
            name=name.text,
            eq=eq,
            pattern=self.parse_pattern(),
        )

    # ------------------------------------------------------------------
    # Patterns

    def parse_pattern(self) -> Pattern:
        kind = self._peek().kind
        if kind == "<empty>":
            return Pattern(empty=Empty(empty=self._keyword("<empty>")))
        if kind == "*":
            return Pattern(z_any=ZAny(star=self._keyword("*")))
        if kind == "@":
            at = self._keyword("@")
            return Pattern(reference=Reference(at=at, name=self._expect("ident").text))
        if kind == "[" and self._peek(1).kind != "]":
            return Pattern(concat=self._parse_concat())
        if kind == "{":
            return Pattern(interleave=self._parse_interleave())
        if kind == ".":
            return Pattern(contains=self._parse_contains())
        if kind == "->" or kind in BUILTIN_SYMBOLS:
            return Pattern(leaf_node=self._parse_leaf())
        if kind in ("(", "!"):
            # "(a|b): p" and "!(a): p" are tree nodes with name expressions
            tree_node = self._attempt(self._parse_tree_node)
            if tree_node is not None:
                return Pattern(tree_node=tree_node)
            if kind == "!":
                return Pattern(not_=self._parse_not())
            return self._parse_group()
        if kind in _NAME_START:
            return Pattern(tree_node=self._parse_tree_node())
        raise self._error("expected pattern")

    def _parse_depth_pattern(self) -> Pattern:
        kind = self._peek().kind
        if kind == "[" and self._peek(1).kind != "]":
            return Pattern(concat=self._parse_concat())
        if kind == "{":
            return Pattern(interleave=self._parse_interleave())
        if kind == ".":
            return Pattern(contains=self._parse_contains())
        if kind in BUILTIN_SYMBOLS:
            return Pattern(leaf_node=self._parse_leaf())
        raise self._error("expected ':' or a depth pattern")

    def _parse_tree_node(self) -> TreeNode:
        name = self.parse_name_expr()
        if self._at(":"):
            colon = self._keyword(":")
            return TreeNode(name=name, colon=colon, pattern=self.parse_pattern())
        return TreeNode(name=name, pattern=self._parse_depth_pattern())

    def _parse_contains(self) -> Contains:
        dot = self._keyword(".")
        return Contains(dot=dot, pattern=self.parse_pattern())

    def _parse_leaf(self) -> LeafNode:
        if self._at("->"):
            arrow = self._keyword("->")
            return LeafNode(expr=replace(self.parse_expr(), right_arrow=arrow))
        return LeafNode(expr=self.parse_expr())

    def _parse_not(self) -> Not:
        exclamation = self._keyword("!")
        open_paren = self._keyword("(")
        pattern = self.parse_pattern()
        return Not(
            exclamation=exclamation,
            open_paren=open_paren,
            pattern=pattern,
            close_paren=self._keyword(")"),
        )

    def _parse_group(self) -> Pattern:
        open_paren = self._keyword("(")
        first = self.parse_pattern()
        if self._at(")"):
            close_paren = self._keyword(")")
            if self._at("*"):
                return Pattern(zero_or_more=ZeroOrMore(
                    open_paren=open_paren, pattern=first, close_paren=close_paren,
                    star=self._keyword("*"),
                ))
            if self._at("?"):
                return Pattern(optional=Optional(
                    open_paren=open_paren, pattern=first, close_paren=close_paren,
                    question_mark=self._keyword("?"),
                ))
            raise self._error("expected '*' or '?' after parenthesized pattern")
        if self._at("|"):
            operator, build = "|", _or
        elif self._at("&"):
            operator, build = "&", _and
        else:
            raise self._error("expected '|', '&' or ')'")
        patterns, separators = [first], []
        while self._at(operator):
            separators.append(self._keyword(operator))
            patterns.append(self.parse_pattern())
        close_paren = self._keyword(")")
        right = _fold_right(patterns[1:], separators[1:], build)
        return build(open_paren, first, separators[0], right, close_paren)

    def _parse_concat(self) -> Concat:
        open_bracket = self._keyword("[")
        patterns, separators = [self.parse_pattern()], []
        extra_comma = None
        while self._at(","):
            comma = self._keyword(",")
            if self._at("]"):
                extra_comma = comma
                break
            separators.append(comma)
            patterns.append(self.parse_pattern())
        if len(patterns) < 2:
            raise self._error("concatenation needs at least two patterns")
        close_bracket = self._keyword("]")
        right = _fold_right(patterns[1:], separators[1:], _concat)
        return Concat(
            open_bracket=open_bracket,
            left_pattern=patterns[0],
            comma=separators[0],
            right_pattern=right,
            extra_comma=extra_comma,
            close_bracket=close_bracket,
        )

    def _parse_interleave(self) -> Interleave:
        open_curly = self._keyword("{")
        patterns, separators = [self.parse_pattern()], []
        extra_semi_colon = None
        while self._at(";"):
            semi_colon = self._keyword(";")
            if self._at("}"):
                extra_semi_colon = semi_colon
                break
            separators.append(semi_colon)
            patterns.append(self.parse_pattern())
        if len(patterns) < 2:
            raise self._error("interleave needs at least two patterns")
        close_curly = self._keyword("}")
        right = _fold_right(patterns[1:], separators[1:], _interleave)
        return Interleave(
            open_curly=open_curly,
            left_pattern=patterns[0],
            semi_colon=separators[0],
            right_pattern=right,
            extra_semi_colon=extra_semi_colon,
            close_curly=close_curly,
        )

    # ------------------------------------------------------------------
    # Name expressions

    def parse_name_expr(self) -> NameExpr:
        kind = self._peek().kind
        if kind == "_":
            return NameExpr(any_name=AnyName(underscore=self._keyword("_")))
        if kind == "!":
            exclamation = self._keyword("!")
            open_paren = self._keyword("(")
            except_ = self.parse_name_expr()
            return NameExpr(any_name_except=AnyNameExcept(
                exclamation=exclamation,
                open_paren=open_paren,
                except_=except_,
                close_paren=self._keyword(")"),
            ))
        if kind == "(":
            open_paren = self._keyword("(")
            names = [self.parse_name_expr()]
            pipes = []
            while self._at("|"):
                pipes.append(self._keyword("|"))
                names.append(self.parse_name_expr())
            if not pipes:
                raise self._error("expected '|' in name choice")
            close_paren = self._keyword(")")
            right = names[-1]
            for left, pipe in zip(reversed(names[1:-1]), reversed(pipes[1:])):
                right = NameExpr(name_choice=NameChoice(left=left, pipe=pipe, right=right))
            return NameExpr(name_choice=NameChoice(
                open_paren=open_paren, left=names[0], pipe=pipes[0], right=right,
                close_paren=close_paren,
            ))
        return NameExpr(name=self._parse_name())

    def _parse_name(self) -> Name:
        token = self._peek()
        values = self._parse_value()
        if values is None:
            raise self._error("expected name", token)
        return Name(before=token.before, **values)

    # ------------------------------------------------------------------
    # Literal values shared by names and terminals

    def _parse_value(self) -> dict | None:
        """Parse a literal; return the populated value fields or None."""
        token = self._peek()
        if token.kind == "string":
            self._next()
            return {"string_value": _unquote(token)}
        if token.kind == "int":
            self._next()
            return {"int_value": int(token.text)}
        if token.kind == "double":
            self._next()
            return {"double_value": float(token.text)}
        if token.kind == "ident" and token.text in BOOL_LITERALS:
            self._next()
            return {"bool_value": BOOL_LITERALS[token.text]}
        if token.kind == "ident" and token.text in CAST_NAMES and self._peek(1).kind == "(":
            return self._parse_cast()
        if token.kind == "[" and self._peek(1).kind == "]" and self._peek(2).text == "byte" \
                and self._peek(3).kind == "{":
            return {"bytes_value": self._parse_bytes()}
        if token.kind == "ident":
            self._next()
            return {"string_value": token.text}
        return None

    def _parse_cast(self) -> dict:
        name = self._next().text
        self._expect("(")
        token = self._next()
        if token.kind not in ("int", "double") or (name != "double" and token.kind != "int"):
            raise self._error(f"expected number in {name}() literal", token)
        self._expect(")")
        if name == "double":
            return {"double_value": float(token.text)}
        value = int(token.text)
        if name == "uint":
            if value < 0:
                raise self._error("uint literal must not be negative", token)
            return {"uint_value": value}
        return {"int_value": value}

    def _parse_bytes(self) -> bytes:
        for kind in ("[", "]", "ident", "{"):
            self._expect(kind)
        values = []
        while not self._at("}"):
            token = self._expect("int")
            value = int(token.text)
            if not 0 <= value <= 255:
                raise self._error("byte value out of range", token)
            values.append(value)
            if not self._at("}"):
                self._expect(",")
        self._expect("}")
        return bytes(values)

    # ------------------------------------------------------------------
    # Expressions

    def parse_expr(self, comma: Keyword | None = None) -> Expr:
        token = self._peek()
        if token.kind in BUILTIN_SYMBOLS:
            symbol = self._keyword(token.kind)
            return Expr(comma=comma, built_in=BuiltIn(symbol=symbol, expr=self.parse_expr()))
        if token.kind == "variable":
            self._next()
            return Expr(comma=comma, terminal=Terminal(
                before=token.before,
                literal=token.text,
                variable=Variable(type=VARIABLE_TYPES[token.text[1:]]),
            ))
        if token.kind == "[" and self._peek(1).kind == "]" and not self._is_bytes_literal():
            return Expr(comma=comma, list_=self._parse_list())
        if token.kind == "ident" and self._peek(1).kind == "(" and token.text not in CAST_NAMES:
            return Expr(comma=comma, function=self._parse_function())
        start = self.pos
        values = self._parse_value()
        if values is None:
            raise self._error("expected expression")
        literal = "".join(t.text for t in self.tokens[start:self.pos])
        if "bytes_value" in values:
            literal = _bytes_spelling(values["bytes_value"])
        return Expr(comma=comma, terminal=Terminal(before=token.before, literal=literal, **values))

    def _is_bytes_literal(self) -> bool:
        return self._peek(2).text == "byte" and self._peek(3).kind == "{"

    def _parse_list(self) -> List:
        start = self._expect("[")
        self._expect("]")
        if self._at("["):
            # [][]byte{...}
            self._expect("[")
            self._expect("]")
            spelling = "[]" + self._expect("ident").text
        else:
            spelling = self._expect("ident").text
        if spelling not in LIST_TYPES:
            raise self._error(f"unknown list type {spelling!r}")
        open_curly = self._keyword("{")
        elems = []
        comma = None
        while not self._at("}"):
            elems.append(self.parse_expr(comma))
            if self._at("}"):
                break
            comma = self._keyword(",")
        return List(
            before=start.before,
            type=LIST_TYPES[spelling],
            open_curly=open_curly,
            elems=elems,
            close_curly=self._keyword("}"),
        )

    def _parse_function(self) -> Function:
        name = self._next()
        open_paren = self._keyword("(")
        params = []
        comma = None
        while not self._at(")"):
            params.append(self.parse_expr(comma))
            if self._at(")"):
                break
            comma = self._keyword(",")
        return Function(
            before=name.before,
            name=name.text,
            open_paren=open_paren,
            params=params,
            close_paren=self._keyword(")"),
        )


# ----------------------------------------------------------------------
# Right-nesting builders for binary pattern chains


def _or(open_paren, left, pipe, right, close_paren) -> Pattern:
    return Pattern(or_=Or(
        open_paren=open_paren, left_pattern=left, pipe=pipe,
        right_pattern=right, close_paren=close_paren,
    ))


def _and(open_paren, left, ampersand, right, close_paren) -> Pattern:
    return Pattern(and_=And(
        open_paren=open_paren, left_pattern=left, ampersand=ampersand,
        right_pattern=right, close_paren=close_paren,
    ))


def _concat(open_bracket, left, comma, right, close_bracket) -> Pattern:
    return Pattern(concat=Concat(
        open_bracket=open_bracket, left_pattern=left, comma=comma,
        right_pattern=right, close_bracket=close_bracket,
    ))


def _interleave(open_curly, left, semi_colon, right, close_curly) -> Pattern:
    return Pattern(interleave=Interleave(
        open_curly=open_curly, left_pattern=left, semi_colon=semi_colon,
        right_pattern=right, close_curly=close_curly,
    ))


def _fold_right(patterns: list[Pattern], separators: list[Keyword], build) -> Pattern:
    """Nest ``patterns`` to the right; inner nodes carry no brackets."""
    right = patterns[-1]
    for left, separator in zip(reversed(patterns[:-1]), reversed(separators)):
        right = build(None, left, separator, right, None)
    return right


def _unquote(token: Token) -> str:
    """Decode a string literal token.

    Backquoted literals are raw. In double-quoted literals ``\\x`` and octal
    escapes write single bytes, and the result is decoded as UTF-8 with invalid
    sequences replaced.
    """
    text = token.text
    if text.startswith("`"):
        return text[1:-1]
    out = bytearray()
    index = 1
    end = len(text) - 1
    while index < end:
        ch = text[index]
        if ch != "\\":
            out += ch.encode("utf-8")
            index += 1
            continue
        escaped = text[index + 1]
        index += 2
        if escaped in STRING_ESCAPES:
            out += STRING_ESCAPES[escaped].encode("utf-8")
        elif escaped in HEX_ESCAPES:
            digits = text[index:index + HEX_ESCAPES[escaped]]
            if len(digits) != HEX_ESCAPES[escaped] or not all(d in string.hexdigits for d in digits):
                raise ParseError(f"invalid \\{escaped} escape in string literal", token.line, token.column)
            value = int(digits, 16)
            index += len(digits)
            if escaped == "x":
                out.append(value)
            elif value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                raise ParseError(f"escape sequence is invalid Unicode code point {digits}", token.line, token.column)
            else:
                out += chr(value).encode("utf-8")
        elif escaped in OCTAL_DIGITS:
            digits = text[index - 1:index + 2]
            if len(digits) != 3 or not all(d in OCTAL_DIGITS for d in digits) or int(digits, 8) > 0xFF:
                raise ParseError(f"invalid octal escape \\{digits} in string literal", token.line, token.column)
            out.append(int(digits, 8))
            index += 2
        else:
            raise ParseError(f"unknown escape sequence \\{escaped}", token.line, token.column)
    return out.decode("utf-8", errors="replace")


def _bytes_spelling(value: bytes) -> str:
    return "[]byte{" + ", ".join(str(b) for b in value) + "}"


def parse(source: str) -> Grammar:
    """Parse Relapse ``source`` into a ``Grammar``.

    Raises:
        ParseError: If the source is not a valid grammar
    """
    grammar = Parser(source).parse_grammar()
    logger.debug(f"Parsed grammar with {len(grammar.pattern_decls)} pattern declarations")
    return grammar
