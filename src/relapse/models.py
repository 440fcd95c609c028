"""AST data models for parsed Relapse grammars.

All models use dataclasses so the package stays dependency free. Every field
declares a role through its metadata which tells consumers whether it holds a
structural sub-node, an ordered list of sub-nodes, a lexical trivia token or a
plain scalar. Fields are declared in source order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Iterator, NamedTuple

from .constants import Type


class Role(str, Enum):
    """Role of an AST field."""
    CHILD = "child"          # Structural sub-node
    CHILDREN = "children"    # Ordered structural sub-nodes
    TRIVIA = "trivia"        # Keyword or Space wrapper
    SCALAR = "scalar"        # Plain value, label only


def child() -> Any:
    return field(default=None, metadata={"role": Role.CHILD})


def children() -> Any:
    return field(default_factory=list, metadata={"role": Role.CHILDREN})


def trivia() -> Any:
    return field(default=None, metadata={"role": Role.TRIVIA})


def scalar(default: Any = None, quoted: bool = False) -> Any:
    return field(default=default, metadata={"role": Role.SCALAR, "quoted": quoted})


class FieldView(NamedTuple):
    """One AST field as seen by consumers."""
    label: str
    role: Role
    value: Any
    quoted: bool = False


def field_label(name: str) -> str:
    """CamelCase display name of a field, e.g. left_pattern -> LeftPattern."""
    return "".join(part[:1].upper() + part[1:] for part in name.strip("_").split("_"))


class Node:
    """Base class for all Relapse AST nodes."""

    @property
    def variant_name(self) -> str:
        return type(self).__name__

    def iter_fields(self) -> Iterator[FieldView]:
        """Yield every field in source order."""
        for spec in fields(self):
            yield FieldView(
                field_label(spec.name),
                spec.metadata["role"],
                getattr(self, spec.name),
                spec.metadata.get("quoted", False),
            )


# ---------------------------------------------------------------------------
# Lexical trivia


@dataclass
class Space(Node):
    """Whitespace runs and comments preceding a token, one element each."""
    space: list[str] = field(default_factory=list, metadata={"role": Role.SCALAR, "quoted": True})

    def __str__(self) -> str:
        return "".join(self.space)


@dataclass
class Keyword(Node):
    """Punctuation or operator token with its leading space."""
    before: Space | None = trivia()
    value: str = scalar(default="", quoted=True)

    def __str__(self) -> str:
        return (str(self.before) if self.before else "") + self.value


# ---------------------------------------------------------------------------
# Grammar and declarations


@dataclass
class Grammar(Node):
    """Root of a parsed grammar: optional top pattern plus declarations."""
    top_pattern: Pattern | None = child()
    pattern_decls: list[PatternDecl] = children()
    after: Space | None = trivia()


@dataclass
class PatternDecl(Node):
    """Named pattern declaration, ``#name = pattern``."""
    hash: Keyword | None = trivia()
    before: Space | None = trivia()
    name: str = scalar(default="")
    eq: Keyword | None = trivia()
    pattern: Pattern | None = child()


@dataclass
class Pattern(Node):
    """Wrapper holding exactly one populated pattern variant."""
    empty: Empty | None = child()
    tree_node: TreeNode | None = child()
    leaf_node: LeafNode | None = child()
    concat: Concat | None = child()
    or_: Or | None = child()
    and_: And | None = child()
    zero_or_more: ZeroOrMore | None = child()
    reference: Reference | None = child()
    not_: Not | None = child()
    z_any: ZAny | None = child()
    contains: Contains | None = child()
    optional: Optional | None = child()
    interleave: Interleave | None = child()

    def value(self) -> Node | None:
        """Return the populated variant."""
        for view in self.iter_fields():
            if view.value is not None:
                return view.value
        return None


# ---------------------------------------------------------------------------
# Pattern variants


@dataclass
class Empty(Node):
    empty: Keyword | None = trivia()


@dataclass
class TreeNode(Node):
    """Tree node pattern, ``name: pattern`` or ``name <depth pattern>``."""
    name: NameExpr | None = child()
    colon: Keyword | None = trivia()
    pattern: Pattern | None = child()


@dataclass
class Contains(Node):
    dot: Keyword | None = trivia()
    pattern: Pattern | None = child()


@dataclass
class LeafNode(Node):
    expr: Expr | None = child()


@dataclass
class Concat(Node):
    open_bracket: Keyword | None = trivia()
    left_pattern: Pattern | None = child()
    comma: Keyword | None = trivia()
    right_pattern: Pattern | None = child()
    extra_comma: Keyword | None = trivia()
    close_bracket: Keyword | None = trivia()


@dataclass
class Or(Node):
    open_paren: Keyword | None = trivia()
    left_pattern: Pattern | None = child()
    pipe: Keyword | None = trivia()
    right_pattern: Pattern | None = child()
    close_paren: Keyword | None = trivia()


@dataclass
class And(Node):
    open_paren: Keyword | None = trivia()
    left_pattern: Pattern | None = child()
    ampersand: Keyword | None = trivia()
    right_pattern: Pattern | None = child()
    close_paren: Keyword | None = trivia()


@dataclass
class ZeroOrMore(Node):
    open_paren: Keyword | None = trivia()
    pattern: Pattern | None = child()
    close_paren: Keyword | None = trivia()
    star: Keyword | None = trivia()


@dataclass
class Reference(Node):
    at: Keyword | None = trivia()
    name: str = scalar(default="")


@dataclass
class Not(Node):
    exclamation: Keyword | None = trivia()
    open_paren: Keyword | None = trivia()
    pattern: Pattern | None = child()
    close_paren: Keyword | None = trivia()


@dataclass
class ZAny(Node):
    star: Keyword | None = trivia()


@dataclass
class Optional(Node):
    open_paren: Keyword | None = trivia()
    pattern: Pattern | None = child()
    close_paren: Keyword | None = trivia()
    question_mark: Keyword | None = trivia()


@dataclass
class Interleave(Node):
    open_curly: Keyword | None = trivia()
    left_pattern: Pattern | None = child()
    semi_colon: Keyword | None = trivia()
    right_pattern: Pattern | None = child()
    extra_semi_colon: Keyword | None = trivia()
    close_curly: Keyword | None = trivia()


# ---------------------------------------------------------------------------
# Expressions


@dataclass
class Expr(Node):
    """Leaf expression; exactly one of terminal, list, function, built_in is set."""
    right_arrow: Keyword | None = trivia()
    comma: Keyword | None = trivia()
    terminal: Terminal | None = child()
    list_: List | None = child()
    function: Function | None = child()
    built_in: BuiltIn | None = child()


@dataclass
class List(Node):
    """Typed list literal, e.g. ``[]int{1, 2}``."""
    before: Space | None = trivia()
    type: Type = scalar(default=Type.UNKNOWN)
    open_curly: Keyword | None = trivia()
    elems: list[Expr] = children()
    close_curly: Keyword | None = trivia()


@dataclass
class Function(Node):
    before: Space | None = trivia()
    name: str = scalar(default="")
    open_paren: Keyword | None = trivia()
    params: list[Expr] = children()
    close_paren: Keyword | None = trivia()


@dataclass
class BuiltIn(Node):
    """Builtin comparison, e.g. ``== 1``."""
    symbol: Keyword | None = trivia()
    expr: Expr | None = child()


@dataclass
class Terminal(Node):
    """Literal value or variable. ``literal`` keeps the source spelling."""
    before: Space | None = trivia()
    literal: str = scalar(default="")
    double_value: float | None = scalar()
    int_value: int | None = scalar()
    uint_value: int | None = scalar()
    bool_value: bool | None = scalar()
    string_value: str | None = scalar()
    bytes_value: bytes | None = scalar()
    variable: Variable | None = child()


@dataclass
class Variable(Node):
    type: Type = scalar(default=Type.UNKNOWN)


# ---------------------------------------------------------------------------
# Name expressions


@dataclass
class NameExpr(Node):
    """Wrapper holding exactly one populated name variant."""
    name: Name | None = child()
    any_name: AnyName | None = child()
    any_name_except: AnyNameExcept | None = child()
    name_choice: NameChoice | None = child()


@dataclass
class Name(Node):
    before: Space | None = trivia()
    double_value: float | None = scalar()
    int_value: int | None = scalar()
    uint_value: int | None = scalar()
    bool_value: bool | None = scalar()
    string_value: str | None = scalar()
    bytes_value: bytes | None = scalar()


@dataclass
class AnyName(Node):
    underscore: Keyword | None = trivia()


@dataclass
class AnyNameExcept(Node):
    exclamation: Keyword | None = trivia()
    open_paren: Keyword | None = trivia()
    except_: NameExpr | None = child()
    close_paren: Keyword | None = trivia()


@dataclass
class NameChoice(Node):
    open_paren: Keyword | None = trivia()
    left: NameExpr | None = child()
    pipe: Keyword | None = trivia()
    right: NameExpr | None = child()
    close_paren: Keyword | None = trivia()


# Closed set of AST variants
NODE_TYPES: frozenset[type[Node]] = frozenset({
    Grammar, PatternDecl, Pattern, Empty, TreeNode, Contains, LeafNode,
    Concat, Or, And, ZeroOrMore, Reference, Not, ZAny, Optional, Interleave,
    Expr, List, Function, BuiltIn, Terminal, Variable, Keyword, Space,
    NameExpr, Name, AnyName, AnyNameExcept, NameChoice,
})
