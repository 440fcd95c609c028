"""Standalone Relapse grammar parser.

This package parses Relapse pattern-matching grammars into a dataclass AST
that keeps every punctuation token and every run of whitespace or comments,
with zero external dependencies.

Basic usage:
    from relapse import parse

    grammar = parse('(.Name == "Robert" & .Age >= 18)')
    print(grammar.top_pattern.value())
"""

from .constants import BUILTIN_SYMBOLS, Type
from .errors import ParseError
from .lexer import Token, tokenize
from .models import (
    NODE_TYPES,
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
    Node,
    Not,
    Optional,
    Or,
    Pattern,
    PatternDecl,
    Reference,
    Role,
    Space,
    Terminal,
    TreeNode,
    Variable,
    ZAny,
    ZeroOrMore,
    field_label,
)
from .parser import Parser, parse

__version__ = "0.1.0"

__all__ = [
    "__version__",

    # Parsing
    "parse",
    "Parser",
    "ParseError",
    "tokenize",
    "Token",

    # AST model
    "Node",
    "Role",
    "NODE_TYPES",
    "field_label",
    "Grammar",
    "PatternDecl",
    "Pattern",
    "Empty",
    "TreeNode",
    "Contains",
    "LeafNode",
    "Concat",
    "Or",
    "And",
    "ZeroOrMore",
    "Reference",
    "Not",
    "ZAny",
    "Optional",
    "Interleave",
    "Expr",
    "List",
    "Function",
    "BuiltIn",
    "Terminal",
    "Variable",
    "Keyword",
    "Space",
    "NameExpr",
    "Name",
    "AnyName",
    "AnyNameExcept",
    "NameChoice",

    # Constants
    "Type",
    "BUILTIN_SYMBOLS",
]
