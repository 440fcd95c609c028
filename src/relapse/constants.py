"""Constants for Relapse grammar lexing and parsing.

Token spellings, builtin comparison symbols and value type names are
centralized here so the lexer, parser and tests agree on them.
"""

from enum import Enum


class Type(int, Enum):
    """Value types a Relapse terminal, variable or list can carry."""
    UNKNOWN = 0
    SINGLE_DOUBLE = 1
    SINGLE_INT = 3
    SINGLE_UINT = 4
    SINGLE_BOOL = 8
    SINGLE_STRING = 9
    SINGLE_BYTES = 12
    LIST_DOUBLE = 101
    LIST_INT = 103
    LIST_UINT = 104
    LIST_BOOL = 108
    LIST_STRING = 109
    LIST_BYTES = 112


# Spelling after "$" in a variable, e.g. $string
VARIABLE_TYPES: dict[str, Type] = {
    "double": Type.SINGLE_DOUBLE,
    "int": Type.SINGLE_INT,
    "uint": Type.SINGLE_UINT,
    "bool": Type.SINGLE_BOOL,
    "string": Type.SINGLE_STRING,
    "[]byte": Type.SINGLE_BYTES,
}

# Spelling after "[]" in a list literal, e.g. []int{1, 2}
LIST_TYPES: dict[str, Type] = {
    "double": Type.LIST_DOUBLE,
    "int": Type.LIST_INT,
    "uint": Type.LIST_UINT,
    "bool": Type.LIST_BOOL,
    "string": Type.LIST_STRING,
    "[]byte": Type.LIST_BYTES,
}

# Builtin comparison symbols usable as leaf patterns, e.g. == "x"
BUILTIN_SYMBOLS: frozenset[str] = frozenset({
    "==", "!=", "<", ">", "<=", ">=", "~=", "*=", "^=", "$=", "::",
})

# Multi-character punctuation, longest first so the lexer prefers it
LONG_SYMBOLS: tuple[str, ...] = (
    "<empty>",
    "->",
    "==", "!=", "<=", ">=", "~=", "*=", "^=", "$=", "::",
)

SINGLE_SYMBOLS: frozenset[str] = frozenset("(){}[],;|&*?!@#=:.<>")

# Identifiers spelling typed literal casts, e.g. uint(5)
CAST_NAMES: frozenset[str] = frozenset({"int", "uint", "double"})

BOOL_LITERALS: dict[str, bool] = {"true": True, "false": False}

STRING_ESCAPES: dict[str, str] = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

# Hex escapes and the number of digits each takes; \x yields a raw byte
HEX_ESCAPES: dict[str, int] = {"x": 2, "u": 4, "U": 8}

OCTAL_DIGITS = "01234567"
