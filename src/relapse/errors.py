"""Error types raised while reading Relapse source text."""


class ParseError(ValueError):
    """Source text is not a valid Relapse grammar.

    Carries the 1-based line and column of the offending token.
    """

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{line}:{column}: {message}")
        self.message = message
        self.line = line
        self.column = column
