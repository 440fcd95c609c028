"""Node label assembly for DOT output."""

import re

from .errors import LabelSealedError

_ESCAPES = str.maketrans({
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
})

_ESCAPED = re.compile(r"\\(.)", re.DOTALL)
_UNESCAPES = {"n": "\n", "r": "\r", '"': '"', "\\": "\\"}


def escape(text: str) -> str:
    """Escape ``text`` for embedding inside a double-quoted DOT string."""
    return text.translate(_ESCAPES)


def plain_text(label: str) -> str:
    """Undo ``escape`` and drop the surrounding quotes of a finalized label."""
    if len(label) >= 2 and label.startswith('"') and label.endswith('"'):
        label = label[1:-1]
    return _ESCAPED.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), label)


class LabelBuilder:
    """Append-only accumulator for a quoted node label.

    The builder starts as ``"<name>`` and fragments are appended verbatim, so
    callers must ``escape`` any field value first. ``finalize`` closes the
    quote and seals the builder.
    """

    def __init__(self, name: str):
        self._parts = ['"', name]
        self._value: str | None = None

    @property
    def sealed(self) -> bool:
        return self._value is not None

    def append(self, *fragments: str) -> None:
        if self._value is not None:
            raise LabelSealedError(f"label {self._value} is already finalized")
        self._parts.extend(fragments)

    def line(self, name: str, value: str) -> None:
        """Append a ``\\nname: value`` line."""
        self.append("\\n", name, ": ", value)

    def finalize(self) -> str:
        if self._value is None:
            self._parts.append('"')
            self._value = "".join(self._parts)
        return self._value
