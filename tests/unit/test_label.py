"""Unit tests for label assembly."""

import pytest

from relapseviz.errors import LabelSealedError
from relapseviz.label import LabelBuilder, escape, plain_text


class TestEscape:
    """Test DOT string escaping."""

    def test_quotes_and_backslashes(self):
        assert escape('a "b" \\c') == 'a \\"b\\" \\\\c'

    def test_line_breaks(self):
        assert escape("a\nb\rc") == "a\\nb\\rc"

    def test_plain_text_round_trip(self):
        text = 'say "hi"\nC:\\temp'
        assert plain_text('"' + escape(text) + '"') == text


class TestLabelBuilder:
    """Test the append-only label builder."""

    def test_starts_with_variant_name(self):
        assert LabelBuilder("ZAny").finalize() == '"ZAny"'

    def test_fragments_are_appended_verbatim(self):
        label = LabelBuilder("Terminal")
        label.append("\\n", "Literal", ": ", '\\"x\\"')
        assert label.finalize() == '"Terminal\\nLiteral: \\"x\\""'

    def test_line(self):
        label = LabelBuilder("Reference")
        label.line("Name", "main")
        assert label.finalize() == '"Reference\\nName: main"'

    def test_finalize_is_idempotent(self):
        label = LabelBuilder("Empty")
        assert label.finalize() is label.finalize()
        assert label.sealed

    def test_append_after_finalize_raises(self):
        label = LabelBuilder("Empty")
        label.finalize()
        with pytest.raises(LabelSealedError):
            label.append("x")
        with pytest.raises(RuntimeError):
            label.line("Name", "x")
