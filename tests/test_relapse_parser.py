"""Tests for the standalone Relapse grammar parser."""

import pytest

from relapse import (
    And,
    Concat,
    Interleave,
    Not,
    Optional,
    Or,
    ParseError,
    Reference,
    Type,
    ZAny,
    ZeroOrMore,
    parse,
    tokenize,
)


def _and_operands(pattern):
    """Flatten a right-nested conjunction into its operand patterns."""
    operands = []
    while pattern.and_ is not None:
        operands.append(pattern.and_.left_pattern)
        pattern = pattern.and_.right_pattern
    operands.append(pattern)
    return operands


class TestLexer:
    """Test tokenization with leading trivia."""

    def test_symbols_and_literals(self):
        tokens = tokenize('.A == "x" & $int <empty> -> -3 1.5')
        kinds = [t.kind for t in tokens]
        assert kinds == [".", "ident", "==", "string", "&", "variable", "<empty>", "->", "int", "double", "eof"]

    def test_whitespace_and_comments_attach_to_next_token(self):
        tokens = tokenize("  // note\n*")
        star = tokens[0]
        assert star.kind == "*"
        assert star.before.space == ["  ", "// note", "\n"]
        assert (star.line, star.column) == (2, 1)

    def test_dollar_equals_is_builtin_not_variable(self):
        kinds = [t.kind for t in tokenize('$= "omen"')]
        assert kinds == ["$=", "string", "eof"]

    def test_lone_underscore_is_wildcard(self):
        kinds = [t.kind for t in tokenize("_ _name")]
        assert kinds == ["_", "ident", "eof"]

    def test_unterminated_block_comment(self):
        with pytest.raises(ParseError, match="unterminated block comment"):
            tokenize("* /* open")

    def test_unknown_variable_type(self):
        with pytest.raises(ParseError, match="unknown variable type"):
            tokenize("A == $float")


class TestPatterns:
    """Test pattern variants."""

    def test_conjunction_of_comparisons(self, conjunction_source):
        grammar = parse(conjunction_source)
        conjunction = grammar.top_pattern.and_
        assert isinstance(conjunction, And)

        left = conjunction.left_pattern.contains.pattern.tree_node
        assert left.name.name.string_value == "A"
        assert left.colon is None
        builtin = left.pattern.leaf_node.expr.built_in
        assert builtin.symbol.value == "=="
        assert builtin.expr.terminal.int_value == 1
        assert builtin.expr.terminal.literal == "1"

        right = conjunction.right_pattern.contains.pattern.tree_node
        assert right.name.name.string_value == "B"
        assert right.pattern.leaf_node.expr.built_in.expr.terminal.int_value == 2

    def test_chains_nest_to_the_right(self):
        grammar = parse("(.A == 1 & .B == 2 & .C == 3)")
        outer = grammar.top_pattern.and_
        assert outer.open_paren.value == "("
        assert outer.close_paren.value == ")"
        inner = outer.right_pattern.and_
        assert inner.open_paren is None
        assert inner.close_paren is None
        assert inner.ampersand.value == "&"
        assert inner.right_pattern.contains.pattern.tree_node.name.name.string_value == "C"

    def test_or(self):
        grammar = parse("(A: * | B: *)")
        assert isinstance(grammar.top_pattern.or_, Or)
        assert grammar.top_pattern.or_.pipe.value == "|"

    def test_zero_or_more_and_optional(self):
        assert isinstance(parse("(A: *)*").top_pattern.zero_or_more, ZeroOrMore)
        optional = parse("(A: *)?").top_pattern.optional
        assert isinstance(optional, Optional)
        assert optional.question_mark.value == "?"

    def test_not(self):
        grammar = parse("!(.A == 1)")
        assert isinstance(grammar.top_pattern.not_, Not)

    def test_any_and_empty(self):
        assert isinstance(parse("*").top_pattern.z_any, ZAny)
        assert parse("<empty>").top_pattern.empty.empty.value == "<empty>"

    def test_concat_with_trailing_comma(self):
        concat = parse("[*, *,]").top_pattern.concat
        assert isinstance(concat, Concat)
        assert concat.extra_comma.value == ","
        assert concat.right_pattern.z_any is not None

    def test_interleave_with_trailing_semicolon(self):
        interleave = parse("{*; <empty>;}").top_pattern.interleave
        assert isinstance(interleave, Interleave)
        assert interleave.extra_semi_colon.value == ";"
        assert interleave.right_pattern.empty is not None

    def test_single_pattern_concat_is_rejected(self):
        with pytest.raises(ParseError, match="at least two patterns"):
            parse("[*]")

    def test_reference_and_declarations(self, declarations_source):
        grammar = parse(declarations_source)
        assert isinstance(grammar.top_pattern.reference, Reference)
        assert grammar.top_pattern.reference.name == "first"
        assert [d.name for d in grammar.pattern_decls] == ["first", "second", "third"]
        assert grammar.pattern_decls[0].hash.value == "#"
        assert grammar.pattern_decls[0].eq.value == "="

    def test_grammar_without_top_pattern(self):
        grammar = parse("#main = *")
        assert grammar.top_pattern is None
        assert len(grammar.pattern_decls) == 1

    def test_pattern_value(self):
        pattern = parse("*").top_pattern
        assert pattern.value() is pattern.z_any


class TestNameExpressions:
    """Test name expression variants."""

    def test_any_name(self):
        tree_node = parse("_: *").top_pattern.tree_node
        assert tree_node.name.any_name.underscore.value == "_"
        assert tree_node.colon.value == ":"

    def test_any_name_except(self):
        tree_node = parse("!(A): *").top_pattern.tree_node
        assert tree_node.name.any_name_except.except_.name.string_value == "A"

    def test_name_choice_nests_to_the_right(self):
        choice = parse("(A|B|C): *").top_pattern.tree_node.name.name_choice
        assert choice.open_paren.value == "("
        assert choice.left.name.string_value == "A"
        inner = choice.right.name_choice
        assert inner.open_paren is None
        assert inner.left.name.string_value == "B"
        assert inner.right.name.string_value == "C"

    def test_typed_names(self):
        assert parse("1: *").top_pattern.tree_node.name.name.int_value == 1
        assert parse("true: *").top_pattern.tree_node.name.name.bool_value is True
        assert parse("uint(7): *").top_pattern.tree_node.name.name.uint_value == 7
        assert parse("double(2): *").top_pattern.tree_node.name.name.double_value == 2.0
        assert parse('"A b": *').top_pattern.tree_node.name.name.string_value == "A b"
        assert parse("[]byte{1, 2}: *").top_pattern.tree_node.name.name.bytes_value == b"\x01\x02"

    def test_negative_uint_is_rejected(self):
        with pytest.raises(ParseError, match="must not be negative"):
            parse("uint(-1): *")


class TestExpressions:
    """Test leaf expressions."""

    def test_variable(self):
        terminal = parse("A :: $string").top_pattern.tree_node.pattern.leaf_node.expr.built_in.expr.terminal
        assert terminal.literal == "$string"
        assert terminal.variable.type == Type.SINGLE_STRING

    def test_function_with_params(self):
        expr = parse('-> contains($string, "Met")').top_pattern.leaf_node.expr
        assert expr.right_arrow.value == "->"
        function = expr.function
        assert function.name == "contains"
        assert len(function.params) == 2
        assert function.params[0].comma is None
        assert function.params[1].comma.value == ","
        assert function.params[1].terminal.string_value == "Met"

    def test_list(self):
        expr = parse("A == []int{1, 2, 3}").top_pattern.tree_node.pattern.leaf_node.expr.built_in.expr
        assert expr.list_.type == Type.LIST_INT
        assert [e.terminal.int_value for e in expr.list_.elems] == [1, 2, 3]

    def test_list_of_bytes(self):
        expr = parse("A == [][]byte{[]byte{104, 105}}").top_pattern.tree_node.pattern.leaf_node.expr.built_in.expr
        assert expr.list_.type == Type.LIST_BYTES
        assert expr.list_.elems[0].terminal.bytes_value == b"hi"
        assert expr.list_.elems[0].terminal.literal == "[]byte{104, 105}"

    def test_typed_literals(self):
        def terminal(source):
            return parse(source).top_pattern.tree_node.pattern.leaf_node.expr.built_in.expr.terminal

        assert terminal("A == 1.5").double_value == 1.5
        assert terminal("A == int(-3)").int_value == -3
        assert terminal("A == uint(5)").literal == "uint(5)"
        assert terminal("A == false").bool_value is False
        assert terminal("A == `raw \\n`").string_value == "raw \\n"

    def test_string_escapes(self):
        terminal = parse('A == "say \\"hi\\""').top_pattern.tree_node.pattern.leaf_node.expr.built_in.expr.terminal
        assert terminal.string_value == 'say "hi"'
        assert terminal.literal == '"say \\"hi\\""'

    def test_unknown_escape(self):
        with pytest.raises(ParseError, match="unknown escape sequence"):
            parse('A == "\\q"')


class TestStringEscapes:
    """Test decoding of escapes in double-quoted literals."""

    @staticmethod
    def _string(literal):
        return parse(f"A == {literal}").top_pattern.tree_node.pattern.leaf_node.expr.built_in.expr.terminal

    def test_single_character_escapes(self):
        terminal = self._string('"\\a\\b\\f\\n\\r\\t\\v\\\\"')
        assert terminal.string_value == "\a\b\f\n\r\t\v\\"

    def test_short_unicode_escape(self):
        terminal = self._string('"\\u00e9t\\u00e9"')
        assert terminal.string_value == "été"
        assert terminal.literal == '"\\u00e9t\\u00e9"'

    def test_long_unicode_escape(self):
        assert self._string('"\\U0001F409"').string_value == "\U0001F409"

    def test_hex_escape(self):
        assert self._string('"\\x41\\x62"').string_value == "Ab"

    def test_hex_escapes_form_utf8_bytes(self):
        assert self._string('"\\xc3\\xa9"').string_value == "é"

    def test_octal_escape(self):
        assert self._string('"\\101\\142"').string_value == "Ab"

    def test_octal_escapes_form_utf8_bytes(self):
        assert self._string('"\\303\\251"').string_value == "é"

    def test_short_hex_escape_is_rejected(self):
        with pytest.raises(ParseError, match="invalid \\\\x escape"):
            self._string('"\\x4"')

    def test_surrogate_is_rejected(self):
        with pytest.raises(ParseError, match="invalid Unicode code point"):
            self._string('"\\ud800"')

    def test_short_octal_escape_is_rejected(self):
        with pytest.raises(ParseError, match="invalid octal escape"):
            self._string('"\\0"')

    def test_octal_escape_above_byte_is_rejected(self):
        with pytest.raises(ParseError, match="invalid octal escape"):
            self._string('"\\400"')


class TestTrivia:
    """Test that whitespace and comments are kept."""

    def test_space_before_keyword(self):
        grammar = parse("(.A == 1 /*c*/ & .B == 2)")
        assert grammar.top_pattern.and_.ampersand.before.space == [" ", "/*c*/", " "]

    def test_space_before_name(self):
        tree_node = parse("( .A: * | .B: *)").top_pattern.or_.left_pattern.contains.pattern.tree_node
        assert tree_node.name.name.before is None
        assert str(parse("( .A: * | .B: *)").top_pattern.or_.left_pattern.contains.dot) == " ."

    def test_trailing_space(self):
        grammar = parse("* // trailing\n")
        assert grammar.after.space == [" ", "// trailing", "\n"]


class TestErrors:
    """Test parse failures."""

    def test_empty_source(self):
        with pytest.raises(ParseError, match="empty grammar"):
            parse("   ")

    def test_unclosed_group(self):
        with pytest.raises(ParseError):
            parse("(.A == 1")

    def test_error_position(self):
        with pytest.raises(ParseError) as exc_info:
            parse("*\n  )")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 3
        assert str(exc_info.value).startswith("2:3: ")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse("#")


class TestSampleGrammar:
    """Test the larger sample grammar."""

    def test_parses(self, survival_grammar):
        grammar = parse(survival_grammar)
        operands = _and_operands(grammar.top_pattern)
        assert len(operands) == 7

        names = [op.contains.pattern.tree_node.name.name.string_value for op in operands[:6]]
        assert names == ["WhatsUp", "Survived", "DragonsExist", "MonkeysSmart", "History", "FeatureRequests"]
        assert operands[6].or_ is not None

    def test_comment_is_kept(self, survival_grammar):
        grammar = parse(survival_grammar)
        second = grammar.top_pattern.and_.right_pattern.and_
        assert "/*years*/" in second.ampersand.before.space
