# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from tin.tinhir import ParseFailed, parse
from tin.tinhir import hir as H
from tin.tinhir.parser import parser as p


def test_array_of_ints() -> None:
	arr = p._parse_expr_fragment("#[1, 2, 3]")
	assert isinstance(arr, H.Array)
	assert [type(e) for e in arr.elements] == [H.Int, H.Int, H.Int]
	assert [e.value for e in arr.elements] == [1, 2, 3]
	assert arr.src.text == "#[1, 2, 3]"


def test_tuple_is_heterogeneous() -> None:
	tup = p._parse_expr_fragment("#(1, 'a', b\"hi\")")
	assert isinstance(tup, H.Tuple)
	num, ch, bs = tup.elements
	assert isinstance(num, H.Int) and num.value == 1
	assert isinstance(ch, H.Char) and ch.value == "a"
	assert isinstance(bs, H.BStr) and bs.value == b"hi"
	assert bs.src.text == 'b"hi"'


def test_nested_and_empty_compound_literals() -> None:
	arr = p._parse_expr_fragment("#[#[], #(x, :y), #{}]")
	inner_arr, inner_tup, inner_map = arr.elements
	assert isinstance(inner_arr, H.Array) and inner_arr.elements == []
	assert isinstance(inner_tup.elements[0], H.Ident)
	assert isinstance(inner_tup.elements[1], H.Symbol)
	assert isinstance(inner_map, H.Map) and inner_map.entries == []


def test_map_keeps_entry_order_and_duplicates() -> None:
	m = p._parse_expr_fragment("#{ a: 1, b: x + 1, a: 3, }")
	assert isinstance(m, H.Map)
	assert m.keys() == ["a", "b", "a"]
	assert m.duplicate_keys() == ["a"]
	assert isinstance(m.entries[1].value, H.FnCall)
	assert m.entries[2].value.value == 3
	assert m.entries[0].key.src.text == "a"


def test_numbers() -> None:
	assert p._parse_expr_fragment("42").value == 42
	neg = p._parse_expr_fragment("-7")
	assert isinstance(neg, H.Int) and neg.value == -7
	f = p._parse_expr_fragment("1.5")
	assert isinstance(f, H.Float) and f.value == 1.5
	e = p._parse_expr_fragment("2e3")
	assert isinstance(e, H.Float) and e.value == 2000.0
	big = p._parse_expr_fragment("9223372036854775807")
	assert big.value == 2**63 - 1
	assert p._parse_expr_fragment("-9223372036854775808").value == -(2**63)


def test_integer_overflow_fails() -> None:
	with pytest.raises(ParseFailed) as excinfo:
		parse("fn main() {\n\tx = 9223372036854775808\n}")
	err = excinfo.value
	assert err.code == "E-LITERAL"
	assert (err.line, err.column) == (2, 6)


def test_string_escapes() -> None:
	s = p._parse_expr_fragment(r'"a\tb\u{1F600}\x41\"q\""')
	assert isinstance(s, H.UStr)
	assert s.value == 'a\tb\U0001F600A"q"'
	assert s.src.text == r'"a\tb\u{1F600}\x41\"q\""'


def test_unicode_string_text() -> None:
	s = p._parse_expr_fragment('"héllo wörld"')
	assert s.value == "héllo wörld"


def test_unknown_escape_fails() -> None:
	with pytest.raises(ParseFailed) as excinfo:
		parse('fn main() {\n\tx = "bad \\q"\n}')
	assert excinfo.value.code == "E-LITERAL"


def test_byte_string_escapes() -> None:
	bs = p._parse_expr_fragment(r'b"h\x00i\n"')
	assert bs.value == b"h\x00i\n"


def test_non_ascii_byte_string_fails() -> None:
	with pytest.raises(ParseFailed):
		parse('fn main() {\n\tx = b"h\u00e9"\n}')


def test_char_literals() -> None:
	assert p._parse_expr_fragment("'x'").value == "x"
	assert p._parse_expr_fragment(r"'\n'").value == "\n"
	assert p._parse_expr_fragment(r"'\u{1F600}'").value == "\U0001F600"
	assert p._parse_expr_fragment("'é'").value == "é"


def test_char_literal_must_be_one_scalar() -> None:
	with pytest.raises(ParseFailed):
		parse("fn main() {\n\tx = 'ab'\n}")


def test_symbols_and_bools() -> None:
	sym = p._parse_expr_fragment(":hello-world")
	assert isinstance(sym, H.Symbol)
	assert sym.text == "hello-world"
	assert sym.src.text == ":hello-world"
	t = p._parse_expr_fragment("true")
	assert isinstance(t, H.Bool) and t.value is True
	assert p._parse_expr_fragment("false").value is False


def test_literals_are_assignable() -> None:
	prog = p.parse_program("fn main() {\n\tx = #{ k: :v }\n\ty = :sym\n}")
	first, second = prog.main.body.statements
	assert isinstance(first.rhs, H.Map)
	assert first.rhs.entries[0].value.text == "v"
	assert isinstance(second.rhs, H.Symbol)
