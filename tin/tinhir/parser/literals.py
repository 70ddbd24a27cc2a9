# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Decoding of literal token text into values.

The grammar only recognizes the *shape* of a literal; these helpers turn the
matched text into a typed value and reject what the shape cannot: integers
outside the 64-bit range, unknown escapes, char literals that are not exactly
one scalar value.

Escapes shared by strings, chars and byte strings:
`\\n \\r \\t \\0 \\\\ \\" \\'` and `\\xHH`. Strings and chars also accept
`\\u{H...}` (one to six hex digits naming a Unicode scalar value). In a
string `\\xHH` is the code point U+00HH; in a byte string it is the byte HH.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from ..core.errors import LiteralError
from ..core.source import SourceSlice

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_SIMPLE_ESCAPES = {
	"n": "\n",
	"r": "\r",
	"t": "\t",
	"0": "\0",
	"\\": "\\",
	'"': '"',
	"'": "'",
}

_ESCAPE_RE = re.compile(r"\\(?:x([0-9a-fA-F]{2})|u\{([0-9a-fA-F]{1,6})\}|(.))", re.DOTALL)


def is_float_spelling(text: str) -> bool:
	"""A decimal point or an exponent makes a numeric literal a float."""
	return "." in text or "e" in text or "E" in text


def decode_number(text: str, *, loc: Optional[SourceSlice] = None) -> Union[int, float]:
	if is_float_spelling(text):
		return decode_float(text, loc=loc)
	return decode_int(text, loc=loc)


def decode_int(text: str, *, loc: Optional[SourceSlice] = None) -> int:
	try:
		value = int(text, 10)
	except ValueError:
		raise LiteralError(f"invalid integer literal '{text}'", loc=loc) from None
	if not INT64_MIN <= value <= INT64_MAX:
		raise LiteralError(f"integer literal '{text}' does not fit in 64 bits", loc=loc)
	return value


def decode_float(text: str, *, loc: Optional[SourceSlice] = None) -> float:
	try:
		return float(text)
	except ValueError:
		raise LiteralError(f"invalid float literal '{text}'", loc=loc) from None


def _scalar(hex_digits: str, *, loc: Optional[SourceSlice]) -> str:
	code = int(hex_digits, 16)
	if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
		raise LiteralError(f"'\\u{{{hex_digits}}}' is not a Unicode scalar value", loc=loc)
	return chr(code)


def decode_string(body: str, *, loc: Optional[SourceSlice] = None) -> str:
	"""Decode the text between the quotes of a string or char literal."""

	def _replace(match: re.Match) -> str:
		hex_byte, unicode, simple = match.groups()
		if hex_byte is not None:
			return chr(int(hex_byte, 16))
		if unicode is not None:
			return _scalar(unicode, loc=loc)
		if simple in _SIMPLE_ESCAPES:
			return _SIMPLE_ESCAPES[simple]
		raise LiteralError(f"unknown escape sequence '\\{simple}'", loc=loc)

	return _ESCAPE_RE.sub(_replace, body)


def decode_bytes(body: str, *, loc: Optional[SourceSlice] = None) -> bytes:
	"""Decode the text between the quotes of a `b"..."` literal."""
	out = bytearray()
	pos = 0
	for match in _ESCAPE_RE.finditer(body):
		out.extend(_ascii(body[pos:match.start()], loc=loc))
		hex_byte, unicode, simple = match.groups()
		if hex_byte is not None:
			out.append(int(hex_byte, 16))
		elif unicode is not None:
			raise LiteralError("'\\u{...}' escapes are not allowed in byte strings", loc=loc)
		elif simple in _SIMPLE_ESCAPES:
			out.extend(_ascii(_SIMPLE_ESCAPES[simple], loc=loc))
		else:
			raise LiteralError(f"unknown escape sequence '\\{simple}'", loc=loc)
		pos = match.end()
	out.extend(_ascii(body[pos:], loc=loc))
	return bytes(out)


def _ascii(text: str, *, loc: Optional[SourceSlice]) -> bytes:
	try:
		return text.encode("ascii")
	except UnicodeEncodeError:
		raise LiteralError("byte strings may only contain ASCII characters", loc=loc) from None


def decode_char(body: str, *, loc: Optional[SourceSlice] = None) -> str:
	value = decode_string(body, loc=loc)
	if len(value) != 1:
		raise LiteralError(
			f"char literal must hold exactly one Unicode scalar value, got {len(value)}",
			loc=loc,
		)
	return value


__all__ = [
	"INT64_MAX",
	"INT64_MIN",
	"decode_bytes",
	"decode_char",
	"decode_float",
	"decode_int",
	"decode_number",
	"decode_string",
	"is_float_spelling",
]
