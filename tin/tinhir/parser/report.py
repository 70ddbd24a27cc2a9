# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Classification of parse failures.

Every failure, whether raised by lark's lexer/parser or by the HIR builder,
becomes one `ParseFailed` carrying the furthest position reached, the set of
acceptable alternatives there, and an optional rendered trace.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from ..core.errors import ParseFailed, TinSyntaxError
from ..core.source import SourceBuffer
from .parser import terminal_pattern

# Terminals whose name reads better than their pattern.
_LABELS = {
	"$END": "end of input",
	"_TERMINATOR": "newline or ';'",
	"NAME": "identifier",
	"NUMBER": "number",
	"STRING": "string",
	"BYTES": "byte string",
	"CHAR": "char",
	"SYMBOL": "symbol",
	"LABEL": "label",
	"COMMENT": "comment",
	"NEWLINE": "newline",
}

_QUOTE_HINTS = {
	'"': "unterminated string literal",
	"'": "unterminated or malformed char literal",
}


def describe_terminal(name: str) -> str:
	if name in _LABELS:
		return _LABELS[name]
	spelling = terminal_pattern(name)
	if spelling is not None:
		return f"'{spelling}'"
	return name.lower()


def _describe_found(token) -> str:
	if token.type == "$END":
		return "end of input"
	if token.type == "_TERMINATOR":
		return "end of statement"
	return f"{describe_terminal(token.type)} '{token}'" if token.type in _LABELS else f"'{token}'"


def failure_from_lark(buffer: SourceBuffer, err: UnexpectedInput, *, trace: bool = True) -> ParseFailed:
	"""Convert a lark `UnexpectedInput` into a `ParseFailed`."""
	expected: List[str] = []
	found: Optional[str] = None

	if isinstance(err, UnexpectedCharacters):
		offset = err.pos_in_stream
		reason = _QUOTE_HINTS.get(err.char, f"unrecognized character '{err.char}'")
		found = repr(err.char)
	elif isinstance(err, UnexpectedToken):
		token = err.token
		offset = len(buffer.text) if token.type == "$END" else token.start_pos
		expected = sorted({describe_terminal(name) for name in err.expected})
		found = _describe_found(token)
		reason = f"unexpected {found}"
	elif isinstance(err, UnexpectedEOF):
		offset = len(buffer.text)
		expected = sorted({describe_terminal(name) for name in err.expected})
		found = "end of input"
		reason = "unexpected end of input"
	else:
		offset = getattr(err, "pos_in_stream", None) or 0
		reason = str(err).splitlines()[0] if str(err) else "syntax error"

	line, column = buffer.line_col(offset)
	return ParseFailed(
		reason,
		line=line,
		column=column,
		offset=offset,
		expected=expected,
		found=found,
		code="E-PARSE",
		file=buffer.name,
		trace=render_trace(buffer, line, column, reason, expected) if trace else None,
	)


def failure_from_syntax_error(buffer: SourceBuffer, err: TinSyntaxError, *, trace: bool = True) -> ParseFailed:
	"""Convert a builder-detected `TinSyntaxError` into a `ParseFailed`."""
	loc = err.loc
	offset = loc.start if loc is not None else len(buffer.text)
	line, column = buffer.line_col(offset)
	reason = str(err)
	found = repr(loc.text) if loc is not None and len(loc) else None
	return ParseFailed(
		reason,
		line=line,
		column=column,
		offset=offset,
		found=found,
		code=err.code,
		file=buffer.name,
		trace=render_trace(buffer, line, column, reason, ()) if trace else None,
	)


def render_trace(buffer: SourceBuffer, line: int, column: int, reason: str, expected: Iterable[str]) -> str:
	"""
	Render a caret diagram under the failing line.

	Tabs before the caret are kept so it stays aligned with the source as
	displayed.
	"""
	text = buffer.line_text(line)
	gutter = str(line)
	pad = " " * len(gutter)
	caret_lead = "".join(ch if ch == "\t" else " " for ch in text[: max(column - 1, 0)])
	out = [
		f"{pad}--> {buffer.name}:{line}:{column}",
		f"{pad} |",
		f"{gutter} | {text}",
		f"{pad} | {caret_lead}^ {reason}",
	]
	expected = list(expected)
	if expected:
		out.append(f"{pad} = expected one of: {', '.join(expected)}")
	return "\n".join(out)


__all__ = ["describe_terminal", "failure_from_lark", "failure_from_syntax_error", "render_trace"]
