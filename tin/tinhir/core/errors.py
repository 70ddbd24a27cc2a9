# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error kinds at the parser boundary.

Two kinds leave the core: `ParseFailed` (any grammar violation, always with a
position) and `NoFile` (owned by the driver, listed here because both share
one taxonomy). Callers tell failures apart by kind only; messages and traces
are diagnostic text.

`TinSyntaxError` and its subclasses are raised *inside* the parser while the
tree is being built (invariant violations the grammar cannot express). The
public `parse()` converts them, like lark's own `UnexpectedInput`, into a
single `ParseFailed`.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional, TYPE_CHECKING

from .diagnostics import Diagnostic
from .span import Span

if TYPE_CHECKING:
	from .source import SourceSlice


class TinError(Exception):
	"""Base class of every error kind the Tin tooling reports."""


class ParseFailed(TinError):
	"""
	Parsing stopped at the first position no grammar alternative matched.

	`line`/`column` are 1-based (None when unknown), `offset` is the character
	offset into the buffer. `expected` is the set of alternatives that were
	acceptable at that point, `found` what was there instead. `trace` is the
	optional human-readable rendering; it never participates in identity.
	"""

	def __init__(
		self,
		reason: str,
		*,
		line: Optional[int] = None,
		column: Optional[int] = None,
		offset: Optional[int] = None,
		expected: Iterable[str] = (),
		found: Optional[str] = None,
		code: Optional[str] = None,
		file: Optional[str] = None,
		trace: Optional[str] = None,
	) -> None:
		super().__init__(f"parse failed: {reason}")
		self.reason = reason
		self.line = line
		self.column = column
		self.offset = offset
		self.expected: FrozenSet[str] = frozenset(expected)
		self.found = found
		self.code = code
		self.file = file
		self.trace = trace

	@property
	def span(self) -> Span:
		return Span(file=self.file, line=self.line, column=self.column)

	def to_diagnostic(self) -> Diagnostic:
		notes: list[str] = []
		if self.found is not None:
			notes.append(f"found {self.found}")
		if self.expected:
			notes.append("expected one of: " + ", ".join(sorted(self.expected)))
		return Diagnostic(
			message=self.reason,
			code=self.code,
			phase="parser",
			severity="error",
			span=self.span,
			notes=notes,
		)


class NoFile(TinError):
	"""No input file was designated."""

	def __init__(self, message: str = "no input file") -> None:
		super().__init__(message)


class TinSyntaxError(ValueError):
	"""
	Grammar-level violation detected while building the HIR.

	Carries the offending source view in `loc` so it can be reported at a
	precise position. `code` is a stable short identifier for tests/tools.
	"""

	code = "E-SYNTAX"

	def __init__(self, message: str, *, loc: Optional["SourceSlice"] = None) -> None:
		super().__init__(message)
		self.loc = loc


class LiteralError(TinSyntaxError):
	"""A literal token could not be decoded into its value."""

	code = "E-LITERAL"


class TypeDeclError(TinSyntaxError):
	"""A type declaration violates the variant-naming or field-homogeneity rule."""

	code = "E-TYPE-DECL"


class PathGlobError(TinSyntaxError):
	"""A `use` path is malformed (e.g. contains whitespace between segments)."""

	code = "E-USE-PATH"


class EntrypointError(TinSyntaxError):
	"""The program lacks exactly one `fn main`."""

	code = "E-ENTRYPOINT"


class NestingError(TinSyntaxError):
	"""An expression is nested deeper than the tree builder can follow."""

	code = "E-NESTING"


__all__ = [
	"TinError",
	"ParseFailed",
	"NoFile",
	"TinSyntaxError",
	"LiteralError",
	"TypeDeclError",
	"PathGlobError",
	"EntrypointError",
	"NestingError",
]
