# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Core support types shared by the HIR, the parser and the driver.
"""

from .diagnostics import Diagnostic
from .errors import (
	EntrypointError,
	LiteralError,
	NestingError,
	NoFile,
	ParseFailed,
	PathGlobError,
	TinError,
	TinSyntaxError,
	TypeDeclError,
)
from .source import SourceBuffer, SourceSlice
from .span import Span

__all__ = [
	"Diagnostic",
	"EntrypointError",
	"LiteralError",
	"NestingError",
	"NoFile",
	"ParseFailed",
	"PathGlobError",
	"SourceBuffer",
	"SourceSlice",
	"Span",
	"TinError",
	"TinSyntaxError",
	"TypeDeclError",
]
