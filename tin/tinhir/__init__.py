# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tin front end: source text to HIR.

	from tin.tinhir import parse
	program = parse(text, name="hello.tin")
	program.main.body

Everything downstream of the HIR (type checking, optimization, code
generation) lives elsewhere.
"""

from . import hir
from .core import Diagnostic, NoFile, ParseFailed, SourceBuffer, SourceSlice, Span, TinError
from .hir import Program
from .parser import parse

__all__ = [
	"Diagnostic",
	"NoFile",
	"ParseFailed",
	"Program",
	"SourceBuffer",
	"SourceSlice",
	"Span",
	"TinError",
	"hir",
	"parse",
]
