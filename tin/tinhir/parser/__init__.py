# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tin parser entry points.

`parse()` is the one public operation: source text in, `Program` out, or a
single `ParseFailed` describing the first position where parsing stopped.
"""

from __future__ import annotations

from typing import Union

from lark.exceptions import UnexpectedInput

from ..core.errors import ParseFailed, TinSyntaxError
from ..core.source import SourceBuffer
from ..hir import Program
from .parser import parse_program
from .report import failure_from_lark, failure_from_syntax_error


def parse(source: Union[str, SourceBuffer], *, name: str = "<input>", trace: bool = True) -> Program:
	"""
	Parse a complete Tin program.

	The returned tree holds views into a `SourceBuffer` wrapping `source`;
	keep the Program (or the buffer) alive as long as any node is in use.
	With `trace=False` the failure carries no rendered trace.
	"""
	buffer = source if isinstance(source, SourceBuffer) else SourceBuffer(source, name)
	try:
		return parse_program(buffer)
	except UnexpectedInput as err:
		raise failure_from_lark(buffer, err, trace=trace) from err
	except TinSyntaxError as err:
		raise failure_from_syntax_error(buffer, err, trace=trace) from err


__all__ = ["ParseFailed", "parse", "parse_program"]
