# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Where a diagnostic points: file, line and column, detached from the source
buffer so diagnostics stay cheap to keep and serialize.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
	from .source import SourceSlice


@dataclass(frozen=True)
class Span:
	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@classmethod
	def from_slice(cls, src: "SourceSlice") -> "Span":
		return cls(
			file=src.file,
			line=src.line,
			column=src.column,
			end_line=src.end_line,
			end_column=src.end_column,
		)

	def short(self) -> str:
		"""`file:line:column`, with `?` for unknown parts."""
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{self.file or '<unknown>'}:{line}:{column}"


__all__ = ["Span"]
