# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source buffers and views into them.

Every HIR node refers to the text it was parsed from through a
`SourceSlice`: a `(buffer, start, end)` triple over one immutable
`SourceBuffer`. No text is copied into the tree; `SourceSlice.text`
slices the buffer on demand. Because each view holds a reference to its
buffer, the buffer lives at least as long as any tree derived from it.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from functools import cached_property
from typing import List, Tuple


@dataclass(frozen=True)
class SourceBuffer:
	"""The immutable text of one parse call (the arena all views point into)."""

	text: str
	name: str = "<input>"

	@cached_property
	def _line_starts(self) -> Tuple[int, ...]:
		starts: List[int] = [0]
		for idx, ch in enumerate(self.text):
			if ch == "\n":
				starts.append(idx + 1)
		return tuple(starts)

	def line_col(self, offset: int) -> Tuple[int, int]:
		"""Return the 1-based (line, column) of a character offset."""
		offset = max(0, min(offset, len(self.text)))
		line_idx = bisect_right(self._line_starts, offset) - 1
		return line_idx + 1, offset - self._line_starts[line_idx] + 1

	def line_text(self, line: int) -> str:
		"""Return the text of a 1-based line without its line ending."""
		starts = self._line_starts
		if line < 1 or line > len(starts):
			return ""
		start = starts[line - 1]
		end = starts[line] - 1 if line < len(starts) else len(self.text)
		return self.text[start:end].rstrip("\r")

	@property
	def line_count(self) -> int:
		return len(self._line_starts)

	def slice(self, start: int, end: int) -> "SourceSlice":
		return SourceSlice(self, start, end)

	def __repr__(self) -> str:
		return f"SourceBuffer({self.name!r}, {len(self.text)} chars)"


@dataclass(frozen=True)
class SourceSlice:
	"""A non-owning view of `buffer.text[start:end]`."""

	buffer: SourceBuffer = field(repr=False)
	start: int
	end: int

	def __post_init__(self) -> None:
		if not 0 <= self.start <= self.end <= len(self.buffer.text):
			raise ValueError(f"slice [{self.start}, {self.end}) outside buffer of {len(self.buffer.text)} chars")

	@property
	def text(self) -> str:
		return self.buffer.text[self.start:self.end]

	@property
	def line(self) -> int:
		return self.buffer.line_col(self.start)[0]

	@property
	def column(self) -> int:
		return self.buffer.line_col(self.start)[1]

	@property
	def end_line(self) -> int:
		return self.buffer.line_col(self.end)[0]

	@property
	def end_column(self) -> int:
		return self.buffer.line_col(self.end)[1]

	@property
	def file(self) -> str:
		return self.buffer.name

	def sub(self, start: int, end: int | None = None) -> "SourceSlice":
		"""View a sub-range, with offsets relative to this view."""
		stop = len(self) if end is None else end
		return SourceSlice(self.buffer, self.start + start, self.start + stop)

	def __len__(self) -> int:
		return self.end - self.start

	def __str__(self) -> str:
		return self.text

	def __repr__(self) -> str:
		return f"{self.text!r}@{self.start}"


__all__ = ["SourceBuffer", "SourceSlice"]
