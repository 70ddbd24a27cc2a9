# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure handed from the parser to its collaborators.

The parser itself never prints; it classifies a failure and the driver turns
it into one of these for human or JSON output.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a compiler diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Phase that produced the diagnostic (`parser`, `driver`, `resolve`).
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self) -> str:
		"""Render as a single `file:line:col: severity: message` line."""
		code = f" [{self.code}]" if self.code else ""
		return f"{self.span.short()}: {self.severity}{code}: {self.message}"

	def to_json(self) -> dict:
		"""Render to a JSON-friendly dict."""
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
