# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Post-lexer stages between lark's basic lexer and the LALR parser.

1. `CommentJoiner` merges consecutive line-starting comments into one token.
2. `AdjacencySplitter` re-reads `-1` / `:name` that directly follow an operand
   as an operator / colon (`x -1` is a subtraction, `x:Int` an annotation).
3. `TerminatorInserter` turns `;` and statement-ending newlines into
   `_TERMINATOR` tokens.

Each `process()` call builds fresh stage objects, so one parser can serve
concurrent parses.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from lark import Token

from ..hir import RESERVED_WORDS

TERMINATOR = "_TERMINATOR"


def _token(ttype: str, value: str, start: int, line: int, column: int) -> Token:
	return Token(ttype, value, start, line, column, line, column + len(value), start + len(value))


class CommentJoiner:
	"""
	Merge runs of line-starting comments on consecutive lines.

	A comment is line-starting when nothing but whitespace precedes it on its
	line. Two such comments merge when exactly one newline separates them; the
	merged token spans from the first marker to the end of the last line.
	"""

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		group: List[Token] = []
		gap: Optional[Token] = None
		line_start = True

		for token in stream:
			ttype = token.type
			if ttype == "COMMENT" and line_start and group and gap is not None and gap.value.count("\n") == 1:
				group.append(token)
				gap = None
				line_start = False
				continue
			if ttype == "NEWLINE" and group and gap is None:
				gap = token
				line_start = True
				continue

			if group:
				yield self._merge(group)
				group = []
			if gap is not None:
				yield gap
				gap = None

			if ttype == "COMMENT" and line_start:
				group = [token]
				line_start = False
				continue
			yield token
			line_start = ttype == "NEWLINE"

		if group:
			yield self._merge(group)
		if gap is not None:
			yield gap

	@staticmethod
	def _merge(group: List[Token]) -> Token:
		if len(group) == 1:
			return group[0]
		first, last = group[0], group[-1]
		merged = Token.new_borrow_pos("COMMENT", "\n".join(group), first)
		merged.end_line = last.end_line
		merged.end_column = last.end_column
		merged.end_pos = last.end_pos
		return merged


class AdjacencySplitter:
	"""
	Split tokens the basic lexer over-eagerly glued to a sign or colon.

	A signed number or a symbol can never follow an operand, so when one does
	the sign is a binary operator and the colon an annotation separator.
	"""

	OPERAND_END = {
		"NAME",
		"NUMBER",
		"STRING",
		"BYTES",
		"CHAR",
		"SYMBOL",
		"TRUE",
		"FALSE",
		"RPAR",
		"RSQB",
		"RBRACE",
	}

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		prev: Optional[str] = None
		for token in stream:
			ttype = token.type
			if ttype == "NUMBER" and token.value[0] in "+-" and prev in self.OPERAND_END:
				sign = "PLUS" if token.value[0] == "+" else "MINUS"
				yield _token(sign, token.value[0], token.start_pos, token.line, token.column)
				yield _token("NUMBER", token.value[1:], token.start_pos + 1, token.line, token.column + 1)
				prev = "NUMBER"
				continue
			if ttype == "SYMBOL" and prev == "NAME":
				name = token.value[1:]
				name_type = name.upper() if name in RESERVED_WORDS else "NAME"
				yield _token("COLON", ":", token.start_pos, token.line, token.column)
				yield _token(name_type, name, token.start_pos + 1, token.line, token.column + 1)
				prev = name_type
				continue
			yield token
			prev = None if ttype == "NEWLINE" else ttype


class TerminatorInserter:
	always_accept = ("NEWLINE", "SEMI")

	TERMINABLE = {
		"NAME",
		"NUMBER",
		"STRING",
		"BYTES",
		"CHAR",
		"SYMBOL",
		"LABEL",
		"TRUE",
		"FALSE",
		"RPAR",
		"RSQB",
		"RBRACE",
		"RETURN",
		"BREAK",
		"CONTINUE",
		"COMMENT",
	}

	# A newline before these continues the previous line.
	CONTINUATION = {"ELSE", "BAR"}

	OPENERS = {"LPAR", "LSQB", "LBRACE", "HASH_LSQB", "HASH_LPAR", "HASH_LBRACE"}
	CLOSERS = {"RPAR", "RSQB", "RBRACE"}

	def __init__(self) -> None:
		self.nesting: List[str] = []
		self.can_terminate = False
		self.in_use = False

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		"""
		Insert `_TERMINATOR` tokens for statement boundaries.

		`;` always terminates. A newline terminates only when the previous
		token can end a statement, the innermost open bracket (if any) is a
		block brace, and the next token is not a continuation (`else`, `|`).
		A `use` path ends at its newline whatever its last token is.
		A comment following code on the same line first terminates that code;
		inside brackets other than a block brace comments are dropped.
		The end of input terminates the last statement.
		"""
		pending_newline: Optional[Token] = None
		last: Optional[Token] = None

		for token in stream:
			ttype = token.type

			if ttype == "NEWLINE":
				pending_newline = token
				continue

			if ttype == "COMMENT" and self._inside_brackets():
				continue

			if ttype == "SEMI":
				pending_newline = None
				yield self._terminate(token)
				continue

			if pending_newline is not None:
				if self._should_emit_terminator() and ttype not in self.CONTINUATION:
					yield self._terminate(pending_newline)
				pending_newline = None
			elif ttype == "COMMENT" and self._should_emit_terminator():
				yield self._terminate(token)

			yield token
			last = token
			self._update_nesting(ttype)
			self.can_terminate = ttype in self.TERMINABLE
			if ttype == "USE":
				self.in_use = True

		if self._should_emit_terminator():
			anchor = pending_newline or last
			if anchor is not None:
				yield self._terminate(anchor)

	def _terminate(self, anchor: Token) -> Token:
		self.can_terminate = False
		self.in_use = False
		return Token.new_borrow_pos(TERMINATOR, anchor.value, anchor)

	def _update_nesting(self, ttype: str) -> None:
		if ttype in self.OPENERS:
			self.nesting.append(ttype)
		elif ttype in self.CLOSERS and self.nesting:
			self.nesting.pop()

	def _inside_brackets(self) -> bool:
		return bool(self.nesting) and self.nesting[-1] != "LBRACE"

	def _should_emit_terminator(self) -> bool:
		if self._inside_brackets():
			return False
		return self.can_terminate or self.in_use


class TinPostLex:
	"""Combined post-lexer: comment joining, adjacency splitting, terminator insertion."""

	# Lark drops terminals the grammar never references unless the post-lexer
	# asks to keep them; newlines and semicolons only matter here.
	always_accept = TerminatorInserter.always_accept

	def process(self, stream: Iterable[Token]) -> Iterator[Token]:
		joined = CommentJoiner().process(stream)
		split = AdjacencySplitter().process(joined)
		return TerminatorInserter().process(split)


__all__ = ["AdjacencySplitter", "CommentJoiner", "TERMINATOR", "TerminatorInserter", "TinPostLex"]
