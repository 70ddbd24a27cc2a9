# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark-based parser that builds the Tin HIR.

`parse_program` is the raw entry point: it lets lark's `UnexpectedInput` and
the builder's `TinSyntaxError` escape unchanged. The public `parse()` in the
package `__init__` wraps both into `ParseFailed`.
"""

from __future__ import annotations

from pathlib import Path as FsPath
from typing import List, Optional, Union

from lark import Lark, Token, Tree

from ..core.errors import NestingError, PathGlobError
from ..core.source import SourceBuffer, SourceSlice
from ..hir import (
	AnonymousFields,
	Array,
	Block,
	Bool,
	Break,
	BStr,
	Char,
	Comment,
	Continue,
	Dot,
	Expr,
	ExprStmt,
	Fields,
	Float,
	FnCall,
	FnDecl,
	For,
	Ident,
	If,
	Int,
	Loop,
	Map,
	MapEntry,
	Operator,
	PathGlob,
	Program,
	Return,
	Stmt,
	Symbol,
	TopStmt,
	Tuple,
	Ty,
	TyDecl,
	TyIdent,
	TyVariant,
	UStr,
	Unless,
	Until,
	Use,
	VarAssign,
	While,
)
from .literals import decode_bytes, decode_char, decode_int, decode_float, decode_string, is_float_spelling
from .postlex import TinPostLex

_GRAMMAR_PATH = FsPath(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start=["program", "expr_fragment"],
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=TinPostLex(),
)

Node = Union[Tree, Token]


def parse_program(source: Union[str, SourceBuffer], *, name: str = "<input>") -> Program:
	buffer = source if isinstance(source, SourceBuffer) else SourceBuffer(source, name)
	tree = _PARSER.parse(buffer.text, start="program")
	builder = _HirBuilder(buffer)
	try:
		return builder.program(tree)
	except RecursionError:
		raise NestingError("expression nested too deeply", loc=builder.innermost) from None


def _parse_expr_fragment(source: str) -> Expr:
	"""
	Parse a single Tin expression.

	Used by tests and tooling; the whole text must be one expression
	(optionally followed by one terminator).
	"""
	buffer = SourceBuffer(source, "<fragment>")
	tree = _PARSER.parse(source, start="expr_fragment")
	return _HirBuilder(buffer).expr(tree.children[0])


def terminal_pattern(name: str) -> Optional[str]:
	"""The literal spelling of a string terminal (`IF` -> `if`), else None."""
	try:
		pattern = _PARSER.get_terminal(name).pattern
	except KeyError:
		return None
	if pattern.type == "str":
		return pattern.value
	return None


def _name(node: Node) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	return node.type


class _HirBuilder:
	"""Turns one lark tree into HIR nodes whose views point into `buffer`."""

	def __init__(self, buffer: SourceBuffer) -> None:
		self.buffer = buffer
		# Last expression entered; where a too-deep nesting is reported.
		self.innermost = buffer.slice(0, 0)

	# ---- views --------------------------------------------------------------

	def slice(self, node: Node) -> SourceSlice:
		if isinstance(node, Token):
			return self.buffer.slice(node.start_pos, node.end_pos)
		meta = node.meta
		if meta.empty:
			return self.buffer.slice(0, 0)
		return self.buffer.slice(meta.start_pos, meta.end_pos)

	def ident(self, tok: Token) -> Ident:
		return Ident(self.slice(tok))

	def ty(self, tree: Tree) -> Ty:
		return Ty(self.slice(tree))

	def ty_ident(self, tree: Tree) -> TyIdent:
		name_tok, ty_tree = tree.children
		return TyIdent(self.slice(tree), self.ident(name_tok), self.ty(ty_tree))

	# ---- top level ----------------------------------------------------------

	def program(self, tree: Tree) -> Program:
		statements: List[TopStmt] = []
		for child in tree.children:
			kind = _name(child)
			if kind == "comment":
				statements.append(self.comment(child.children[0]))
			elif kind == "use_stmt":
				statements.append(self.use(child))
			elif kind == "fn_decl":
				statements.append(self.fn_decl(child))
			elif kind == "ty_decl":
				statements.append(self.ty_decl(child))
			else:
				raise TypeError(f"unexpected top-level node {kind}")
		return Program(self.buffer, statements)

	def comment(self, tok: Token) -> Comment:
		src = self.slice(tok)
		if src.text.endswith("\r"):
			src = src.sub(0, len(src) - 1)
		lines: List[SourceSlice] = []
		offset = 0
		for raw in src.text.split("\n"):
			start = offset + raw.index(Comment.MARKER) + len(Comment.MARKER)
			end = offset + len(raw.rstrip("\r"))
			lines.append(src.sub(start, end))
			offset += len(raw) + 1
		return Comment(src, lines)

	def use(self, tree: Tree) -> Use:
		path_tree = tree.children[0]
		path_src = self.slice(path_tree)
		if any(ch.isspace() for ch in path_src.text):
			raise PathGlobError(f"whitespace inside `use` path '{path_src.text}'", loc=path_src)
		return Use(self.slice(tree), PathGlob(path_src))

	def fn_decl(self, tree: Tree) -> FnDecl:
		name = self.ident(tree.children[0])
		args: List[TyIdent] = []
		ret_ty: Optional[Ty] = None
		for child in tree.children[1:-1]:
			kind = _name(child)
			if kind == "fn_args":
				args = [self.ty_ident(arg) for arg in child.children]
			elif kind == "ret_ty":
				ret_ty = self.ty(child.children[0])
		body = self.block(tree.children[-1])
		return FnDecl(self.slice(tree), name, args, ret_ty, body)

	def ty_decl(self, tree: Tree) -> TyDecl:
		name = self.ident(tree.children[0])
		variants = [self.ty_variant(child) for child in tree.children[1:]]
		return TyDecl(self.slice(tree), name, variants)

	def ty_variant(self, tree: Tree) -> TyVariant:
		src = self.slice(tree)
		name: Optional[Ident] = None
		fields: Fields = AnonymousFields(src.sub(len(src)), [])
		for child in tree.children:
			if isinstance(child, Token):
				name = self.ident(child)
			else:
				fields = self.fields(child)
		return TyVariant(src, name, fields)

	def fields(self, tree: Tree) -> Fields:
		items: List[Union[TyIdent, Ty]] = []
		for child in tree.children:
			if _name(child) == "ty_ident":
				items.append(self.ty_ident(child))
			else:
				items.append(self.ty(child))
		return Fields.build(self.slice(tree), items)

	# ---- statements ---------------------------------------------------------

	def block(self, tree: Tree) -> Block:
		return Block(self.slice(tree), [self.stmt(child) for child in tree.children])

	def stmt(self, tree: Tree) -> Stmt:
		kind = _name(tree)
		if kind == "comment":
			return self.comment(tree.children[0])
		if kind == "var_assign":
			return self.var_assign(tree)
		if kind == "expr_stmt":
			return ExprStmt(self.slice(tree), self.expr(tree.children[0]))
		raise TypeError(f"unexpected statement node {kind}")

	def var_assign(self, tree: Tree) -> VarAssign:
		name = self.ident(tree.children[0])
		ty: Optional[Ty] = None
		op = Operator.ASSIGN
		for child in tree.children[1:-1]:
			if _name(child) == "ty":
				ty = self.ty(child)
			elif _name(child) == "assign_op":
				op = Operator(child.children[0].value)
		rhs = self.expr(tree.children[-1])
		return VarAssign(self.slice(tree), name, ty, rhs, op)

	# ---- expressions --------------------------------------------------------

	def expr(self, node: Node) -> Expr:
		if isinstance(node, Token):
			return self.token_literal(node)
		kind = _name(node)
		src = self.slice(node)
		self.innermost = src
		children = node.children

		if kind == "paren":
			return self.expr(children[0])
		if kind == "binop":
			return self.binop_chain(node)
		if kind == "unop":
			op, operand = children
			return FnCall(src, self.ident(op), [self.expr(operand)])
		if kind == "call":
			return FnCall(src, self.ident(children[0]), [self.expr(arg) for arg in children[1:]])
		if kind == "dot":
			target, member = children
			return Dot(src, self.expr(target), self.expr(member))
		if kind == "return_expr":
			return Return(src, self.expr(children[0]) if children else None)
		if kind == "break_expr":
			value = None
			label = src.sub(len(src))
			for child in children:
				if isinstance(child, Token) and child.type == "LABEL":
					label = self.slice(child).sub(1)
				else:
					value = self.expr(child)
			return Break(src, value, label)
		if kind == "continue_expr":
			label = self.slice(children[0]).sub(1) if children else src.sub(len(src))
			return Continue(src, label)
		if kind in ("if_expr", "unless_expr"):
			cond = self.expr(children[0])
			then_block = self.block(children[1])
			else_block = self.else_block(children[2]) if len(children) > 2 else None
			node_type = If if kind == "if_expr" else Unless
			return node_type(src, cond, then_block, else_block)
		if kind == "loop_expr":
			return Loop(src, self.block(children[0]))
		if kind == "while_expr":
			return While(src, self.expr(children[0]), self.block(children[1]))
		if kind == "until_expr":
			return Until(src, self.expr(children[0]), self.block(children[1]))
		if kind == "for_expr":
			binder, iterable, body = children
			return For(src, self.expr(binder), self.expr(iterable), self.block(body))
		if kind == "array_lit":
			return Array(src, [self.expr(child) for child in children])
		if kind == "tuple_lit":
			return Tuple(src, [self.expr(child) for child in children])
		if kind == "map_lit":
			return Map(src, [self.map_entry(child) for child in children])
		raise TypeError(f"unexpected expression node {kind}")

	def binop_chain(self, node: Tree) -> Expr:
		"""Fold a left-nested run of binary operators without recursing down it."""
		spine: List[Tree] = []
		while isinstance(node, Tree) and _name(node) == "binop":
			spine.append(node)
			node = node.children[0]
		result = self.expr(node)
		for binop in reversed(spine):
			_, op, right = binop.children
			result = FnCall(self.slice(binop), self.ident(op), [result, self.expr(right)])
		return result

	def else_block(self, node: Tree) -> Block:
		if _name(node) == "block":
			return self.block(node)
		# `else if` / `else unless`: the nested conditional is the block's only statement.
		nested = self.expr(node)
		return Block(nested.src, [ExprStmt(nested.src, nested)])

	def map_entry(self, tree: Tree) -> MapEntry:
		key_tok, value = tree.children
		key_src = self.slice(key_tok)
		return MapEntry(self.slice(tree), Symbol(key_src, key_src), self.expr(value))

	def token_literal(self, tok: Token) -> Expr:
		src = self.slice(tok)
		text = src.text
		ttype = tok.type
		if ttype == "NAME":
			return Ident(src)
		if ttype == "NUMBER":
			if is_float_spelling(text):
				return Float(src, decode_float(text, loc=src))
			return Int(src, decode_int(text, loc=src))
		if ttype == "STRING":
			return UStr(src, decode_string(text[1:-1], loc=src))
		if ttype == "BYTES":
			return BStr(src, decode_bytes(text[2:-1], loc=src))
		if ttype == "CHAR":
			return Char(src, decode_char(text[1:-1], loc=src))
		if ttype == "SYMBOL":
			return Symbol(src, src.sub(1))
		if ttype in ("TRUE", "FALSE"):
			return Bool(src, ttype == "TRUE")
		raise TypeError(f"unexpected token {ttype} in expression")


__all__ = ["parse_program", "terminal_pattern"]
