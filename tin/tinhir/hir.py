# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
High-level representation (HIR) of Tin source code.

The HIR is the abstract syntax tree built directly by the parser. It is the
basis for static analysis, optimization and code generation, none of which
happen here.

Every node carries `src`, a `SourceSlice` view of the text it was parsed
from; identifiers, types, comment lines and literal spellings are views too,
never copies. Two parses of equal text produce equal trees.

Invariants the grammar alone cannot express are enforced when the nodes are
constructed (`TyDecl`, `Fields.build`, `Program`), so an invalid tree is never
representable.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from fnmatch import fnmatchcase
from typing import FrozenSet, Iterable, Iterator, List, Optional, Sequence, Union

from .core.errors import EntrypointError, TypeDeclError
from .core.source import SourceBuffer, SourceSlice


class Keyword(Enum):
	"""Reserved words, keyed by surface spelling."""

	USE = "use"
	FN = "fn"
	TYPE = "type"
	RETURN = "return"
	AND = "and"
	OR = "or"
	XOR = "xor"
	NOT = "not"
	IF = "if"
	ELSE = "else"
	ELSE_IF = "else if"
	UNLESS = "unless"
	ELSE_UNLESS = "else unless"
	LOOP = "loop"
	WHILE = "while"
	UNTIL = "until"
	FOR = "for"
	IN = "in"
	BREAK = "break"
	CONTINUE = "continue"
	TRUE = "true"
	FALSE = "false"

	@classmethod
	def lookup(cls, spelling: str) -> Optional["Keyword"]:
		try:
			return cls(spelling)
		except ValueError:
			return None


# Single-word keywords; these can never be identifiers.
RESERVED_WORDS: FrozenSet[str] = frozenset(k.value for k in Keyword if " " not in k.value)


class Operator(Enum):
	"""Symbolic operators, keyed by surface spelling."""

	ASSIGN = "="
	ADD = "+"
	SUB = "-"
	MUL = "*"
	DIV = "/"
	REM = "%"
	EXP = "^"
	ADD_ASSIGN = "+="
	SUB_ASSIGN = "-="
	MUL_ASSIGN = "*="
	DIV_ASSIGN = "/="
	REM_ASSIGN = "%="
	EXP_ASSIGN = "^="
	EQ = "=="
	ID = "@"
	GREATER = ">"
	LESS = "<"
	GREATER_EQ = ">="
	LESS_EQ = "<="
	NOT_EQ = "!="

	@classmethod
	def lookup(cls, spelling: str) -> Optional["Operator"]:
		try:
			return cls(spelling)
		except ValueError:
			return None

	@property
	def is_assignment(self) -> bool:
		return self in ASSIGNMENT_OPERATORS


ASSIGNMENT_OPERATORS: FrozenSet[Operator] = frozenset(
	{
		Operator.ASSIGN,
		Operator.ADD_ASSIGN,
		Operator.SUB_ASSIGN,
		Operator.MUL_ASSIGN,
		Operator.DIV_ASSIGN,
		Operator.REM_ASSIGN,
		Operator.EXP_ASSIGN,
	}
)

# Keywords that operate like operators and therefore appear as call names.
LOGICAL_KEYWORDS: FrozenSet[Keyword] = frozenset({Keyword.AND, Keyword.OR, Keyword.XOR, Keyword.NOT})


class TopStmt:
	"""A statement allowed at the top of a program."""

	src: SourceSlice


class Stmt:
	"""A statement inside a block. Statements have no R-value."""

	src: SourceSlice


class Expr:
	"""A value-producing construct."""

	src: SourceSlice


class Literal(Expr):
	"""A literal value. Every literal keeps the source text it was decoded from."""

	src: SourceSlice


@dataclass
class Ident(Literal):
	"""An identifier (e.g. `some-name`), usable as an expression or a literal."""

	src: SourceSlice

	@property
	def name(self) -> str:
		return self.src.text


@dataclass
class Ty:
	"""A type annotation, kept as the text of the type expression."""

	src: SourceSlice

	@property
	def name(self) -> str:
		return self.src.text


@dataclass
class TyIdent:
	"""An identifier paired with its type (argument or named field)."""

	src: SourceSlice
	ident: Ident
	ty: Ty


@dataclass
class Comment(TopStmt, Stmt):
	"""
	A comment block.

	`lines` are views of each line with the `//` marker stripped. One line
	is a single-line comment; consecutive line-starting comments are merged.
	"""

	src: SourceSlice
	lines: List[SourceSlice]

	MARKER = "//"

	@property
	def is_multiline(self) -> bool:
		return len(self.lines) > 1

	def __str__(self) -> str:
		return "\n".join(self.MARKER + line.text for line in self.lines)


@dataclass
class Block:
	"""A (possibly empty) sequence of statements."""

	src: SourceSlice
	statements: List[Stmt] = field(default_factory=list)

	def __iter__(self) -> Iterator[Stmt]:
		return iter(self.statements)

	def __len__(self) -> int:
		return len(self.statements)


@dataclass
class VarAssign(Stmt):
	"""
	A variable assignment.

	If the identifier has not been declared in scope before, the assignment
	introduces the binding. Scoping is decided by later passes; the parser only
	records whether an explicit annotation was present.
	"""

	src: SourceSlice
	name: Ident
	ty: Optional[Ty]
	rhs: Expr
	op: Operator = Operator.ASSIGN

	@property
	def is_annotated(self) -> bool:
		return self.ty is not None


@dataclass
class ExprStmt(Stmt):
	"""An expression evaluated for its effect, discarding the R-value."""

	src: SourceSlice
	value: Expr


@dataclass
class If(Expr):
	src: SourceSlice
	cond: Expr
	then_block: Block
	else_block: Optional[Block] = None


@dataclass
class Unless(Expr):
	"""`if` with the condition negated; kept distinct for source fidelity."""

	src: SourceSlice
	cond: Expr
	then_block: Block
	else_block: Optional[Block] = None


@dataclass
class Loop(Expr):
	src: SourceSlice
	body: Block


@dataclass
class While(Expr):
	src: SourceSlice
	cond: Expr
	body: Block


@dataclass
class Until(Expr):
	src: SourceSlice
	cond: Expr
	body: Block


@dataclass
class For(Expr):
	"""A `for <binder> in <iterable>` loop."""

	src: SourceSlice
	binder: Expr
	iterable: Expr
	body: Block


@dataclass
class Continue(Expr):
	"""
	Jump to the next iteration.

	`label` views the label name without its leading tick; an empty label
	targets the innermost enclosing loop.
	"""

	src: SourceSlice
	label: SourceSlice

	@property
	def targets_innermost(self) -> bool:
		return len(self.label) == 0


@dataclass
class Break(Expr):
	"""End loop iteration, optionally producing a value. Labels as for `Continue`."""

	src: SourceSlice
	value: Optional[Expr]
	label: SourceSlice

	@property
	def targets_innermost(self) -> bool:
		return len(self.label) == 0


@dataclass
class Return(Expr):
	src: SourceSlice
	value: Optional[Expr] = None


@dataclass
class FnCall(Expr):
	"""
	A function call.

	Operators are calls too: `a + b` is a call named `+` with two arguments,
	`-a` a call named `-` with one, `not a` a call named `not`.
	"""

	src: SourceSlice
	name: Ident
	args: List[Expr] = field(default_factory=list)

	@property
	def operator(self) -> Union[Operator, Keyword, None]:
		op = Operator.lookup(self.name.name)
		if op is not None:
			return op
		kw = Keyword.lookup(self.name.name)
		if kw in LOGICAL_KEYWORDS:
			return kw
		return None


@dataclass
class Dot(Expr):
	"""Field access `target.member`; `member` is an `Ident` or an `FnCall`."""

	src: SourceSlice
	target: Expr
	member: Expr


@dataclass
class Bool(Literal):
	src: SourceSlice
	value: bool


@dataclass
class Int(Literal):
	"""A 64-bit signed integer."""

	src: SourceSlice
	value: int


@dataclass
class Float(Literal):
	"""A 64-bit floating point number."""

	src: SourceSlice
	value: float


@dataclass
class UStr(Literal):
	"""A UTF-8 string; `value` has escapes decoded."""

	src: SourceSlice
	value: str


@dataclass
class BStr(Literal):
	"""A byte string written with ASCII text (`b"..."`)."""

	src: SourceSlice
	value: bytes


@dataclass
class Char(Literal):
	"""Exactly one Unicode scalar value."""

	src: SourceSlice
	value: str


@dataclass
class Symbol(Literal):
	"""
	An interned-string literal (`:hello`).

	`name` views the identifier part. Interning is left to later passes.
	"""

	src: SourceSlice
	name: SourceSlice

	@property
	def text(self) -> str:
		return self.name.text


@dataclass
class Array(Literal):
	"""`#[...]`; element homogeneity is checked by later passes."""

	src: SourceSlice
	elements: List[Literal] = field(default_factory=list)


@dataclass
class Tuple(Literal):
	"""`#(...)`; heterogeneous by construction."""

	src: SourceSlice
	elements: List[Literal] = field(default_factory=list)


@dataclass
class MapEntry:
	src: SourceSlice
	key: Symbol
	value: Expr


@dataclass
class Map(Literal):
	"""
	`#{ key: expr, ... }` with entries in source order.

	Duplicate keys are kept; rejecting them is left to semantic analysis.
	"""

	src: SourceSlice
	entries: List[MapEntry] = field(default_factory=list)

	def keys(self) -> List[str]:
		return [entry.key.text for entry in self.entries]

	def duplicate_keys(self) -> List[str]:
		counts = Counter(self.keys())
		return [key for key, count in counts.items() if count > 1]


class Fields:
	"""
	The fields of a type variant: all named or all anonymous, never mixed.

	Use `Fields.build` to construct from parsed items; it rejects mixtures.
	"""

	src: SourceSlice

	@staticmethod
	def build(src: SourceSlice, items: Sequence[Union[TyIdent, Ty]]) -> "Fields":
		named = [item for item in items if isinstance(item, TyIdent)]
		if named and len(named) != len(items):
			first_anon = next(item for item in items if not isinstance(item, TyIdent))
			raise TypeDeclError(
				"a variant's fields must be all named or all anonymous",
				loc=first_anon.src,
			)
		if named:
			return NamedFields(src=src, fields=named)
		return AnonymousFields(src=src, types=list(items))  # type: ignore[arg-type]


@dataclass
class NamedFields(Fields):
	src: SourceSlice
	fields: List[TyIdent] = field(default_factory=list)

	def __len__(self) -> int:
		return len(self.fields)


@dataclass
class AnonymousFields(Fields):
	src: SourceSlice
	types: List[Ty] = field(default_factory=list)

	def __len__(self) -> int:
		return len(self.types)


@dataclass
class TyVariant:
	"""One variant of a type; the name is optional only for single-variant types."""

	src: SourceSlice
	name: Optional[Ident]
	fields: Fields


@dataclass
class TyDecl(TopStmt):
	"""
	A type declaration.

	Sum and product types are declared uniformly: a type has one or more
	variants. With more than one variant every variant must be named.
	"""

	src: SourceSlice
	name: Ident
	variants: List[TyVariant]

	def __post_init__(self) -> None:
		if not self.variants:
			raise TypeDeclError(f"type '{self.name.name}' declares no variants", loc=self.src)
		if len(self.variants) > 1:
			for variant in self.variants:
				if variant.name is None:
					raise TypeDeclError(
						f"type '{self.name.name}' has {len(self.variants)} variants; every variant must be named",
						loc=variant.src,
					)

	@property
	def is_product(self) -> bool:
		return len(self.variants) == 1


@dataclass
class FnDecl(TopStmt):
	src: SourceSlice
	name: Ident
	args: List[TyIdent]
	ret_ty: Optional[Ty]
	body: Block


@dataclass
class Path:
	"""
	A concrete module path.

	Borrows the `use` statement's own text when no expansion was needed;
	owns a `str` only when it came out of glob expansion.
	"""

	value: Union[SourceSlice, str]

	@property
	def text(self) -> str:
		if isinstance(self.value, SourceSlice):
			return self.value.text
		return self.value

	@property
	def is_borrowed(self) -> bool:
		return isinstance(self.value, SourceSlice)

	def __str__(self) -> str:
		return self.text


@dataclass
class PathGlob:
	"""An unresolved module reference; `*` and `?` never cross a `/`."""

	src: SourceSlice

	SEPARATOR = "/"
	WILDCARDS = frozenset("*?")

	@property
	def pattern(self) -> str:
		return self.src.text

	@property
	def is_glob(self) -> bool:
		return any(ch in self.WILDCARDS for ch in self.pattern)

	def matches(self, candidate: str) -> bool:
		pat_segments = self.pattern.split(self.SEPARATOR)
		segments = candidate.split(self.SEPARATOR)
		if len(pat_segments) != len(segments):
			return False
		return all(fnmatchcase(seg, pat) for seg, pat in zip(segments, pat_segments))

	def resolve(self, universe: Iterable[str] = ()) -> List[Path]:
		"""
		Expand against the caller-supplied module paths, keeping their order.

		A pattern without wildcards resolves to itself without consulting the
		universe; whether that module exists is the caller's concern.
		"""
		if not self.is_glob:
			return [Path(self.src)]
		seen: set[str] = set()
		paths: List[Path] = []
		for candidate in universe:
			if candidate in seen or not self.matches(candidate):
				continue
			seen.add(candidate)
			paths.append(Path(candidate))
		return paths


@dataclass
class Use(TopStmt):
	"""A `use` statement (may expand into several paths)."""

	src: SourceSlice
	glob: PathGlob


@dataclass
class Program:
	"""
	A complete parsed program.

	A collection of top-level statements, well-formed only with exactly one
	`fn main`; construction fails otherwise.
	"""

	source: SourceBuffer = field(repr=False)
	statements: List[TopStmt] = field(default_factory=list)

	ENTRYPOINT = "main"

	def __post_init__(self) -> None:
		mains = [fn for fn in self.functions if fn.name.name == self.ENTRYPOINT]
		if not mains:
			end = len(self.source.text)
			raise EntrypointError(
				f"program has no `fn {self.ENTRYPOINT}`",
				loc=self.source.slice(end, end),
			)
		if len(mains) > 1:
			raise EntrypointError(
				f"duplicate `fn {self.ENTRYPOINT}`",
				loc=mains[1].name.src,
			)

	@property
	def functions(self) -> List[FnDecl]:
		return [stmt for stmt in self.statements if isinstance(stmt, FnDecl)]

	@property
	def types(self) -> List[TyDecl]:
		return [stmt for stmt in self.statements if isinstance(stmt, TyDecl)]

	@property
	def uses(self) -> List[Use]:
		return [stmt for stmt in self.statements if isinstance(stmt, Use)]

	@property
	def comments(self) -> List[Comment]:
		return [stmt for stmt in self.statements if isinstance(stmt, Comment)]

	@property
	def main(self) -> FnDecl:
		return next(fn for fn in self.functions if fn.name.name == self.ENTRYPOINT)


__all__ = [
	"ASSIGNMENT_OPERATORS",
	"AnonymousFields",
	"Array",
	"BStr",
	"Block",
	"Bool",
	"Break",
	"Char",
	"Comment",
	"Continue",
	"Dot",
	"Expr",
	"ExprStmt",
	"Fields",
	"Float",
	"FnCall",
	"FnDecl",
	"For",
	"Ident",
	"If",
	"Int",
	"Keyword",
	"LOGICAL_KEYWORDS",
	"Literal",
	"Loop",
	"Map",
	"MapEntry",
	"NamedFields",
	"Operator",
	"Path",
	"PathGlob",
	"Program",
	"RESERVED_WORDS",
	"Return",
	"Stmt",
	"Symbol",
	"TopStmt",
	"Tuple",
	"Ty",
	"TyDecl",
	"TyIdent",
	"TyVariant",
	"UStr",
	"Unless",
	"Until",
	"Use",
	"VarAssign",
	"While",
]
