# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from tin.tinhir import hir as H
from tin.tinhir.parser import parser as p


def _call(expr: H.Expr, name: str) -> H.FnCall:
	assert isinstance(expr, H.FnCall), expr
	assert expr.name.name == name
	return expr


def _body(src: str) -> list:
	return p.parse_program(src).main.body.statements


def test_multiplication_binds_tighter_than_addition() -> None:
	expr = p._parse_expr_fragment("1 + 2 * 3")
	add = _call(expr, "+")
	assert add.operator is H.Operator.ADD
	assert isinstance(add.args[0], H.Int) and add.args[0].value == 1
	mul = _call(add.args[1], "*")
	assert [a.value for a in mul.args] == [2, 3]


def test_subtraction_is_left_associative() -> None:
	outer = _call(p._parse_expr_fragment("a - b - c"), "-")
	inner = _call(outer.args[0], "-")
	assert [a.name for a in inner.args] == ["a", "b"]
	assert outer.args[1].name == "c"


def test_exponent_is_right_associative() -> None:
	outer = _call(p._parse_expr_fragment("2 ^ 3 ^ 2"), "^")
	assert outer.args[0].value == 2
	inner = _call(outer.args[1], "^")
	assert [a.value for a in inner.args] == [3, 2]


def test_logical_operators_are_calls() -> None:
	expr = p._parse_expr_fragment("a and b or c")
	or_call = _call(expr, "or")
	assert or_call.operator is H.Keyword.OR
	and_call = _call(or_call.args[0], "and")
	assert [a.name for a in and_call.args] == ["a", "b"]
	assert _call(p._parse_expr_fragment("a xor b"), "xor").operator is H.Keyword.XOR


def test_not_is_looser_than_comparison() -> None:
	not_call = _call(p._parse_expr_fragment("not a == b"), "not")
	assert len(not_call.args) == 1
	eq = _call(not_call.args[0], "==")
	assert eq.operator is H.Operator.EQ


def test_prefix_minus_binds_tighter_than_exponent() -> None:
	pow_call = _call(p._parse_expr_fragment("-x ^ 2"), "^")
	neg = _call(pow_call.args[0], "-")
	assert len(neg.args) == 1 and neg.args[0].name == "x"
	assert _call(p._parse_expr_fragment("@x"), "@").operator is H.Operator.ID


def test_comparison_operators() -> None:
	for op in ("==", "!=", ">", "<", ">=", "<="):
		call = _call(p._parse_expr_fragment(f"a {op} b"), op)
		assert call.operator is H.Operator(op)


def test_sign_after_operand_is_binary() -> None:
	sub = _call(p._parse_expr_fragment("x -1"), "-")
	assert sub.args[0].name == "x"
	assert sub.args[1].value == 1
	sub = _call(p._parse_expr_fragment("x - -1"), "-")
	assert isinstance(sub.args[1], H.Int) and sub.args[1].value == -1
	assert sub.args[1].src.text == "-1"


def test_parenthesized_operand_keeps_outer_view() -> None:
	expr = _call(p._parse_expr_fragment("(1 + 2) * 3"), "*")
	assert expr.src.text == "(1 + 2) * 3"
	assert _call(expr.args[0], "+").src.text == "1 + 2"


def test_identifiers_may_contain_operator_characters() -> None:
	expr = p._parse_expr_fragment("a+b")
	assert isinstance(expr, H.Ident)
	assert expr.name == "a+b"


def test_calls_and_field_access() -> None:
	call = _call(p._parse_expr_fragment("f(1, x, g(),)"), "f")
	assert len(call.args) == 3
	assert isinstance(call.args[2], H.FnCall) and call.args[2].args == []
	assert call.operator is None

	dot = p._parse_expr_fragment("a.b.push(1)")
	assert isinstance(dot, H.Dot)
	assert isinstance(dot.target, H.Dot)
	assert dot.target.target.name == "a"
	assert dot.target.member.name == "b"
	assert _call(dot.member, "push").args[0].value == 1


def test_assignment_operators_are_recorded() -> None:
	stmts = _body(
		"""
fn main() {
	x: Int = 5
	x += 1
	x ^= 2
	y = x
}
"""
	)
	assert [s.op for s in stmts] == [
		H.Operator.ASSIGN,
		H.Operator.ADD_ASSIGN,
		H.Operator.EXP_ASSIGN,
		H.Operator.ASSIGN,
	]
	assert stmts[0].is_annotated
	assert not stmts[3].is_annotated
	assert isinstance(stmts[3].rhs, H.Ident)


def test_semicolons_and_newlines_both_terminate() -> None:
	stmts = _body("fn main() { x = 1; y = 2\n z = 3 }")
	assert [s.name.name for s in stmts] == ["x", "y", "z"]


def test_newlines_inside_brackets_do_not_terminate() -> None:
	stmts = _body("fn main() {\n\tx = f(1,\n\t\t2\n\t)\n\ty = #[\n\t\t1,\n\t\t2,\n\t]\n}")
	assert len(stmts) == 2
	assert len(stmts[0].rhs.args) == 2
	assert len(stmts[1].rhs.elements) == 2


def test_comments_inside_brackets_are_skipped() -> None:
	stmts = _body("fn main() {\n\tx = f(1, // first\n\t\t2)\n\ty = #[\n\t\t// leading\n\t\t1,\n\t\t2, // trailing\n\t]\n}")
	assert len(stmts) == 2
	assert len(stmts[0].rhs.args) == 2
	assert [e.value for e in stmts[1].rhs.elements] == [1, 2]


def test_long_operator_chain_is_built_without_deep_recursion() -> None:
	terms = " + ".join(["a"] * 1200)
	(stmt,) = _body(f"fn main() {{\n\tx = {terms}\n}}")
	assert stmt.rhs.src.text == terms
	node = stmt.rhs
	depth = 0
	while isinstance(node, H.FnCall):
		assert node.args[1].name == "a"
		node = node.args[0]
		depth += 1
	assert depth == 1199
	assert node.name == "a"


def test_if_else_if_chain() -> None:
	stmts = _body(
		"""
fn main() {
	if a {
		x = 1
	} else if b {
		x = 2
	}
	else {
		x = 3
	}
}
"""
	)
	assert len(stmts) == 1
	outer = stmts[0].value
	assert isinstance(outer, H.If)
	assert outer.cond.name == "a"
	assert len(outer.then_block) == 1
	nested_stmt = outer.else_block.statements[0]
	assert isinstance(nested_stmt, H.ExprStmt)
	nested = nested_stmt.value
	assert isinstance(nested, H.If)
	assert nested.cond.name == "b"
	assert isinstance(nested.else_block, H.Block)
	assert nested.else_block.statements[0].rhs.value == 3


def test_unless_without_else() -> None:
	stmts = _body("fn main() {\n\tunless done { go() }\n}")
	node = stmts[0].value
	assert isinstance(node, H.Unless)
	assert node.else_block is None
	assert node.then_block.statements[0].value.name.name == "go"


def test_loops() -> None:
	stmts = _body(
		"""
fn main() {
	loop { tick() }
	while n > 0 { n -= 1 }
	until done { step() }
	for x in xs { use-it(x) }
}
"""
	)
	kinds = [type(s.value) for s in stmts]
	assert kinds == [H.Loop, H.While, H.Until, H.For]
	while_loop = stmts[1].value
	assert _call(while_loop.cond, ">").args[1].value == 0
	for_loop = stmts[3].value
	assert for_loop.binder.name == "x"
	assert for_loop.iterable.name == "xs"
	assert for_loop.body.statements[0].value.name.name == "use-it"


def test_break_and_continue_labels() -> None:
	stmts = _body(
		"""
fn main() {
	loop {
		break 'outer
		continue
		break x
		break x 'inner
		continue 'outer
	}
}
"""
	)
	body = stmts[0].value.body.statements
	exprs = [s.value for s in body]

	assert isinstance(exprs[0], H.Break)
	assert exprs[0].value is None
	assert exprs[0].label.text == "outer"
	assert not exprs[0].targets_innermost

	assert isinstance(exprs[1], H.Continue)
	assert exprs[1].label.text == ""
	assert exprs[1].targets_innermost

	assert exprs[2].value.name == "x"
	assert exprs[2].targets_innermost

	assert exprs[3].value.name == "x"
	assert exprs[3].label.text == "inner"

	assert isinstance(exprs[4], H.Continue)
	assert exprs[4].label.text == "outer"


def test_bare_return_and_return_value() -> None:
	stmts = _body("fn main() {\n\treturn\n}")
	assert isinstance(stmts[0].value, H.Return)
	assert stmts[0].value.value is None
	ret = p._parse_expr_fragment("return a * 2")
	assert isinstance(ret, H.Return)
	assert _call(ret.value, "*").args[1].value == 2


def test_node_views_point_at_source() -> None:
	src = "fn main() {\n\ttotal = a + b\n}"
	assign = p.parse_program(src).main.body.statements[0]
	assert assign.src.text == "total = a + b"
	assert assign.src.line == 2
	assert assign.src.column == 2
	assert assign.rhs.src.text == "a + b"
	assert assign.rhs.name.src.text == "+"
