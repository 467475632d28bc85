import unittest
from unittest import mock

from lox import syntax
from lox.diagnostics import Report
from lox.front_end import parse_text

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False)
		self.complain_to_console = mock.Mock()

def _parse(text):
	report = Silence()
	statements = parse_text(text, report)
	report.assert_no_issues("Parser complained about %r"%text)
	return statements

def _complaints(text):
	report = Silence()
	parse_text(text, report)
	assert report.sick(), text
	return report.messages()

def _expr(text):
	stmt, = _parse(text + ";")
	assert isinstance(stmt, syntax.ExprStmt), stmt
	return stmt.expr

class ExpressionTests(unittest.TestCase):

	def test_precedence(self):
		for text, expect in [
			("1 + 2 * 3", "(<Literal 1.0> + (<Literal 2.0> * <Literal 3.0>))"),
			("1 * 2 + 3", "((<Literal 1.0> * <Literal 2.0>) + <Literal 3.0>)"),
			("a < b == c > d", "((<ref:a> < <ref:b>) == (<ref:c> > <ref:d>))"),
			("a or b and c", "(<ref:a> or (<ref:b> and <ref:c>))"),
		]:
			with self.subTest(text):
				self.assertEqual(expect, str(_expr(text)))

	def test_left_associative(self):
		self.assertEqual("((<ref:a> - <ref:b>) - <ref:c>)", str(_expr("a - b - c")))
		self.assertEqual("((<ref:a> / <ref:b>) / <ref:c>)", str(_expr("a / b / c")))

	def test_logical_is_its_own_node(self):
		self.assertIsInstance(_expr("a and b"), syntax.Logical)
		self.assertNotIsInstance(_expr("a + b"), syntax.Logical)

	def test_unary_nests(self):
		expr = _expr("!!x")
		self.assertIsInstance(expr, syntax.Unary)
		self.assertIsInstance(expr.arg, syntax.Unary)
		self.assertIsInstance(expr.arg.arg, syntax.Variable)

	def test_assignment_is_right_associative(self):
		expr = _expr("a = b = c")
		self.assertIsInstance(expr, syntax.Assign)
		self.assertEqual("a", expr.name.text)
		self.assertIsInstance(expr.value, syntax.Assign)
		self.assertEqual("b", expr.value.name.text)

	def test_property_assignment_becomes_set(self):
		expr = _expr("a.b.c = 1")
		self.assertIsInstance(expr, syntax.Set)
		self.assertEqual("c", expr.name.text)
		self.assertEqual("(<ref:a>.b)", str(expr.lhs))

	def test_calls_and_gets_chain(self):
		expr = _expr("f(1)(2).g(3)")
		self.assertIsInstance(expr, syntax.Call)
		self.assertEqual(1, len(expr.args))
		self.assertIsInstance(expr.callee, syntax.Get)
		self.assertEqual("<ref:f>(<Literal 1.0>)(<Literal 2.0>)", str(expr.callee.lhs))

	def test_super_and_this(self):
		expr = _expr("super.cook")
		self.assertIsInstance(expr, syntax.Super)
		self.assertEqual("cook", expr.method.text)
		self.assertIsInstance(_expr("this"), syntax.This)

	def test_grouping(self):
		expr = _expr("(1 + 2) * 3")
		self.assertIsInstance(expr.lhs, syntax.Grouping)

	def test_literals(self):
		for text, value in [("true", True), ("false", False), ("nil", None), ('"hi"', "hi"), ("12.5", 12.5)]:
			with self.subTest(text):
				expr = _expr(text)
				self.assertIsInstance(expr, syntax.Literal)
				self.assertEqual(value, expr.value)

	def test_every_expression_has_a_distinct_serial(self):
		expr = _expr("a + a")
		serials = [expr.serial, expr.lhs.serial, expr.rhs.serial]
		self.assertEqual(3, len(set(serials)))
		self.assertNotIn(0, serials)

class StatementTests(unittest.TestCase):

	def test_declarations(self):
		kinds = [type(s) for s in _parse("var a; var b = 1; fun f(x, y) { return x; } class C { m() {} }")]
		self.assertEqual([syntax.Var, syntax.Var, syntax.Function, syntax.Class], kinds)

	def test_function_shape(self):
		fn, = _parse("fun add(a, b) { print a + b; return; }")
		self.assertEqual("add", fn.name.text)
		self.assertEqual(["a", "b"], [p.text for p in fn.params])
		self.assertEqual([syntax.Print, syntax.Return], [type(s) for s in fn.body])
		self.assertIsNone(fn.body[1].value)

	def test_class_shape(self):
		cls, = _parse("class B < A { init(x) {} go() {} }")
		self.assertEqual("B", cls.name.text)
		self.assertIsInstance(cls.superclass, syntax.Variable)
		self.assertEqual("A", cls.superclass.name.text)
		self.assertEqual(["init", "go"], [m.name.text for m in cls.methods])
		plain, = _parse("class A {}")
		self.assertIsNone(plain.superclass)
		self.assertEqual([], plain.methods)

	def test_dangling_else_binds_nearest(self):
		stmt, = _parse("if (a) if (b) print 1; else print 2;")
		self.assertIsNone(stmt.else_part)
		self.assertIsNotNone(stmt.then_part.else_part)

	def test_full_for_loop_desugars(self):
		outer, = _parse("for (var i = 0; i < 3; i = i + 1) print i;")
		self.assertIsInstance(outer, syntax.Block)
		init, loop = outer.body
		self.assertIsInstance(init, syntax.Var)
		self.assertIsInstance(loop, syntax.While)
		self.assertEqual("(<ref:i> < <Literal 3.0>)", str(loop.condition))
		body, step = loop.body.body
		self.assertIsInstance(body, syntax.Print)
		self.assertIsInstance(step.expr, syntax.Assign)

	def test_empty_for_loop_desugars(self):
		loop, = _parse("for (;;) print 1;")
		self.assertIsInstance(loop, syntax.While)
		self.assertIsInstance(loop.condition, syntax.Literal)
		self.assertIs(True, loop.condition.value)
		self.assertIsInstance(loop.body, syntax.Print)

	def test_block(self):
		block, = _parse("{ var a = 1; { print a; } }")
		self.assertIsInstance(block, syntax.Block)
		self.assertIsInstance(block.body[1], syntax.Block)

	def test_every_statement_has_a_head(self):
		text = "var a; print a; { a; } if (a) a; while (a) a; fun f() { return; } class C {} for (;;) a;"
		for stmt in _parse(text):
			with self.subTest(type(stmt).__name__):
				self.assertEqual(1, stmt.head().line)
		block = _parse("{ }")[0]
		self.assertEqual("{", block.head().text)
		loop = _parse("for (var i = 0; i < 1; i = i + 1) {}")[0]
		self.assertEqual("for", loop.head().text)

class SyntaxErrorTests(unittest.TestCase):

	def test_expect_expression(self):
		self.assertEqual(["[line 1] Error at ';': Expect expression."], _complaints("print ;"))

	def test_error_at_end(self):
		self.assertEqual(["[line 1] Error at end: Expect ';' after value."], _complaints("print 1"))

	def test_invalid_assignment_target(self):
		self.assertEqual(["[line 1] Error at '=': Invalid assignment target."], _complaints("a + b = c;"))

	def test_recovery_finds_later_mistakes(self):
		self.assertEqual([
			"[line 1] Error at ')': Expect expression.",
			"[line 3] Error at '}': Expect expression.",
		], _complaints("print );\nvar ok = 1;\n}"))

	def test_class_errors(self):
		self.assertEqual(["[line 1] Error at '{': Expect class name."], _complaints("class {}"))
		self.assertEqual(["[line 1] Error at '{': Expect superclass name."], _complaints("class A < {}"))

	def test_property_name(self):
		self.assertEqual(["[line 1] Error at '1': Expect property name after '.'."], _complaints("a.1;"))

	def test_too_many_arguments(self):
		args = ", ".join(["1"] * 256)
		messages = _complaints("f(%s);"%args)
		self.assertEqual(["[line 1] Error at '1': Can't have more than 255 arguments."], messages)

	def test_exactly_enough_arguments(self):
		call = _expr("f(%s)" % ", ".join(["1"] * 255))
		self.assertEqual(255, len(call.args))

	def test_too_many_parameters(self):
		params = ", ".join("p%d"%i for i in range(256))
		messages = _complaints("fun f(%s) {}"%params)
		self.assertEqual(["[line 1] Error at 'p255': Can't have more than 255 parameters."], messages)

if __name__ == '__main__':
	unittest.main()
