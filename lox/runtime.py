"""
The tree-walking evaluator.

Each kind of syntax gets exactly one method here, named _eval_* for
expressions and _exec_* for statements. The type-annotation on the
node parameter says which kind it handles; the dispatch tables get
built from those annotations, and an assertion at import time makes
sure no kind of node went without.

Statements produce an outcome: None for normal completion, or a
Returned marker which travels up to the nearest function call.
"""
import sys, math, operator
from typing import Any, Iterable, Optional
from . import syntax
from .ontology import Token, Expr, Stmt, RuntimeFault, STACK_OVERFLOW
from .environment import Environment
from .diagnostics import Report
from .resolution import BindingTable
from .primitive import install_natives
from .values import Returned, Function, Closure, ClassValue, Instance

OUTCOME = Optional[Returned]

def _divide(a:float, b:float) -> float:
	# IEEE-754 semantics rather than a Python exception.
	if b == 0:
		if a == 0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)
	return a / b

ARITHMETIC = {
	"-" : operator.sub,
	"*" : operator.mul,
	"/" : _divide,
	">" : operator.gt,
	">=" : operator.ge,
	"<" : operator.lt,
	"<=" : operator.le,
}

def is_number(x) -> bool:
	return type(x) is float

def is_truthy(x) -> bool:
	return not (x is None or x is False)

def is_equal(a, b) -> bool:
	""" No coercion: Values of different types are never equal. """
	if a is None: return b is None
	if type(a) is not type(b): return False
	return a == b

def stringify(value:Any) -> str:
	if value is None: return "nil"
	if value is True: return "true"
	if value is False: return "false"
	if is_number(value):
		if math.isnan(value): return "NaN"
		if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
		text = repr(value)
		if text.endswith(".0"): text = text[:-2]
		return text
	return str(value)

def _check_number(op:Token, operand):
	if not is_number(operand):
		raise RuntimeFault(op, "Operand must be a number.")

def _check_numbers(op:Token, lhs, rhs):
	if not (is_number(lhs) and is_number(rhs)):
		raise RuntimeFault(op, "Operands must be numbers.")

class Interpreter:
	"""
	Owns the global environment and the accumulated binding table.
	Both persist from one run to the next, so an interactive session
	can refer to what it defined on earlier lines.
	"""
	globals: Environment
	bindings: BindingTable

	def __init__(self, report:Report, out=None):
		self.report = report
		self.globals = Environment()
		install_natives(self.globals)
		self.bindings = {}
		self._out = out

	def resolved(self, bindings:BindingTable):
		self.bindings.update(bindings)

	def interpret(self, statements:Iterable[Stmt]):
		""" Run top-level statements in order. A run-time error stops the lot, and gets reported. """
		try:
			for stmt in statements:
				try: self.execute(stmt, self.globals)
				except RecursionError: raise RuntimeFault(stmt.head(), STACK_OVERFLOW) from None
		except RuntimeFault as fault:
			self.report.runtime_error(fault)

	def execute(self, stmt:Stmt, env:Environment) -> OUTCOME:
		return EXECUTE[type(stmt)](self, stmt, env)

	def evaluate(self, expr:Expr, env:Environment) -> Any:
		return EVALUATE[type(expr)](self, expr, env)

	def execute_block(self, statements:Iterable[Stmt], env:Environment) -> OUTCOME:
		# The caller's environment is untouched, whichever way this exits.
		for stmt in statements:
			outcome = self.execute(stmt, env)
			if outcome is not None: return outcome
		return None

	def _lookup_variable(self, name:Token, expr:Expr, env:Environment):
		distance = self.bindings.get(expr.serial)
		if distance is None: return self.globals.get(name)
		return env.get_at(distance, name.text)

	def _write(self, text:str):
		print(text, file=self._out or sys.stdout)

	############################################################
	# Statements

	def _exec_expression(self, stmt:syntax.ExprStmt, env:Environment) -> OUTCOME:
		self.evaluate(stmt.expr, env)

	def _exec_print(self, stmt:syntax.Print, env:Environment) -> OUTCOME:
		self._write(stringify(self.evaluate(stmt.expr, env)))

	def _exec_var(self, stmt:syntax.Var, env:Environment) -> OUTCOME:
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer, env)
		env.define(stmt.name.text, value)

	def _exec_block(self, stmt:syntax.Block, env:Environment) -> OUTCOME:
		return self.execute_block(stmt.body, Environment(env))

	def _exec_if(self, stmt:syntax.If, env:Environment) -> OUTCOME:
		if is_truthy(self.evaluate(stmt.condition, env)):
			return self.execute(stmt.then_part, env)
		elif stmt.else_part is not None:
			return self.execute(stmt.else_part, env)

	def _exec_while(self, stmt:syntax.While, env:Environment) -> OUTCOME:
		while is_truthy(self.evaluate(stmt.condition, env)):
			outcome = self.execute(stmt.body, env)
			if outcome is not None: return outcome

	def _exec_function(self, stmt:syntax.Function, env:Environment) -> OUTCOME:
		env.define(stmt.name.text, Closure(stmt, env))

	def _exec_return(self, stmt:syntax.Return, env:Environment) -> OUTCOME:
		return Returned(None if stmt.value is None else self.evaluate(stmt.value, env))

	def _exec_class(self, stmt:syntax.Class, env:Environment) -> OUTCOME:
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass, env)
			if not isinstance(superclass, ClassValue):
				raise RuntimeFault(stmt.superclass.name, "Superclass must be a class.")
		env.define(stmt.name.text, None)
		method_env = env
		if superclass is not None:
			method_env = Environment(env)
			method_env.define("super", superclass)
		methods = {
			m.name.text: Closure(m, method_env, m.name.text == "init")
			for m in stmt.methods
		}
		env.define(stmt.name.text, ClassValue(stmt.name.text, superclass, methods))

	############################################################
	# Expressions

	def _eval_literal(self, expr:syntax.Literal, env:Environment):
		return expr.value

	def _eval_grouping(self, expr:syntax.Grouping, env:Environment):
		return self.evaluate(expr.expr, env)

	def _eval_unary(self, expr:syntax.Unary, env:Environment):
		arg = self.evaluate(expr.arg, env)
		if expr.op.kind == "-":
			_check_number(expr.op, arg)
			return -arg
		assert expr.op.kind == "!", expr.op
		return not is_truthy(arg)

	def _eval_binary(self, expr:syntax.Binary, env:Environment):
		lhs = self.evaluate(expr.lhs, env)
		rhs = self.evaluate(expr.rhs, env)
		op = expr.op
		if op.kind == "==": return is_equal(lhs, rhs)
		if op.kind == "!=": return not is_equal(lhs, rhs)
		if op.kind == "+":
			if is_number(lhs) and is_number(rhs): return lhs + rhs
			if isinstance(lhs, str) and isinstance(rhs, str): return lhs + rhs
			raise RuntimeFault(op, "Operands must be two numbers or two strings.")
		_check_numbers(op, lhs, rhs)
		return ARITHMETIC[op.kind](lhs, rhs)

	def _eval_logical(self, expr:syntax.Logical, env:Environment):
		lhs = self.evaluate(expr.lhs, env)
		if expr.op.kind == "OR":
			if is_truthy(lhs): return lhs
		elif not is_truthy(lhs): return lhs
		return self.evaluate(expr.rhs, env)

	def _eval_variable(self, expr:syntax.Variable, env:Environment):
		return self._lookup_variable(expr.name, expr, env)

	def _eval_assign(self, expr:syntax.Assign, env:Environment):
		value = self.evaluate(expr.value, env)
		distance = self.bindings.get(expr.serial)
		if distance is None: self.globals.assign(expr.name, value)
		else: env.assign_at(distance, expr.name.text, value)
		return value

	def _eval_call(self, expr:syntax.Call, env:Environment):
		callee = self.evaluate(expr.callee, env)
		args = [self.evaluate(a, env) for a in expr.args]
		if not isinstance(callee, Function):
			raise RuntimeFault(expr.paren, "Can only call functions and classes.")
		if len(args) != callee.arity():
			raise RuntimeFault(expr.paren, "Expected %d arguments but got %d." % (callee.arity(), len(args)))
		try: return callee.apply(self, args)
		except RecursionError: raise RuntimeFault(expr.paren, STACK_OVERFLOW) from None

	def _eval_get(self, expr:syntax.Get, env:Environment):
		lhs = self.evaluate(expr.lhs, env)
		if isinstance(lhs, Instance): return lhs.get(expr.name)
		raise RuntimeFault(expr.name, "Only instances have properties.")

	def _eval_set(self, expr:syntax.Set, env:Environment):
		lhs = self.evaluate(expr.lhs, env)
		if not isinstance(lhs, Instance):
			raise RuntimeFault(expr.name, "Only instances have fields.")
		value = self.evaluate(expr.value, env)
		lhs.set(expr.name, value)
		return value

	def _eval_this(self, expr:syntax.This, env:Environment):
		return self._lookup_variable(expr.keyword, expr, env)

	def _eval_super(self, expr:syntax.Super, env:Environment):
		distance = self.bindings[expr.serial]
		superclass = env.get_at(distance, "super")
		# "this" is always bound in the frame just inside the one holding "super".
		instance = env.get_at(distance - 1, "this")
		method = superclass.find_method(expr.method.text)
		if method is None:
			raise RuntimeFault(expr.method, "Undefined property '%s'." % expr.method.text)
		return method.bind(instance)

EVALUATE = {}
EXECUTE = {}

def attach_evaluation_methods(cls):
	for _k, _v in list(vars(cls).items()):
		if _k.startswith("_eval_"): table, param = EVALUATE, "expr"
		elif _k.startswith("_exec_"): table, param = EXECUTE, "stmt"
		else: continue
		_t = _v.__annotations__[param]
		assert isinstance(_t, type), (_k, _t)
		table[_t] = _v

attach_evaluation_methods(Interpreter)
assert set(EVALUATE) == set(syntax.EXPRESSIONS), set(syntax.EXPRESSIONS) - set(EVALUATE)
assert set(EXECUTE) == set(syntax.STATEMENTS), set(syntax.STATEMENTS) - set(EXECUTE)
