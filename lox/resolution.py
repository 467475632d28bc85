"""
The static resolution pass.

By the time this pass is finished, every local variable reference
(including "this" and "super") has a binding distance recorded in
the binding table: the number of scope-hops from the reference out
to the scope that declares it. References that find no local scope
stay out of the table, and the run-time looks them up among globals.

Along the way, this pass rejects the structural mistakes which the
grammar alone cannot catch.
"""
from enum import Enum
from typing import Iterable, Optional
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import Token, Expr, Stmt, STACK_OVERFLOW
from .diagnostics import Report

BindingTable = dict[int, int]

class FunctionType(Enum):
	NONE = 0
	FUNCTION = 1
	INITIALIZER = 2
	METHOD = 3

class ClassType(Enum):
	NONE = 0
	CLASS = 1
	SUBCLASS = 2

class Resolver(Visitor):
	"""
	Scopes form a stack, innermost last. Each maps a name to whether
	its declaration is complete ("ready"). The global scope is not on
	the stack: names not found on the stack belong to the globals.
	"""
	bindings: BindingTable
	_scopes: list[dict[str, bool]]
	_globals: set[str]
	_initializing: Optional[str]

	def __init__(self, report:Report, known_globals:Iterable[str]=()):
		self.report = report
		self.bindings = {}
		self._scopes = []
		self._globals = set(known_globals)
		self._initializing = None
		self._current_function = FunctionType.NONE
		self._current_class = ClassType.NONE

	def resolve(self, statements:Iterable[Stmt]) -> BindingTable:
		for stmt in statements:
			try: self.visit(stmt)
			except RecursionError:
				self.report.error(stmt.head(), STACK_OVERFLOW)
				self._scopes.clear()
				self._initializing = None
				self._current_function = FunctionType.NONE
				self._current_class = ClassType.NONE
		return self.bindings

	def tour(self, items):
		for i in items:
			self.visit(i)

	############################################################
	# Scope management

	def _begin_scope(self, **predefined):
		self._scopes.append(dict(predefined))

	def _end_scope(self):
		self._scopes.pop()

	def _declare(self, name:Token):
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.text in scope:
			self.report.error(name, "Already a variable with this name in this scope.")
		scope[name.text] = False

	def _define(self, name:Token):
		if self._scopes: self._scopes[-1][name.text] = True
		else: self._globals.add(name.text)

	def _resolve_local(self, expr:Expr, name:Token):
		for depth, scope in enumerate(reversed(self._scopes)):
			if name.text in scope:
				self.bindings[expr.serial] = depth
				return
		# Not found. Assume it is global.

	def _resolve_function(self, function:syntax.Function, kind:FunctionType):
		enclosing_function = self._current_function
		self._current_function = kind
		self._begin_scope()
		for param in function.params:
			self._declare(param)
			self._define(param)
		self.tour(function.body)
		self._end_scope()
		self._current_function = enclosing_function

	############################################################
	# Statements

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.tour(stmt.body)
		self._end_scope()

	def visit_Class(self, stmt:syntax.Class):
		enclosing_class = self._current_class
		self._current_class = ClassType.CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		superclass = stmt.superclass
		if superclass is not None:
			if superclass.name.text == stmt.name.text:
				self.report.error(superclass.name, "A class can't inherit from itself.")
			self._current_class = ClassType.SUBCLASS
			self.visit(superclass)
			self._begin_scope(super=True)

		self._begin_scope(this=True)
		for method in stmt.methods:
			kind = FunctionType.INITIALIZER if method.name.text == "init" else FunctionType.METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if superclass is not None: self._end_scope()
		self._current_class = enclosing_class

	def visit_ExprStmt(self, stmt:syntax.ExprStmt):
		self.visit(stmt.expr)

	def visit_Function(self, stmt:syntax.Function):
		# Define eagerly, so the function may refer to itself recursively.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FunctionType.FUNCTION)

	def visit_If(self, stmt:syntax.If):
		self.visit(stmt.condition)
		self.visit(stmt.then_part)
		if stmt.else_part is not None: self.visit(stmt.else_part)

	def visit_Print(self, stmt:syntax.Print):
		self.visit(stmt.expr)

	def visit_Return(self, stmt:syntax.Return):
		if self._current_function is FunctionType.NONE:
			self.report.error(stmt.keyword, "Can't return from top-level code.")
		if stmt.value is not None:
			if self._current_function is FunctionType.INITIALIZER:
				self.report.error(stmt.keyword, "Can't return a value from an initializer.")
			self.visit(stmt.value)

	def visit_Var(self, stmt:syntax.Var):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			if self._scopes or stmt.name.text in self._globals:
				self.visit(stmt.initializer)
			else:
				# A brand-new global cannot usefully refer to itself, either.
				self._initializing = stmt.name.text
				self.visit(stmt.initializer)
				self._initializing = None
		self._define(stmt.name)

	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.condition)
		self.visit(stmt.body)

	############################################################
	# Expressions

	def visit_Variable(self, expr:syntax.Variable):
		name = expr.name.text
		if self._scopes and self._scopes[-1].get(name) is False:
			self.report.error(expr.name, "Can't read local variable in its own initializer.")
		elif name == self._initializing and not any(name in scope for scope in self._scopes):
			self.report.error(expr.name, "Can't read local variable in its own initializer.")
		self._resolve_local(expr, expr.name)

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name)

	def visit_Binary(self, expr:syntax.Binary):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_Logical(self, expr:syntax.Logical):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		self.tour(expr.args)

	def visit_Get(self, expr:syntax.Get):
		# Properties are looked up dynamically; only the object needs resolving.
		self.visit(expr.lhs)

	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.lhs)

	def visit_Grouping(self, expr:syntax.Grouping):
		self.visit(expr.expr)

	def visit_Literal(self, expr:syntax.Literal):
		pass

	def visit_Unary(self, expr:syntax.Unary):
		self.visit(expr.arg)

	def visit_Super(self, expr:syntax.Super):
		if self._current_class is ClassType.NONE:
			self.report.error(expr.keyword, "Can't use 'super' outside of a class.")
		elif self._current_class is not ClassType.SUBCLASS:
			self.report.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
		self._resolve_local(expr, expr.keyword)

	def visit_This(self, expr:syntax.This):
		if self._current_class is ClassType.NONE:
			self.report.error(expr.keyword, "Can't use 'this' outside of a class.")
			return
		self._resolve_local(expr, expr.keyword)

for _kind in syntax.EXPRESSIONS + syntax.STATEMENTS:
	assert hasattr(Resolver, "visit_" + _kind.__name__), _kind

def resolve(statements:Iterable[Stmt], report:Report, known_globals:Iterable[str]=()) -> BindingTable:
	""" Check report.sick() afterwards before trying to run anything. """
	return Resolver(report, known_globals).resolve(statements)
