"""
The set of parse-nodes in simple form.
The parser calls these constructors directly as it descends.
The set is closed: Each later pass keeps one handler per class,
and checks at import time that it has not missed any.
Class-level type annotations make peace with pycharm.
"""
from typing import Any, Optional, Sequence
from .ontology import Token, Expr, Stmt

###############################################################################
# Expressions

class Literal(Expr):
	def __init__(self, value: Any, token: Token):
		self.value, self._token = value, token
	def __str__(self): return "<Literal %r>" % self.value
	def head(self): return self._token

class Grouping(Expr):
	def __init__(self, expr: Expr): self.expr = expr
	def head(self): return self.expr.head()

class Unary(Expr):
	def __init__(self, op: Token, arg: Expr):
		self.op, self.arg = op, arg
	def head(self): return self.op

class Binary(Expr):
	def __init__(self, lhs: Expr, op: Token, rhs: Expr):
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def __str__(self): return "(%s %s %s)" % (self.lhs, self.op.text, self.rhs)
	def head(self): return self.op

class Logical(Binary):
	""" Short-circuit "and" / "or". Yields the deciding operand. """
	pass

class Variable(Expr):
	def __init__(self, name: Token): self.name = name
	def __str__(self): return "<ref:%s>" % self.name.text
	def head(self): return self.name

class Assign(Expr):
	def __init__(self, name: Token, value: Expr):
		self.name, self.value = name, value
	def head(self): return self.name

class Call(Expr):
	def __init__(self, callee: Expr, paren: Token, args: Sequence[Expr]):
		self.callee, self.paren, self.args = callee, paren, args
	def __str__(self): return "%s(%s)" % (self.callee, ', '.join(map(str, self.args)))
	def head(self): return self.paren

class Get(Expr):
	def __init__(self, lhs: Expr, name: Token):
		self.lhs, self.name = lhs, name
	def __str__(self): return "(%s.%s)" % (self.lhs, self.name.text)
	def head(self): return self.name

class Set(Expr):
	def __init__(self, lhs: Expr, name: Token, value: Expr):
		self.lhs, self.name, self.value = lhs, name, value
	def head(self): return self.name

class This(Expr):
	def __init__(self, keyword: Token): self.keyword = keyword
	def __str__(self): return "<this>"
	def head(self): return self.keyword

class Super(Expr):
	def __init__(self, keyword: Token, method: Token):
		self.keyword, self.method = keyword, method
	def __str__(self): return "<super.%s>" % self.method.text
	def head(self): return self.keyword

###############################################################################
# Statements

class ExprStmt(Stmt):
	def __init__(self, expr: Expr): self.expr = expr
	def head(self): return self.expr.head()

class Print(Stmt):
	def __init__(self, keyword: Token, expr: Expr):
		self.keyword, self.expr = keyword, expr
	def head(self): return self.keyword

class Var(Stmt):
	def __init__(self, name: Token, initializer: Optional[Expr]):
		self.name, self.initializer = name, initializer
	def head(self): return self.name

class Block(Stmt):
	""" The opener is the brace, or the "for" keyword of a desugared loop. """
	def __init__(self, opener: Token, body: Sequence[Stmt]):
		self.opener, self.body = opener, body
	def head(self): return self.opener

class If(Stmt):
	def __init__(self, keyword: Token, condition: Expr, then_part: Stmt, else_part: Optional[Stmt]):
		self.keyword = keyword
		self.condition, self.then_part, self.else_part = condition, then_part, else_part
	def head(self): return self.keyword

class While(Stmt):
	def __init__(self, keyword: Token, condition: Expr, body: Stmt):
		self.keyword, self.condition, self.body = keyword, condition, body
	def head(self): return self.keyword

class Function(Stmt):
	""" Both free functions and methods. """
	def __init__(self, name: Token, params: Sequence[Token], body: Sequence[Stmt]):
		self.name, self.params, self.body = name, params, body
	def __repr__(self):
		return "{fn|%s(%s)}" % (self.name.text, ", ".join(p.text for p in self.params))
	def head(self): return self.name

class Return(Stmt):
	def __init__(self, keyword: Token, value: Optional[Expr]):
		self.keyword, self.value = keyword, value
	def head(self): return self.keyword

class Class(Stmt):
	def __init__(self, name: Token, superclass: Optional[Variable], methods: Sequence[Function]):
		self.name, self.superclass, self.methods = name, superclass, methods
	def __repr__(self): return "{class|%s}" % self.name.text
	def head(self): return self.name

EXPRESSIONS = (Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call, Get, Set, This, Super)
STATEMENTS = (ExprStmt, Print, Var, Block, If, While, Function, Return, Class)
