"""
Recursive-descent parser. One token of lookahead; precedence by nested rules.

On a syntax error within a declaration, the parser reports it,
skips ahead to a plausible statement boundary, and carries on.
That way a single pass can find several independent mistakes.
"""
from itertools import count
from typing import Optional
from . import syntax
from .ontology import Token, Expr, Stmt, END, STACK_OVERFLOW, synthetic
from .diagnostics import Report
from .scanner import scan

MAX_ARGS = 255

class LoxParseError(Exception):
	""" Internal signal to abandon the current declaration and synchronize. """
	pass

STATEMENT_STARTERS = frozenset(["CLASS", "FUN", "VAR", "FOR", "IF", "WHILE", "PRINT", "RETURN"])

EQUALITY = ("!=", "==")
COMPARISON = (">", ">=", "<", "<=")
TERM = ("-", "+")
FACTOR = ("/", "*")
UNARY = ("!", "-")

class Parser:
	def __init__(self, tokens:list[Token], report:Report, serial=None):
		assert tokens and tokens[-1].is_end()
		self._tokens = tokens
		self._report = report
		self._current = 0
		self._serial = serial or count(1)

	def parse(self) -> list[Stmt]:
		statements = []
		try:
			while not self._at_end():
				stmt = self._declaration()
				if stmt is not None: statements.append(stmt)
		except RecursionError:
			# Nesting ran deeper than Python's stack. No sensible way to resynchronize.
			self._report.error(self._peek(), STACK_OVERFLOW)
		return statements

	def _expr(self, node:Expr) -> Expr:
		node.serial = next(self._serial)
		return node

	############################################################
	# Declarations and statements

	def _declaration(self) -> Optional[Stmt]:
		try:
			if self._match("CLASS"): return self._class_declaration()
			if self._match("FUN"): return self._function("function")
			if self._match("VAR"): return self._var_declaration()
			return self._statement()
		except LoxParseError:
			self._synchronize()
			return None

	def _class_declaration(self) -> syntax.Class:
		name = self._consume("name", "Expect class name.")
		superclass = None
		if self._match("<"):
			self._consume("name", "Expect superclass name.")
			superclass = self._expr(syntax.Variable(self._previous()))
		self._consume("{", "Expect '{' before class body.")
		methods = []
		while not self._check("}") and not self._at_end():
			methods.append(self._function("method"))
		self._consume("}", "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)

	def _function(self, kind:str) -> syntax.Function:
		name = self._consume("name", "Expect %s name." % kind)
		self._consume("(", "Expect '(' after %s name." % kind)
		params = []
		if not self._check(")"):
			while True:
				if len(params) >= MAX_ARGS:
					self._error(self._peek(), "Can't have more than %d parameters." % MAX_ARGS)
				params.append(self._consume("name", "Expect parameter name."))
				if not self._match(","): break
		self._consume(")", "Expect ')' after parameters.")
		self._consume("{", "Expect '{' before %s body." % kind)
		return syntax.Function(name, params, self._block())

	def _var_declaration(self) -> syntax.Var:
		name = self._consume("name", "Expect variable name.")
		initializer = self._expression() if self._match("=") else None
		self._consume(";", "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)

	def _statement(self) -> Stmt:
		if self._match("FOR"): return self._for_statement()
		if self._match("IF"): return self._if_statement()
		if self._match("PRINT"): return self._print_statement()
		if self._match("RETURN"): return self._return_statement()
		if self._match("WHILE"): return self._while_statement()
		if self._match("{"): return syntax.Block(self._previous(), self._block())
		return self._expression_statement()

	def _for_statement(self) -> Stmt:
		keyword = self._previous()
		self._consume("(", "Expect '(' after 'for'.")
		if self._match(";"): initializer = None
		elif self._match("VAR"): initializer = self._var_declaration()
		else: initializer = self._expression_statement()

		condition = None if self._check(";") else self._expression()
		self._consume(";", "Expect ';' after loop condition.")
		increment = None if self._check(")") else self._expression()
		self._consume(")", "Expect ')' after for clauses.")
		body = self._statement()

		# Desugar into a while-loop inside a block.
		if increment is not None:
			body = syntax.Block(keyword, [body, syntax.ExprStmt(increment)])
		if condition is None:
			condition = self._expr(syntax.Literal(True, synthetic("TRUE", "true", keyword.line)))
		body = syntax.While(keyword, condition, body)
		if initializer is not None:
			body = syntax.Block(keyword, [initializer, body])
		return body

	def _if_statement(self) -> syntax.If:
		keyword = self._previous()
		self._consume("(", "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(")", "Expect ')' after if condition.")
		then_part = self._statement()
		else_part = self._statement() if self._match("ELSE") else None
		return syntax.If(keyword, condition, then_part, else_part)

	def _print_statement(self) -> syntax.Print:
		keyword = self._previous()
		value = self._expression()
		self._consume(";", "Expect ';' after value.")
		return syntax.Print(keyword, value)

	def _return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check(";") else self._expression()
		self._consume(";", "Expect ';' after return value.")
		return syntax.Return(keyword, value)

	def _while_statement(self) -> syntax.While:
		keyword = self._previous()
		self._consume("(", "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(")", "Expect ')' after condition.")
		return syntax.While(keyword, condition, self._statement())

	def _block(self) -> list[Stmt]:
		statements = []
		while not self._check("}") and not self._at_end():
			stmt = self._declaration()
			if stmt is not None: statements.append(stmt)
		self._consume("}", "Expect '}' after block.")
		return statements

	def _expression_statement(self) -> syntax.ExprStmt:
		expr = self._expression()
		self._consume(";", "Expect ';' after expression.")
		return syntax.ExprStmt(expr)

	############################################################
	# Expressions, lowest precedence first

	def _expression(self) -> Expr:
		return self._assignment()

	def _assignment(self) -> Expr:
		expr = self._or()
		if self._match("="):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return self._expr(syntax.Assign(expr.name, value))
			if isinstance(expr, syntax.Get):
				return self._expr(syntax.Set(expr.lhs, expr.name, value))
			# Report, but there's no need to synchronize.
			self._error(equals, "Invalid assignment target.")
		return expr

	def _or(self) -> Expr:
		return self._left_fold(self._and, syntax.Logical, ("OR",))

	def _and(self) -> Expr:
		return self._left_fold(self._equality, syntax.Logical, ("AND",))

	def _equality(self) -> Expr:
		return self._left_fold(self._comparison, syntax.Binary, EQUALITY)

	def _comparison(self) -> Expr:
		return self._left_fold(self._term, syntax.Binary, COMPARISON)

	def _term(self) -> Expr:
		return self._left_fold(self._factor, syntax.Binary, TERM)

	def _factor(self) -> Expr:
		return self._left_fold(self._unary, syntax.Binary, FACTOR)

	def _left_fold(self, operand, ctor, kinds) -> Expr:
		expr = operand()
		while self._match(*kinds):
			op = self._previous()
			expr = self._expr(ctor(expr, op, operand()))
		return expr

	def _unary(self) -> Expr:
		if self._match(*UNARY):
			op = self._previous()
			return self._expr(syntax.Unary(op, self._unary()))
		return self._call()

	def _call(self) -> Expr:
		expr = self._primary()
		while True:
			if self._match("("):
				expr = self._finish_call(expr)
			elif self._match("."):
				name = self._consume("name", "Expect property name after '.'.")
				expr = self._expr(syntax.Get(expr, name))
			else:
				return expr

	def _finish_call(self, callee:Expr) -> Expr:
		args = []
		if not self._check(")"):
			while True:
				if len(args) >= MAX_ARGS:
					self._error(self._peek(), "Can't have more than %d arguments." % MAX_ARGS)
				args.append(self._expression())
				if not self._match(","): break
		paren = self._consume(")", "Expect ')' after arguments.")
		return self._expr(syntax.Call(callee, paren, args))

	def _primary(self) -> Expr:
		if self._match("FALSE"): return self._expr(syntax.Literal(False, self._previous()))
		if self._match("TRUE"): return self._expr(syntax.Literal(True, self._previous()))
		if self._match("NIL"): return self._expr(syntax.Literal(None, self._previous()))
		if self._match("number", "string"):
			token = self._previous()
			return self._expr(syntax.Literal(token.literal, token))
		if self._match("SUPER"):
			keyword = self._previous()
			self._consume(".", "Expect '.' after 'super'.")
			method = self._consume("name", "Expect superclass method name.")
			return self._expr(syntax.Super(keyword, method))
		if self._match("THIS"): return self._expr(syntax.This(self._previous()))
		if self._match("name"): return self._expr(syntax.Variable(self._previous()))
		if self._match("("):
			expr = self._expression()
			self._consume(")", "Expect ')' after expression.")
			return self._expr(syntax.Grouping(expr))
		raise self._error(self._peek(), "Expect expression.")

	############################################################
	# Token-stream plumbing

	def _match(self, *kinds:str) -> bool:
		if any(self._check(k) for k in kinds):
			self._advance()
			return True
		return False

	def _consume(self, kind:str, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _check(self, kind:str) -> bool:
		return not self._at_end() and self._peek().kind == kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _at_end(self) -> bool: return self._peek().kind == END
	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]

	def _error(self, token:Token, message:str) -> LoxParseError:
		self._report.error(token, message)
		return LoxParseError(token, message)

	def _synchronize(self):
		""" Discard tokens until we are probably at the start of the next statement. """
		self._advance()
		while not self._at_end():
			if self._previous().kind == ";": return
			if self._peek().kind in STATEMENT_STARTERS: return
			self._advance()

def parse(tokens:list[Token], report:Report, serial=None) -> list[Stmt]:
	return Parser(tokens, report, serial).parse()

def parse_text(text:str, report:Report, serial=None) -> list[Stmt]:
	""" Submit text to scanner and parser together. Check report.sick() before going further. """
	return parse(scan(text, report), report, serial)
