"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid various circular-import
scenarios. The scanner, parser, resolver, and run-time all
speak in terms of tokens, and the run-time complains in terms
of tokens too.
"""
from typing import NamedTuple, Any

END = "<END>"
STACK_OVERFLOW = "Stack overflow."

class Token(NamedTuple):
	"""
	Kinds are plain strings: Punctuation and operators are their own kind,
	reserved words are upper-cased (e.g. "CLASS"), and otherwise we have
	"name", "number", "string", and the end-of-input marker.
	"""
	kind: str
	text: str
	literal: Any
	line: int
	spot: int = 0  # Character offset of the lexeme, for illustrations.

	def __str__(self): return "%s %r %r" % (self.kind, self.text, self.literal)
	def is_end(self) -> bool: return self.kind == END
	def where(self) -> str:
		""" The location-context that goes into a static error message. """
		return " at end" if self.is_end() else " at '%s'" % self.text

def synthetic(kind:str, text:str, line:int) -> Token:
	return Token(kind, text, None, line)

class Phrase:
	""" Root for all syntax-tree nodes """
	def head(self) -> Token:
		""" Return the token most representative of this phrase, for complaints """
		raise NotImplementedError(type(self))

class Expr(Phrase):
	"""
	Every expression gets a serial number at parse time.
	The resolver's binding table is keyed on that number,
	so structurally-identical nodes stay distinct.
	"""
	serial: int = 0

class Stmt(Phrase): pass

class RuntimeFault(Exception):
	""" The one and only kind of error a running program can provoke. """
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message

	@property
	def line(self) -> int: return self.token.line
