"""
The scanner is a miniscan definition: a handful of patterns, each hooked to an action.
Longest match wins; among equals, the earlier rule wins. So the catch-all rule at the
bottom only sees characters nothing else wants. It never gives up: Bad characters get
reported and skipped.
"""
import sys
from boozetools.scanning import miniscan
from boozetools.scanning.engine import IterableScanner
from .ontology import Token, END
from .diagnostics import Report

RESERVED = frozenset("""
	and class else false for fun if nil or print return super this true var while
""".split())

LEX = miniscan.Definition("Lox")
LEX.ignore(r'[\t\r\x20]+')
LEX.ignore(r'\/\/.*')

@LEX.on(r'\n')
def _newline(yy:"LoxScanner"): yy.line += 1

@LEX.on(r'[\(\)\{\}\,\.\-\+\;\*\/]')
def _punctuation(yy:"LoxScanner"): yy.emit(yy.match())

@LEX.on(r'[\!\=\<\>]\=?')
def _operator(yy:"LoxScanner"): yy.emit(yy.match())

@LEX.on(r'"[^"]*"')
def _string(yy:"LoxScanner"):
	text = yy.match()
	yy.line += text.count("\n")
	yy.emit("string", text[1:-1])

@LEX.on(r'"[^"]*')
def _unterminated_string(yy:"LoxScanner"):
	# Only ever matches when the closing quote never comes.
	yy.line += yy.match().count("\n")
	yy.report.error_at_line(yy.line, "Unterminated string.", yy.left)

@LEX.on(r'\d+(\.\d+)?')
def _number(yy:"LoxScanner"): yy.emit("number", float(yy.match()))

@LEX.on(r'[_\l][_\l\d]*')
def _word(yy:"LoxScanner"):
	text = yy.match()
	yy.emit(text.upper() if text in RESERVED else "name")

@LEX.on(r'{ANY}')
def _unexpected(yy:"LoxScanner"):
	yy.report.error_at_line(yy.line, "Unexpected character.", yy.left)

class LoxScanner(IterableScanner):
	""" Iterating yields (kind, Token) pairs. The scan actions keep track of the line number. """
	def __init__(self, source:str, report:Report):
		super().__init__(source, LEX.get_dfa(), LEX, start=None)
		self.report = report
		self.line = 1

	def emit(self, kind:str, literal=None):
		self.token(kind, Token(sys.intern(kind), self.match(), literal, self.line, self.left))

def scan(source:str, report:Report) -> list[Token]:
	""" Convert source text into a list of tokens, always ending with exactly one <END> token. """
	yy = LoxScanner(source, report)
	tokens = [token for kind, token in yy]
	tokens.append(Token(END, "", None, yy.line, len(source)))
	return tokens
