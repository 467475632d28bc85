"""
This is the overall control for running a program:
scan, parse, resolve, and only then interpret.
Any static complaint in a phase means the later phases do not happen.
"""
from itertools import count
from pathlib import Path
from typing import Optional
from .diagnostics import Report, Yuck
from .front_end import parse
from .scanner import scan
from .resolution import resolve
from .runtime import Interpreter

class Session:
	"""
	One interpreter, one global environment, any number of runs.
	The interactive prompt feeds it a line at a time;
	a script gets fed all at once.
	"""
	def __init__(self, report:Report, out=None):
		self.report = report
		self.interpreter = Interpreter(report, out)
		self._serial = count(1)

	def check(self, text:str, path:Optional[Path]=None):
		"""
		Run the static phases. Raise Yuck naming the first phase that complained.
		Returns the statements, with the binding table already handed to the interpreter.
		"""
		report = self.report
		report.set_source(text, path)
		tokens = scan(text, report)
		statements = parse(tokens, report, self._serial)
		if report.sick(): raise Yuck("parse")
		report.info("Parsed %d top-level statements." % len(statements))
		bindings = resolve(statements, report, self.interpreter.globals.names())
		if report.sick(): raise Yuck("resolve")
		report.info("Resolved %d local references." % len(bindings))
		self.interpreter.resolved(bindings)
		return statements

	def run(self, text:str, path:Optional[Path]=None):
		""" Run the pipeline end-to-end. Afterwards, poll the report to see how it went. """
		try: statements = self.check(text, path)
		except Yuck: return
		self.interpreter.interpret(statements)

def run(text:str, report:Report, out=None) -> Session:
	""" One-shot convenience: A fresh session runs the text once. """
	session = Session(report, out)
	session.run(text)
	return session
