import sys, random
from pathlib import Path
from typing import Optional, Sequence
from boozetools.support.failureprone import SourceText, illustration

from .ontology import Token, RuntimeFault

class Yuck(Exception):
	"""
	The first argument will be the name of the phase fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Hmm. ", "", ""]

	minced_oaths = [
		'Blast', 'Bother', 'Confound it', 'Crumbs', 'Darn', 'Drat',
		'Fiddlesticks', 'Gadzooks', 'Good Grief', 'Great Scott', 'Heavens',
		'Jeepers', 'Nuts', 'Phooey', 'Rats', 'Shucks', 'Zounds',
	]

	resignations = [
		'That did not go as planned.',
		'I cannot make sense of this.',
		'Something is amiss.',
		'Here is what went wrong.',
		'Best to look this over.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	"""
	Collects complaints from every phase of the pipeline.

	There are two sinks, one for static errors (scanning, parsing, resolution)
	and one for run-time errors. Callers poll ok()/sick() for the former and
	had_runtime_error for the latter. Nothing goes to the console until
	someone asks for complain_to_console().
	"""
	_issues : list["Pic"]
	_faults : list["Pic"]

	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._faults = []
		self._source = SourceText("")
		self._text = ""
		self._path = None

	def set_source(self, text:str, path:Optional[Path]=None):
		""" Subsequent illustrations draw upon this text. """
		self._source = SourceText(text, filename=str(path) if path else None)
		self._text = text
		self._path = path

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def had_runtime_error(self) -> bool: return bool(self._faults)

	def issue(self, it:"Pic"):
		self._issues.append(it)

	def messages(self) -> list[str]:
		""" The one-line summary of every complaint so far, in order. """
		return [i.intro for i in self._issues + self._faults]

	def reset(self):
		self._issues.clear()
		self._faults.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def _annotate(self, spot:Optional[int], width:int) -> list["Annotation"]:
		if spot is None or not self._text.strip(): return []
		spot = min(spot, len(self._text.rstrip()) - 1)
		return [Annotation(self._source, max(spot, 0), width)]

	# The static sink:

	def static_error(self, line:int, where:str, message:str, spot:Optional[int]=None, width:int=1):
		intro = "[line %d] Error%s: %s" % (line, where, message)
		self.issue(Pic(intro, self._annotate(spot, width)))

	def error(self, token:Token, message:str):
		""" Parser and resolver complain about a specific token. """
		assert isinstance(token, Token), token
		self.static_error(token.line, token.where(), message, token.spot, len(token.text))

	def error_at_line(self, line:int, message:str, spot:Optional[int]=None):
		""" The scanner has no token yet, only a position. """
		self.static_error(line, "", message, spot)

	# The run-time sink:

	def runtime_error(self, fault:RuntimeFault):
		token = fault.token
		intro = "%s\n[line %d]" % (fault.message, token.line)
		self._faults.append(Pic(intro, self._annotate(token.spot, len(token.text))))

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues + self._faults)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues or self._faults:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

class Annotation:
	caption: str
	def __init__(self, source:SourceText, spot:int, width:int=1, caption:str=""):
		self.source = source
		self.spot = spot
		self.width = max(width, 1)
		self.caption = caption
	def illustrate(self):
		row, col = self.source.find_row_col(self.spot)
		single_line = self.source.line_of_text(row)
		return illustration(single_line, col, self.width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:Sequence[Annotation], footer=()):
		self.intro, self._anns, self._footer = intro, list(anns), footer
	def as_text(self):
		lines = [self.intro]
		for ann in self._anns:
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
