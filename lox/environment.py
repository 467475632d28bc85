"""
Environments are linked scope frames, searched innermost-first.

Closures and bound methods hold references to frames, so frames
are shared and live as long as their longest holder. A write through
any holder is visible to every other holder; closures depend on this.
"""
from typing import Any, Optional
from .ontology import Token, RuntimeFault

class Environment:
	_bindings: dict[str, Any]
	enclosing: Optional["Environment"]

	def __init__(self, enclosing:Optional["Environment"]=None):
		self._bindings = {}
		self.enclosing = enclosing

	def __contains__(self, name:str) -> bool: return name in self._bindings
	def names(self): return self._bindings.keys()

	def define(self, name:str, value:Any):
		""" Always goes in this very frame; redefinition is fine. """
		self._bindings[name] = value

	def get(self, name:Token) -> Any:
		frame = self
		while frame is not None:
			if name.text in frame._bindings:
				return frame._bindings[name.text]
			frame = frame.enclosing
		raise _undefined(name)

	def assign(self, name:Token, value:Any):
		frame = self
		while frame is not None:
			if name.text in frame._bindings:
				frame._bindings[name.text] = value
				return
			frame = frame.enclosing
		raise _undefined(name)

	def ancestor(self, distance:int) -> "Environment":
		frame = self
		for _ in range(distance):
			frame = frame.enclosing
		return frame

	# The resolver guarantees these names exist at these distances:
	def get_at(self, distance:int, name:str) -> Any:
		return self.ancestor(distance)._bindings[name]

	def assign_at(self, distance:int, name:str, value:Any):
		self.ancestor(distance)._bindings[name] = value

def _undefined(name:Token) -> RuntimeFault:
	return RuntimeFault(name, "Undefined variable '%s'." % name.text)
