"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves: None is nil, and there are bool, float, and str.
Special things like closures, classes, and instances need more help.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, NamedTuple, Optional, Sequence, TYPE_CHECKING
from . import syntax
from .ontology import Token, RuntimeFault
from .environment import Environment

if TYPE_CHECKING:
	from .runtime import Interpreter

ARGS = Sequence[Any]

class Returned(NamedTuple):
	"""
	The outcome of executing a return statement. Statements otherwise
	produce None. It rides back up through blocks and loops to the
	nearest function call, which unwraps it. It is not an error.
	"""
	value: Any

class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """
	pass

class Function(LoxValue):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def arity(self) -> int: pass
	@abstractmethod
	def apply(self, interpreter:"Interpreter", args: ARGS) -> Any: pass

class Closure(Function):
	""" The run-time manifestation of a function declaration: a callable value tied to its natal environment. """
	def __init__(self, declaration:syntax.Function, closure:Environment, is_initializer:bool=False):
		self._declaration = declaration
		self._closure = closure
		self.is_initializer = is_initializer

	def __str__(self): return "<fn %s>" % self._declaration.name.text

	def arity(self) -> int: return len(self._declaration.params)

	def bind(self, instance:"Instance") -> "Closure":
		""" A fresh frame defining "this", just for this one instance. """
		frame = Environment(self._closure)
		frame.define("this", instance)
		return Closure(self._declaration, frame, self.is_initializer)

	def apply(self, interpreter:"Interpreter", args: ARGS) -> Any:
		frame = Environment(self._closure)
		for param, arg in zip(self._declaration.params, args):
			frame.define(param.text, arg)
		outcome = interpreter.execute_block(self._declaration.body, frame)
		if outcome is None: return None
		# An explicit (bare) return from an initializer yields the instance.
		if self.is_initializer: return self._closure.get_at(0, "this")
		return outcome.value

class Primitive(Function):
	""" A native function: host logic behind the same callable contract. """
	def __init__(self, name:str, arity:int, fn:Callable):
		self.name = name
		self._arity = arity
		self._fn = fn

	def __str__(self): return "<native fn>"
	def arity(self) -> int: return self._arity
	def apply(self, interpreter:"Interpreter", args: ARGS) -> Any:
		return self._fn(*args)

class ClassValue(Function):
	"""
	Calling a class makes an instance and runs its initializer, if any,
	on that instance. The result is always the instance, whatever the
	initializer itself might have said.
	"""
	def __init__(self, name:str, superclass:Optional["ClassValue"], methods:dict[str, Closure]):
		self.name = name
		self.superclass = superclass
		self._methods = methods

	def __str__(self): return self.name

	def find_method(self, name:str) -> Optional[Closure]:
		cls = self
		while cls is not None:
			if name in cls._methods: return cls._methods[name]
			cls = cls.superclass
		return None

	def arity(self) -> int:
		initializer = self.find_method("init")
		return 0 if initializer is None else initializer.arity()

	def apply(self, interpreter:"Interpreter", args: ARGS) -> "Instance":
		instance = Instance(self)
		initializer = self.find_method("init")
		if initializer is not None:
			initializer.bind(instance).apply(interpreter, args)
		return instance

class Instance(LoxValue):
	""" The class is fixed for life; the fields are anybody's business. """
	def __init__(self, cls:ClassValue):
		self.cls = cls
		self.fields = {}

	def __str__(self): return "%s instance" % self.cls.name

	def get(self, name:Token) -> Any:
		# Fields shadow methods.
		if name.text in self.fields:
			return self.fields[name.text]
		method = self.cls.find_method(name.text)
		if method is not None:
			return method.bind(self)
		raise RuntimeFault(name, "Undefined property '%s'." % name.text)

	def set(self, name:Token, value:Any):
		self.fields[name.text] = value
