"""
Build the primitive namespace: the native functions every program starts with.
"""
import time
from .values import Primitive
from .environment import Environment

def _clock():
	return time.time()

NATIVES = [
	Primitive("clock", 0, _clock),
]

def install_natives(globals_:Environment):
	for native in NATIVES:
		globals_.define(native.name, native)
