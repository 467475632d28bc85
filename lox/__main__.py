"""
Lets you say:

    py -m lox program.lox

and otherwise behaves just like the "lox" console script.
"""
from .cmdline import main

main()
