"""
A tree-walking interpreter for Lox: scanner, parser, resolver, and evaluator.
"""
