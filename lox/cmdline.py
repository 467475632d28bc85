"""
This is an interpreter for the Lox programming language.

For example:

    lox program.lox

will run program.lox if possible, or else try to explain why not.

    lox

with no program starts an interactive prompt. End it with end-of-file.

    lox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

parser = argparse.ArgumentParser(
	prog="lox",
	description="Interpreter for the Lox programming language.",
	epilog="Exit status: 65 for a static error, 70 for a run-time error.",
)
parser.add_argument("program", nargs="?", help="a .lox script to run; omit for a prompt.")
parser.add_argument('-c', "--check", action="store_true", help="Scan, parse, and resolve the program, but do not actually execute it.")
parser.add_argument('-s', "--scan", action="store_true", help="Print the token stream and stop.")
parser.add_argument('-v', "--verbose", action="count", help="Say more about what is happening.")

def run(args) -> int:
	from .diagnostics import Report
	report = Report(verbose=args.verbose)
	if args.program is None:
		return prompt(report)
	path = Path.cwd() / args.program
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except OSError as ex:
		print("Error reading file: %s" % ex, file=sys.stderr)
		return EX_NOINPUT
	if args.scan:
		return dump_tokens(text, report)
	from .executive import Session
	from .diagnostics import Yuck
	session = Session(report)
	if args.check:
		try: session.check(text, path)
		except Yuck:
			report.complain_to_console()
			return EX_DATAERR
		print("Looks plausible to me.", file=sys.stderr)
		return 0
	session.run(text, path)
	report.complain_to_console()
	if report.sick(): return EX_DATAERR
	if report.had_runtime_error: return EX_SOFTWARE
	return 0

def dump_tokens(text:str, report) -> int:
	from .scanner import scan
	report.set_source(text)
	for token in scan(text, report):
		print(token)
	report.complain_to_console()
	return EX_DATAERR if report.sick() else 0

def prompt(report) -> int:
	""" Each line runs in the same session, so definitions persist. Errors do not. """
	from .executive import Session
	session = Session(report)
	while True:
		try: line = input("> ")
		except EOFError:
			print()
			return 0
		session.run(line)
		report.complain_to_console()
		report.reset()

def main():
	exit(run(parser.parse_args()))
