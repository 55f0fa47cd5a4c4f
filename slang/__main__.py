"""
Slang: a macro expander for simple language abstractions.

Reads macro definitions from one or more files, then expands those macros
throughout the input (a file, or standard input) and writes the result
(to a file, or standard output).
"""

import sys, os, argparse

from slang import expansion
from slang.compiler import compile_files
from slang.expansion import expand
from slang.interface import SlangError
from slang.tokenizer import tokenize, render
from slang.failureprone import Issue, SourceText

def parse_arguments(argv=None):
	parser = argparse.ArgumentParser(prog='py -m slang', description=__doc__,)
	parser.add_argument('macro_files', nargs='+', metavar='MACROFILE', help='macro definition files')
	parser.add_argument('-i', '--input', help='the file to macro-expand; standard input by default')
	parser.add_argument('-o', '--output', help='where to write the expanded text; standard output by default')
	parser.add_argument('-f', '--force', action='store_true', dest='force', help='allow to write over existing file')
	parser.add_argument('--max-depth', type=int, default=expansion.MAX_DEPTH, help='how deeply captured blocks may nest during expansion')
	parser.add_argument('--max-rewrites', type=int, default=expansion.MAX_REWRITES, help='how many times in a row one position may be rewritten')
	parser.add_argument('-v', '--verbose', action='store_true', help="Squawk about each expansion as it happens.")
	return parser.parse_args(argv)

def main(args):
	if args.verbose: expansion.VERBOSE = True
	if args.output and os.path.exists(args.output) and not args.force:
		print('Target file already exists and --force command-line argument was not given.', file=sys.stderr)
		sys.exit(1)
	sources = {}
	def keep(key, path, text): sources[key] = SourceText(text, filename=path)
	try:
		rule_set = compile_files(args.macro_files, on_read=keep)
		if args.input:
			with open(args.input) as fh: text = fh.read()
		else:
			text = sys.stdin.read()
		sources[None] = SourceText(text, filename=args.input)
		result = render(expand(rule_set, tokenize(text), max_depth=args.max_depth, max_rewrites=args.max_rewrites))
	except OSError as e:
		print(e, file=sys.stderr)
		sys.exit(1)
	except SlangError as e:
		Issue.from_error(e).emit(sources.get)
		sys.exit(1)
	if args.output:
		with open(args.output, 'w') as fh: fh.write(result)
	else:
		sys.stdout.write(result)

if __name__ == '__main__': main(parse_arguments())
