"""
Carve text into tokens, and paste tokens back into text.

The macro engine proper works on token sequences, so all it really needs
from the tokenizer is that the interesting boundaries fall where a person
would expect. Delimiters are always tokens on their own, because block
captures depend on them. A `$` or `#` directly in front of a name sticks
to it, so `$cond` and `#define` come through as single tokens.

Each token keeps the whitespace that followed it. That makes `render` the
inverse of `tokenize`, apart from any whitespace before the very first
token, and it is also what allows a macro expansion to come out looking
like something a person wrote.
"""

import re
from typing import Iterable
from .interface import Token, NAME, NUMBER, STRING, OPEN, CLOSE, SYMBOL, DELIMITERS, CLOSERS

LEXEME = re.compile(r'''
	(?P<name>[$#]?[A-Za-z_][A-Za-z0-9_]*)
	|(?P<number>[0-9][A-Za-z0-9_.]*)
	|(?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
	|(?P<delimiter>[][(){}])
	|(?P<symbol>[;,]|[-+*/%=<>!&|^~?:.@\\]+|\S)
''', re.VERBOSE)
WHITESPACE = re.compile(r'\s*')
LINE_BREAK = re.compile(r'\r\n?|\n') # As in failureprone.LINEBREAK_MODE['normal']

def _kind(m) -> str:
	if m.lastgroup == 'delimiter':
		text = m.group()
		if text in DELIMITERS: return OPEN
		assert text in CLOSERS, text
		return CLOSE
	return {'name': NAME, 'number': NUMBER, 'string': STRING, 'symbol': SYMBOL}[m.lastgroup]

def tokenize(text:str) -> list[Token]:
	tokens = []
	line = 1
	cursor = WHITESPACE.match(text).end()
	line += count_line_breaks(text[:cursor])
	while cursor < len(text):
		m = LEXEME.match(text, cursor)
		gap = WHITESPACE.match(text, m.end())
		tokens.append(Token(_kind(m), m.group(), gap.group(), cursor, line))
		line += count_line_breaks(gap.group())
		cursor = gap.end()
	return tokens

def render(tokens:Iterable[Token]) -> str:
	return ''.join(t.text + t.space for t in tokens)

def count_line_breaks(space:str) -> int:
	return len(LINE_BREAK.findall(space))
