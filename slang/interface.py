"""
This file aggregates the token type and the exception types which Slang deals in.

Everything here is about token sequences. Characters only matter to the tokenizer
(and to error display), so by the time anything in this file is involved, the text
has already been carved into tokens, each of which remembers where it came from.
"""

from typing import NamedTuple, Optional

NAME = 'name'
NUMBER = 'number'
STRING = 'string'
OPEN = 'open'
CLOSE = 'close'
SYMBOL = 'symbol'

DELIMITERS = {'(': ')', '[': ']', '{': '}'}
CLOSERS = {closer:opener for opener, closer in DELIMITERS.items()}

PLACEHOLDER_SIGIL = '$'
DEFINE = '#define'
END = '#end'

class Token(NamedTuple):
	"""
	kind: one of the constants above.
	text: exactly what matched.
	space: the whitespace which followed the token in its original text.
	offset, line: where the token came from, for the benefit of error messages.
	"""
	kind: str
	text: str
	space: str = ''
	offset: int = 0
	line: int = 1

	def is_placeholder(self) -> bool:
		return self.kind == NAME and self.text.startswith(PLACEHOLDER_SIGIL)

	def placeholder_name(self) -> str:
		assert self.is_placeholder(), self
		return self.text[len(PLACEHOLDER_SIGIL):]

	def slice(self) -> slice:
		return slice(self.offset, self.offset+len(self.text))


class SlangError(ValueError):
	"""
	Base class of all exceptions arising from the macro machinery.
	Subclasses say what went wrong (`description`) and where (`evidence`);
	the error-display machinery in `failureprone` takes it from there.
	"""
	phase = 'processing'

	def description(self) -> str:
		raise NotImplementedError(type(self))

	def evidence(self) -> dict:
		""" Return a dictionary from source-key to a list of (token, caption) pairs. """
		return {}

	def __str__(self):
		return self.description()


class CompileError(SlangError):
	""" Something is wrong with the macro definitions. No RuleSet results. """
	phase = 'compiling macros'

class MalformedPattern(CompileError):
	def __init__(self, source:Optional[str], token:Token, message:str):
		super().__init__(source, token, message)
		self.source, self.token, self.message = source, token, message

	def description(self) -> str:
		return 'At line %d: %s'%(self.token.line, self.message)

	def evidence(self) -> dict:
		return {self.source: [(self.token, 'here')]}

class UnknownCapture(CompileError):
	def __init__(self, rule, token:Token):
		super().__init__(rule, token)
		self.rule, self.token = rule, token

	def description(self) -> str:
		return 'At line %d: Template mentions %r, which the pattern does not capture.'%(self.token.line, self.token.text)

	def evidence(self) -> dict:
		return {self.rule.source: [(self.token, 'unknown')]}

class AmbiguousPrefix(CompileError):
	"""
	Two rules could both match at the same position.
	`shorter` is the one whose pattern is a prefix of the `longer`.
	"""
	def __init__(self, shorter, longer):
		super().__init__(shorter, longer)
		self.shorter, self.longer = shorter, longer

	def description(self) -> str:
		return 'The macro at %s is ambiguous with the macro at %s.'%(self.shorter.whereabouts(), self.longer.whereabouts())

	def evidence(self) -> dict:
		evidence = {}
		for rule, caption in [(self.shorter, 'this'), (self.longer, 'conflicts with this')]:
			evidence.setdefault(rule.source, []).append((rule.origin, caption))
		return evidence


class ExpansionError(SlangError):
	""" Expansion of a particular input failed. Partial output is discarded. """
	phase = 'expanding'

class UnbalancedInputDelimiter(ExpansionError):
	def __init__(self, rule, token:Token):
		super().__init__(rule, token)
		self.rule, self.token = rule, token

	def description(self) -> str:
		return 'At line %d: %r is never closed, but the macro at %s needs it to be.'%(self.token.line, self.token.text, self.rule.whereabouts())

	def evidence(self) -> dict:
		return {None: [(self.token, 'opens here')]}

class RecursionLimitExceeded(ExpansionError):
	"""
	`token` is where the runaway expansion was happening.
	`what` says which limit was hit, and `limit` gives its value.
	"""
	def __init__(self, rule, token:Token, what:str, limit:int):
		super().__init__(rule, token, what, limit)
		self.rule, self.token, self.what, self.limit = rule, token, what, limit

	def description(self) -> str:
		return 'At line %d: %s exceeded the limit of %d, most recently by the macro at %s.'%(
			self.token.line, self.what, self.limit, self.rule.whereabouts()
		)

	def evidence(self) -> dict:
		return {None: [(self.token, 'near here')]}
