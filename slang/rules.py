"""
The semantic objects of compiled macros: pattern elements, template elements, rules, and rule-sets.

Pattern and template elements are each a small closed family of NamedTuples.
Code that consumes them dispatches on type and treats anything else as a bug.

A RuleSet also carries a prefix tree over the rules' pattern slots, so that
the matcher can consider every rule at once without trying each in turn.
The tree is built only after the compiler has established that no rule's
pattern is a prefix of another's; given that, each node has at most one
rule, and a node with a rule has no children.
"""

from typing import NamedTuple, Optional, Union, Mapping
from .interface import Token

### Pattern elements:
class Literal(NamedTuple):
	""" Matches one token with exactly this text. """
	text: str

class Variable(NamedTuple):
	""" Captures any one token. """
	name: str

class Block(NamedTuple):
	""" Captures a balanced span, from an `opener` to its matching `closer`, exclusive. """
	name: str
	opener: str
	closer: str

PatternElement = Union[Literal, Variable, Block]

### Template elements:
class Verbatim(NamedTuple):
	""" Emit this token as-is. """
	token: Token

class VariableRef(NamedTuple):
	""" Emit the token captured as `name`, followed by `space`. """
	name: str
	space: str

class BlockRef(NamedTuple):
	""" Emit the fully-expanded span captured as `name`, followed by `space`. """
	name: str
	space: str

TemplateElement = Union[Verbatim, VariableRef, BlockRef]


class Rule(NamedTuple):
	"""
	pattern, template: as above.
	captures: a read-only map from each placeholder name to its slot-number in the pattern.
	origin: the `#define` token which began this rule.
	source: typically the name of the file the rule came from.
	"""
	pattern: tuple
	template: tuple
	captures: Mapping[str, int]
	origin: Token
	source: Optional[str] = None

	def whereabouts(self) -> str:
		place = 'line %d'%self.origin.line
		return place if self.source is None else '%s %s'%(self.source, place)

	def describe(self) -> str:
		""" Approximately the text of the pattern, for messages and diagnostics. """
		words = []
		for element in self.pattern:
			if isinstance(element, Literal): words.append(element.text)
			elif isinstance(element, Variable): words.append('$'+element.name)
			elif isinstance(element, Block): words.append('%s $%s %s'%(element.opener, element.name, element.closer))
			else: assert False, type(element)
		return ' '.join(words)


class PrefixNode:
	""" A node in the prefix tree. `rule` is the rule whose pattern ends here, if any. """
	def __init__(self):
		self.literal : dict[str, PrefixNode] = {}
		self.block : dict[str, PrefixNode] = {}
		self.variable : Optional[PrefixNode] = None
		self.rule : Optional[Rule] = None

	def child(self, element:PatternElement) -> "PrefixNode":
		""" Find or create the child reached by a given pattern slot. """
		if isinstance(element, Literal):
			return self.literal.setdefault(element.text, PrefixNode())
		elif isinstance(element, Variable):
			if self.variable is None: self.variable = PrefixNode()
			return self.variable
		elif isinstance(element, Block):
			return self.block.setdefault(element.opener, PrefixNode())
		else: assert False, type(element)

	def is_leaf(self) -> bool:
		return not (self.literal or self.block or self.variable)


class RuleSet:
	"""
	An ordered collection of compiled rules, plus the prefix tree that indexes them.
	Do not build one directly: the compiler is responsible for checking that
	the rules are prefix-free before it gets this far.
	Treat it as read-only; the same RuleSet may serve any number of expansions.
	"""
	def __init__(self, rules):
		self.rules = tuple(rules)
		self.root = PrefixNode()
		for rule in self.rules:
			node = self.root
			for element in rule.pattern: node = node.child(element)
			assert node.rule is None and node.is_leaf(), rule
			node.rule = rule

	def __len__(self): return len(self.rules)
	def __iter__(self): return iter(self.rules)
	def __eq__(self, other): return isinstance(other, RuleSet) and self.rules == other.rules
	def __hash__(self): return hash(tuple(r.pattern for r in self.rules))

