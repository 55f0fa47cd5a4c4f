"""
Find the rule (if any) that matches at a given position in a token sequence.

The walk follows the RuleSet's prefix tree. A node may offer several ways forward:
the current token's own text, a block opened by the current token, or a variable
slot, which takes anything. These are tried in that order. The compiler guarantees
that at most one rule can succeed, so the first success is the only success.

Captured spans are recorded by slot position as the walk proceeds, because rules
sharing a path through the tree need not share placeholder names. Names are
attached once the walk arrives at a rule.
"""

from typing import NamedTuple, Optional, Sequence
from .interface import Token, OPEN, DELIMITERS, UnbalancedInputDelimiter
from .rules import Rule, RuleSet, PrefixNode, Literal


class Match(NamedTuple):
	rule: Rule
	bindings: dict
	size: int


def match(rule_set:RuleSet, tokens:Sequence[Token], position:int) -> Optional[Match]:
	""" Return a Match if some rule applies at `tokens[position]`, or else None. """
	spans = []
	found = _walk(rule_set.root, tokens, position, spans)
	if found is None: return None
	end, rule = found
	bindings = {
		element.name: span
		for element, span in zip(rule.pattern, spans)
		if not isinstance(element, Literal)
	}
	return Match(rule, bindings, end - position)


def _walk(node:PrefixNode, tokens:Sequence[Token], cursor:int, spans:list) -> Optional[tuple[int, Rule]]:
	"""
	Depth-first search from `node`, with the input at `cursor`.
	On success, returns the cursor just past the match along with the rule, and `spans` has
	one entry per pattern slot (None for literals). On failure, returns None
	and leaves `spans` as it was.
	"""
	if node.rule is not None: return cursor, node.rule
	if cursor >= len(tokens): return None
	token = tokens[cursor]
	if token.text in node.literal:
		spans.append(None)
		found = _walk(node.literal[token.text], tokens, cursor+1, spans)
		if found is not None: return found
		spans.pop()
	if token.kind == OPEN and token.text in node.block:
		child = node.block[token.text]
		close = find_closer(tokens, cursor)
		if close is None: raise UnbalancedInputDelimiter(any_rule_under(child), token)
		spans.append(tuple(tokens[cursor+1:close]))
		found = _walk(child, tokens, close+1, spans)
		if found is not None: return found
		spans.pop()
	if node.variable is not None:
		spans.append((token,))
		found = _walk(node.variable, tokens, cursor+1, spans)
		if found is not None: return found
		spans.pop()
	return None

def find_closer(tokens:Sequence[Token], cursor:int) -> Optional[int]:
	"""
	Given that `tokens[cursor]` is an opening delimiter, return the index of its balancing closer.
	Only delimiters of the same kind affect the balance. Return None if the input ends first.
	"""
	opener = tokens[cursor].text
	closer = DELIMITERS[opener]
	depth = 0
	for index in range(cursor, len(tokens)):
		text = tokens[index].text
		if text == opener: depth += 1
		elif text == closer:
			depth -= 1
			if depth == 0: return index
	return None

def any_rule_under(node:PrefixNode) -> Rule:
	""" For error messages: some rule that would be reachable from here. """
	while node.rule is None:
		if node.literal: node = next(iter(node.literal.values()))
		elif node.block: node = next(iter(node.block.values()))
		else: node = node.variable
	return node.rule
