"""
Expand macros: the template expander and the driver which applies it across a token sequence.

The driver scans left to right. Wherever a rule matches, the matched span is
replaced by the rule's expansion, and scanning resumes at the same position,
so that the replacement is itself subject to further expansion. Where nothing
matches, the token stays put and the scan moves on.

The expander fills in a rule's template. Captured blocks get expanded on their
own (by a nested run of the driver) before being spliced in, which is how a
macro call inside another macro's block gets taken care of.

Two limits keep runaway rules from running away. Nested block expansion may go
only `max_depth` levels deep. Within a single run, one position may be rewritten
at most `max_rewrites` times in a row, and the run as a whole may perform at most
`max_rewrites` rewrites per input token. Exceeding either is an error.
"""

import sys
from typing import NamedTuple, Sequence
from .interface import Token, RecursionLimitExceeded
from .rules import Rule, RuleSet, Verbatim, VariableRef, BlockRef
from .matcher import match
from .tokenizer import tokenize, render

MAX_DEPTH = 64
MAX_REWRITES = 256
VERBOSE = False

class Limits(NamedTuple):
	depth: int
	rewrites: int

def default_limits(max_depth:int=None, max_rewrites:int=None) -> Limits:
	return Limits(
		MAX_DEPTH if max_depth is None else max_depth,
		MAX_REWRITES if max_rewrites is None else max_rewrites,
	)


def expand(rule_set:RuleSet, tokens:Sequence[Token], *, max_depth:int=None, max_rewrites:int=None) -> list[Token]:
	""" Expand all the macros in a token sequence. Raises ExpansionError if that goes wrong. """
	return run(rule_set, tokens, default_limits(max_depth, max_rewrites))

def expand_string(rule_set:RuleSet, text:str, **kwargs) -> str:
	return render(expand(rule_set, tokenize(text), **kwargs))


def run(rule_set:RuleSet, tokens:Sequence[Token], limits:Limits, depth:int=0) -> list[Token]:
	""" The expansion driver. `depth` counts how many captured blocks deep this run is. """
	work = list(tokens)
	budget = limits.rewrites * (len(work) + 1)
	position, streak = 0, 0
	while position < len(work):
		found = match(rule_set, work, position)
		if found is None:
			position, streak = position+1, 0
			continue
		streak += 1
		budget -= 1
		if streak > limits.rewrites:
			raise RecursionLimitExceeded(found.rule, work[position], 'Rewriting at one position', limits.rewrites)
		if budget < 0:
			raise RecursionLimitExceeded(found.rule, work[position], 'Rewriting overall', limits.rewrites * (len(tokens) + 1))
		site = work[position:position+found.size]
		replacement = expand_template(found.rule, found.bindings, rule_set, limits=limits, depth=depth, site=site)
		if VERBOSE:
			print('At line %d (depth %d): %s (macro at %s) turns %d tokens into %d.'%(
				site[0].line, depth, found.rule.describe(), found.rule.whereabouts(), len(site), len(replacement)
			), file=sys.stderr)
		work[position:position+found.size] = replacement
	return work


def expand_template(rule:Rule, bindings:dict, rule_set:RuleSet, *, limits:Limits=None, depth:int=0, site:Sequence[Token]=()) -> list[Token]:
	"""
	Fill in a rule's template from the bindings of a match.

	`site` is the matched span, if there is one. The expansion's text tokens
	are attributed to the beginning of the site, so errors which turn up later
	point at the macro call. The expansion also inherits the whitespace
	that followed the site.
	"""
	if limits is None: limits = default_limits()
	where = site[0] if site else rule.origin
	output = []
	def splice(span, space):
		if span:
			output.extend(span[:-1])
			output.append(span[-1]._replace(space=space))
	for element in rule.template:
		if isinstance(element, Verbatim):
			token = element.token
			output.append(token._replace(offset=where.offset, line=where.line) if site else token)
		elif isinstance(element, VariableRef):
			splice(bindings[element.name], element.space)
		elif isinstance(element, BlockRef):
			if depth >= limits.depth:
				raise RecursionLimitExceeded(rule, where, 'Nesting of block expansions', limits.depth)
			splice(run(rule_set, bindings[element.name], limits, depth+1), element.space)
		else: assert False, type(element)
	if output and site:
		output[-1] = output[-1]._replace(space=site[-1].space)
	return output
