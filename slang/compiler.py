"""
Compile macro definitions into a RuleSet.

A macro definition file looks like this:

	#define if ( $cond ) { $block }
	if $cond:
	  $block

	#define unless ( $cond ) { $block }
	if not ($cond):
	  $block

The `#define` line gives the pattern. The template is on the following lines,
up to a blank line, an `#end` line, the next `#define`, or the end of the file.

Within a pattern, `$name` captures any single token, unless it appears all by
itself between a matching pair of delimiters, as in `{ $block }` above. Then it
captures everything between that opener and its balancing closer.

Within a template, `$name` refers to a capture. Everything else is emitted as-is.

Compilation is all-or-nothing. Either every rule is well-formed and no two
rules could both match at the same place, or you get a CompileError.
"""

import os
from types import MappingProxyType
from typing import NamedTuple, Optional, Mapping
from .interface import (
	Token, OPEN, CLOSE, DELIMITERS, DEFINE, END,
	MalformedPattern, UnknownCapture, AmbiguousPrefix,
)
from .rules import Literal, Variable, Block, Verbatim, VariableRef, BlockRef, Rule, RuleSet
from .tokenizer import tokenize, count_line_breaks


class Definition(NamedTuple):
	""" The raw pieces of a macro definition, not yet analyzed. """
	origin: Token
	pattern: list
	template: list
	source: Optional[str] = None


def compile_string(text:str, filename:str=None) -> RuleSet:
	return compile_rules(tokenize(text), source=filename)

def compile_files(paths, on_read=None) -> RuleSet:
	"""
	All the macros from several files go into one RuleSet, which means they must
	be mutually unambiguous. Errors mention the base name of the offending file.
	If given, `on_read(key, path, text)` sees each file's text as it is read,
	where `key` is the name that errors will mention.
	"""
	definitions = []
	for path in paths:
		with open(path) as fh: text = fh.read()
		if on_read is not None: on_read(os.path.basename(path), path, text)
		definitions.extend(split_definitions(tokenize(text), source=os.path.basename(path)))
	return compile_definitions(definitions)

def compile_rules(tokens:list[Token], source:str=None) -> RuleSet:
	return compile_definitions(split_definitions(tokens, source=source))

def compile_definitions(definitions) -> RuleSet:
	rules = [compile_one(d) for d in definitions]
	check_prefix_free(rules)
	return RuleSet(rules)


def split_definitions(tokens:list[Token], source:str=None) -> list[Definition]:
	""" Sort out where each macro definition begins and ends, and which part is which. """
	definitions = []
	i, size = 0, len(tokens)
	while i < size:
		origin = tokens[i]
		i += 1
		if origin.text == END: continue
		if origin.text != DEFINE: raise MalformedPattern(source, origin, 'Expected %r to begin a macro definition.'%DEFINE)
		start = i
		if not count_line_breaks(origin.space):
			while i < size:
				i += 1
				if count_line_breaks(tokens[i-1].space): break
		pattern = tokens[start:i]
		start = i
		ends_paragraph = count_line_breaks((pattern[-1] if pattern else origin).space) > 1
		while i < size and not ends_paragraph and tokens[i].text not in (DEFINE, END):
			i += 1
			if count_line_breaks(tokens[i-1].space) > 1: break
		definitions.append(Definition(origin, pattern, tokens[start:i], source))
	return definitions


def compile_one(definition:Definition) -> Rule:
	pattern, captures = parse_pattern(definition)
	rule = Rule(pattern, (), captures, definition.origin, definition.source)
	return rule._replace(template=parse_template(definition.template, rule))

def parse_pattern(definition:Definition) -> tuple[tuple, Mapping[str, int]]:
	tokens, source = definition.pattern, definition.source
	if not tokens: raise MalformedPattern(source, definition.origin, 'This macro has no pattern.')
	pattern, captures, nesting = [], {}, []
	i = 0
	while i < len(tokens):
		token = tokens[i]
		if is_block_capture(tokens, i):
			placeholder = tokens[i+1]
			element = Block(placeholder.placeholder_name(), token.text, tokens[i+2].text)
			i += 3
		elif token.is_placeholder():
			placeholder = token
			element = Variable(placeholder.placeholder_name())
			i += 1
		else:
			placeholder = None
			if token.kind == OPEN: nesting.append(token)
			elif token.kind == CLOSE:
				if not nesting or DELIMITERS[nesting[-1].text] != token.text:
					raise MalformedPattern(source, token, 'Unbalanced %r in pattern.'%token.text)
				nesting.pop()
			element = Literal(token.text)
			i += 1
		if placeholder is not None:
			if element.name in captures:
				raise MalformedPattern(source, placeholder, 'Capture %r appears more than once in this pattern.'%placeholder.text)
			captures[element.name] = len(pattern)
		pattern.append(element)
	if nesting: raise MalformedPattern(source, nesting[-1], 'Pattern ends before %r is closed.'%nesting[-1].text)
	return tuple(pattern), MappingProxyType(captures)

def is_block_capture(tokens:list[Token], i:int) -> bool:
	""" Is there an opener, a placeholder, and the matching closer, starting at tokens[i]? """
	return (
		i + 2 < len(tokens)
		and tokens[i].kind == OPEN
		and tokens[i+1].is_placeholder()
		and tokens[i+2].text == DELIMITERS[tokens[i].text]
	)

def parse_template(tokens:list[Token], rule:Rule) -> tuple:
	template = []
	for token in tokens:
		if token.is_placeholder():
			name = token.placeholder_name()
			if name not in rule.captures: raise UnknownCapture(rule, token)
			slot = rule.pattern[rule.captures[name]]
			if isinstance(slot, Variable): template.append(VariableRef(name, token.space))
			elif isinstance(slot, Block): template.append(BlockRef(name, token.space))
			else: assert False, type(slot)
		else:
			template.append(Verbatim(token))
	return tuple(template)


### Checking the prefix-free property:
DISJOINT, ALIKE, CLASH = 'disjoint', 'alike', 'clash'

def compare_slots(a, b) -> str:
	"""
	Could two pattern slots match at the same input position?
	ALIKE means yes, and both consume the same span; DISJOINT means no.
	CLASH means yes, but afterward the two patterns no longer line up.
	A block opener versus anything that could eat just that opener is such a case.
	"""
	if isinstance(a, Block) or isinstance(b, Block):
		if isinstance(a, Block) and isinstance(b, Block):
			return ALIKE if a.opener == b.opener else DISJOINT
		block, other = (a, b) if isinstance(a, Block) else (b, a)
		if isinstance(other, Variable): return CLASH
		elif isinstance(other, Literal): return CLASH if other.text == block.opener else DISJOINT
		else: assert False, type(other)
	elif isinstance(a, Variable) or isinstance(b, Variable):
		return ALIKE
	elif isinstance(a, Literal) and isinstance(b, Literal):
		return ALIKE if a.text == b.text else DISJOINT
	else: assert False, (type(a), type(b))

def is_ambiguous(a:Rule, b:Rule) -> bool:
	"""
	Two patterns are ambiguous if, over the length of the shorter, every slot is alike.
	(That is to say, the shorter is a prefix of the longer.) A clash also counts.
	"""
	for x, y in zip(a.pattern, b.pattern):
		relation = compare_slots(x, y)
		if relation == DISJOINT: return False
		if relation == CLASH: return True
	return True

def check_prefix_free(rules:list[Rule]):
	for j, later in enumerate(rules):
		for earlier in rules[:j]:
			if is_ambiguous(earlier, later):
				if len(later.pattern) < len(earlier.pattern): raise AmbiguousPrefix(later, earlier)
				else: raise AmbiguousPrefix(earlier, later)
