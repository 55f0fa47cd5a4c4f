"""
Error display: show where things went wrong, with the offending line and a caret underneath.

Every SlangError knows its phase, can describe itself, and can point at the tokens
responsible. Tokens know their character offsets, but not which text they came from,
so the evidence is grouped by a key: the name of a macro file, or `None` for the
text being expanded. Whoever displays the report supplies a `fetch` function to
turn those keys into SourceText objects.

Line breaks follow the Unix, Apple, and DOS conventions, which is what the
tokenizer also assumes.
"""

import bisect, re, sys
from typing import NamedTuple, Any
from enum import Enum
from .interface import SlangError

LINE_BREAK = re.compile(r'\r\n?|\n')

class Severity(Enum):
	ERROR = "Error"

class Evidence(NamedTuple):
	slice: slice
	caption: str = "here"

	def width(self): return self.slice.stop - self.slice.start

class Issue(NamedTuple):
	"""
	phase: tells what the macro processor was doing.
	severity: tells how bad the issue is.
	description: explains the issue in plain language.
	evidence: from source-key to lists of ``Evidence`` objects relevant to that text.
	"""
	phase: str
	severity: Severity
	description: str
	evidence: dict[Any, list[Evidence]]

	@staticmethod
	def from_error(error:SlangError) -> "Issue":
		evidence = {
			key: [Evidence(token.slice(), caption) for token, caption in items]
			for key, items in error.evidence().items()
		}
		return Issue(error.phase, Severity.ERROR, error.description(), evidence)

	def as_text(self, fetch):
		"""
		`fetch` takes a key from the evidence dictionary and returns a
		corresponding SourceText object, or None if the text is not available.
		Evidence in unavailable texts is skipped.
		"""
		lines = ["%s while %s: %s"%(self.severity.value, self.phase, self.description)]
		for key, evidence in self.evidence.items():
			source = fetch(key)
			if source is None: continue
			if source.filename:
				lines.append("Excerpt from "+source.filename+" :")
			for e in evidence:
				row, col = source.find_row_col(e.slice.start)
				single_line = source.line_of_text(row)
				lines.append(illustration(single_line, col, e.width(), prefix='% 6d :'%row, caption=e.caption))
		return "\n".join(lines)

	def emit(self, fetch):
		print(self.as_text(fetch), file=sys.stderr)

def illustration(single_line:str, start:int, width:int=0, *, prefix='', caption="near here") -> str:
	""" Builds up a picture of where something appears in a line of text. """
	blanks = ''.join(c if c == '\t' else ' ' for c in prefix + single_line[:start])
	underline_width = max(1, min(width, len(single_line.rstrip())-start))
	return prefix + single_line.rstrip() + '\n' + blanks + '^'*underline_width + " " + caption

class SourceText:
	""" Wrapper for source text: finds rows and columns for the sake of error display. """
	def __init__(self, content:str, filename:str=None):
		self.content = content
		self.filename = filename
		self.__bounds = None

	def __make_bounds(self):
		""" Lazily only find line breaks if it turns out to be necessary for a particular text. """
		if self.__bounds is None:
			inside = [m.end() for m in LINE_BREAK.finditer(self.content)]
			self.__bounds = [0] + inside + [len(self.content)]

	def find_row_col(self, index:int):
		""" Based on a character index offset from the start of text. Rows count from 1. """
		self.__make_bounds()
		row = bisect.bisect_right(self.__bounds, index, hi=len(self.__bounds) - 1) - 1
		return row+1, index - self.__bounds[row]

	def line_of_text(self, row):
		self.__make_bounds()
		r = max(0, row - 1)
		return self.content[self.__bounds[r]:self.__bounds[r + 1]]
