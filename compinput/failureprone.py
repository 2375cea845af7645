"""
This module is all about showing where things went wrong.

There are two kinds of trouble in this library. A broken schema is a bug in the program,
and the schema text is right there, so the report should point at the offending bit
with a caret. Broken input is somebody else's text, possibly megabytes of it arriving
through a pipe, so a byte offset is as much location data as we keep.

Schemas are usually one line, but a triple-quoted schema spanning several lines
is perfectly normal, so SourceText still deals in rows and columns.
"""

import bisect, re, sys

LINE_BREAK = re.compile(r'\r\n?|\n')

def illustration(single_line:str, start:int, width:int=0, *, prefix='', caption="near here") -> str:
	""" Builds up a picture of where something appears in a line of text. """
	blanks = ''.join(c if c == '\t' else ' ' for c in prefix + single_line[:start])
	underline = '^'*max(1, min(width, len(single_line.rstrip())-start))
	return prefix + single_line.rstrip() + '\n' + blanks + underline + " " + caption

class SourceText:
	""" Wrapper for a piece of text (normally a schema) which knows how to complain about a slice of itself. """
	def __init__(self, content:str, filename:str=None):
		self.content = content
		self.filename = filename
		self.__bounds = None

	def __make_bounds(self):
		# Only find line breaks once it turns out to be necessary.
		if self.__bounds is None:
			inside = [m.end() for m in LINE_BREAK.finditer(self.content)]
			self.__bounds = [0] + inside + [len(self.content)]

	def find_row_col(self, index:int):
		""" One-based row, zero-based column. """
		self.__make_bounds()
		row = bisect.bisect_right(self.__bounds, index, hi=len(self.__bounds) - 1) - 1
		return row+1, index - self.__bounds[row]

	def line_of_text(self, row:int) -> str:
		self.__make_bounds()
		r = max(0, row - 1)
		return self.content[self.__bounds[r]:self.__bounds[r + 1]]

	def complaint(self, a_slice:slice, message:str) -> str:
		left, right = a_slice.start, a_slice.stop
		row, col = self.find_row_col(left)
		prefix = "At" if self.filename is None else self.filename+":"
		reference = "%s line %d, column %d: %s" % (prefix, row, col + 1, message)
		illustrated = illustration(self.line_of_text(row), col, right - left, prefix=' >>> ')
		return "%s\n%s"%(reference, illustrated)

def complain(ex:Exception):
	""" Print a failure to standard error, with a picture if the exception can draw one. """
	text = ex.complaint() if hasattr(ex, 'complaint') else str(ex)
	print("%s: %s"%(type(ex).__name__, text), file=sys.stderr)
