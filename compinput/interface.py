"""
This file aggregates the exception types and design constants which comp-input deals in.

The engine is built for trusted, rigidly-formatted input. When the input turns out not
to match, there is nothing sensible to do but stop: every error below propagates to the
top of the program. You can still catch them -- it's Python -- but nothing in the library
ever does so on your behalf.

The split between InputError and SchemaError is about who is to blame:
InputError means the text being read doesn't look like what the schema promised;
SchemaError means the schema itself is broken, which is a bug in the calling program.
"""

from .failureprone import SourceText

WHITESPACE = b' \t\n\x0c\r' # ASCII whitespace, exactly. Vertical-tab is NOT a separator.
CHUNK_SIZE = 1 << 16 # How much to ask of the underlying stream at a time.


class InputError(ValueError):
	"""
	Base class of all exceptions arising from reading the input.
	Parameters are:
		a message;
		the byte offset (within the whole stream) where things went wrong.
	"""
	def __init__(self, message, position):
		super().__init__(message, position)
		self.message, self.position = message, position

	def __str__(self):
		return "%s (at byte offset %d)"%(self.message, self.position)

class StreamExhausted(InputError):
	""" Asked for another token, but only whitespace (or nothing) remained. """

class ReadFailure(InputError):
	""" The underlying stream raised an OSError. That OSError is chained as __cause__. """

class MalformedToken(InputError):
	""" A token did not have the shape required of the requested type. """
	def __init__(self, message, position, token:bytes, kind:str):
		super().__init__(message, position)
		self.token, self.kind = token, kind

class MalformedNumber(MalformedToken): pass

class MalformedChar(MalformedToken): pass

class NumericOverflow(MalformedToken):
	""" Well-formed digits, but out of range for the target width. """

class NumericUnderflow(MalformedToken):
	""" The one-subtracted integer was given a zero. """

class InvalidCount(InputError):
	""" A sequence length evaluated to something other than a non-negative integer. """


class UninitializedSource(RuntimeError):
	""" Something tried to read through the process-wide source before setup() was called. """

class AlreadyInitialized(RuntimeError):
	""" setup() was called a second time. """


class SchemaError(ValueError):
	"""
	The schema text is malformed or inconsistent. This is a programming error.
	If the schema text and an offending slice are known, `complaint()` shows where.
	"""
	def __init__(self, message, text:str=None, where:slice=None):
		super().__init__(message)
		self.message, self.text, self.where = message, text, where

	def complaint(self) -> str:
		if self.text is None or self.where is None: return self.message
		return SourceText(self.text, filename='<schema>').complaint(self.where, self.message)
