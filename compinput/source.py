"""
The token source: a cursor over a stream of bytes which hands out whitespace-delimited tokens.

It knows nothing about types. All it does is skip whitespace, find the end of the next
run of non-whitespace, and give you those bytes. Everything else is somebody else's problem.

The stream is read a chunk at a time. Only the unconsumed tail of the buffer is kept when
the next chunk arrives, so a token may straddle any number of chunks without fuss.
"""

import io, re

from .interface import WHITESPACE, CHUNK_SIZE, StreamExhausted, ReadFailure

_SPACE = re.compile(b'[' + re.escape(WHITESPACE) + b']*')
_WORD = re.compile(b'[^' + re.escape(WHITESPACE) + b']*')
_LINE = re.compile(rb'[^\n]*')

def _make_reader(subject):
	""" Return a function from a requested size to a chunk of bytes; empty at end-of-input. """
	if isinstance(subject, str):
		subject = subject.encode()
	if isinstance(subject, (bytes, bytearray)):
		return io.BytesIO(subject).read
	if isinstance(subject, io.TextIOBase):
		if hasattr(subject, 'buffer'): subject = subject.buffer
		else: return lambda size: subject.read(size).encode()
	if hasattr(subject, 'read1'): return subject.read1 # Doesn't stall an interactive pipe.
	if hasattr(subject, 'read'): return subject.read
	raise TypeError("Can't read tokens from %r"%type(subject))

class TokenSource:
	"""
	Owns a cursor over the input. After each token, `left` and `right` give its extent
	as absolute byte offsets into the stream, and `tokens_read` counts how many tokens
	(or lines) have been handed out so far.

	`stream` is whatever you passed in. The source keeps it, but never closes it.

	There's no locking. One consumer, one thread.
	"""

	def __init__(self, stream, *, chunk_size:int=CHUNK_SIZE):
		self.stream = stream # A text wrapper closes its buffer when collected, so hold on to it.
		self.__read = _make_reader(stream)
		self.__chunk_size = chunk_size
		self.__buffer = b''
		self.__cursor = 0 # Relative to the buffer,
		self.__base = 0 # which starts at this absolute offset.
		self.__exhausted = False
		self.left = self.right = 0
		self.tokens_read = 0

	@property
	def position(self) -> int:
		""" Absolute offset of the cursor. """
		return self.__base + self.__cursor

	def __fill(self) -> bool:
		""" Pull another chunk, discarding what's consumed. False means end-of-input. """
		if self.__exhausted: return False
		try: chunk = self.__read(self.__chunk_size)
		except OSError as ex: raise ReadFailure("the input stream failed: %s"%ex, self.position) from ex
		if not chunk:
			self.__exhausted = True
			return False
		self.__base += self.__cursor
		self.__buffer = self.__buffer[self.__cursor:] + chunk
		self.__cursor = 0
		return True

	def __skip_whitespace(self) -> bool:
		while True:
			self.__cursor = _SPACE.match(self.__buffer, self.__cursor).end()
			if self.__cursor < len(self.__buffer): return True
			if not self.__fill(): return False

	def __scan(self, pattern) -> int:
		# A run that reaches the end of the buffer might continue in the next chunk.
		while True:
			end = pattern.match(self.__buffer, self.__cursor).end()
			if end < len(self.__buffer) or not self.__fill(): return end

	def next_token(self) -> bytes:
		""" Skip whitespace, then return the next maximal run of non-whitespace. Never empty. """
		if not self.__skip_whitespace():
			raise StreamExhausted("expected a token, but the input is exhausted", self.position)
		end = self.__scan(_WORD)
		token = self.__buffer[self.__cursor:end]
		self.left, self.right = self.position, self.__base + end
		self.__cursor = end
		self.tokens_read += 1
		return token

	def read_line(self) -> bytes:
		"""
		Skip whitespace (newlines included), then return the rest of that line
		without its line-break. A CR-LF pair counts as one line-break.
		The last line of the input need not end with a line-break.
		"""
		if not self.__skip_whitespace():
			raise StreamExhausted("expected a line, but the input is exhausted", self.position)
		end = self.__scan(_LINE)
		line = self.__buffer[self.__cursor:end]
		self.left = self.position
		if end < len(self.__buffer): end += 1 # Consume the newline itself.
		self.right = self.__base + end
		self.__cursor = end
		self.tokens_read += 1
		return line[:-1] if line.endswith(b'\r') else line

	def at_end(self) -> bool:
		""" True if nothing but whitespace remains. """
		return not self.__skip_whitespace()
