"""
Parsers: the capability to "read one value of type T from the token source", and its composition.

A parser is stateless. Primitive parsers each consume exactly one token and convert it.
Composite parsers never touch the token source themselves; they just ask their members,
in order, and assemble the results:

	Tuple      -> tuple, one value per member, strictly left to right.
	FixedArray -> tuple of exactly N values, N fixed when the parser is built.
	Sequence   -> list of N values, N evaluated at parse time from a count expression.

Count expressions can mention names. These are looked up in the `values` mapping passed to
`parse(...)`, which (when driven by a schema) holds whatever was bound earlier in the same
read, along with anything the caller supplied. Every composite passes `values` down unchanged,
so a sequence nested in a tuple sees the same names as one at top level.

`__str__` gives back schema notation, which is how parsers describe themselves in error messages.
"""

from abc import ABC, abstractmethod
from typing import Mapping, NamedTuple, Union
import operator

from .interface import MalformedNumber, MalformedChar, NumericOverflow, NumericUnderflow, InvalidCount, SchemaError
from .source import TokenSource

NO_VALUES = {} # Never mutated.

INTEGER_WIDTHS = {
	'u8': (0, 2**8-1), 'u16': (0, 2**16-1), 'u32': (0, 2**32-1), 'u64': (0, 2**64-1), 'u128': (0, 2**128-1),
	'usize': (0, 2**64-1),
	'i8': (-2**7, 2**7-1), 'i16': (-2**15, 2**15-1), 'i32': (-2**31, 2**31-1), 'i64': (-2**63, 2**63-1),
	'i128': (-2**127, 2**127-1), 'isize': (-2**63, 2**63-1),
	'int': (None, None),
}
MAX_BOUNDED_DIGITS = 40 # Enough for any width above; longer runs overflow without calling int().

def _show(token:bytes) -> str:
	return repr(token.decode(errors='replace'))

class Parser(ABC):
	""" Consume tokens from a source and produce one value, or raise. """

	@abstractmethod
	def parse(self, source:TokenSource, values:Mapping=NO_VALUES):
		""" `values` resolves any names mentioned in run-time counts. """

	@abstractmethod
	def __str__(self): """ Schema notation for this parser. """

	def mentions(self):
		""" Yield every Name its counts refer to. Most parsers have none. """
		return ()

	def __repr__(self): return "<%s %s>"%(type(self).__name__, self)

class Primitive(Parser):
	""" Exactly one token in, one value out. """
	kind: str

	def parse(self, source:TokenSource, values:Mapping=NO_VALUES):
		token = source.next_token()
		return self.convert(token, source.left)

	@abstractmethod
	def convert(self, token:bytes, position:int):
		""" `position` is the token's offset, for error messages. """

	def __str__(self): return self.kind

class Integer(Primitive):
	"""
	Base-10 integer with inclusive bounds; `None` means unbounded on that side.
	Unsigned kinds (lower bound zero) take digits only. Others allow one leading sign.
	"""
	def __init__(self, kind:str, low:int=None, high:int=None):
		self.kind, self.low, self.high = kind, low, high
		self.signed = low is None or low < 0

	def convert(self, token:bytes, position:int) -> int:
		digits = token[1:] if self.signed and token[:1] in (b'+', b'-') else token
		if not digits.isdigit(): # ASCII digits only. False for b''.
			raise MalformedNumber("%s is not a valid %s"%(_show(token), self.kind), position, token, self.kind)
		bounded = self.low is not None or self.high is not None
		if bounded and len(digits.lstrip(b'0')) > MAX_BOUNDED_DIGITS:
			raise NumericOverflow("%s is out of range for %s"%(_show(token), self.kind), position, token, self.kind)
		try: value = int(token)
		except ValueError as ex: # Beyond the interpreter's digit limit for unbounded ints.
			raise NumericOverflow("%s is too long for %s"%(_show(token), self.kind), position, token, self.kind) from ex
		if (self.low is not None and value < self.low) or (self.high is not None and value > self.high):
			raise NumericOverflow("%s is out of range for %s"%(_show(token), self.kind), position, token, self.kind)
		return value

class Adjusted(Primitive):
	""" Wraps an unsigned integer parser and subtracts one: converts 1-based indices to 0-based. """
	def __init__(self, inner:Integer, kind:str=None):
		if inner.signed: raise ValueError("Only an unsigned parser can be adjusted, not %s"%inner)
		self.inner = inner
		self.kind = kind or inner.kind+'1'

	def convert(self, token:bytes, position:int) -> int:
		value = self.inner.convert(token, position)
		if value == 0:
			raise NumericUnderflow("%s is zero, but %s counts from one"%(_show(token), self.kind), position, token, self.kind)
		return value - 1

class Char(Primitive):
	""" The whole token must be exactly one character; not merely start with one. """
	kind = 'char'

	def convert(self, token:bytes, position:int) -> str:
		try: text = token.decode()
		except UnicodeDecodeError: text = None
		if text is None or len(text) != 1:
			raise MalformedChar("%s is not a single character"%_show(token), position, token, self.kind)
		return text

class Word(Primitive):
	""" The token, verbatim. Undecodable bytes survive as surrogates, so this never fails. """
	def __init__(self, kind:str): self.kind = kind
	def convert(self, token:bytes, position:int) -> str: return token.decode(errors='surrogateescape')

class Raw(Primitive):
	kind = 'bytes'
	def convert(self, token:bytes, position:int) -> bytes: return token

class Line(Parser):
	""" The rest of the line, after skipping any whitespace (newlines included). """
	def parse(self, source:TokenSource, values:Mapping=NO_VALUES) -> str:
		return source.read_line().decode(errors='surrogateescape')
	def __str__(self): return 'line'


class Tuple(Parser):
	def __init__(self, members):
		self.members = tuple(members)

	def parse(self, source:TokenSource, values:Mapping=NO_VALUES) -> tuple:
		return tuple(p.parse(source, values) for p in self.members)

	def mentions(self):
		for p in self.members: yield from p.mentions()

	def __str__(self): return '(' + ', '.join(map(str, self.members)) + ')'

class FixedArray(Parser):
	def __init__(self, member:Parser, length:int):
		if not isinstance(length, int) or length < 0:
			raise ValueError("A fixed array needs a non-negative integer length, not %r"%(length,))
		self.member, self.length = member, length

	def parse(self, source:TokenSource, values:Mapping=NO_VALUES) -> tuple:
		return tuple(self.member.parse(source, values) for _ in range(self.length))

	def mentions(self): return self.member.mentions()

	def __str__(self): return '[%s; const %d]'%(self.member, self.length)

class Sequence(Parser):
	""" N values of one type, with N evaluated (once) just before the first element is read. """
	def __init__(self, member:Parser, count:Union["Expression", int, str]):
		self.member = member
		if isinstance(count, int): count = Constant(count)
		elif isinstance(count, str): count = Name(count)
		self.count = count

	def parse(self, source:TokenSource, values:Mapping=NO_VALUES) -> list:
		try: n = self.count.evaluate(values)
		except (ArithmeticError, TypeError) as ex:
			raise InvalidCount("count %s could not be evaluated: %s"%(self.count, ex), source.position) from ex
		if not isinstance(n, int) or isinstance(n, bool) or n < 0:
			raise InvalidCount("count %s came to %r; it must be a non-negative integer"%(self.count, n), source.position)
		return [self.member.parse(source, values) for _ in range(n)]

	def mentions(self):
		yield from self.count.mentions()
		yield from self.member.mentions()

	def __str__(self): return '[%s; %s]'%(self.member, self.count)


class Constant(NamedTuple):
	value: int
	where: slice = None
	def evaluate(self, values:Mapping): return self.value
	def mentions(self): return ()
	def __str__(self): return str(self.value)

class Name(NamedTuple):
	name: str
	where: slice = None
	def evaluate(self, values:Mapping):
		try: return values[self.name]
		except KeyError: raise SchemaError("count %r is not bound to any value"%self.name, where=self.where) from None
	def mentions(self): yield self
	def __str__(self): return self.name

OPERATORS = {'+': operator.add, '-': operator.sub, '*': operator.mul, '/': operator.floordiv, '%': operator.mod}

class BinaryOp(NamedTuple):
	symbol: str
	left: "Expression"
	right: "Expression"
	def evaluate(self, values:Mapping): return OPERATORS[self.symbol](self.left.evaluate(values), self.right.evaluate(values))
	def mentions(self):
		yield from self.left.mentions()
		yield from self.right.mentions()
	def __str__(self): return '(%s %s %s)'%(self.left, self.symbol, self.right)

Expression = Union[Constant, Name, BinaryOp]


PRIMITIVES = {kind: Integer(kind, low, high) for kind, (low, high) in INTEGER_WIDTHS.items()}
PRIMITIVES['usize1'] = Adjusted(PRIMITIVES['usize'])
PRIMITIVES['char'] = Char()
PRIMITIVES['String'] = Word('String')
PRIMITIVES['str'] = Word('str')
PRIMITIVES['bytes'] = Raw()
PRIMITIVES['line'] = Line()
