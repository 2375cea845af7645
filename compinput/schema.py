"""
The schema language, and a compiler from schema text into a composition of parsers.

A schema reads like this:

	n, m: usize
	edges: [(usize1, usize1); m]

Each declaration binds one or more names to a type-fragment. Grouped names each get their
own independent read, left to right. Declarations may be separated by commas, semicolons,
or nothing at all; whitespace and newlines don't matter, and `#` starts a comment.

Fragments are:
	a primitive name         -- usize, i32, char, String, line, usize1, etc.
	( fragment, ... )        -- a tuple
	[ fragment; const N ]    -- a fixed array; N must be an integer literal
	[ fragment; count ]      -- a sequence; count is an expression over integers and
	                            names bound earlier (or supplied by the caller), with + - * / %

Compiling happens once per distinct text. All the structural decisions get made then;
reading is nothing but walking the resulting parsers in declaration order. The result of
a read is a named tuple, so you can unpack it straight into local variables:

	n, m, edges = compile_schema(text).read(source)
"""

import collections, functools, keyword, re
from typing import NamedTuple

from .interface import SchemaError
from .parsers import Parser, PRIMITIVES, Tuple, FixedArray, Sequence, Constant, Name, BinaryOp
from .source import TokenSource

END = '<END>'

_LEXEME = re.compile(r'(?P<ignore>\s+|#[^\n]*)|(?P<name>[A-Za-z_][A-Za-z0-9_]*)|(?P<number>[0-9]+)|(?P<punct>[,;:()\[\]+\-*/%])')

class Token(NamedTuple):
	kind: str
	text: str
	where: slice

def scan(text:str) -> list[Token]:
	""" Punctuation tokens are their own kind. The list always ends with an END token. """
	tokens, pos = [], 0
	while pos < len(text):
		match = _LEXEME.match(text, pos)
		if match is None: raise SchemaError("unexpected character %r"%text[pos], text, slice(pos, pos+1))
		kind = match.group() if match.lastgroup == 'punct' else match.lastgroup
		if kind != 'ignore': tokens.append(Token(kind, match.group(), slice(match.start(), match.end())))
		pos = match.end()
	tokens.append(Token(END, '', slice(pos, pos)))
	return tokens

class Declaration(NamedTuple):
	names: list[Token]
	fragment: Parser

class _Compiler:
	""" Recursive descent over the token list. One instance per compilation. """
	def __init__(self, text:str):
		self.text = text
		self.tokens = scan(text)
		self.index = 0

	def peek(self) -> Token: return self.tokens[self.index]

	def advance(self) -> Token:
		token = self.tokens[self.index]
		self.index += 1
		return token

	def accept(self, kind:str):
		if self.peek().kind == kind: return self.advance()

	def expect(self, kind:str, what:str) -> Token:
		if self.peek().kind != kind: self.fail(self.peek(), "expected %s"%what)
		return self.advance()

	def fail(self, token:Token, message:str):
		found = "the end" if token.kind == END else repr(token.text)
		raise SchemaError("%s, but found %s"%(message, found), self.text, token.where)

	def schema(self) -> list[Declaration]:
		declarations = []
		while self.peek().kind != END:
			declarations.append(self.declaration())
			if self.peek().kind in (',', ';'): self.advance()
		return declarations

	def declaration(self) -> Declaration:
		names = [self.expect('name', "a name to bind")]
		while self.accept(','): names.append(self.expect('name', "a name to bind"))
		self.expect(':', "':' after the names")
		return Declaration(names, self.fragment())

	def fragment(self) -> Parser:
		token = self.advance()
		if token.kind == 'name':
			if token.text not in PRIMITIVES: self.fail(token, "expected a type")
			return PRIMITIVES[token.text]
		if token.kind == '(':
			members = []
			while self.peek().kind != ')':
				members.append(self.fragment())
				if not self.accept(','): break
			self.expect(')', "',' or ')' within a tuple")
			return Tuple(members)
		if token.kind == '[':
			member = self.fragment()
			self.expect(';', "';' between element type and length")
			if self.peek().kind == 'name' and self.peek().text == 'const':
				self.advance()
				length = self.expect('number', "an integer literal after 'const'")
				self.expect(']', "']' after a constant length")
				return FixedArray(member, int(length.text))
			count = self.expression()
			self.expect(']', "']' after a length")
			return Sequence(member, count)
		self.fail(token, "expected a type")

	def expression(self):
		left = self.term()
		while self.peek().kind in ('+', '-'):
			symbol = self.advance().text
			left = BinaryOp(symbol, left, self.term())
		return left

	def term(self):
		left = self.atom()
		while self.peek().kind in ('*', '/', '%'):
			symbol = self.advance().text
			left = BinaryOp(symbol, left, self.atom())
		return left

	def atom(self):
		token = self.advance()
		if token.kind == 'number': return Constant(int(token.text), token.where)
		if token.kind == 'name': return Name(token.text, token.where)
		if token.kind == '(':
			inside = self.expression()
			self.expect(')', "')' to close the parenthesis")
			return inside
		self.fail(token, "expected a length")


class Schema:
	"""
	A compiled schema: an ordered list of (name, parser) bindings, plus a record type.
	Grouped declarations have already been split into one binding per name.
	"""
	def __init__(self, text:str):
		self.text = text
		declarations = _Compiler(text).schema()
		self.bindings = []
		everywhere = {}
		for declaration in declarations:
			for token in declaration.names:
				self.__check_name(token, everywhere)
				everywhere[token.text] = token
		bound = set()
		for declaration in declarations:
			mentions = list(declaration.fragment.mentions())
			for token in declaration.names:
				for mention in mentions:
					if mention.name in everywhere and mention.name not in bound:
						raise SchemaError("%r is used as a length before it is bound"%mention.name, text, mention.where)
				bound.add(token.text)
				self.bindings.append((token.text, declaration.fragment))
		self.record = collections.namedtuple('Record', self.fields)

	def __check_name(self, token:Token, everywhere:dict):
		if token.text in everywhere:
			raise SchemaError("%r is declared twice"%token.text, self.text, token.where)
		if keyword.iskeyword(token.text) or token.text.startswith('_'):
			raise SchemaError("%r cannot be used as a name"%token.text, self.text, token.where)

	@property
	def fields(self) -> tuple: return tuple(name for name, _ in self.bindings)

	def read(self, source:TokenSource, **values):
		"""
		Read every binding in order. Keyword arguments supply any count names the schema
		doesn't bind itself. Returns an instance of `self.record`.
		"""
		bound = dict(values)
		try:
			for name, parser in self.bindings:
				bound[name] = parser.parse(source, bound)
		except SchemaError as ex:
			if ex.text is None: ex.text = self.text
			raise
		return self.record(*(bound[name] for name in self.fields))

	def __str__(self): return ', '.join('%s: %s'%binding for binding in self.bindings)

	def __repr__(self): return "<Schema %s>"%self


@functools.lru_cache(maxsize=None)
def compile_schema(text:str) -> Schema:
	return Schema(text)

@functools.lru_cache(maxsize=None)
def compile_fragment(text:str) -> Parser:
	""" A lone type-fragment, such as for reading a single value. """
	compiler = _Compiler(text)
	fragment = compiler.fragment()
	compiler.expect(END, "the end of the fragment")
	return fragment
