"""
The terse call-site interface, built around one process-wide token source.

	from compinput.runtime import setup, input, read

	setup()
	n, m, edges = input("n, m: usize, edges: [(usize1, usize1); m]")
	name = read("String")

Importing `input` from here shadows the builtin of the same name on purpose. Programs
that read their input this way have no use for the interactive prompt. If yours does,
import the module instead and call `runtime.input(...)`.

Call `setup()` exactly once before reading. Everything here also takes an explicit
`source=` argument, in which case the shared one is never consulted, so library code
and tests can thread their own TokenSource through without touching global state.

Keyword arguments to `read` and `input` supply count names. That means `source`,
`fragment` and `schema` themselves can't be used as count names here; use the
Schema and Parser objects directly if you really must.
"""

import functools, sys
from typing import Union

from .interface import InputError, SchemaError, UninitializedSource, AlreadyInitialized
from .source import TokenSource
from .parsers import Parser
from .schema import compile_schema, compile_fragment
from . import failureprone

_shared: TokenSource = None

def setup(stream=None, **kwargs) -> TokenSource:
	""" Take over `stream` (default: standard input) for the rest of the process. """
	global _shared
	if _shared is not None: raise AlreadyInitialized("setup() has already been called")
	_shared = TokenSource(sys.stdin if stream is None else stream, **kwargs)
	return _shared

def reset():
	""" Forget the shared source, so setup() may be called again. Mainly for test harnesses. """
	global _shared
	_shared = None

def shared_source() -> TokenSource:
	if _shared is None: raise UninitializedSource("setup() must be called before reading")
	return _shared

def read(fragment:Union[str, Parser], source:TokenSource=None, **values):
	""" Read one value. `fragment` is schema notation like "(usize1, char)", or a Parser. """
	parser = compile_fragment(fragment) if isinstance(fragment, str) else fragment
	return parser.parse(shared_source() if source is None else source, values)

def input(schema:str, source:TokenSource=None, **values):
	""" Read a whole schema's worth of values; returns a named tuple in declaration order. """
	return compile_schema(schema).read(shared_source() if source is None else source, **values)

def abort_on_error(fn):
	"""
	Decorate your `main` with this if you'd rather bad input ended the program with a
	one-line complaint and exit status 1, instead of a traceback.
	"""
	@functools.wraps(fn)
	def wrapper(*args, **kwargs):
		try: return fn(*args, **kwargs)
		except (InputError, SchemaError, UninitializedSource, AlreadyInitialized) as ex:
			failureprone.complain(ex)
			sys.exit(1)
	return wrapper
