import unittest
from unittest import mock
import contextlib
import io

from compinput import runtime
from compinput.source import TokenSource
from compinput.parsers import PRIMITIVES, Tuple
from compinput.interface import (
	UninitializedSource, AlreadyInitialized, StreamExhausted, MalformedChar, NumericUnderflow,
)


class SharedSourceCase(unittest.TestCase):
	def setUp(self) -> None:
		runtime.reset()

	def tearDown(self) -> None:
		runtime.reset()


class TestLifecycle(SharedSourceCase):
	def test_read_before_setup(self):
		with self.assertRaises(UninitializedSource):
			runtime.read("u32")
		with self.assertRaises(UninitializedSource):
			runtime.input("n: u32")

	def test_setup_twice(self):
		runtime.setup(b"1")
		with self.assertRaises(AlreadyInitialized):
			runtime.setup(b"2")

	def test_default_is_standard_input(self):
		with mock.patch('sys.stdin', io.TextIOWrapper(io.BytesIO(b"5 six\n"))):
			runtime.setup()
		self.assertEqual(5, runtime.read("u8"))
		self.assertEqual("six", runtime.read("String"))

	def test_setup_returns_the_shared_source(self):
		src = runtime.setup(b"1 2", chunk_size=1)
		runtime.read("(u8, u8)")
		self.assertIs(src, runtime.shared_source())
		self.assertEqual(2, src.tokens_read)


class TestScenarios(SharedSourceCase):
	def test_a_unsigned(self):
		runtime.setup(io.BytesIO(b"3\n"))
		self.assertEqual(3, runtime.read("usize"))

	def test_b_pair_of_words(self):
		runtime.setup(io.BytesIO(b"hello world\n"))
		self.assertEqual(("hello", "world"), runtime.read("(String, String)"))

	def test_c_edge_list(self):
		runtime.setup(io.BytesIO(b"2 3\n1 2\n2 3\n"))
		n, m, edges = runtime.input("n, m: usize; edges: [(usize1, usize1); n]")
		self.assertEqual((2, 3), (n, m))
		self.assertEqual([(0, 1), (1, 2)], edges)

	def test_d_character(self):
		runtime.setup(io.BytesIO(b"x\n"))
		self.assertEqual('x', runtime.read("char"))
		self.assertEqual('y', runtime.read("char", source=TokenSource(b"y\n")))
		with self.assertRaises(MalformedChar):
			runtime.read("char", source=TokenSource(b"xy\n"))

	def test_e_exhausted(self):
		for fragment in ["u32", "i8", "usize1", "char", "String", "bytes", "line", "(u8, u8)", "[u8; const 1]", "[u8; n]"]:
			with self.subTest(fragment=fragment):
				with self.assertRaises(StreamExhausted):
					runtime.read(fragment, source=TokenSource(b""), n=1)


class TestExplicitSource(unittest.TestCase):
	def test_no_setup_needed(self):
		runtime.reset()
		self.assertEqual(9, runtime.read("u8", source=TokenSource(b"9")))

	def test_parser_objects(self):
		parser = Tuple([PRIMITIVES['usize1'], PRIMITIVES['char']])
		self.assertEqual((4, 'q'), runtime.read(parser, source=TokenSource(b"5 q")))

	def test_count_values(self):
		self.assertEqual([1, 2], runtime.read("[u8; n]", source=TokenSource(b"1 2 3"), n=2))
		record = runtime.input("xs: [u8; n]", source=TokenSource(b"1 2 3"), n=3)
		self.assertEqual([1, 2, 3], record.xs)


class TestAbortOnError(SharedSourceCase):
	def test_clean_run(self):
		@runtime.abort_on_error
		def main():
			runtime.setup(b"7")
			return runtime.read("u8")
		self.assertEqual(7, main())

	def test_bad_input_exits(self):
		@runtime.abort_on_error
		def main():
			runtime.setup(b"0")
			return runtime.read("usize1")
		stderr = io.StringIO()
		with contextlib.redirect_stderr(stderr):
			with self.assertRaises(SystemExit) as cm:
				main()
		self.assertEqual(1, cm.exception.code)
		self.assertIn("NumericUnderflow", stderr.getvalue())
		self.assertIn("byte offset 0", stderr.getvalue())

	def test_bad_schema_exits(self):
		@runtime.abort_on_error
		def main():
			return runtime.input("n: usize, xs: [u8; m", source=TokenSource(b"1 2"))
		stderr = io.StringIO()
		with contextlib.redirect_stderr(stderr):
			with self.assertRaises(SystemExit):
				main()
		self.assertIn("SchemaError", stderr.getvalue())
		self.assertIn("^", stderr.getvalue())

	def test_other_errors_are_not_caught(self):
		@runtime.abort_on_error
		def main(): raise KeyError('not ours')
		with self.assertRaises(KeyError):
			main()

	def test_underflow_without_wrapper(self):
		with self.assertRaises(NumericUnderflow):
			runtime.read("usize1", source=TokenSource(b"0"))


if __name__ == '__main__':
	unittest.main()
