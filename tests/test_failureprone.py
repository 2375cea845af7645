import unittest
import contextlib
import io

from compinput import failureprone
from compinput.interface import StreamExhausted, SchemaError


class TestFailureProne(unittest.TestCase):
	def test_illustration(self):
		picture = failureprone.illustration("xs: [u8; q]", 9, 1, caption="here")
		self.assertEqual("xs: [u8; q]\n         ^ here", picture)

	def test_tabs_line_up(self):
		picture = failureprone.illustration("\tn: float", 4, 5)
		self.assertEqual("\tn: float\n\t   ^^^^^ near here", picture)

	def test_rows_and_columns(self):
		text = failureprone.SourceText("ab\ncd\r\nef")
		self.assertEqual((1, 0), text.find_row_col(0))
		self.assertEqual((2, 1), text.find_row_col(4))
		self.assertEqual((3, 0), text.find_row_col(7))
		self.assertEqual("cd\r\n", text.line_of_text(2))

	def test_complaint(self):
		text = failureprone.SourceText("n: usize\nxs: [u8; q]", filename="<schema>")
		complaint = text.complaint(slice(18, 19), "no such count")
		self.assertEqual("<schema>: line 2, column 10: no such count\n >>> xs: [u8; q]\n              ^ near here", complaint)

	def test_complain_about_input(self):
		stderr = io.StringIO()
		with contextlib.redirect_stderr(stderr):
			failureprone.complain(StreamExhausted("expected a token, but the input is exhausted", 12))
		self.assertEqual("StreamExhausted: expected a token, but the input is exhausted (at byte offset 12)\n", stderr.getvalue())

	def test_complain_about_schema(self):
		stderr = io.StringIO()
		with contextlib.redirect_stderr(stderr):
			failureprone.complain(SchemaError("expected a type, but found 'float'", "x: float", slice(3, 8)))
		self.assertEqual("SchemaError: <schema>: line 1, column 4: expected a type, but found 'float'\n >>> x: float\n        ^^^^^ near here\n", stderr.getvalue())


if __name__ == '__main__':
	unittest.main()
