import contextlib
import io
import unittest

from lambdaeval.lang.error import (ErrorHandler, GenericException, LexicalError, ReductionExceeded, UnexpectedTerm,
                                   UnrecognizedExpression)


class GenericExceptionTestCase(unittest.TestCase):

    def test_msg(self):
        cases = {
            ("'{}' could not be opened", "a.lc"): "'a.lc' could not be opened",
            ("keyboard interrupt", ""): "keyboard interrupt",
            ("'{}' shadows '{}'", ("I", "K")): "'I' shadows 'K'",
        }
        for (msg, exprs), expected in cases.items():
            error = GenericException(msg, exprs)
            self.assertEqual(expected, error.msg, msg)
            self.assertEqual(expected, str(error), msg)

    def test_span(self):
        error = GenericException("bad", "abcdef", start=2)
        self.assertEqual((2, 6), (error.start, error.end))

        error = UnexpectedTerm("a )", start=2)
        self.assertEqual(("a )", 2, 3), (error.expr, error.start, error.end))
        self.assertIsInstance(error, LexicalError)
        self.assertFalse(UnexpectedTerm().diagnosis)

    def test_messages(self):
        self.assertEqual("Reduction exceeded budget of 3 steps", str(ReductionExceeded("x", max_steps=3)))
        self.assertEqual("Reduction exceeded timeout of 1.5 seconds", str(ReductionExceeded("x", timeout=1.5)))
        self.assertEqual("Unrecognized expression in substitution", str(UnrecognizedExpression("substitution")))


class ErrorHandlerTestCase(unittest.TestCase):

    def throw(self, handler, error):
        with contextlib.redirect_stdout(io.StringIO()) as out:
            handler.throw(error)
        return out.getvalue()

    def test_throw(self):
        out = self.throw(ErrorHandler(fatal=False), UnexpectedTerm("a )", start=2))
        self.assertIn("error: ", out)
        self.assertIn("Unexpected term", out)
        self.assertIn("^", out)

    def test_throw_internal(self):
        out = self.throw(ErrorHandler(fatal=False), UnrecognizedExpression("substitution"))
        self.assertIn("[internal] ", out)
        self.assertNotIn("^", out)

    def test_throw_fatal(self):
        with self.assertRaises(SystemExit):
            self.throw(ErrorHandler(), UnexpectedTerm("a )", start=2))

    def test_location(self):
        handler = ErrorHandler(fatal=False)
        out = self.throw(handler, UnexpectedTerm("(a", start=2))
        self.assertNotIn("File ", out)

        handler.at_line("<in>", "(a", 3)
        out = self.throw(handler, UnexpectedTerm("(a", start=2))
        self.assertIn("File '<in>', line 3:\n    (a\n", out)
        self.assertIsNone(handler.location)

    def test_warn(self):
        handler = ErrorHandler(fatal=False)
        handler.at_line("<in>", "let I = x", 4)
        with contextlib.redirect_stdout(io.StringIO()) as out:
            handler.warn("'{}' shadows an earlier binding", "I", diagnosis=False)
        self.assertIn("<in>:4: ", out.getvalue())
        self.assertIn("warning: ", out.getvalue())
        self.assertIn("shadows an earlier binding", out.getvalue())
        self.assertEqual(("<in>", "let I = x", 4), handler.location)

        handler.clear_line()
        with contextlib.redirect_stdout(io.StringIO()) as out:
            handler.warn("'{}' shadows an earlier binding", "I", diagnosis=False)
        self.assertNotIn("<in>:", out.getvalue())

    def test_context_manager(self):
        should_suppress = {
            UnexpectedTerm("a )", start=2): "Unexpected term",
            KeyboardInterrupt(): "keyboard interrupt",
            RecursionError(): "maximum recursion depth exceeded",
        }
        for error, expected in should_suppress.items():
            with contextlib.redirect_stdout(io.StringIO()) as out:
                with ErrorHandler(fatal=False):
                    raise error
            self.assertIn(expected, out.getvalue(), error)

    def test_unknown_error(self):
        with contextlib.redirect_stdout(io.StringIO()) as out:
            with self.assertRaises(ValueError):
                with ErrorHandler(fatal=False):
                    raise ValueError("{boom}")
        self.assertIn("[internal] ", out.getvalue())
        self.assertIn("ValueError: {boom}", out.getvalue())


if __name__ == '__main__':
    unittest.main()
