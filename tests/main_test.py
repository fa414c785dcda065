import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock

from lambdaeval.main import build_parser, main


class MainTestCase(unittest.TestCase):

    def write(self, text):
        file = tempfile.NamedTemporaryFile("w", suffix=".lc", encoding="utf-8", delete=False)
        with file:
            file.write(text)
        self.addCleanup(os.remove, file.name)
        return file.name

    def test_parser(self):
        args = build_parser().parse_args([])
        self.assertEqual((None, None, None, False, False), (args.file, args.max_steps, args.timeout, args.quiet,
                                                           args.no_bindings_lookup))

        args = build_parser().parse_args(["--max-steps", "5", "--timeout", "2.5", "-q", "prog.lc"])
        self.assertEqual(("prog.lc", 5, 2.5, True), (args.file, args.max_steps, args.timeout, args.quiet))

    def test_file(self):
        path = self.write("let K = λx y.x\nK a b\n")
        with contextlib.redirect_stdout(io.StringIO()) as out:
            main([path])
        self.assertEqual("<K> λx.λy.x\n↪ β-reduce: x <- a\n↪ β-reduce: y <- b\na\n", out.getvalue())

    def test_quiet(self):
        path = self.write("(λx.x) a\n")
        with contextlib.redirect_stdout(io.StringIO()) as out:
            main(["-q", path])
        self.assertEqual("a\n", out.getvalue())

    def test_no_bindings_lookup(self):
        path = self.write("let I = λx.x\nI a\n")
        with contextlib.redirect_stdout(io.StringIO()) as out:
            main(["-q", "--no-bindings-lookup", path])
        self.assertEqual("<I> λx.x\n(I a)\n", out.getvalue())

    def test_max_steps(self):
        path = self.write("(λx.x x) (λx.x x)\n")
        with mock.patch.dict(os.environ):
            with contextlib.redirect_stdout(io.StringIO()) as out:
                with self.assertRaises(SystemExit) as context:
                    main(["-q", "--no-color", "--max-steps", "3", path])
            self.assertEqual("1", os.environ["NO_COLOR"])
        self.assertEqual(1, context.exception.code)
        self.assertIn("Reduction exceeded budget of 3 steps", out.getvalue())


if __name__ == '__main__':
    unittest.main()
