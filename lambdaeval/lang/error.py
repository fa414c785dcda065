"""Error handling for lambdaeval. Only GenericExceptions should be encountered during running: if another type of error
is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

GenericExceptions keep their message as plain text (str(error) is what Session reports as "Error: <message>"). Color
is only added by ErrorHandler when the error is displayed.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a lambdaeval error/warning. msg is formatted
    with exprs, and exprs[0] should be the offending expr that caused the error. start and end delimit the offending
    part of exprs[0], used for error display.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = list(exprs)
        self.msg = msg.format(*self.exprs)
        self.expr = self.exprs[0]
        self.end = end if end != -1 else len(self.expr)

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def colored_msg(self):
        """Returns self.msg with expr snippets bolded."""
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class LexicalError(GenericException):
    """Raised when a λ-term cannot be tokenized or parsed. expr is the full source text, start is the position of the
    offending token.
    """
    MESSAGE = ""

    def __init__(self, expr="", start=0, end=-1):
        if end == -1:
            end = start + 1
        super().__init__(self.MESSAGE, expr, start=start, end=end, diagnosis=bool(expr))


class UnexpectedCharacter(LexicalError):
    MESSAGE = "Unexpected character encountered"


class MissingParameters(LexicalError):
    MESSAGE = "Expected at least one lambda parameter"


class ExpectedDotAfterParameters(LexicalError):
    MESSAGE = "Expected '.' after lambda parameters"


class ExpectedClosingParenthesis(LexicalError):
    MESSAGE = "Expected closing parenthesis"


class UnexpectedTerm(LexicalError):
    MESSAGE = "Unexpected term"


class UnexpectedTrailingInput(LexicalError):
    MESSAGE = "Unexpected input after expression"


class UnrecognizedExpression(GenericException):
    """Internal defect: a value outside Variable/Abstraction/Application reached the substitution engine."""

    def __init__(self, operation, term=None):
        super().__init__("Unrecognized expression in {}", operation, diagnosis=False, internal=True)
        self.term = term


class InvalidBindingSyntax(GenericException):

    def __init__(self, line=""):
        super().__init__("Invalid binding syntax", line, diagnosis=False)


class ReductionExceeded(GenericException):
    """Reduction ran out of its step or time budget before reaching normal form."""

    def __init__(self, expr, max_steps=None, timeout=None):
        if max_steps is not None:
            msg = f"Reduction exceeded budget of {max_steps} steps"
        else:
            msg = f"Reduction exceeded timeout of {timeout} seconds"
        super().__init__(msg, expr, diagnosis=False)
        self.max_steps = max_steps
        self.timeout = timeout


class ErrorHandler:
    """Prints lambdaeval errors and warnings, pointing at the session line being interpreted. Used as a context manager,
    it also reports any error escaping its block: GenericExceptions as errors, anything else as an internal defect.
    """
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.location = None  # (path, line, line_num) of the line being interpreted, if any

    def at_line(self, path, line, line_num):
        """Sets the line that later errors and warnings point at, until clear_line."""
        self.location = (path, line, line_num)

    def clear_line(self):
        self.location = None

    @staticmethod
    def diagnose(error, warning=False):
        """Returns error.expr with its offending span highlighted, and a caret line underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        end = max(error.end, error.start + 1)

        marked = colored(error.expr[error.start:end], color, attrs=["bold"])
        caret = colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])
        return f"  {error.expr[:error.start]}{marked}{error.expr[end:]}\n  {' ' * error.start}{caret}"

    def warn(self, *args, **kwargs):
        """Prints a warning built from GenericException(*args, **kwargs), prefixed with path:line_num if a line is set."""
        warning = GenericException(*args, **kwargs)

        prefix = ""
        if self.location is not None:
            path, __, line_num = self.location
            prefix = colored(f"{path}:{line_num}: ", attrs=["bold"])
        print(prefix + colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + warning.colored_msg())

        if not warning.internal and warning.expr and warning.diagnosis:
            print(ErrorHandler.diagnose(warning, warning=True))

    def throw(self, error):
        """Prints error (a GenericException) under the line it came from, then exits if fatal. The current line is
        cleared either way.
        """
        error_msg = ""
        if self.location is not None:
            path, line, line_num = self.location
            error_msg = f"  File '{path}', line {line_num}:\n    {line}\n"
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        print(error_msg + colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.colored_msg())

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        self.clear_line()
        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or exc_type is SystemExit:
            return False

        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            details = f"{exc_type.__name__}: {exc_val}".replace("{", "{{").replace("}", "}}")
            self.throw(GenericException(f"unknown error: '{details}'", internal=True))
            return False  # let unknown errors propagate
        return True
