"""Session control for lambdaeval. Classifies lines as expressions or `let` bindings, evaluates them, and keeps track of
the bindings made so far, either in command-line mode or file interpretation mode.

A session line is either

```
<exec_stmt>    ::= <λ-term>                      ; reduced to normal form and printed
<binding_stmt> ::= "let " <name> "=" <λ-term>    ; reduced, printed as "<name> <normal form>" and stored
<comment>      ::= ";;" <char>*                  ; file mode only
```

Free variables of later λ-terms that match a binding name are replaced by that binding's normal form before reduction.
Since variables are single characters, only single-character binding names can ever be referenced.
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum

from lambdaeval.lang.bindings import BindingStore
from lambdaeval.lang.error import ErrorHandler, GenericException, InvalidBindingSyntax, ReductionExceeded
from lambdaeval.pure.lexical import parse
from lambdaeval.pure.reduction import Status, normalize
from lambdaeval.pure.substitution import free_variables, substitute_all
from lambdaeval.pure.term import LambdaTerm


logger = logging.getLogger(__name__)


class InputType(Enum):
    EXPRESSION = "expression"
    BINDING = "binding"
    INVALID_BINDING = "invalid binding"


@dataclass
class Result:
    """Outcome of evaluating one line. value is the text to show the user: the normal form on success (term is then the
    normal form itself), and "Error: <message>" on failure (error is then the GenericException that caused it).
    """
    value: str
    ok: bool
    trace: list = field(default_factory=list)
    error: GenericException = None
    term: LambdaTerm = None


def classify(line):
    """Returns (InputType, name, source) for line. name is None unless line is a binding."""
    line = line.lstrip(" ")
    if not line.startswith("let "):
        return InputType.EXPRESSION, None, line

    eq = line.find("=", 4)
    if eq == -1:
        return InputType.INVALID_BINDING, None, line

    name = line[4:eq].strip().replace(" ", "-")
    if not name:
        return InputType.INVALID_BINDING, None, line
    return InputType.BINDING, name, line[eq + 1:]


class Session:
    """Governs a lambdaeval session, with control over the scope of bindings."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";;"
    RECURSION_LIMIT = 10000  # parsing, substitution and reduction recurse once per level of term nesting

    def __init__(self, error_handler=None, path=SH_FILE, cmd_line=True, trace=None, max_steps=None, timeout=None,
                 resolve_bindings=True):
        """
        :param error_handler: ErrorHandler used to display errors in run() and binding warnings
        :param path: file to interpret, or SH_FILE in command-line mode
        :param trace: callable receiving a TraceRecord per contracted redex, as it happens
        :param max_steps: step budget per evaluation (None is unbounded)
        :param timeout: wall-clock budget in seconds per evaluation (None is unbounded)
        :param resolve_bindings: whether bindings are substituted into later λ-terms
        """
        if error_handler is None:
            error_handler = ErrorHandler(fatal=not cmd_line)
        self.error_handler = error_handler

        if sys.getrecursionlimit() < Session.RECURSION_LIMIT:
            sys.setrecursionlimit(Session.RECURSION_LIMIT)

        self.path = path
        self.cmd_line = cmd_line

        self.trace = trace
        self.max_steps = max_steps
        self.timeout = timeout
        self.resolve_bindings = resolve_bindings

        self.bindings = BindingStore()
        self.lines = []    # list of (line num, line) to interpret in file mode
        self.results = []  # successful Results, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    for line_num, line in enumerate(file):
                        line = self.preprocess_line(line)
                        if line and not line.isspace():
                            self.lines.append((line_num + 1, line))
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Gets rid of comments and trailing whitespace in a line from a file."""
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]
        return line.rstrip()

    def resolve(self, term):
        """Substitutes the normal form of every binding whose name is free in term, all in a single pass: a bound value
        is never itself resolved again, even if it mentions a binding name.
        """
        if not self.resolve_bindings:
            return term

        mapping = self.bindings.values(sorted(free_variables(term)))
        if mapping:
            logger.debug("resolving %s from bindings", ", ".join(f"'{name}'" for name in mapping))
        return substitute_all(term, mapping)

    def evaluate(self, source):
        """Tokenizes, parses and reduces source. Never raises for bad input: errors are returned as a failed Result."""
        trace = []

        def record(step):
            trace.append(str(step))
            if self.trace is not None:
                self.trace(step)

        try:
            term = self.resolve(parse(source))
            reduction = normalize(term, record, self.max_steps, self.timeout)
            if reduction.status is Status.BUDGET_EXCEEDED:
                if self.max_steps is not None and reduction.steps >= self.max_steps:
                    raise ReductionExceeded(source, max_steps=self.max_steps)
                raise ReductionExceeded(source, timeout=self.timeout)
            value = str(reduction.term)

        except GenericException as error:
            return Result(f"Error: {error}", False, trace, error)
        except RecursionError:
            error = GenericException("maximum recursion depth exceeded", source, diagnosis=False)
            return Result(f"Error: {error}", False, trace, error)

        return Result(value, True, trace, term=reduction.term)

    def interpret(self, line):
        """Classifies and evaluates line. Successful bindings are stored, failed ones are rolled back."""
        input_type, name, source = classify(line)

        if input_type is InputType.INVALID_BINDING:
            error = InvalidBindingSyntax(line)
            return Result(f"Error: {error}", False, error=error)

        elif input_type is InputType.EXPRESSION:
            return self.evaluate(source)

        if name in self.bindings:
            self.error_handler.warn("'{}' shadows an earlier binding", name, diagnosis=False)

        entry = self.bindings.append(name, source)
        try:
            result = self.evaluate(source)
        except BaseException:
            self.bindings.rollback(entry)
            raise
        if not result.ok:
            self.bindings.rollback(entry)
            return result

        entry.value = result.term
        result.value = f"<{name}> {result.value}"
        return result

    def run(self):
        """Interprets this session's file lines in order, printing each result. Errors are thrown to the error
        handler.
        """
        for line_num, line in self.lines:
            self.error_handler.at_line(self.path, line, line_num)

            result = self.interpret(line)
            if not result.ok:
                self.error_handler.throw(result.error)
                continue

            print(result.value)
            self.results.append(result)
            self.error_handler.clear_line()
