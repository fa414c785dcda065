"""Beta reduction of pure lambda calculus terms.

Each call to beta_reduce_step contracts every redex that can be reached from the root by descending through
Applications and Abstraction bodies without crossing an uncontracted redex, so one step may contract several redexes.
beta_reduce repeats steps until no redex is left anywhere in the term.

Sources: https://plato.stanford.edu/entries/lambda-calculus/#Com,
         http://pages.cs.wisc.edu/~horwitz/CS704-NOTES/1.LAMBDA-CALCULUS.html#NOR
"""

import logging
import time
from collections import namedtuple
from enum import Enum

from lambdaeval.pure.substitution import substitute
from lambdaeval.pure.term import Abstraction, Application


logger = logging.getLogger(__name__)


class TraceRecord(namedtuple("TraceRecord", ["param", "argument"])):
    """Emitted once per contracted redex (λparam.M) argument. argument is the rendered text of the argument."""
    __slots__ = ()

    def __str__(self):
        return f"↪ β-reduce: {self.param} <- {self.argument}"


class Status(Enum):
    NORMALIZED = "normalized"
    BUDGET_EXCEEDED = "budget exceeded"


Reduction = namedtuple("Reduction", ["status", "term", "steps"])


def beta_reduce_step(term, trace=None):
    """Contracts every exposed redex in term. trace, if given, is called with a TraceRecord per contraction."""
    if isinstance(term, Application):
        if isinstance(term.func, Abstraction):
            if trace is not None:
                trace(TraceRecord(term.func.param, str(term.arg)))
            return substitute(term.func.body, term.func.param, term.arg)
        return Application(beta_reduce_step(term.func, trace), beta_reduce_step(term.arg, trace))

    elif isinstance(term, Abstraction):
        return Abstraction(term.param, beta_reduce_step(term.body, trace))

    return term


def is_reduced(term):
    """Whether term is in normal form: no Application anywhere in term has an Abstraction in function position."""
    stack = [term]
    while stack:
        term = stack.pop()
        if isinstance(term, Application):
            if isinstance(term.func, Abstraction):
                return False
            stack.extend((term.arg, term.func))
        elif isinstance(term, Abstraction):
            stack.append(term.body)
    return True


def normalize(term, trace=None, max_steps=None, timeout=None):
    """Reduces term until it is in normal form or the budget runs out. max_steps bounds the number of beta_reduce_step
    calls and timeout (in seconds) bounds wall-clock time, both checked once before every step. With neither set, a
    term without a normal form will never return.

    :return: Reduction(status, term, steps), term being the last term reached
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    steps = 0

    while not is_reduced(term):
        if max_steps is not None and steps >= max_steps:
            logger.debug("step budget of %s exhausted", max_steps)
            return Reduction(Status.BUDGET_EXCEEDED, term, steps)
        if deadline is not None and time.monotonic() >= deadline:
            logger.debug("timeout of %ss exhausted after %s steps", timeout, steps)
            return Reduction(Status.BUDGET_EXCEEDED, term, steps)

        term = beta_reduce_step(term, trace)
        steps += 1

    logger.debug("normal form reached after %s steps", steps)
    return Reduction(Status.NORMALIZED, term, steps)


def beta_reduce(term, trace=None):
    """Reduces term to normal form. Unbounded: loops forever if term has no normal form."""
    return normalize(term, trace).term
