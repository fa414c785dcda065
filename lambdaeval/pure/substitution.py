"""Capture-avoiding substitution for pure lambda calculus terms.

Substituting N for x in M (M[x := N]) must never let a free variable of N be bound by an abstraction of M. If an
abstraction λy.B of M binds a name that also appears in N, y is first renamed (alpha-converted) to a fresh name:

    (λx.λy.x)[x := y]  ->  λy0.y    (not λy.y)

None of these functions mutate their input: unchanged subtrees are returned as-is (by identity) and shared between the
old and new trees.
"""

from lambdaeval.lang.error import UnrecognizedExpression
from lambdaeval.pure.term import Abstraction, Application, Variable


def occurs_in(name, term):
    """Whether name is used anywhere in term, either as a Variable or as an Abstraction parameter. Broader than a free
    variable check: only used to pick names that cannot collide.
    """
    stack = [term]
    while stack:
        term = stack.pop()
        if isinstance(term, Variable):
            if term.name == name:
                return True
        elif isinstance(term, Abstraction):
            if term.param == name:
                return True
            stack.append(term.body)
        elif isinstance(term, Application):
            stack.extend((term.arg, term.func))
        else:
            raise UnrecognizedExpression("occurrence check", term)
    return False


def free_variables(term):
    """Returns the set of names that occur free in term."""
    free = set()
    stack = [(term, frozenset())]
    while stack:
        term, bound = stack.pop()
        if isinstance(term, Variable):
            if term.name not in bound:
                free.add(term.name)
        elif isinstance(term, Abstraction):
            stack.append((term.body, bound | {term.param}))
        elif isinstance(term, Application):
            stack.extend(((term.arg, bound), (term.func, bound)))
        else:
            raise UnrecognizedExpression("free variable search", term)
    return free


def fresh_name(base, context):
    """Returns base if it does not occur in context, else the first of base0, base1, ... that does not."""
    name = base
    idx = 0
    while occurs_in(name, context):
        name = f"{base}{idx}"
        idx += 1
    return name


def alpha_convert(term, old, new):
    """Renames every Variable and Abstraction parameter named old to new in term. This is a plain rename of a binder
    and everything it scopes over, not an alpha-equivalence check: new should be fresh with respect to term.
    """
    if isinstance(term, Variable):
        return Variable(new) if term.name == old else term

    elif isinstance(term, Abstraction):
        param = new if term.param == old else term.param
        body = alpha_convert(term.body, old, new)
        if param == term.param and body is term.body:
            return term
        return Abstraction(param, body)

    elif isinstance(term, Application):
        func = alpha_convert(term.func, old, new)
        arg = alpha_convert(term.arg, old, new)
        if func is term.func and arg is term.arg:
            return term
        return Application(func, arg)

    raise UnrecognizedExpression("alpha conversion", term)


def substitute(term, name, value):
    """Returns term[name := value]. value is shared, not copied, at every position name occurred."""
    if isinstance(term, Variable):
        return value if term.name == name else term

    elif isinstance(term, Abstraction):
        if term.param == name:
            return term  # name is shadowed

        if occurs_in(term.param, value):
            # rename the parameter so the free variables of value are not captured
            param = fresh_name(term.param, Application(value, term.body))
            body = alpha_convert(term.body, term.param, param)
            return Abstraction(param, substitute(body, name, value))

        body = substitute(term.body, name, value)
        return term if body is term.body else Abstraction(term.param, body)

    elif isinstance(term, Application):
        func = substitute(term.func, name, value)
        arg = substitute(term.arg, name, value)
        if func is term.func and arg is term.arg:
            return term
        return Application(func, arg)

    raise UnrecognizedExpression("substitution", term)


def substitute_all(term, mapping):
    """Returns term with every free Variable named in mapping replaced by its value, all at once: names introduced by
    one value are never themselves replaced by another. substitute_all(M, {x: N}) == substitute(M, x, N).
    """
    if not mapping:
        return term

    if isinstance(term, Variable):
        return mapping.get(term.name, term)

    elif isinstance(term, Abstraction):
        inner = {name: value for name, value in mapping.items() if name != term.param}
        if not inner:
            return term  # every name is shadowed

        if any(occurs_in(term.param, value) for value in inner.values()):
            context = term.body
            for value in inner.values():
                context = Application(value, context)
            param = fresh_name(term.param, context)
            body = alpha_convert(term.body, term.param, param)
            return Abstraction(param, substitute_all(body, inner))

        body = substitute_all(term.body, inner)
        return term if body is term.body else Abstraction(term.param, body)

    elif isinstance(term, Application):
        func = substitute_all(term.func, mapping)
        arg = substitute_all(term.arg, mapping)
        if func is term.func and arg is term.arg:
            return term
        return Application(func, arg)

    raise UnrecognizedExpression("substitution", term)
