"""Pure lambda calculus terms. A term is one of three immutable node types:

```
Variable(name)             ; x
Abstraction(param, body)   ; λx.M
Application(func, arg)     ; (M N)
```

Nodes are frozen dataclasses, so equality is structural and subtrees can be shared freely between trees: nothing
ever mutates a node once it is built. Every transformation in `pure` returns new nodes and reuses untouched subtrees.
"""

from dataclasses import dataclass


class LambdaTerm:
    """Superclass of all λ-terms: there are exactly three subclasses, all rendered by render()."""

    def __str__(self):
        return render(self)

    def __repr__(self):
        return f"{type(self).__name__}('{self}')"


@dataclass(frozen=True, repr=False)
class Variable(LambdaTerm):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True, repr=False)
class Abstraction(LambdaTerm):
    param: str
    body: LambdaTerm


@dataclass(frozen=True, repr=False)
class Application(LambdaTerm):
    func: LambdaTerm
    arg: LambdaTerm


def group(term):
    """Abstraction bodies are greedy, so an Abstraction nested in an Application must be parenthesized, else
    ((λx.x) a) would be rendered as (λx.x a).
    """
    if isinstance(term, Abstraction):
        return ["(", term, ")"]
    return [term]


def render(term):
    """Renders term as text, walking it with an explicit stack so that deep terms do not hit the recursion limit.
    Stack items are either terms still to render or literal text.
    """
    out = []
    stack = [term]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, Variable):
            out.append(item.name)
        elif isinstance(item, Abstraction):
            out.append(f"λ{item.param}.")
            stack.append(item.body)
        else:
            out.append("(")
            stack.extend(reversed(group(item.func) + [" "] + group(item.arg) + [")"]))
    return "".join(out)


def curry(params, body):
    """Folds params right-to-left into nested single-parameter Abstractions: curry("xy", M) == λx.λy.M"""
    for param in reversed(params):
        body = Abstraction(param, body)
    return body
