"""Pure lambda calculus tokenizer and recursive-descent parser.

The `pure` directory contains pure lambda calculus AST generation and reduction- not sufficient for the lambdaeval
language (see `lang`).

Formally, the accepted grammar can be defined as

```
<expr>        ::= "λ" <var>+ "." <expr>     ; "abstraction"
                                            ; - λxy.M is curried into λx.λy.M
                                            ; - abstraction bodies are greedy: λx.x y = λx.(x y) != (λx.x) (y)
                | <application>
<application> ::= <term> <term>*            ; "application"
                                            ; - associating by left: abcd = (((a b) c) d)
<term>        ::= <var> | "(" <expr> ")"
<var>         ::= any single character but "λ", ".", "(", ")", whitespace, or a decimal digit
```

Note that variables are always exactly one character long: "ab" is the application of a to b, not a variable named
"ab". Whitespace is only needed for readability.
"""

import string
from dataclasses import dataclass
from enum import Enum

from lambdaeval.lang.error import (ExpectedClosingParenthesis, ExpectedDotAfterParameters, MissingParameters,
                                   UnexpectedCharacter, UnexpectedTerm, UnexpectedTrailingInput)
from lambdaeval.pure.term import Application, Variable, curry


class TokenType(Enum):
    VARIABLE = "variable"
    LAMBDA = "λ"
    DOT = "."
    LPAREN = "("
    RPAREN = ")"
    END = "end"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str = ""
    pos: int = 0  # index of the token in the source text, used for error display


BUILTINS = {TokenType.LAMBDA.value: TokenType.LAMBDA, TokenType.DOT.value: TokenType.DOT,
            TokenType.LPAREN.value: TokenType.LPAREN, TokenType.RPAREN.value: TokenType.RPAREN}


def tokenize(expr):
    """Returns the list of Tokens in expr, always terminated by a single END token. Raises UnexpectedCharacter on
    digits, which are not valid variables.
    """
    tokens = []
    pos = 0
    while pos < len(expr):
        if expr[pos].isspace():
            pos += 1
            continue

        char = expr[pos]
        if char in BUILTINS:
            tokens.append(Token(BUILTINS[char], pos=pos))
        elif char in string.digits:
            raise UnexpectedCharacter(expr, start=pos)
        else:
            tokens.append(Token(TokenType.VARIABLE, char, pos))
        pos += 1

    tokens.append(Token(TokenType.END, pos=len(expr)))
    return tokens


class Parser:
    """Recursive-descent parser with one token of lookahead over a complete token list."""

    def __init__(self, tokens, expr=""):
        """expr is the source text of tokens, only used for error messages."""
        self.tokens = tokens
        self.expr = expr
        self.position = 0

    @property
    def current(self):
        return self.tokens[self.position]

    def advance(self):
        """Moves to the next token. Advancing past the END token is a no-op."""
        if self.position < len(self.tokens) - 1:
            self.position += 1
        return self.current

    def parse(self):
        """Parses the whole token list into a LambdaTerm. Leftover tokens are an error."""
        term = self.parse_expression()
        if self.current.type is not TokenType.END:
            raise UnexpectedTrailingInput(self.expr, start=self.current.pos)
        return term

    def parse_expression(self):
        if self.current.type is not TokenType.LAMBDA:
            return self.parse_application()

        lambda_pos = self.current.pos
        self.advance()

        params = []
        while self.current.type is TokenType.VARIABLE:
            params.append(self.current.value)
            self.advance()

        if self.current.type is not TokenType.DOT:
            raise ExpectedDotAfterParameters(self.expr, start=self.current.pos)
        if not params:
            raise MissingParameters(self.expr, start=lambda_pos, end=self.current.pos + 1)
        self.advance()

        return curry(params, self.parse_expression())

    def parse_application(self):
        term = self.parse_term()
        while self.current.type in (TokenType.VARIABLE, TokenType.LPAREN):
            term = Application(term, self.parse_term())
        return term

    def parse_term(self):
        token = self.current
        if token.type is TokenType.VARIABLE:
            self.advance()
            return Variable(token.value)

        elif token.type is TokenType.LPAREN:
            self.advance()
            term = self.parse_expression()
            if self.current.type is not TokenType.RPAREN:
                raise ExpectedClosingParenthesis(self.expr, start=self.current.pos)
            self.advance()
            return term

        raise UnexpectedTerm(self.expr, start=token.pos)


def parse(expr):
    """Tokenizes and parses expr into a LambdaTerm."""
    return Parser(tokenize(expr), expr).parse()
