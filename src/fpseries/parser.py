"""Precedence-climbing parser: tokens -> expression tree.

Binding powers (left, right):

    + -    (1, 2)
    * /    (3, 4)
    ^      (6, 5)   right-associative

Unary minus is handled in primary position and parses its operand at power 5,
so ``-x^2`` is ``-(x^2)`` while ``-x*2`` is ``(-x)*2``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from fractions import Fraction
from typing import TypeAlias

from fpseries.errors import UnexpectedEof, UnexpectedToken
from fpseries.tokenizer import FunctionName, Token, TokenKind

UNARY_MINUS_BP = 5

# Deepest accepted nesting of operators, parentheses and function calls.
# Bounds the recursion of both the parser and the evaluator.
MAX_NESTING = 100


@dataclass(frozen=True, slots=True)
class Num:
    value: Fraction


@dataclass(frozen=True, slots=True)
class Variable:
    pass


@dataclass(frozen=True, slots=True)
class Add:
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Sub:
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Mul:
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Div:
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Pow:
    base: Expr
    exponent: Expr


@dataclass(frozen=True, slots=True)
class Neg:
    inner: Expr


@dataclass(frozen=True, slots=True)
class Sin:
    inner: Expr


@dataclass(frozen=True, slots=True)
class Cos:
    inner: Expr


@dataclass(frozen=True, slots=True)
class Exp:
    inner: Expr


@dataclass(frozen=True, slots=True)
class Log:
    inner: Expr


Expr: TypeAlias = Num | Variable | Add | Sub | Mul | Div | Pow | Neg | Sin | Cos | Exp | Log

_BINARY: dict[TokenKind, type[Add | Sub | Mul | Div | Pow]] = {
    TokenKind.PLUS: Add,
    TokenKind.MINUS: Sub,
    TokenKind.STAR: Mul,
    TokenKind.SLASH: Div,
    TokenKind.CARET: Pow,
}

_FUNCTIONS: dict[FunctionName, type[Sin | Cos | Exp | Log]] = {
    FunctionName.SIN: Sin,
    FunctionName.COS: Cos,
    FunctionName.EXP: Exp,
    FunctionName.LOG: Log,
}


def infix_binding_power(kind: TokenKind) -> tuple[int, int] | None:
    if kind in (TokenKind.PLUS, TokenKind.MINUS):
        return (1, 2)
    if kind in (TokenKind.STAR, TokenKind.SLASH):
        return (3, 4)
    if kind is TokenKind.CARET:
        return (6, 5)
    return None


class Parser:
    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def next(self) -> Token:
        tok = self.peek()
        if tok is None:
            raise UnexpectedEof()
        self._pos += 1
        return tok

    def parse(self) -> Expr:
        expr = self.parse_expr(0)
        trailing = self.peek()
        if trailing is not None:
            raise UnexpectedToken(trailing)
        return expr

    def parse_expr(self, min_bp: int) -> Expr:
        expr, _ = self._expr(min_bp)
        return expr

    # The private helpers also return the nesting height of the subtree
    # (parentheses count as a level). Both the recursion here and the height
    # of the finished tree stay within MAX_NESTING.

    def _expr(self, min_bp: int) -> tuple[Expr, int]:
        self._depth += 1
        try:
            if self._depth > MAX_NESTING:
                tok = self.peek()
                if tok is None:
                    raise UnexpectedEof()
                raise UnexpectedToken(tok)
            return self._climb(min_bp)
        finally:
            self._depth -= 1

    def _climb(self, min_bp: int) -> tuple[Expr, int]:
        lhs, height = self._primary()

        while True:
            op = self.peek()
            if op is None:
                break
            bp = infix_binding_power(op.kind)
            if bp is None:
                break
            l_bp, r_bp = bp
            if l_bp < min_bp:
                break

            self.next()
            rhs, rhs_height = self._expr(r_bp)
            height = _nest(op, max(height, rhs_height))
            lhs = _BINARY[op.kind](lhs, rhs)

        return lhs, height

    def _primary(self) -> tuple[Expr, int]:
        tok = self.next()
        kind = tok.kind

        if kind is TokenKind.NUM:
            assert tok.value is not None
            return Num(tok.value), 1
        if kind is TokenKind.VARIABLE:
            return Variable(), 1
        if kind is TokenKind.LPAREN:
            expr, height = self._finish_group()
            return expr, _nest(tok, height)
        if kind is TokenKind.MINUS:
            inner, height = self._expr(UNARY_MINUS_BP)
            return Neg(inner), _nest(tok, height)
        if kind is TokenKind.FUNCTION:
            assert tok.function is not None
            # A function name only applies to a parenthesized argument.
            opening = self.next()
            if opening.kind is not TokenKind.LPAREN:
                raise UnexpectedToken(opening)
            inner, height = self._finish_group()
            return _FUNCTIONS[tok.function](inner), _nest(tok, height)

        raise UnexpectedToken(tok)

    def _finish_group(self) -> tuple[Expr, int]:
        expr, height = self._expr(0)
        closing = self.next()
        if closing.kind is not TokenKind.RPAREN:
            raise UnexpectedToken(closing)
        return expr, height


def _nest(tok: Token, height: int) -> int:
    height += 1
    if height > MAX_NESTING:
        raise UnexpectedToken(tok)
    return height


def parse(tokens: Sequence[Token]) -> Expr:
    """Parse a complete token sequence into an expression tree.

    Raises UnexpectedEof when input ends mid-expression and UnexpectedToken
    for anything else out of place, including tokens left over after a
    complete expression.
    """

    return Parser(tokens).parse()
