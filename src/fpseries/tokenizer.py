"""Lexical analysis: source text -> tokens.

Scanning happens in one left-to-right pass; implicit multiplication is then
inserted by a second, separate pass over the finished token list so that
``3x``, ``2(1+x)`` and ``x sin(x)`` read as products.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field
from fractions import Fraction

from fpseries.errors import UnexpectedChar, UnexpectedIdentifier

VARIABLE = "x"


class FunctionName(enum.Enum):
    SIN = "sin"
    COS = "cos"
    EXP = "exp"
    LOG = "log"


class TokenKind(enum.Enum):
    NUM = "number"
    VARIABLE = "variable"
    FUNCTION = "function"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    CARET = "^"
    LPAREN = "("
    RPAREN = ")"


_OPERATORS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "^": TokenKind.CARET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

_ENDS_VALUE = frozenset({TokenKind.NUM, TokenKind.VARIABLE, TokenKind.RPAREN})
_STARTS_VALUE = frozenset(
    {TokenKind.NUM, TokenKind.VARIABLE, TokenKind.LPAREN, TokenKind.FUNCTION}
)


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    ``value`` is set only for numbers, ``function`` only for function names.
    ``position`` is the 0-based offset in the source (-1 for inserted tokens)
    and does not take part in equality.
    """

    kind: TokenKind
    value: Fraction | None = None
    function: FunctionName | None = None
    position: int = field(default=-1, compare=False)

    def __str__(self) -> str:
        if self.kind is TokenKind.NUM:
            text = str(self.value)
        elif self.kind is TokenKind.VARIABLE:
            text = VARIABLE
        elif self.kind is TokenKind.FUNCTION:
            assert self.function is not None
            text = self.function.value
        else:
            text = self.kind.value
        if self.position >= 0:
            return f"{text!r} at position {self.position}"
        return repr(text)


def num(value: int | Fraction) -> Token:
    return Token(TokenKind.NUM, value=Fraction(value))


def tokenize(source: str) -> list[Token]:
    """Split ``source`` into tokens, then insert implicit multiplications.

    Raises UnexpectedChar for characters outside the grammar and
    UnexpectedIdentifier for letter runs other than ``x`` and the four
    function names.
    """

    tokens: list[Token] = []
    i = 0
    n = len(source)
    while i < n:
        c = source[i]
        if c.isspace():
            i += 1
            continue

        if c.isascii() and c.isdigit():
            start = i
            while i < n and source[i].isascii() and source[i].isdigit():
                i += 1
            tokens.append(
                Token(TokenKind.NUM, value=Fraction(int(source[start:i])), position=start)
            )
            continue

        if c.isascii() and c.isalpha():
            start = i
            # Any letter continues the word, so "xé" is one bad identifier.
            while i < n and source[i].isalpha():
                i += 1
            tokens.append(_identifier(source[start:i], start))
            continue

        kind = _OPERATORS.get(c)
        if kind is None:
            raise UnexpectedChar(c, i)
        tokens.append(Token(kind, position=i))
        i += 1

    return insert_implicit_multiplication(tokens)


def _identifier(name: str, position: int) -> Token:
    if name == VARIABLE:
        return Token(TokenKind.VARIABLE, position=position)
    try:
        fn = FunctionName(name)
    except ValueError:
        raise UnexpectedIdentifier(name, position) from None
    return Token(TokenKind.FUNCTION, function=fn, position=position)


def insert_implicit_multiplication(tokens: Sequence[Token]) -> list[Token]:
    """Insert ``*`` between a token that ends a value and one that starts one."""

    out: list[Token] = []
    prev: Token | None = None
    for tok in tokens:
        if prev is not None and prev.kind in _ENDS_VALUE and tok.kind in _STARTS_VALUE:
            out.append(Token(TokenKind.STAR))
        out.append(tok)
        prev = tok
    return out
