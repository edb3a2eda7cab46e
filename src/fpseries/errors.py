"""fpseries exception hierarchy.

Keep this module small and dependency-free: it is imported broadly across the
project and by tests.

Every error is a deterministic function of its input, so nothing here is
retried. Errors compare equal by type and payload.
"""

from __future__ import annotations


class FpsError(Exception):
    """Base exception for all fpseries errors."""

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class FpsConfigError(FpsError):
    """Raised for invalid user configuration."""


# --- tokenizer -------------------------------------------------------------


class TokenizerError(FpsError):
    """Raised when the input text cannot be split into tokens."""


class UnexpectedChar(TokenizerError):
    def __init__(self, char: str, position: int) -> None:
        super().__init__(char, position)
        self.char = char
        self.position = position

    def __str__(self) -> str:
        return f"Unexpected character: {self.char!r} at position {self.position}"


class UnexpectedIdentifier(TokenizerError):
    def __init__(self, name: str, position: int) -> None:
        super().__init__(name, position)
        self.name = name
        self.position = position

    def __str__(self) -> str:
        return f"Unexpected identifier: {self.name!r} at position {self.position}"


# --- parser ----------------------------------------------------------------


class ParserError(FpsError):
    """Raised when a token sequence is not a well-formed expression."""


class UnexpectedToken(ParserError):
    def __init__(self, token: object) -> None:
        super().__init__(token)
        self.token = token

    def __str__(self) -> str:
        return f"Unexpected token: {self.token}"


class UnexpectedEof(ParserError):
    def __str__(self) -> str:
        return "Unexpected end of input"


# --- evaluation ------------------------------------------------------------


class EvalError(FpsError):
    """Raised when an expression has no truncated power series value."""


class DivisionByZero(EvalError):
    def __str__(self) -> str:
        return "Division by series with zero constant term"


class NonIntegerExponent(EvalError):
    def __str__(self) -> str:
        return "Exponent must be a constant integer"


class ExponentTooLarge(EvalError):
    def __str__(self) -> str:
        return "Exponent magnitude is too large"


class FunctionRequiresZeroConstant(EvalError):
    def __init__(self, function: str) -> None:
        super().__init__(function)
        self.function = function

    def __str__(self) -> str:
        return f"{self.function} requires series with zero constant term"


class LogRequiresUnitConstant(EvalError):
    def __str__(self) -> str:
        return "log requires series with constant term equal to 1"
