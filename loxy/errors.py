from dataclasses import dataclass
from typing import Any


@dataclass
class ErrorVal:
    """Name and message of a Loxy runtime failure."""
    name: str
    message: str


class LoxyError(Exception):
    """Exception type used to propagate Loxy runtime failures."""
    def __init__(self, err: ErrorVal):
        super().__init__(f"{err.name}: {err.message}")
        self.err = err


class DivisionByZero(LoxyError):
    def __init__(self):
        super().__init__(ErrorVal('DivisionByZero', 'Division by zero.'))


class UndefinedVariable(LoxyError):
    def __init__(self, name: str):
        super().__init__(ErrorVal('UndefinedVariable', f"Undefined variable '{name}'."))
        self.name = name


class LoxyTypeError(LoxyError):
    def __init__(self, reason: str):
        super().__init__(ErrorVal('TypeError', reason))
        self.reason = reason


class LoxySyntaxError(LoxyError):
    """Malformed operator use that the parser let through."""
    def __init__(self, reason: str):
        super().__init__(ErrorVal('SyntaxError', reason))
        self.reason = reason


class ArityError(LoxyError):
    def __init__(self, expected: int, actual: int):
        super().__init__(ErrorVal('ArityError', f'Expected {expected} arguments but got {actual}.'))
        self.expected = expected
        self.actual = actual


class ExecutionLimitExceeded(LoxyError):
    def __init__(self, limit: int):
        super().__init__(ErrorVal('ExecutionLimitExceeded', f'Exceeded the budget of {limit} statements.'))
        self.limit = limit


class StackOverflow(LoxyError):
    """The host call stack ran out, usually through unbounded recursion."""
    def __init__(self):
        super().__init__(ErrorVal('StackOverflow', 'Maximum recursion depth exceeded.'))


class ParseError(Exception):
    """Raised inside the parser to abandon the current declaration."""
    def __init__(self, token, message: str):
        self.token = token
        self.line = token.line
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        from .lexer import TokenKind
        where = 'end' if self.token.kind is TokenKind.EOF else f"'{self.token.lexeme}'"
        return f"[line {self.line}] Error at {where}: {self.message}"


# Control signals. These are returned from statement execution, not raised:
# loops absorb break/continue, calls absorb return, everything else passes
# them up unchanged.

class BreakSignal:
    def __repr__(self) -> str:
        return 'break'


class ContinueSignal:
    def __repr__(self) -> str:
        return 'continue'


@dataclass
class ReturnSignal:
    value: Any


BREAK = BreakSignal()
CONTINUE = ContinueSignal()
