"""Tree-walking evaluator for the Loxy language.

``execute`` and ``evaluate`` are mutually recursive. Statement execution
returns ``None`` on normal completion or a control signal
(``BreakSignal``, ``ContinueSignal``, ``ReturnSignal``); loops absorb
break and continue, function calls absorb return, and blocks and ``if``
hand any signal straight back to their caller. Runtime failures are
``LoxyError`` exceptions and stop the run at the first one.

Output from ``print`` is collected in memory, one line per statement, and
handed back from ``run`` so the embedding code decides where it goes.
"""

from __future__ import annotations

import math
from typing import Any, List, Optional, Tuple, Union

from .ast import (
    Expr, Literal, Unary, Binary, Logical, Grouping, Variable, Assign, Call,
    Stmt, Expression, Print, Var, Block, If, While, Break, Continue,
    Function, Return,
)
from .callable import LoxCallable, LoxFunction
from .environment import Environment
from .errors import (
    LoxyError, DivisionByZero, LoxyTypeError, LoxySyntaxError, ArityError,
    ExecutionLimitExceeded, StackOverflow, BreakSignal, ContinueSignal, ReturnSignal,
    BREAK, CONTINUE,
)
from .lexer import Token, TokenKind
from .natives import global_environment
from .resolver import Resolution
from .types import NIL, is_number, is_truthy, to_string, type_name

Signal = Union[BreakSignal, ContinueSignal, ReturnSignal]


class Interpreter:
    """Core interpreter that executes a resolved Loxy program."""
    def __init__(self, resolution: Optional[Resolution] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt', max_steps: Optional[int] = None):
        self.resolution = resolution if resolution is not None else Resolution()
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None
        self.max_steps = max_steps
        self.steps = 0
        self.output: List[str] = []

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    # Public API
    def run(self, statements: List[Stmt], env: Optional[Environment] = None) -> Tuple[str, Optional[LoxyError]]:
        """Execute ``statements`` and return ``(output, error)``.

        ``error`` is the first runtime failure, or None. A break, continue
        or return signal that reaches the top level ends the program
        quietly.
        """
        if env is None:
            env = global_environment()
        self.output = []
        self.steps = 0
        error: Optional[LoxyError] = None
        if self.debug_level > 0:
            self.debug_fp = open(self.debug_file, 'a', encoding='utf-8')
        try:
            self.debug(f"run: {len(statements)} statements, {len(self.resolution)} resolved locals")
            signal = self.execute_block(statements, env)
            if signal is not None:
                self.debug(f"run: stopped by stray {signal!r}")
            self.debug(f"run: finished after {self.steps} statements")
        except LoxyError as ex:
            self.debug(f"run: {ex}")
            error = ex
        except RecursionError:
            error = StackOverflow()
            self.debug(f"run: {error}")
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None
        return ''.join(self.output), error

    def execute_block(self, statements: List[Stmt], env: Environment) -> Optional[Signal]:
        for stmt in statements:
            signal = self.execute(stmt, env)
            if signal is not None:
                return signal
        return None

    def execute(self, stmt: Stmt, env: Environment) -> Optional[Signal]:
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps:
            raise ExecutionLimitExceeded(self.max_steps)

        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression, env)
            return None
        if isinstance(stmt, Print):
            value = self.evaluate(stmt.expression, env)
            self.output.append(to_string(value) + '\n')
            return None
        if isinstance(stmt, Var):
            value = self.evaluate(stmt.initializer, env) if stmt.initializer is not None else NIL
            env.define(stmt.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {stmt.name.lexeme}: {type_name(value)} = {to_string(value)}")
            return None
        if isinstance(stmt, Block):
            return self.execute_block(stmt.statements, Environment(env))
        if isinstance(stmt, If):
            cond = self.evaluate(stmt.condition, env)
            if not isinstance(cond, bool):
                raise LoxyTypeError("If condition must be a boolean.")
            if self.debug_level >= 3:
                self.debug(f"if condition line {self.line_of(stmt.condition)} -> {to_string(cond)}")
            if cond:
                return self.execute(stmt.then_branch, env)
            if stmt.else_branch is not None:
                return self.execute(stmt.else_branch, env)
            return None
        if isinstance(stmt, While):
            return self.execute_while(stmt, env)
        if isinstance(stmt, Break):
            return BREAK
        if isinstance(stmt, Continue):
            return CONTINUE
        if isinstance(stmt, Function):
            func = LoxFunction(stmt.name.lexeme, [p.lexeme for p in stmt.params], stmt.body, env)
            env.define(stmt.name.lexeme, func)
            if self.debug_level >= 2:
                self.debug(f"define function {stmt.name.lexeme}/{func.arity()}")
            return None
        if isinstance(stmt, Return):
            value = self.evaluate(stmt.value, env) if stmt.value is not None else NIL
            return ReturnSignal(value)
        raise NotImplementedError(f"execute: unexpected node type {type(stmt).__name__}")

    def execute_while(self, stmt: While, env: Environment) -> Optional[Signal]:
        while True:
            cond = self.evaluate(stmt.condition, env)
            if not isinstance(cond, bool):
                raise LoxyTypeError("While condition must be a boolean.")
            if self.debug_level >= 3:
                self.debug(f"while condition line {self.line_of(stmt.condition)} -> {to_string(cond)}")
            if not cond:
                return None
            signal = self.execute(stmt.body, env)
            if isinstance(signal, BreakSignal):
                return None
            if isinstance(signal, ContinueSignal):
                if stmt.increment is not None:
                    # Same frame shape as the body block the increment lives in.
                    self.evaluate(stmt.increment, Environment(env))
                continue
            if signal is not None:
                return signal

    def evaluate(self, expr: Expr, env: Environment) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression, env)
        if isinstance(expr, Variable):
            depth = self.resolution.depth_of(expr)
            if depth is not None:
                return env.get_at(depth, expr.name)
            return env.get(expr.name)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value, env)
            env.assign(expr.name, value)
            return value
        if isinstance(expr, Logical):
            left = self.evaluate(expr.left, env)
            if expr.operator.kind is TokenKind.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right, env)
        if isinstance(expr, Unary):
            operand = self.evaluate(expr.operand, env)
            return self.apply_unary_op(expr.operator, operand)
        if isinstance(expr, Binary):
            left = self.evaluate(expr.left, env)
            right = self.evaluate(expr.right, env)
            return self.apply_binary_op(expr.operator, left, right)
        if isinstance(expr, Call):
            callee = self.evaluate(expr.callee, env)
            args = [self.evaluate(arg, env) for arg in expr.arguments]
            return self.call_function(callee, args, expr.paren)
        raise NotImplementedError(f"evaluate: unexpected node type {type(expr).__name__}")

    def call_function(self, callee: Any, args: List[Any], paren: Optional[Token] = None) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxyTypeError("Can only call functions.")
        if len(args) != callee.arity():
            raise ArityError(callee.arity(), len(args))
        if self.debug_level >= 3:
            line = paren.line if paren is not None else '?'
            self.debug(f"call {callee!r} with {len(args)} args at line {line}")
        return callee.call(self, args)

    def apply_unary_op(self, op: Token, operand: Any) -> Any:
        if isinstance(operand, bool):
            if op.kind is TokenKind.BANG:
                return not operand
            raise LoxySyntaxError(f"Unknown unary operator '{op.lexeme}' for boolean.")
        if is_number(operand):
            if op.kind is TokenKind.MINUS:
                return -operand
            if op.kind is TokenKind.BANG:
                return operand == 0.0
            raise LoxySyntaxError(f"Unknown unary operator '{op.lexeme}'.")
        raise LoxyTypeError(f"Cannot apply unary '{op.lexeme}' to {type_name(operand)}.")

    def apply_binary_op(self, op: Token, a: Any, b: Any) -> Any:
        kind = op.kind
        if is_number(a) and is_number(b):
            return self.apply_numeric_op(op, a, b)
        if isinstance(a, str) or isinstance(b, str):
            if kind is TokenKind.PLUS:
                return to_string(a) + to_string(b)
            if isinstance(a, str) and isinstance(b, str):
                raise LoxyTypeError(f"Unsupported operation '{op.lexeme}' for strings.")
            raise LoxyTypeError(f"Unsupported operation '{op.lexeme}' for mixed types.")
        raise LoxyTypeError(
            f"Operands of '{op.lexeme}' must be compatible, got {type_name(a)} and {type_name(b)}."
        )

    def apply_numeric_op(self, op: Token, a: float, b: float) -> Any:
        kind = op.kind
        if kind is TokenKind.PLUS:
            return a + b
        if kind is TokenKind.MINUS:
            return a - b
        if kind is TokenKind.STAR:
            return a * b
        if kind is TokenKind.SLASH:
            if b == 0.0:
                raise DivisionByZero()
            return a / b
        if kind is TokenKind.PERCENT:
            if b == 0.0:
                raise DivisionByZero()
            return _remainder(a, b)
        if kind is TokenKind.EQUAL_EQUAL:
            return a == b
        if kind is TokenKind.BANG_EQUAL:
            return a != b
        if kind is TokenKind.GREATER:
            return a > b
        if kind is TokenKind.GREATER_EQUAL:
            return a >= b
        if kind is TokenKind.LESS:
            return a < b
        if kind is TokenKind.LESS_EQUAL:
            return a <= b
        raise LoxySyntaxError(f"Unknown binary operator '{op.lexeme}'.")

    @staticmethod
    def line_of(expr: Expr) -> Any:
        for attr in ('name', 'operator', 'paren'):
            token = getattr(expr, attr, None)
            if isinstance(token, Token):
                return token.line
        return '?'


def _remainder(a: float, b: float) -> float:
    """Remainder with the sign of the dividend (C fmod), not Python's floor mod."""
    return math.fmod(a, b)


def run(statements: List[Stmt], resolution: Resolution,
        environment: Optional[Environment] = None, **options) -> Tuple[str, Optional[LoxyError]]:
    """Run a resolved program against ``environment`` (a fresh global frame by default)."""
    return Interpreter(resolution, **options).run(statements, environment)
