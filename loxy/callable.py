from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from loxy.ast import Stmt
from loxy.environment import Environment
from loxy.errors import ReturnSignal
from loxy.types import NIL

if TYPE_CHECKING:
    from loxy.interpreter import Interpreter


class LoxCallable:
    """Anything a Loxy program can call."""
    name: str

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """A user-defined function and the frame it was declared in.

    Each call gets one fresh frame enclosed by the *captured* frame, never
    the caller's. Parameters are bound there and the body statements run
    in that same frame, which is the single scope the resolver pushes for
    a function.
    """
    def __init__(self, name: str, params: List[str], body: List[Stmt], closure: Environment):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure

    def __repr__(self) -> str:
        return f"<function {self.name}>"

    def arity(self) -> int:
        return len(self.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        call_env = Environment(self.closure)
        for param, arg in zip(self.params, arguments):
            call_env.define(param, arg)
        signal = interpreter.execute_block(self.body, call_env)
        if isinstance(signal, ReturnSignal):
            return signal.value
        # Falling off the end, or a stray break/continue, yields nil.
        return NIL


@dataclass
class NativeFunction(LoxCallable):
    """A host-provided function. No captured frame, no new frame per call."""
    name: str
    fn_arity: int
    fn: Callable[[List[Any]], Any]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"

    def arity(self) -> int:
        return self.fn_arity

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        result = self.fn(arguments)
        # Loxy has one number type.
        if isinstance(result, int) and not isinstance(result, bool):
            return float(result)
        return result
