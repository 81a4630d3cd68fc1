"""Native functions installed into every fresh global environment.

``NATIVE_FUNCTIONS`` is the registry. Host code adds to it with the
``register_native`` decorator; the interpreter itself never changes when a
native is added.
"""

import time
from typing import Any, Callable, Dict, List

from .callable import NativeFunction
from .environment import Environment

NATIVE_FUNCTIONS: Dict[str, NativeFunction] = {}


def register_native(name: str, arity: int) -> Callable:
    def decorator(fn: Callable[[List[Any]], Any]) -> Callable[[List[Any]], Any]:
        NATIVE_FUNCTIONS[name] = NativeFunction(name, arity, fn)
        return fn
    return decorator


@register_native('clock', 0)
def clock(args: List[Any]) -> float:
    """Seconds since the Unix epoch, as a number."""
    return time.time()


def define_native_functions(env: Environment):
    for name, native in NATIVE_FUNCTIONS.items():
        env.define(name, native)


def global_environment() -> Environment:
    """A fresh global frame with every registered native defined."""
    env = Environment()
    define_native_functions(env)
    return env
