"""Runtime value model for Loxy.

A Loxy value is one of a closed set of Python representations:

* ``float`` for numbers (every numeric literal is a double),
* ``str`` for strings,
* ``bool`` for booleans,
* a ``LoxCallable`` for functions (user closures and natives),
* the ``NIL`` singleton for ``nil``.

``bool`` is a subclass of ``int`` in Python, so every helper here checks
for booleans before it checks for numbers.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .callable import LoxCallable


class NilVal:
    """Marker object for the Loxy ``nil`` value. There is only one."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()

Value = Union[float, str, bool, 'LoxCallable', NilVal]


def is_number(value: Any) -> bool:
    return isinstance(value, float) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """``nil`` and ``false`` are falsey; everything else is truthy."""
    if isinstance(value, NilVal):
        return False
    if isinstance(value, bool):
        return value
    return True


def type_name(value: Any) -> str:
    """Return the Loxy type name of a runtime value."""
    from .callable import LoxCallable
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, NilVal):
        return 'nil'
    if isinstance(value, LoxCallable):
        return 'function'
    return type(value).__name__


def format_number(n: float) -> str:
    """Shortest round-trip digits in positional notation, no exponent.

    Integral numbers print without a fractional part: ``3`` not ``3.0``.
    """
    if not math.isfinite(n):
        return repr(n)
    if n == 0 and math.copysign(1.0, n) < 0:
        return '-0'
    text = format(Decimal(repr(n)), 'f')
    if text.endswith('.0'):
        text = text[:-2]
    return text


def to_string(value: Any) -> str:
    """Convert a Loxy value to the text ``print`` and concatenation use."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NilVal):
        return 'nil'
    return repr(value)
