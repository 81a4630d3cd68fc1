"""Abstract Syntax Tree (AST) definitions for the Loxy language.

The parser builds these nodes once and nothing mutates them afterwards.
Every node compares and hashes by identity (``eq=False``): the resolver
keys its depth table on the very node object it analysed, so two
structurally equal ``Variable`` nodes in different scopes must stay
distinct.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Any

from .lexer import Token


@dataclass(eq=False)
class Expr:
    """Base class for expression nodes."""
    pass


@dataclass(eq=False)
class Literal(Expr):
    value: Any  # float, str, bool or NIL


@dataclass(eq=False)
class Unary(Expr):
    operator: Token
    operand: Expr


@dataclass(eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Logical(Expr):
    left: Expr
    operator: Token  # AND or OR
    right: Expr


@dataclass(eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(eq=False)
class Variable(Expr):
    name: Token


@dataclass(eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, for error lines
    arguments: List[Expr] = field(default_factory=list)


@dataclass(eq=False)
class Stmt:
    """Base class for statement nodes."""
    pass


@dataclass(eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(eq=False)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt
    # Set only by for-loop desugaring. The same expression also closes the
    # body block; the loop re-runs it when the body ends with `continue`.
    increment: Optional[Expr] = None


@dataclass(eq=False)
class Break(Stmt):
    keyword: Token


@dataclass(eq=False)
class Continue(Stmt):
    keyword: Token


@dataclass(eq=False)
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None
