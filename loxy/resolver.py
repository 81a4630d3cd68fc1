"""Static scope resolution for Loxy programs.

The resolver walks a parsed program once, before anything executes, and
records for every variable read how many frames outward the interpreter
must walk to reach the declaring frame. Its scope stack must have the
same shape as the frames the interpreter builds:

* one scope per ``Block`` statement,
* one scope per function activation, holding both parameters and body,
* no scope for the global frame. Names found in no scope are globals and
  get no entry, which tells the interpreter to do a full outward walk.

Declaration is two-phase. A ``var`` name is *declared* before its
initializer is resolved and *defined* afterwards. While it is only
declared, reads of that name skip the scope and bind to the enclosing
declaration, so ``var a = a + 1;`` in a block reads the outer ``a``.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .ast import (
    Expr, Literal, Unary, Binary, Logical, Grouping, Variable, Assign, Call,
    Stmt, Expression, Print, Var, Block, If, While, Break, Continue,
    Function, Return,
)


class Resolution:
    """Read-only table of ``Variable`` node -> frame distance."""
    def __init__(self):
        self.depths: Dict[Expr, int] = {}

    def record(self, expr: Expr, depth: int):
        self.depths[expr] = depth

    def depth_of(self, expr: Expr) -> Optional[int]:
        return self.depths.get(expr)

    def __len__(self) -> int:
        return len(self.depths)

    def __contains__(self, expr: Expr) -> bool:
        return expr in self.depths


class Resolver:
    def __init__(self):
        self.scopes: List[Dict[str, bool]] = []
        self.resolution = Resolution()

    def resolve(self, statements: List[Stmt]) -> Resolution:
        self.resolve_statements(statements)
        return self.resolution

    def resolve_statements(self, statements: List[Stmt]):
        for stmt in statements:
            self.resolve_stmt(stmt)

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: str):
        if self.scopes:
            self.scopes[-1][name] = False

    def define(self, name: str):
        if self.scopes:
            self.scopes[-1][name] = True

    def resolve_local(self, expr: Expr, name: str):
        for depth, scope in enumerate(reversed(self.scopes)):
            if scope.get(name):
                self.resolution.record(expr, depth)
                return
        # not found: global

    def resolve_function(self, func: Function):
        self.begin_scope()
        for param in func.params:
            self.declare(param.lexeme)
            self.define(param.lexeme)
        self.resolve_statements(func.body)
        self.end_scope()

    def resolve_stmt(self, stmt: Stmt):
        if isinstance(stmt, Block):
            self.begin_scope()
            self.resolve_statements(stmt.statements)
            self.end_scope()
        elif isinstance(stmt, Var):
            self.declare(stmt.name.lexeme)
            if stmt.initializer is not None:
                self.resolve_expr(stmt.initializer)
            self.define(stmt.name.lexeme)
        elif isinstance(stmt, Function):
            # Bound in the enclosing scope first so the body can recurse.
            self.declare(stmt.name.lexeme)
            self.define(stmt.name.lexeme)
            self.resolve_function(stmt)
        elif isinstance(stmt, (Expression, Print)):
            self.resolve_expr(stmt.expression)
        elif isinstance(stmt, If):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self.resolve_stmt(stmt.else_branch)
        elif isinstance(stmt, While):
            # stmt.increment is the same node as the body block's last
            # statement and is resolved there.
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.body)
        elif isinstance(stmt, Return):
            if stmt.value is not None:
                self.resolve_expr(stmt.value)
        elif isinstance(stmt, (Break, Continue)):
            pass
        else:
            raise NotImplementedError(f"resolve: unexpected statement type {type(stmt).__name__}")

    def resolve_expr(self, expr: Expr):
        if isinstance(expr, Variable):
            self.resolve_local(expr, expr.name.lexeme)
        elif isinstance(expr, Assign):
            # Assignment walks outward at run time; only the value is resolved.
            self.resolve_expr(expr.value)
        elif isinstance(expr, (Binary, Logical)):
            self.resolve_expr(expr.left)
            self.resolve_expr(expr.right)
        elif isinstance(expr, Unary):
            self.resolve_expr(expr.operand)
        elif isinstance(expr, Grouping):
            self.resolve_expr(expr.expression)
        elif isinstance(expr, Call):
            self.resolve_expr(expr.callee)
            for arg in expr.arguments:
                self.resolve_expr(arg)
        elif isinstance(expr, Literal):
            pass
        else:
            raise NotImplementedError(f"resolve: unexpected expression type {type(expr).__name__}")


def resolve(statements: List[Stmt]) -> Resolution:
    """Compute frame distances for every local variable reference."""
    return Resolver().resolve(statements)
