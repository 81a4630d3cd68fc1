"""JSON serialization/deserialization for the Loxy AST.

This module converts between Loxy AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Tokens keep their kind,
lexeme and line so that a reloaded program reports the same error lines.
Loading produces new node objects, so a reloaded program must be resolved
again before it is run.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Literal,
    Unary,
    Binary,
    Logical,
    Grouping,
    Variable,
    Assign,
    Call,
    Expression,
    Print,
    Var,
    Block,
    If,
    While,
    Break,
    Continue,
    Function,
    Return,
)
from .lexer import Token, TokenKind
from .types import NIL, NilVal


def token_to_obj(t: Token) -> Dict[str, Any]:
    return {"kind": t.kind.name, "lexeme": t.lexeme, "line": t.line}


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(TokenKind[o["kind"]], o["lexeme"], o["line"])


def value_to_obj(value: Any) -> Any:
    if isinstance(value, NilVal):
        return {"__type__": "nil"}
    return value


def value_from_obj(o: Any) -> Any:
    if isinstance(o, dict) and o.get("__type__") == "nil":
        return NIL
    if isinstance(o, int) and not isinstance(o, bool):
        return float(o)
    return o


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]

    # Expressions
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": token_to_obj(node.operator), "operand": ast_to_obj(node.operand)}
    if isinstance(node, (Binary, Logical)):
        return {
            "type": type(node).__name__,
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expression": ast_to_obj(node.expression)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": token_to_obj(node.name)}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": token_to_obj(node.name), "value": ast_to_obj(node.value)}
    if isinstance(node, Call):
        return {
            "type": "Call",
            "callee": ast_to_obj(node.callee),
            "paren": token_to_obj(node.paren),
            "arguments": [ast_to_obj(a) for a in node.arguments],
        }

    # Statements
    if isinstance(node, (Expression, Print)):
        return {"type": type(node).__name__, "expression": ast_to_obj(node.expression)}
    if isinstance(node, Var):
        return {"type": "Var", "name": token_to_obj(node.name), "initializer": ast_to_obj(node.initializer)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, While):
        # The increment is the body block's last statement; it is re-linked on load.
        return {
            "type": "While",
            "condition": ast_to_obj(node.condition),
            "body": ast_to_obj(node.body),
            "has_increment": node.increment is not None,
        }
    if isinstance(node, (Break, Continue)):
        return {"type": type(node).__name__, "keyword": token_to_obj(node.keyword)}
    if isinstance(node, Function):
        return {
            "type": "Function",
            "name": token_to_obj(node.name),
            "params": [token_to_obj(p) for p in node.params],
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, Return):
        return {"type": "Return", "keyword": token_to_obj(node.keyword), "value": ast_to_obj(node.value)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")

    # Expressions
    if t == "Literal":
        return Literal(value=value_from_obj(obj["value"]))
    if t == "Unary":
        return Unary(operator=token_from_obj(obj["operator"]), operand=ast_from_obj(obj["operand"]))
    if t in ("Binary", "Logical"):
        cls = Binary if t == "Binary" else Logical
        return cls(
            left=ast_from_obj(obj["left"]),
            operator=token_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Grouping":
        return Grouping(expression=ast_from_obj(obj["expression"]))
    if t == "Variable":
        return Variable(name=token_from_obj(obj["name"]))
    if t == "Assign":
        return Assign(name=token_from_obj(obj["name"]), value=ast_from_obj(obj["value"]))
    if t == "Call":
        return Call(
            callee=ast_from_obj(obj["callee"]),
            paren=token_from_obj(obj["paren"]),
            arguments=[ast_from_obj(a) for a in obj["arguments"]],
        )

    # Statements
    if t == "Expression":
        return Expression(expression=ast_from_obj(obj["expression"]))
    if t == "Print":
        return Print(expression=ast_from_obj(obj["expression"]))
    if t == "Var":
        return Var(name=token_from_obj(obj["name"]), initializer=ast_from_obj(obj.get("initializer")))
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "While":
        body = ast_from_obj(obj["body"])
        increment = None
        if obj.get("has_increment"):
            if not (isinstance(body, Block) and body.statements and isinstance(body.statements[-1], Expression)):
                raise ValueError("While with increment must end its body with an expression statement")
            increment = body.statements[-1].expression
        return While(condition=ast_from_obj(obj["condition"]), body=body, increment=increment)
    if t == "Break":
        return Break(keyword=token_from_obj(obj["keyword"]))
    if t == "Continue":
        return Continue(keyword=token_from_obj(obj["keyword"]))
    if t == "Function":
        return Function(
            name=token_from_obj(obj["name"]),
            params=[token_from_obj(p) for p in obj["params"]],
            body=[ast_from_obj(s) for s in obj["body"]],
        )
    if t == "Return":
        return Return(keyword=token_from_obj(obj["keyword"]), value=ast_from_obj(obj.get("value")))

    raise ValueError(f"Unknown AST node type: {t}")
