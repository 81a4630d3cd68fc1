from loxy.ast import (
    Assign, Binary, Block, Break, Call, Continue, Expression, Function, Grouping,
    If, Literal, Logical, Print, Return, Unary, Var, Variable, While,
)
from loxy.lexer import tokenize, TokenKind
from loxy.parser import parse
from loxy.types import NIL


def parse_ok(source):
    statements, errors = parse(tokenize(source, []))
    assert errors == []
    return statements


def parse_errors(source):
    statements, errors = parse(tokenize(source, []))
    return statements, [str(e) for e in errors]


def single_expr(source):
    (stmt,) = parse_ok(source)
    assert isinstance(stmt, Expression)
    return stmt.expression


def test_factor_binds_tighter_than_term():
    expr = single_expr('1 + 2 * 3;')
    assert isinstance(expr, Binary)
    assert expr.operator.kind is TokenKind.PLUS
    assert isinstance(expr.left, Literal) and expr.left.value == 1.0
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.kind is TokenKind.STAR


def test_binary_operators_are_left_associative():
    expr = single_expr('1 - 2 - 3;')
    assert expr.operator.kind is TokenKind.MINUS
    assert isinstance(expr.left, Binary)
    assert expr.right.value == 3.0


def test_assignment_is_right_associative():
    expr = single_expr('a = b = 1;')
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'a'
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == 'b'


def test_logical_and_binds_tighter_than_or():
    expr = single_expr('a or b and c;')
    assert isinstance(expr, Logical)
    assert expr.operator.kind is TokenKind.OR
    assert isinstance(expr.right, Logical)
    assert expr.right.operator.kind is TokenKind.AND


def test_unary_grouping_and_literals():
    expr = single_expr('!(-1 == nil);')
    assert isinstance(expr, Unary)
    assert isinstance(expr.operand, Grouping)
    inner = expr.operand.expression
    assert isinstance(inner.left, Unary)
    assert inner.right.value is NIL
    assert single_expr('"text";').value == 'text'
    assert single_expr('true;').value is True


def test_chained_calls():
    expr = single_expr('f(1)(2, 3)();')
    assert isinstance(expr, Call) and expr.arguments == []
    assert isinstance(expr.callee, Call) and len(expr.callee.arguments) == 2
    assert isinstance(expr.callee.callee, Call)
    assert isinstance(expr.callee.callee.callee, Variable)


def test_argument_limit():
    args = ', '.join(['1'] * 255)
    parse_ok(f'f({args});')
    _, errors = parse_errors(f'f({args}, 1);')
    assert errors == ["[line 1] Error at '1': Can't have more than 255 arguments."]


def test_parameter_limit():
    params = ', '.join(f'p{i}' for i in range(255))
    (fun,) = parse_ok(f'fun f({params}) {{}}')
    assert len(fun.params) == 255
    statements, errors = parse_errors(f'fun f({params}, p255) {{}}')
    assert statements == []
    assert errors == ["[line 1] Error at 'p255': Can't have more than 255 parameters."]


def test_invalid_assignment_target():
    _, errors = parse_errors('1 = 2;\na + b = c;')
    assert errors == [
        "[line 1] Error at '=': Invalid assignment target.",
        "[line 2] Error at '=': Invalid assignment target.",
    ]


def test_missing_semicolon_at_end():
    _, errors = parse_errors('print 1')
    assert errors == ["[line 1] Error at end: Expect ';' after value."]


def test_reports_independent_errors_from_one_parse():
    statements, errors = parse_errors('var = 1;\n1 + ;\nprint 3;')
    assert errors == [
        "[line 1] Error at '=': Expect variable name.",
        "[line 2] Error at ';': Expect expression.",
    ]
    assert len(statements) == 1
    assert isinstance(statements[0], Print)


def test_errors_inside_blocks_recover_within_the_block():
    statements, errors = parse_errors('{\n print ;\n print 1;\n}\nprint 2;')
    assert errors == ["[line 2] Error at ';': Expect expression."]
    block, last = statements
    assert isinstance(block, Block)
    assert len(block.statements) == 1
    assert isinstance(last, Print)


def test_unclosed_block():
    _, errors = parse_errors('{ print 1;')
    assert errors == ["[line 1] Error at end: Expect '}' after block."]


def test_var_and_function_declarations():
    var, fun = parse_ok('var x;\nfun add(a, b) { return a + b; }')
    assert isinstance(var, Var) and var.initializer is None
    assert isinstance(fun, Function)
    assert fun.name.lexeme == 'add'
    assert [p.lexeme for p in fun.params] == ['a', 'b']
    (ret,) = fun.body
    assert isinstance(ret, Return) and isinstance(ret.value, Binary)


def test_if_else_and_while():
    if_stmt, while_stmt = parse_ok('if (a) print 1; else print 2;\nwhile (b) { break; continue; }')
    assert isinstance(if_stmt, If)
    assert isinstance(if_stmt.else_branch, Print)
    assert isinstance(while_stmt, While)
    assert while_stmt.increment is None
    body = while_stmt.body
    assert isinstance(body.statements[0], Break)
    assert isinstance(body.statements[1], Continue)


def test_for_loop_desugars_into_block_and_while():
    (outer,) = parse_ok('for (var i = 0; i < 3; i = i + 1) print i;')
    assert isinstance(outer, Block)
    init, loop = outer.statements
    assert isinstance(init, Var) and init.name.lexeme == 'i'
    assert isinstance(loop, While)
    assert isinstance(loop.condition, Binary)
    assert isinstance(loop.body, Block)
    original, step = loop.body.statements
    assert isinstance(original, Print)
    assert isinstance(step, Expression)
    assert loop.increment is step.expression


def test_for_loop_without_clauses():
    (loop,) = parse_ok('for (;;) break;')
    assert isinstance(loop, While)
    assert isinstance(loop.condition, Literal) and loop.condition.value is True
    assert isinstance(loop.body, Break)
    assert loop.increment is None


def test_return_without_value():
    (fun,) = parse_ok('fun f() { return; }')
    assert fun.body[0].value is None
