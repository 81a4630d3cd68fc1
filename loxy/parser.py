"""Recursive-descent parser for the Loxy language.

One method per grammar rule, lowest precedence first::

    assignment -> logic_or -> logic_and -> equality -> comparison
               -> term -> factor -> unary -> call -> primary

A syntax error inside a declaration does not stop the parse. The error is
recorded, tokens are discarded up to the next statement boundary, and
parsing resumes with the next declaration, so a single call reports every
independent error in the file.

``for`` loops are desugared here into ``Block``/``While`` nodes; nothing
downstream knows about them.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
    Expr, Literal, Unary, Binary, Logical, Grouping, Variable, Assign, Call,
    Stmt, Expression, Print, Var, Block, If, While, Break, Continue,
    Function, Return,
)
from .errors import ParseError
from .lexer import Token, TokenKind, string_value
from .types import NIL

MAX_ARGUMENTS = 255

# Tokens that begin a new declaration or statement; synchronisation stops here.
STATEMENT_STARTS = {
    TokenKind.CLASS,
    TokenKind.FUN,
    TokenKind.VAR,
    TokenKind.FOR,
    TokenKind.IF,
    TokenKind.WHILE,
    TokenKind.PRINT,
    TokenKind.RETURN,
}


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.errors: List[ParseError] = []

    def parse(self) -> Tuple[List[Stmt], List[ParseError]]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements, self.errors

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, kind: TokenKind) -> bool:
        if self.is_at_end():
            return False
        return self.peek().kind is kind

    def match(self, *kinds: TokenKind) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind: TokenKind, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise ParseError(self.peek(), message)

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().kind is TokenKind.SEMICOLON:
                return
            if self.peek().kind in STATEMENT_STARTS:
                return
            self.advance()

    # Declarations

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenKind.VAR):
                return self.parse_var_decl()
            if self.match(TokenKind.FUN):
                return self.parse_func_decl()
            return self.parse_statement()
        except ParseError as err:
            self.errors.append(err)
            self.synchronize()
            return None

    def parse_var_decl(self) -> Var:
        name = self.consume(TokenKind.IDENTIFIER, "Expect variable name.")
        initializer: Optional[Expr] = None
        if self.match(TokenKind.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_func_decl(self) -> Function:
        name = self.consume(TokenKind.IDENTIFIER, "Expect function name.")
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after function name.")
        params: List[Token] = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    raise ParseError(self.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self.consume(TokenKind.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenKind.COMMA):
                    break
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(TokenKind.LEFT_BRACE, "Expect '{' before function body.")
        body = self.parse_block()
        return Function(name, params, body)

    # Statements

    def parse_statement(self) -> Stmt:
        if self.match(TokenKind.FOR):
            return self.parse_for_stmt()
        if self.match(TokenKind.IF):
            return self.parse_if_stmt()
        if self.match(TokenKind.PRINT):
            return self.parse_print_stmt()
        if self.match(TokenKind.RETURN):
            return self.parse_return_stmt()
        if self.match(TokenKind.WHILE):
            return self.parse_while_stmt()
        if self.match(TokenKind.LEFT_BRACE):
            return Block(self.parse_block())
        if self.match(TokenKind.FUN):
            return self.parse_func_decl()
        if self.match(TokenKind.VAR):
            return self.parse_var_decl()
        if self.match(TokenKind.BREAK):
            keyword = self.previous()
            self.consume(TokenKind.SEMICOLON, "Expect ';' after 'break'.")
            return Break(keyword)
        if self.match(TokenKind.CONTINUE):
            keyword = self.previous()
            self.consume(TokenKind.SEMICOLON, "Expect ';' after 'continue'.")
            return Continue(keyword)
        return self.parse_expression_stmt()

    def parse_for_stmt(self) -> Stmt:
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'for'.")
        if self.match(TokenKind.SEMICOLON):
            initializer = None
        elif self.match(TokenKind.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expression_stmt()

        condition: Expr = Literal(True)
        if not self.check(TokenKind.SEMICOLON):
            condition = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TokenKind.RIGHT_PAREN):
            increment = self.parse_expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()
        if increment is not None:
            body = Block([body, Expression(increment)])
        loop: Stmt = While(condition, body, increment)
        if initializer is not None:
            loop = Block([initializer, loop])
        return loop

    def parse_if_stmt(self) -> If:
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenKind.ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch)

    def parse_print_stmt(self) -> Print:
        value = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def parse_return_stmt(self) -> Return:
        keyword = self.previous()
        value = None
        if not self.check(TokenKind.SEMICOLON):
            value = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def parse_while_stmt(self) -> While:
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_statement()
        return While(condition, body)

    def parse_block(self) -> List[Stmt]:
        """Parse declarations up to the closing brace; '{' is already consumed."""
        statements: List[Stmt] = []
        while not self.check(TokenKind.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenKind.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_expression_stmt(self) -> Expression:
        expr = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assign()

    def parse_assign(self) -> Expr:
        expr = self.parse_logic_or()
        if self.match(TokenKind.EQUAL):
            equals = self.previous()
            value = self.parse_assign()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            raise ParseError(equals, "Invalid assignment target.")
        return expr

    def parse_logic_or(self) -> Expr:
        expr = self.parse_logic_and()
        while self.match(TokenKind.OR):
            operator = self.previous()
            right = self.parse_logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def parse_logic_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match(TokenKind.AND):
            operator = self.previous()
            right = self.parse_equality()
            expr = Logical(expr, operator, right)
        return expr

    def parse_binary(self, operand, *kinds: TokenKind) -> Expr:
        """Left-associative chain of ``operand (op operand)*``."""
        expr = operand()
        while self.match(*kinds):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def parse_equality(self) -> Expr:
        return self.parse_binary(self.parse_comparison, TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)

    def parse_comparison(self) -> Expr:
        return self.parse_binary(
            self.parse_term,
            TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL,
        )

    def parse_term(self) -> Expr:
        return self.parse_binary(self.parse_factor, TokenKind.PLUS, TokenKind.MINUS)

    def parse_factor(self) -> Expr:
        return self.parse_binary(self.parse_unary, TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT)

    def parse_unary(self) -> Expr:
        if self.match(TokenKind.BANG, TokenKind.MINUS):
            operator = self.previous()
            operand = self.parse_unary()
            return Unary(operator, operand)
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while self.match(TokenKind.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    raise ParseError(self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self.parse_expression())
                if not self.match(TokenKind.COMMA):
                    break
        paren = self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def parse_primary(self) -> Expr:
        if self.match(TokenKind.FALSE):
            return Literal(False)
        if self.match(TokenKind.TRUE):
            return Literal(True)
        if self.match(TokenKind.NIL):
            return Literal(NIL)
        if self.match(TokenKind.NUMBER):
            return Literal(float(self.previous().lexeme))
        if self.match(TokenKind.STRING):
            return Literal(string_value(self.previous()))
        if self.match(TokenKind.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenKind.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise ParseError(self.peek(), "Expect expression.")


def parse(tokens: List[Token]) -> Tuple[List[Stmt], List[ParseError]]:
    """Parse a token list into statements plus every syntax error found."""
    return Parser(tokens).parse()
