"""Tokenizer for the Loxy language.

The lexer makes a single left-to-right pass over the source text and
produces a flat list of tokens, always terminated by an ``EOF`` token.
Problems such as unexpected characters or unterminated strings are
reported to a side channel and scanning carries on, so one bad character
never hides the rest of the file.
"""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass
from typing import List, Optional


class TokenKind(enum.Enum):
    # Single-character tokens
    LEFT_PAREN = '('
    RIGHT_PAREN = ')'
    LEFT_BRACE = '{'
    RIGHT_BRACE = '}'
    COMMA = ','
    DOT = '.'
    MINUS = '-'
    PLUS = '+'
    SEMICOLON = ';'
    SLASH = '/'
    STAR = '*'
    PERCENT = '%'

    # One or two character tokens
    BANG = '!'
    BANG_EQUAL = '!='
    EQUAL = '='
    EQUAL_EQUAL = '=='
    GREATER = '>'
    GREATER_EQUAL = '>='
    LESS = '<'
    LESS_EQUAL = '<='

    # Literals
    IDENTIFIER = 'identifier'
    STRING = 'string'
    NUMBER = 'number'

    # Keywords
    AND = 'and'
    BREAK = 'break'
    CLASS = 'class'
    CONTINUE = 'continue'
    ELSE = 'else'
    FALSE = 'false'
    FUN = 'fun'
    FOR = 'for'
    IF = 'if'
    NIL = 'nil'
    OR = 'or'
    PRINT = 'print'
    RETURN = 'return'
    SUPER = 'super'
    THIS = 'this'
    TRUE = 'true'
    VAR = 'var'
    WHILE = 'while'

    EOF = 'eof'


KEYWORDS = {
    'and': TokenKind.AND,
    'break': TokenKind.BREAK,
    'class': TokenKind.CLASS,
    'continue': TokenKind.CONTINUE,
    'else': TokenKind.ELSE,
    'false': TokenKind.FALSE,
    'fun': TokenKind.FUN,
    'for': TokenKind.FOR,
    'if': TokenKind.IF,
    'nil': TokenKind.NIL,
    'or': TokenKind.OR,
    'print': TokenKind.PRINT,
    'return': TokenKind.RETURN,
    'super': TokenKind.SUPER,
    'this': TokenKind.THIS,
    'true': TokenKind.TRUE,
    'var': TokenKind.VAR,
    'while': TokenKind.WHILE,
}

SINGLE_CHAR_TOKENS = {
    '(': TokenKind.LEFT_PAREN,
    ')': TokenKind.RIGHT_PAREN,
    '{': TokenKind.LEFT_BRACE,
    '}': TokenKind.RIGHT_BRACE,
    ',': TokenKind.COMMA,
    '.': TokenKind.DOT,
    '-': TokenKind.MINUS,
    '+': TokenKind.PLUS,
    ';': TokenKind.SEMICOLON,
    '*': TokenKind.STAR,
    '%': TokenKind.PERCENT,
}

# first char -> (kind when followed by '=', kind otherwise)
EQUAL_SUFFIXED = {
    '!': (TokenKind.BANG_EQUAL, TokenKind.BANG),
    '=': (TokenKind.EQUAL_EQUAL, TokenKind.EQUAL),
    '>': (TokenKind.GREATER_EQUAL, TokenKind.GREATER),
    '<': (TokenKind.LESS_EQUAL, TokenKind.LESS),
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    line: int

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, line {self.line})"


@dataclass(frozen=True)
class ScanError:
    """A problem found while scanning; never fatal."""
    line: int
    message: str

    def __str__(self) -> str:
        return f"[line {self.line}] Error: {self.message}"


def _is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def _is_ident_start(c: str) -> bool:
    return c.isalpha() or c == '_'


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c == '_'


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = []
        self.errors: List[ScanError] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def tokenize(self) -> List[Token]:
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TokenKind.EOF, '', self.line))
        return self.tokens

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def match(self, expected: str) -> bool:
        if self.peek() != expected or self.is_at_end():
            return False
        self.current += 1
        return True

    def add_token(self, kind: TokenKind):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(kind, text, self.line))

    def error(self, message: str):
        self.errors.append(ScanError(self.line, message))

    def scan_token(self):
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c in EQUAL_SUFFIXED:
            with_equal, without = EQUAL_SUFFIXED[c]
            self.add_token(with_equal if self.match('=') else without)
        elif c == '/':
            if self.match('/'):
                # comment runs to end of line
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenKind.SLASH)
        elif c in ' \r\t':
            pass
        elif c == '\n':
            self.line += 1
        elif c == '"':
            self.scan_string()
        elif _is_digit(c):
            self.scan_number()
        elif _is_ident_start(c):
            self.scan_identifier()
        else:
            self.error(f"Unexpected character '{c}'.")

    def scan_string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            self.error("Unterminated string.")
            return
        self.advance()  # closing quote
        self.add_token(TokenKind.STRING)

    def scan_number(self):
        while _is_digit(self.peek()):
            self.advance()
        if self.peek() == '.' and _is_digit(self.peek_next()):
            self.advance()
            while _is_digit(self.peek()):
                self.advance()
        self.add_token(TokenKind.NUMBER)

    def scan_identifier(self):
        while _is_ident_char(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenKind.IDENTIFIER))


def tokenize(source: str, errors: Optional[List[ScanError]] = None) -> List[Token]:
    """Convert source code into a list of tokens ending with ``EOF``.

    Scan errors are appended to ``errors`` when a list is supplied and
    written to stderr otherwise.
    """
    lexer = Lexer(source)
    tokens = lexer.tokenize()
    if errors is not None:
        errors.extend(lexer.errors)
    else:
        for err in lexer.errors:
            print(err, file=sys.stderr)
    return tokens


def string_value(token: Token) -> str:
    """The text of a STRING token without its surrounding quotes."""
    return token.lexeme[1:-1]


def format_token(token: Token) -> str:
    """Render a token as ``KIND lexeme literal`` for the tokenize dump."""
    if token.kind is TokenKind.STRING:
        literal = string_value(token)
    elif token.kind is TokenKind.NUMBER:
        literal = repr(float(token.lexeme))
    else:
        literal = 'null'
    return f"{token.kind.name} {token.lexeme} {literal}"
