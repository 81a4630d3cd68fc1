# Loxy language package
# This package provides a scanner, parser, resolver and tree-walking
# interpreter for the Loxy scripting language.
from .lexer import tokenize
from .parser import parse
from .resolver import resolve
from .interpreter import run, Interpreter
from .natives import global_environment, register_native
from .errors import LoxyError, ParseError


def run_program(source: str, debug_level: int = 0) -> str:
    """Scan, parse, resolve and run ``source`` in a fresh global environment.

    Returns the text an embedding would show: the parse errors one per line
    if there are any, otherwise the captured output followed by the runtime
    error message when the run failed.
    """
    tokens = tokenize(source)
    statements, errors = parse(tokens)
    if errors:
        return '\n'.join(str(e) for e in errors)
    output, error = run(statements, resolve(statements), global_environment(), debug_level=debug_level)
    if error is not None:
        return output + str(error)
    return output


__all__ = [
    'tokenize',
    'parse',
    'resolve',
    'run',
    'run_program',
    'Interpreter',
    'global_environment',
    'register_native',
    'LoxyError',
    'ParseError',
]
