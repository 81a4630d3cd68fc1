"""CLI entry point for the Loxy interpreter.

Usage:
    python -m loxy [-v|-vv|-vvv] [--max-steps N] <program_file>
    python -m loxy --tokenize <program_file>
    python -m loxy [-v...] --emit-ast <program_file>
    python -m loxy [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokenize    Print the token stream of the given file, one per line
  --emit-ast    Parse the given file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --max-steps   Stop with an error after executing this many statements

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.

Exit status is 65 when the program has syntax errors and 70 when it stops
with a runtime error.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import ast_to_obj, ast_from_obj
from .interpreter import Interpreter
from .lexer import tokenize, format_token
from .natives import global_environment
from .parser import parse
from .resolver import resolve

EXIT_SYNTAX_ERROR = 65
EXIT_RUNTIME_ERROR = 70
# Each Loxy call costs several Python frames.
RECURSION_LIMIT = 5000


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str):
    statements, errors = parse(tokenize(source))
    if errors:
        for err in errors:
            print(err, file=sys.stderr)
        sys.exit(EXIT_SYNTAX_ERROR)
    return statements


def load_ast(path: Path):
    try:
        statements = ast_from_obj(json.loads(read_source(path)))
        if not isinstance(statements, list):
            raise ValueError("expected a list of statements")
    except (KeyError, TypeError, ValueError) as e:
        print(f"Error: invalid AST file {path}: {e}", file=sys.stderr)
        sys.exit(1)
    return statements


def execute(statements, args) -> None:
    interpreter = Interpreter(resolve(statements), debug_level=args.v, max_steps=args.max_steps)
    output, error = interpreter.run(statements, global_environment())
    sys.stdout.write(output)
    if error is not None:
        print(f"Runtime error: {error}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='loxy', description="Loxy language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-steps', type=int, default=None, metavar='N',
                        help='stop with an error after N statements')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokenize', metavar='LOX_FILE', help='print the tokens of the given file')
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Loxy program file to execute')
    args = parser.parse_args(argv)
    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

    if args.tokenize:
        source = read_source(Path(args.tokenize))
        for token in tokenize(source):
            print(format_token(token))
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        statements = parse_or_exit(read_source(program_file))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        execute(load_ast(Path(args.ast)), args)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --tokenize/--emit-ast/--ast')
    statements = parse_or_exit(read_source(Path(args.program)))
    execute(statements, args)


if __name__ == '__main__':
    main()
