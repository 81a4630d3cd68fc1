from pathlib import Path

import pytest

from loxy import tokenize, parse, resolve, run, global_environment

PROGRAMS = Path(__file__).parent / 'programs'


@pytest.fixture
def interpret():
    """Scan, parse, resolve and run a source string; returns (output, error)."""
    def _interpret(source, **options):
        statements, errors = parse(tokenize(source))
        assert errors == []
        return run(statements, resolve(statements), global_environment(), **options)
    return _interpret


@pytest.fixture
def program_source():
    def _read(name):
        with open(PROGRAMS / name, 'r', encoding='utf-8') as f:
            return f.read()
    return _read
