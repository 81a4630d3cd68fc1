from pathlib import Path

import pytest

from loxy.__main__ import main, EXIT_SYNTAX_ERROR

PROGRAM = Path(__file__).parent / 'programs' / 'syntax_errors.lox'


def test_program_6_reports_every_syntax_error(capsys):
    with pytest.raises(SystemExit) as info:
        main([str(PROGRAM)])
    assert info.value.code == EXIT_SYNTAX_ERROR
    captured = capsys.readouterr()
    assert captured.out == ''
    assert captured.err.splitlines() == [
        "[line 1] Error at '=': Expect variable name.",
        "[line 2] Error at ';': Expect expression.",
        "[line 4] Error at end: Expect ';' after value.",
    ]
