import json

import pytest

from loxy.__main__ import main, EXIT_RUNTIME_ERROR, EXIT_SYNTAX_ERROR

SOURCE = '''
fun square(n) { return n * n; }
for (var i = 0; i < 5; i = i + 1) {
  if (i == 2) continue;
  print square(i);
}
'''


@pytest.fixture
def program(tmp_path):
    def _write(source, name='prog.lox'):
        path = tmp_path / name
        path.write_text(source, encoding='utf-8')
        return path
    return _write


def test_runs_a_program(capsys, program):
    main([str(program(SOURCE))])
    assert capsys.readouterr().out == '0\n1\n9\n16\n'


def test_missing_file(capsys, tmp_path):
    with pytest.raises(SystemExit) as info:
        main([str(tmp_path / 'nope.lox')])
    assert info.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_missing_program_argument(capsys):
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2


def test_tokenize(capsys, program):
    main(['--tokenize', str(program('print "hi" + 1;'))])
    assert capsys.readouterr().out.splitlines() == [
        'PRINT print null',
        'STRING "hi" hi',
        'PLUS + null',
        'NUMBER 1 1.0',
        'SEMICOLON ; null',
        'EOF  null',
    ]


def test_syntax_error_exit_code(capsys, program):
    with pytest.raises(SystemExit) as info:
        main([str(program('print ;'))])
    assert info.value.code == EXIT_SYNTAX_ERROR
    assert capsys.readouterr().err == "[line 1] Error at ';': Expect expression.\n"


def test_runtime_error_exit_code(capsys, program):
    with pytest.raises(SystemExit) as info:
        main([str(program('print "a";\nprint undefined;'))])
    assert info.value.code == EXIT_RUNTIME_ERROR
    captured = capsys.readouterr()
    assert captured.out == 'a\n'
    assert captured.err == "Runtime error: UndefinedVariable: Undefined variable 'undefined'.\n"


def test_unbounded_recursion_is_reported(capsys, program):
    with pytest.raises(SystemExit) as info:
        main([str(program('fun f() { return f(); }\nf();'))])
    assert info.value.code == EXIT_RUNTIME_ERROR
    assert capsys.readouterr().err == 'Runtime error: StackOverflow: Maximum recursion depth exceeded.\n'


def test_deep_recursion_within_the_raised_limit(capsys, program):
    source = 'fun depth(n) { if (n == 0) return 0; return depth(n - 1) + 1; }\nprint depth(300);'
    main([str(program(source))])
    assert capsys.readouterr().out == '300\n'


def test_max_steps(capsys, program):
    with pytest.raises(SystemExit) as info:
        main(['--max-steps', '100', str(program('while (true) {}'))])
    assert info.value.code == EXIT_RUNTIME_ERROR
    assert 'ExecutionLimitExceeded' in capsys.readouterr().err


def test_emit_ast_and_run_it(capsys, program):
    path = program(SOURCE)
    main(['--emit-ast', str(path)])
    ast_path = path.with_name('prog.lox.ast.json')
    assert capsys.readouterr().out.strip() == str(ast_path)
    data = json.loads(ast_path.read_text(encoding='utf-8'))
    assert [node['type'] for node in data] == ['Function', 'Block']

    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out == '0\n1\n9\n16\n'


def test_verbose_writes_debug_file(capsys, program, tmp_path, monkeypatch):
    path = program('var x = 1;\nprint x;')
    monkeypatch.chdir(tmp_path)
    main(['-vv', str(path)])
    assert capsys.readouterr().out == '1\n'
    assert 'declare x: number = 1' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')


@pytest.mark.parametrize('content', [
    'not json',
    '[{"type": "Print"}]',
    '[{"type": "Mystery"}]',
    '{"type": "Literal", "value": 1}',
])
def test_malformed_ast_file(capsys, program, content):
    path = program(content, name='bad.ast.json')
    with pytest.raises(SystemExit) as info:
        main(['--ast', str(path)])
    assert info.value.code == 1
    assert capsys.readouterr().err.startswith(f'Error: invalid AST file {path}: ')
