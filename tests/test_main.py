import builtins

import pytest

from vernacular.__main__ import main


def test_runs_program_file(tmp_path, capsys):
    path = tmp_path / 'prog.vrn'
    path.write_text('print 2 + 2', encoding='utf-8')
    main(['--no-trace', str(path)])
    assert capsys.readouterr().out.split('\n') == [f'Running file: {path}', '4', '']


def test_failing_program_exits_with_error(tmp_path, capsys):
    path = tmp_path / 'bad.vrn'
    path.write_text('foo()', encoding='utf-8')
    with pytest.raises(SystemExit) as excinfo:
        main(['--no-trace', str(path)])
    assert excinfo.value.code == 1
    assert 'UnknownFunction' in capsys.readouterr().err


def test_repl_continuation_errors_and_exit(monkeypatch, capsys):
    lines = iter(['let x: Whole = 2 \\', '    * 3', 'foo()', 'print x', '.exit'])
    monkeypatch.setattr(builtins, 'input', lambda prompt='': next(lines))
    main(['--no-trace'])
    captured = capsys.readouterr()
    assert '6\n' in captured.out
    assert captured.out.rstrip().endswith('Goodbye!')
    assert 'UnknownFunction' in captured.err


def test_repl_load_command(monkeypatch, tmp_path, capsys):
    path = tmp_path / 'loaded.vrn'
    path.write_text('let loaded = "yes"\nprint loaded', encoding='utf-8')
    lines = iter(['.load', str(path), 'print loaded ++ "!"'])

    def fake_input(prompt=''):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, 'input', fake_input)
    main(['--no-trace'])
    out = capsys.readouterr().out
    assert 'yes\n' in out
    assert 'yes!\n' in out
