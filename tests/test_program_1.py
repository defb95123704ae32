from pathlib import Path

from vernacular import Session

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1(capsys):
    with open(EXAMPLES / 'program_1.vrn', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session(trace=False)
    session.run_fragment(source)
    out = capsys.readouterr().out.strip()
    assert out == 'Hello, World!'
