from pathlib import Path

import pytest

from vernacular import Session, VernacularError

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_5_whole_division(capsys):
    """Test program 5: storing a fractional quotient into a Whole variable.

    The analyzer lets the assignment through because both sides are
    numeric; the store instruction rejects 2.5 at run time, after x was
    already set to 10.
    """
    with open(EXAMPLES / 'program_5.vrn', 'r', encoding='utf-8') as f:
        source = f.read()
    session = Session(trace=False)
    with pytest.raises(VernacularError) as excinfo:
        session.run_fragment(source)
    assert excinfo.value.kind == 'TypeMismatch'
    assert session.env.values['x'] == 10.0
    assert capsys.readouterr().out == ''
