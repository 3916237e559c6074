from pathlib import Path
from val.__main__ import main

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_factorial(capsys):
    main([str(EXAMPLES / 'factorial.val')])
    out = capsys.readouterr().out.strip()
    assert out == '120'
