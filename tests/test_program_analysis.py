from pathlib import Path
import pytest
from val.__main__ import main

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_reports_every_analysis_error_before_running(capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(EXAMPLES / 'analysis.val')])
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert 'left-hand side must be a variable or list element' in err
    assert 'Duplicate parameter `x` in function `pair`' in err
    assert 'Call to undefined function `undefined_fn`' in err
