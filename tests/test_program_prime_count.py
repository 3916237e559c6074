from pathlib import Path
from val.__main__ import main

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_prime_count_with_shadowing_variable(capsys):
    # `count` is both the function and the counter variable inside it
    main([str(EXAMPLES / 'prime_count.val')])
    out = capsys.readouterr().out.strip()
    assert out == '669'
