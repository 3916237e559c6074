"""Render errors as labelled source snippets.

    runtime error: Division by zero
     --> program.val:1:5
      |
    1 | 1 / 0
      |     ^
"""

from typing import Iterable, Tuple

from val.errors import ValError


def line_and_column(source: str, offset: int) -> Tuple[int, int]:
    """1-based line and column of a character offset."""
    offset = max(0, min(offset, len(source)))
    line = source.count('\n', 0, offset) + 1
    line_start = source.rfind('\n', 0, offset) + 1
    return line, offset - line_start + 1


def render(source_id: str, source: str, error: ValError) -> str:
    start, end = error.span.start, error.span.end
    first_line, first_col = line_and_column(source, start)
    last_line, _ = line_and_column(source, max(start, end - 1))
    lines = source.split('\n')
    width = len(str(last_line))
    gutter = ' ' * width
    parts = [
        f"{error.kind}: {error.message}",
        f"{gutter}--> {source_id}:{first_line}:{first_col}",
        f"{gutter} |",
    ]
    offset = sum(len(line) + 1 for line in lines[:first_line - 1])
    for number in range(first_line, last_line + 1):
        text = lines[number - 1] if number - 1 < len(lines) else ''
        line_end = offset + len(text)
        lo = max(start, offset) - offset
        hi = min(end, line_end) - offset
        parts.append(f"{number:>{width}} | {text}")
        parts.append(f"{gutter} | {' ' * lo}{'^' * max(hi - lo, 1)}")
        offset = line_end + 1
    return '\n'.join(parts)


def render_all(source_id: str, source: str, errors: Iterable[ValError]) -> str:
    return '\n\n'.join(render(source_id, source, error) for error in errors)
