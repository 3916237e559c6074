from typing import Any, List
from val.ast import Span


class ValError(Exception):
    """Base class for every diagnostic that points into source text."""
    kind = 'error'

    def __init__(self, span: Span, message: str):
        super().__init__(message)
        self.span = span
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.span!r}, {self.message!r})"


class ParseError(ValError):
    kind = 'syntax error'


class AnalysisError(ValError):
    kind = 'error'


class EvaluationError(ValError):
    kind = 'runtime error'


class ParseErrors(Exception):
    """Raised by the parser once input is consumed if any syntax error was seen."""
    def __init__(self, errors: List[ParseError]):
        super().__init__(f"{len(errors)} syntax error(s): " + '; '.join(e.message for e in errors))
        self.errors = errors


class AnalysisErrors(Exception):
    """Raised when the analyzer rejects a program; carries every error found."""
    def __init__(self, errors: List[AnalysisError]):
        super().__init__(f"{len(errors)} error(s): " + '; '.join(e.message for e in errors))
        self.errors = errors


class ReturnSignal:
    """Result of executing a `return` statement; unwinds to the function call."""
    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


class BreakSignal:
    def __repr__(self) -> str:
        return 'BreakSignal'


class ContinueSignal:
    def __repr__(self) -> str:
        return 'ContinueSignal'


BREAK = BreakSignal()
CONTINUE = ContinueSignal()

SIGNALS = (ReturnSignal, BreakSignal, ContinueSignal)
