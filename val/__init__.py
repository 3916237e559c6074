# Val language package
# This package provides a parser, analyzer and evaluator for the Val language.
from .analyzer import analyze
from .config import Config
from .environment import Environment
from .errors import AnalysisError, AnalysisErrors, EvaluationError, ParseError, ParseErrors, ValError
from .evaluator import Evaluator, run_program
from .numeric import RoundingMode
from .parser import parse

run = run_program

__all__ = [
    'analyze',
    'parse',
    'run',
    'run_program',
    'Config',
    'Environment',
    'Evaluator',
    'RoundingMode',
    'ValError',
    'ParseError',
    'ParseErrors',
    'AnalysisError',
    'AnalysisErrors',
    'EvaluationError',
]
