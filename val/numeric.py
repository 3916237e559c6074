"""Arbitrary precision numbers for Val.

Every Val number is a `decimal.Decimal`. A `Numeric` engine owns the
`decimal.Context` built from the configured precision (significant
decimal digits) and rounding mode, and a `Constants` table computed once
when the engine is created. Arithmetic goes through the context methods
so every result is rounded the configured way; the transcendental
functions run with a few guard digits and round once at the end.

Errors signalled by `decimal` (overflow, invalid operation, ...) are left
to propagate as `decimal.DecimalException`; callers translate them into
located errors with `describe`.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


GUARD_DIGITS = 10
DISPLAY_SIGNIFICANT_DIGITS = 20


class RoundingMode(Enum):
    NONE = 'none'
    UP = 'up'
    DOWN = 'down'
    TO_ZERO = 'to-zero'
    FROM_ZERO = 'from-zero'
    TO_EVEN = 'to-even'
    TO_ODD = 'to-odd'

    @classmethod
    def from_str(cls, text: str) -> 'RoundingMode':
        key = text.strip().lower()
        try:
            return _ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown rounding mode: {text}") from None

    @property
    def decimal_rounding(self) -> str:
        return _DECIMAL_ROUNDING[self]

    def __str__(self) -> str:
        return self.value


_ALIASES = {
    'none': RoundingMode.NONE,
    'up': RoundingMode.UP,
    'down': RoundingMode.DOWN,
    'tozero': RoundingMode.TO_ZERO,
    'to_zero': RoundingMode.TO_ZERO,
    'to-zero': RoundingMode.TO_ZERO,
    'toward_zero': RoundingMode.TO_ZERO,
    'toward-zero': RoundingMode.TO_ZERO,
    'fromzero': RoundingMode.FROM_ZERO,
    'from_zero': RoundingMode.FROM_ZERO,
    'from-zero': RoundingMode.FROM_ZERO,
    'away_from_zero': RoundingMode.FROM_ZERO,
    'away-from-zero': RoundingMode.FROM_ZERO,
    'toeven': RoundingMode.TO_EVEN,
    'to_even': RoundingMode.TO_EVEN,
    'to-even': RoundingMode.TO_EVEN,
    'nearest_even': RoundingMode.TO_EVEN,
    'bankers': RoundingMode.TO_EVEN,
    'toodd': RoundingMode.TO_ODD,
    'to_odd': RoundingMode.TO_ODD,
    'to-odd': RoundingMode.TO_ODD,
    'nearest_odd': RoundingMode.TO_ODD,
}

# `none` and `to-odd` round to nearest (ties to even) in arithmetic.
_DECIMAL_ROUNDING = {
    RoundingMode.NONE: decimal.ROUND_HALF_EVEN,
    RoundingMode.UP: decimal.ROUND_CEILING,
    RoundingMode.DOWN: decimal.ROUND_FLOOR,
    RoundingMode.TO_ZERO: decimal.ROUND_DOWN,
    RoundingMode.FROM_ZERO: decimal.ROUND_UP,
    RoundingMode.TO_EVEN: decimal.ROUND_HALF_EVEN,
    RoundingMode.TO_ODD: decimal.ROUND_HALF_EVEN,
}


def _compute_pi(ctx: decimal.Context) -> Decimal:
    # Series from the decimal module documentation recipes.
    with decimal.localcontext(ctx) as local:
        local.prec += 2
        three = Decimal(3)
        lasts, t, s, n, na, d, da = 0, three, 3, 1, 0, 0, 24
        while s != lasts:
            lasts = s
            n, na = n + na, na + 8
            d, da = d + da, da + 32
            t = (t * n) / d
            s += t
    return ctx.plus(s)


@dataclass(frozen=True)
class Constants:
    """Constants computed once per engine at working precision."""
    pi: Decimal
    e: Decimal
    ln2: Decimal

    @classmethod
    def compute(cls, precision: int) -> 'Constants':
        ctx = decimal.Context(prec=precision, rounding=decimal.ROUND_HALF_EVEN)
        return cls(
            pi=_compute_pi(ctx),
            e=ctx.exp(Decimal(1)),
            ln2=ctx.ln(Decimal(2)),
        )


def describe(exc: decimal.DecimalException) -> str:
    """Human-readable message for a decimal signal."""
    if isinstance(exc, decimal.DivisionByZero):
        return 'Division by zero'
    if isinstance(exc, decimal.Overflow):
        return 'Numeric overflow'
    return 'Invalid numeric operation'


def is_integer(value: Decimal) -> bool:
    return value.is_finite() and value == value.to_integral_value()


class Numeric:
    """Numeric engine bound to one precision and rounding mode."""

    def __init__(self, precision: int = 64, rounding_mode: RoundingMode = RoundingMode.TO_EVEN):
        if precision < 1:
            raise ValueError('precision must be at least 1 digit')
        self.precision = precision
        self.rounding_mode = rounding_mode
        self.context = decimal.Context(
            prec=precision,
            rounding=rounding_mode.decimal_rounding,
            traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
        )
        self.working = self.context.copy()
        self.working.prec = precision + GUARD_DIGITS
        self.constants = Constants.compute(self.working.prec)

    @property
    def pi(self) -> Decimal:
        return self.context.plus(self.constants.pi)

    @property
    def e(self) -> Decimal:
        return self.context.plus(self.constants.e)

    # Conversions

    def number(self, text: str) -> Decimal:
        return self.context.create_decimal(text)

    def from_int(self, value: int) -> Decimal:
        return self.context.create_decimal(value)

    # Arithmetic

    def add(self, a: Decimal, b: Decimal) -> Decimal:
        return self.context.add(a, b)

    def sub(self, a: Decimal, b: Decimal) -> Decimal:
        return self.context.subtract(a, b)

    def mul(self, a: Decimal, b: Decimal) -> Decimal:
        return self.context.multiply(a, b)

    def div(self, a: Decimal, b: Decimal) -> Decimal:
        return self.context.divide(a, b)

    def mod(self, a: Decimal, b: Decimal) -> Decimal:
        """Remainder carrying the sign of the dividend.

        The integer quotient may need more digits than the configured
        precision, so the remainder is taken in a context wide enough to
        hold it and rounded afterwards.
        """
        ctx = self.context.copy()
        ctx.prec = max(a.adjusted() - b.adjusted() + 1, 0) + self.precision
        return self.context.plus(ctx.remainder(a, b))

    def pow(self, a: Decimal, b: Decimal) -> Decimal:
        return self.context.power(a, b)

    def neg(self, a: Decimal) -> Decimal:
        return self.context.minus(a)

    def abs(self, a: Decimal) -> Decimal:
        return self.context.abs(a)

    def floor(self, a: Decimal) -> Decimal:
        return a.to_integral_value(rounding=decimal.ROUND_FLOOR)

    def ceil(self, a: Decimal) -> Decimal:
        return a.to_integral_value(rounding=decimal.ROUND_CEILING)

    def compare(self, a: Decimal, b: Decimal) -> int:
        return int(a.compare(b))

    # Exponentials and logarithms

    def sqrt(self, a: Decimal) -> Decimal:
        return self.context.sqrt(a)

    def exp(self, a: Decimal) -> Decimal:
        return self.context.exp(a)

    def ln(self, a: Decimal) -> Decimal:
        return self.context.ln(a)

    def log10(self, a: Decimal) -> Decimal:
        return self.context.log10(a)

    def log2(self, a: Decimal) -> Decimal:
        return self.context.plus(self.working.divide(self.working.ln(a), self.constants.ln2))

    def sinh(self, a: Decimal) -> Decimal:
        with decimal.localcontext(self.working):
            ea = a.exp()
            result = (ea - 1 / ea) / 2
        return self.context.plus(result)

    def cosh(self, a: Decimal) -> Decimal:
        with decimal.localcontext(self.working):
            ea = a.exp()
            result = (ea + 1 / ea) / 2
        return self.context.plus(result)

    def tanh(self, a: Decimal) -> Decimal:
        if abs(a) > self.precision:
            return Decimal(1).copy_sign(a)
        with decimal.localcontext(self.working):
            e2a = (2 * a).exp()
            result = (e2a - 1) / (e2a + 1)
        return self.context.plus(result)

    # Trigonometry

    def _reduce(self, a: Decimal) -> Decimal:
        # Working context must be active; maps a into [-pi, pi].
        return a.remainder_near(2 * self.constants.pi)

    def _sin(self, x: Decimal) -> Decimal:
        x = self._reduce(x)
        i, lasts, s, fact, num, sign = 1, 0, x, 1, x, 1
        while s != lasts:
            lasts = s
            i += 2
            fact *= i * (i - 1)
            num *= x * x
            sign *= -1
            s += num / fact * sign
        return s

    def _cos(self, x: Decimal) -> Decimal:
        x = self._reduce(x)
        i, lasts, s, fact, num, sign = 0, 0, 1, 1, 1, 1
        while s != lasts:
            lasts = s
            i += 2
            fact *= i * (i - 1)
            num *= x * x
            sign *= -1
            s += num / fact * sign
        return s

    def _atan(self, x: Decimal) -> Decimal:
        if x == 0:
            return Decimal(0)
        negative = x < 0
        x = abs(x)
        inverted = x > 1
        if inverted:
            x = 1 / x
        doublings = 0
        while x > Decimal('0.1'):
            x = x / (1 + (1 + x * x).sqrt())
            doublings += 1
        x2 = x * x
        s, term, n, lasts = x, x, 1, 0
        while s != lasts:
            lasts = s
            term *= -x2
            n += 2
            s += term / n
        s *= 2 ** doublings
        if inverted:
            s = self.constants.pi / 2 - s
        return -s if negative else s

    def _asin(self, x: Decimal) -> Decimal:
        if abs(x) == 1:
            return (self.constants.pi / 2).copy_sign(x)
        return self._atan(x / (1 - x * x).sqrt())

    def _run(self, fn, a: Decimal) -> Decimal:
        with decimal.localcontext(self.working):
            result = fn(+a)
        return self.context.plus(result)

    def sin(self, a: Decimal) -> Decimal:
        return self._run(self._sin, a)

    def cos(self, a: Decimal) -> Decimal:
        return self._run(self._cos, a)

    def tan(self, a: Decimal) -> Decimal:
        return self._run(lambda x: self._sin(x) / self._cos(x), a)

    def csc(self, a: Decimal) -> Decimal:
        return self._run(lambda x: 1 / self._sin(x), a)

    def sec(self, a: Decimal) -> Decimal:
        return self._run(lambda x: 1 / self._cos(x), a)

    def cot(self, a: Decimal) -> Decimal:
        return self._run(lambda x: self._cos(x) / self._sin(x), a)

    def atan(self, a: Decimal) -> Decimal:
        return self._run(self._atan, a)

    def asin(self, a: Decimal) -> Decimal:
        return self._run(self._asin, a)

    def acos(self, a: Decimal) -> Decimal:
        return self._run(lambda x: self.constants.pi / 2 - self._asin(x), a)

    def acsc(self, a: Decimal) -> Decimal:
        return self._run(lambda x: self._asin(1 / x), a)

    def asec(self, a: Decimal) -> Decimal:
        return self._run(lambda x: self.constants.pi / 2 - self._asin(1 / x), a)

    def acot(self, a: Decimal) -> Decimal:
        return self._run(lambda x: self.constants.pi / 2 - self._atan(x), a)

    def _is_integral(self, quotient: Decimal) -> bool:
        # Tolerance a few digits above the configured precision absorbs the error of a rounded pi.
        with decimal.localcontext(self.working):
            nearest = quotient.to_integral_value()
            tolerance = Decimal(1).scaleb(3 - self.precision) * max(Decimal(1), abs(nearest))
            return abs(quotient - nearest) <= tolerance

    def is_multiple_of_pi(self, a: Decimal) -> bool:
        with decimal.localcontext(self.working):
            quotient = a / self.constants.pi
        return self._is_integral(quotient)

    def is_odd_multiple_of_half_pi(self, a: Decimal) -> bool:
        with decimal.localcontext(self.working):
            quotient = (a - self.constants.pi / 2) / self.constants.pi
        return self._is_integral(quotient)

    # Display

    def display(self, value: Decimal, digits: Optional[int] = None) -> str:
        return format_number(value, digits, self.rounding_mode)


def format_number(value: Decimal, digits: Optional[int] = None,
                  rounding_mode: RoundingMode = RoundingMode.TO_EVEN) -> str:
    """Render a number in positional notation.

    Without `digits` the value is rounded to 20 significant digits and
    trailing zeros are stripped. With `digits` exactly that many fractional
    digits are shown, rounded with `rounding_mode` (`none` truncates).
    """
    if value.is_nan():
        return 'nan'
    if value.is_infinite():
        return '-inf' if value < 0 else 'inf'
    if digits is None:
        rounded = decimal.Context(
            prec=DISPLAY_SIGNIFICANT_DIGITS, rounding=decimal.ROUND_HALF_EVEN
        ).plus(value)
        text = format(rounded, 'f')
        if '.' in text:
            text = text.rstrip('0').rstrip('.')
    else:
        rounding = decimal.ROUND_DOWN if rounding_mode is RoundingMode.NONE \
            else rounding_mode.decimal_rounding
        ctx = decimal.Context(prec=max(value.adjusted(), 0) + digits + 2)
        text = format(value.quantize(Decimal(1).scaleb(-digits), rounding=rounding, context=ctx), 'f')
    if text.lstrip('-').strip('0.') == '':
        text = text.lstrip('-')
    return text
