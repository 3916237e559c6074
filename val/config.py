from dataclasses import dataclass
from typing import Optional
from val.numeric import Numeric, RoundingMode


@dataclass
class Config:
    """Numeric settings for one evaluation.

    `precision` counts significant decimal digits kept by arithmetic.
    `digits` fixes the number of fractional digits shown when a number is
    displayed; when unset numbers are shown with trailing zeros stripped.
    """
    precision: int = 64
    rounding_mode: RoundingMode = RoundingMode.TO_EVEN
    digits: Optional[int] = None

    def numeric(self) -> Numeric:
        return Numeric(self.precision, self.rounding_mode)
