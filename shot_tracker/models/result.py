"""
Tagged results for calibration and linear-algebra operations.

Degenerate geometry is an expected outcome (collinear clicks, a point on
the horizon line), so these operations hand back a Result instead of
raising.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class CalibrationError(Enum):
    INSUFFICIENT_POINTS            = "insufficient_calibration_points"
    DEGENERATE_SYSTEM              = "degenerate_or_singular_system"
    TRANSFORM_AT_INFINITY          = "transform_at_infinity"
    INVALID_SERIALIZED_CALIBRATION = "invalid_serialized_calibration"


@dataclass(frozen=True)
class Result:
    """Either a value or a CalibrationError. Truthy on success."""
    value: Any = None
    error: Optional[CalibrationError] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CalibrationError, message: str = "") -> "Result":
        return cls(error=error, message=message)
