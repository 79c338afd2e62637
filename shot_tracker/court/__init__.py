from .linalg     import solve_linear_system, invert_3x3, determinant_3x3
from .calibrator import HomographyCalibrator, CalibrationState

__all__ = [
    "solve_linear_system", "invert_3x3", "determinant_3x3",
    "HomographyCalibrator", "CalibrationState",
]
