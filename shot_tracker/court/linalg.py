"""
Small dense linear algebra for homography estimation.

  solve_linear_system – Gauss-Jordan elimination with partial pivoting
  invert_3x3          – closed-form adjugate inverse

Both return a Result rather than raising: a tiny pivot or determinant is
the normal signature of collinear calibration clicks.
"""
from __future__ import annotations
import numpy as np

from ..models.result import CalibrationError, Result
import config


def solve_linear_system(
    A: np.ndarray,
    b: np.ndarray,
    eps: float = config.PIVOT_EPSILON,
) -> Result:
    """
    Solve Ax = b for square A.

    Each column's pivot is the remaining row with the largest magnitude in
    that column (first such row on ties). The pivot row is normalised and
    the column cleared from every other row, so the augmented column holds
    x at the end without back substitution.

    Returns:
        Result with the (N,) solution, or DEGENERATE_SYSTEM.
    """
    A = np.asarray(A, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64).reshape(-1)
    n = A.shape[0] if A.ndim == 2 else 0
    if n == 0 or A.shape != (n, n) or b.shape != (n,):
        return Result.failure(
            CalibrationError.DEGENERATE_SYSTEM,
            f"expected N×N matrix and N vector, got {A.shape} and {b.shape}",
        )

    aug = np.hstack([A, b[:, None]])

    for col in range(n):
        # argmax returns the first maximum, which fixes the tie-break
        pivot = col + int(np.argmax(np.abs(aug[col:, col])))
        if pivot != col:
            aug[[col, pivot]] = aug[[pivot, col]]

        if abs(aug[col, col]) < eps:
            return Result.failure(
                CalibrationError.DEGENERATE_SYSTEM,
                f"pivot {aug[col, col]:.3e} in column {col} is below {eps:g}",
            )

        aug[col, col:] /= aug[col, col]

        for row in range(n):
            if row != col:
                factor = aug[row, col]
                if factor != 0.0:
                    aug[row, col:] -= factor * aug[col, col:]

    return Result.success(aug[:, n].copy())


def determinant_3x3(H: np.ndarray) -> float:
    """Cofactor expansion along the first row."""
    (h11, h12, h13), (h21, h22, h23), (h31, h32, h33) = H
    return float(
        h11 * (h22 * h33 - h23 * h32)
        - h12 * (h21 * h33 - h23 * h31)
        + h13 * (h21 * h32 - h22 * h31)
    )


def invert_3x3(H: np.ndarray, eps: float = config.DETERMINANT_EPSILON) -> Result:
    """
    Invert a 3×3 matrix via its adjugate.

    Returns:
        Result with the (3,3) inverse, or DEGENERATE_SYSTEM when the matrix
        is not 3×3 or |det| < eps.
    """
    H = np.asarray(H, dtype=np.float64)
    if H.shape != (3, 3):
        return Result.failure(
            CalibrationError.DEGENERATE_SYSTEM,
            f"expected a 3×3 matrix, got {H.shape}",
        )

    det = determinant_3x3(H)
    if not np.isfinite(det) or abs(det) < eps:
        return Result.failure(
            CalibrationError.DEGENERATE_SYSTEM,
            f"matrix is singular (det={det:.3e})",
        )

    (h11, h12, h13), (h21, h22, h23), (h31, h32, h33) = H
    inv_det = 1.0 / det
    adj = np.array([
        [h22 * h33 - h23 * h32, h13 * h32 - h12 * h33, h12 * h23 - h13 * h22],
        [h23 * h31 - h21 * h33, h11 * h33 - h13 * h31, h13 * h21 - h11 * h23],
        [h21 * h32 - h22 * h31, h12 * h31 - h11 * h32, h11 * h22 - h12 * h21],
    ], dtype=np.float64)
    return Result.success(adj * inv_det)
