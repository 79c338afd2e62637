"""
Court calibrator – screen pixels ↔ court coordinates via a homography.

The user clicks known court landmarks on screen (corners, free-throw
line ends, ...) and tells us where each one sits on the court. From
four such correspondences we solve the Direct Linear Transform with the
bottom-right entry of H fixed to 1:

    [-sx, -sy, -1,   0,   0,  0, sx·cx, sy·cx] · h = -cx
    [  0,   0,  0, -sx, -sy, -1, sx·cy, sy·cy] · h = -cy

Court origin is assumed to be the point under the basket, so the
three-point test is a plain radius check (no corner-three straights).

States:
  UNCALIBRATED – no usable homography (initial, after any point change,
                 after a failed compute or load)
  CALIBRATED   – H and H⁻¹ cached
"""
from __future__ import annotations
import threading
import time
from enum import Enum
from typing import Iterable, List, Optional, Union
import numpy as np

from ..models.geometry import (CalibrationPoint, CourtCalibration,
                               CourtDimensions, Point)
from ..models.result import CalibrationError, Result
from .linalg import invert_3x3, solve_linear_system
import config


class CalibrationState(Enum):
    UNCALIBRATED = "uncalibrated"
    CALIBRATED   = "calibrated"


class HomographyCalibrator:
    """Owns the calibration point set and the cached homography pair."""

    def __init__(self, court_dimensions: Optional[Union[CourtDimensions, dict]] = None):
        if isinstance(court_dimensions, CourtDimensions):
            self._dims = court_dimensions
        else:
            self._dims = CourtDimensions().merged(court_dimensions)
        self._points:   List[CalibrationPoint] = []
        self._H:        Optional[np.ndarray]   = None
        self._H_inv:    Optional[np.ndarray]   = None
        self._state                            = CalibrationState.UNCALIBRATED
        self._last_error: Optional[Result]     = None
        self._lock = threading.RLock()

    # ── Point set ──────────────────────────────────────────────────────────────

    def add_point(self, point: CalibrationPoint) -> None:
        """Insert a point, or replace the existing one with the same label."""
        with self._lock:
            for i, p in enumerate(self._points):
                if p.label == point.label:
                    self._points[i] = point
                    break
            else:
                self._points.append(point)
            self._invalidate()

    def set_points(self, points: Iterable[CalibrationPoint]) -> None:
        with self._lock:
            self._points = list(points)
            self._invalidate()

    def clear(self) -> None:
        with self._lock:
            self._points = []
            self._invalidate()
            self._last_error = None

    @property
    def points(self) -> List[CalibrationPoint]:
        with self._lock:
            return list(self._points)

    def has_enough_points(self) -> bool:
        return len(self._points) >= config.MIN_CALIBRATION_POINTS

    # ── State ─────────────────────────────────────────────────────────────────

    @property
    def state(self) -> CalibrationState:
        return self._state

    @property
    def is_calibrated(self) -> bool:
        return self._state == CalibrationState.CALIBRATED

    @property
    def last_error(self) -> Optional[Result]:
        """The failed Result of the most recent compute/load, if any."""
        return self._last_error

    @property
    def court_dimensions(self) -> CourtDimensions:
        return self._dims

    @property
    def homography(self) -> Optional[np.ndarray]:
        return None if self._H is None else self._H.copy()

    @property
    def inverse_homography(self) -> Optional[np.ndarray]:
        return None if self._H_inv is None else self._H_inv.copy()

    # ── Homography ────────────────────────────────────────────────────────────

    def compute_homography(self) -> Result:
        """
        Solve H from the first four correspondences and cache H⁻¹.

        Returns:
            Result carrying H on success. On failure the calibrator is left
            UNCALIBRATED and the Result is kept in `last_error`.
        """
        with self._lock:
            if not self.has_enough_points():
                return self._fail(Result.failure(
                    CalibrationError.INSUFFICIENT_POINTS,
                    f"need {config.MIN_CALIBRATION_POINTS} calibration points, "
                    f"have {len(self._points)}",
                ))

            points = self._points
            if len(points) > config.MIN_CALIBRATION_POINTS:
                # TODO: least-squares DLT (SVD over all correspondences)
                print(f"[HomographyCalibrator] {len(points)} points given; "
                      f"using the first {config.MIN_CALIBRATION_POINTS}")
                points = points[:config.MIN_CALIBRATION_POINTS]

            solved = solve_linear_system(*self._build_system(points))
            if not solved:
                return self._fail(solved)

            H = np.append(solved.value, 1.0).reshape(3, 3)
            inverted = invert_3x3(H)
            if not inverted:
                return self._fail(inverted)

            self._H, self._H_inv = H, inverted.value
            self._state = CalibrationState.CALIBRATED
            self._last_error = None
            print("[HomographyCalibrator] Homography computed")
            return Result.success(H.copy())

    @staticmethod
    def _build_system(points: List[CalibrationPoint]):
        A = np.zeros((8, 8), dtype=np.float64)
        b = np.zeros(8, dtype=np.float64)
        for i, p in enumerate(points):
            sx, sy, cx, cy = p.x, p.y, p.court_x, p.court_y
            A[2 * i]     = [-sx, -sy, -1, 0, 0, 0, sx * cx, sy * cx]
            A[2 * i + 1] = [0, 0, 0, -sx, -sy, -1, sx * cy, sy * cy]
            b[2 * i]     = -cx
            b[2 * i + 1] = -cy
        return A, b

    def _ensure_calibrated(self) -> Result:
        if self.is_calibrated:
            return Result.success()
        return self.compute_homography()

    # ── Transforms ────────────────────────────────────────────────────────────

    def screen_to_court(self, sx: float, sy: float) -> Result:
        """Map a screen pixel to court coordinates. Result value is a Point."""
        with self._lock:
            ready = self._ensure_calibrated()
            if not ready:
                return ready
            return _project(self._H, sx, sy)

    def court_to_screen(self, cx: float, cy: float) -> Result:
        """Map court coordinates back to a screen pixel. Result value is a Point."""
        with self._lock:
            ready = self._ensure_calibrated()
            if not ready:
                return ready
            return _project(self._H_inv, cx, cy)

    def is_three_point_shot(self, court_x: float, court_y: float) -> bool:
        """True when the court position lies outside the three-point arc."""
        return float(np.hypot(court_x, court_y)) > self._dims.three_point_radius

    # ── Persistence ───────────────────────────────────────────────────────────

    def get_calibration(self) -> Optional[CourtCalibration]:
        """Snapshot of the current calibration, or None when uncalibrated."""
        with self._lock:
            if not self.is_calibrated:
                return None
            return CourtCalibration(
                points=list(self._points),
                homography=self._H.copy(),
                inverse_homography=self._H_inv.copy(),
                court_dimensions=self._dims,
                calibration_timestamp=time.time() * 1000.0,
            )

    def load_calibration(self, calibration: Union[CourtCalibration, dict]) -> Result:
        """
        Restore a snapshot (object or its dict form).

        H must be finite and invertible; the cached inverse is always
        recomputed from it and a stored inverse must agree with it. Any
        inconsistency resets the calibrator to UNCALIBRATED and is reported
        in the Result.
        """
        with self._lock:
            try:
                if isinstance(calibration, dict):
                    calibration = CourtCalibration.from_dict(calibration)
            except (KeyError, TypeError, ValueError) as e:
                return self._fail_load(CalibrationError.INVALID_SERIALIZED_CALIBRATION,
                                       f"malformed calibration data: {e}")

            if len(calibration.points) < config.MIN_CALIBRATION_POINTS:
                return self._fail_load(CalibrationError.INVALID_SERIALIZED_CALIBRATION,
                                       f"calibration has {len(calibration.points)} points")
            H = calibration.homography
            if H is None or np.shape(H) != (3, 3):
                return self._fail_load(CalibrationError.INVALID_SERIALIZED_CALIBRATION,
                                       "calibration has no usable 3×3 homography")

            H = np.array(H, dtype=np.float64)
            if not np.all(np.isfinite(H)):
                return self._fail_load(CalibrationError.INVALID_SERIALIZED_CALIBRATION,
                                       "homography has non-finite entries")

            # A stored H is only usable if it inverts, stored inverse or not.
            inverted = invert_3x3(H)
            if not inverted:
                return self._fail_load(inverted.error, inverted.message)

            stored_inv = calibration.inverse_homography
            if stored_inv is not None and not _is_inverse_of(H, stored_inv):
                return self._fail_load(CalibrationError.INVALID_SERIALIZED_CALIBRATION,
                                       "stored inverse homography does not match H")

            self._points = list(calibration.points)
            self._H      = H
            self._H_inv  = inverted.value
            self._dims   = calibration.court_dimensions
            self._state  = CalibrationState.CALIBRATED
            self._last_error = None
            print(f"[HomographyCalibrator] Loaded calibration "
                  f"({len(self._points)} points)")
            return Result.success(calibration)

    # ── Internals ─────────────────────────────────────────────────────────────

    def _invalidate(self) -> None:
        self._H = None
        self._H_inv = None
        self._state = CalibrationState.UNCALIBRATED

    def _fail(self, result: Result) -> Result:
        self._invalidate()
        self._last_error = result
        print(f"[HomographyCalibrator] {result.error.value}: {result.message}")
        return result

    def _fail_load(self, error: CalibrationError, message: str) -> Result:
        return self._fail(Result.failure(error, message))


def _project(M: np.ndarray, x: float, y: float) -> Result:
    """Apply a 3×3 projective transform to (x, y) and dehomogenise."""
    u, v, w = M @ np.array([x, y, 1.0])
    if abs(w) < config.PROJECTION_EPSILON:
        return Result.failure(
            CalibrationError.TRANSFORM_AT_INFINITY,
            f"({x:.2f}, {y:.2f}) maps to infinity",
        )
    return Result.success(Point(float(u / w), float(v / w)))


def _is_inverse_of(H: np.ndarray, H_inv) -> bool:
    """True when H @ H_inv is a non-zero multiple of the identity."""
    H_inv = np.asarray(H_inv, dtype=np.float64)
    if H_inv.shape != (3, 3) or not np.all(np.isfinite(H_inv)):
        return False
    P = H @ H_inv
    scale = P[2, 2]
    if abs(scale) < config.DETERMINANT_EPSILON:
        return False
    return bool(np.allclose(P / scale, np.eye(3), atol=1e-6))
