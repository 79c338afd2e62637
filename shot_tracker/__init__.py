"""
Shot Tracker – source package.

Public API:  the core components are importable directly from `shot_tracker`.

    from shot_tracker import HomographyCalibrator, solve_linear_system, invert_3x3
    from shot_tracker import DetectionFilter, TrajectoryClassifier
    from shot_tracker import ShotSession, calculate_stats, ShotStorage
    from shot_tracker.models import CalibrationPoint, Shot, ShotTrajectory

The YOLO-backed BallDetector and the video Pipeline live in
`shot_tracker.ball.detector` and `shot_tracker.pipeline`.
"""

# ── Court calibration ─────────────────────────────────────────────────────────
from .court.linalg     import solve_linear_system, invert_3x3
from .court.calibrator import HomographyCalibrator, CalibrationState

# ── Ball ──────────────────────────────────────────────────────────────────────
from .ball.nms        import DetectionFilter
from .ball.trajectory import TrajectoryClassifier, ShotAnalysis, TrackingState

# ── Session / stats / storage ─────────────────────────────────────────────────
from .session import ShotSession
from .stats   import (calculate_stats, generate_heatmap, generate_shot_chart,
                      generate_game_analytics)
from .storage import ShotStorage

# ── Models (data classes) ─────────────────────────────────────────────────────
from .models import (
    Point, BoundingBox, CalibrationPoint, CourtDimensions, CourtCalibration,
    BallDetection, TrajectoryPoint, ShotTrajectory, Shot, ShootingStats,
    CalibrationError, Result,
)

__all__ = [
    # Court
    "solve_linear_system", "invert_3x3",
    "HomographyCalibrator", "CalibrationState",
    # Ball
    "DetectionFilter", "TrajectoryClassifier", "ShotAnalysis", "TrackingState",
    # Session
    "ShotSession", "calculate_stats", "ShotStorage",
    "generate_heatmap", "generate_shot_chart", "generate_game_analytics",
    # Models
    "Point", "BoundingBox", "CalibrationPoint", "CourtDimensions", "CourtCalibration",
    "BallDetection", "TrajectoryPoint", "ShotTrajectory", "Shot", "ShootingStats",
    "CalibrationError", "Result",
]
