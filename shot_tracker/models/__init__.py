"""
Core data models for Shot Tracker.
Split across sub-modules; this __init__ re-exports everything.
"""
from .geometry import (Point, BoundingBox, CalibrationPoint,
                       CourtDimensions, CourtCalibration)
from .ball     import (BallDetection, TrajectoryPoint, ShotTrajectory,
                       Shot, ShootingStats)
from .result   import CalibrationError, Result
from .video    import VideoMetadata
from .analytics import (HeatmapPoint, HeatmapData, ShotChartData,
                        GameAnalytics)

__all__ = [
    "Point", "BoundingBox", "CalibrationPoint",
    "CourtDimensions", "CourtCalibration",
    "BallDetection", "TrajectoryPoint", "ShotTrajectory",
    "Shot", "ShootingStats",
    "CalibrationError", "Result",
    "VideoMetadata",
    "HeatmapPoint", "HeatmapData", "ShotChartData", "GameAnalytics",
]
