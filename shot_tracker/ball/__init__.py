from .nms        import DetectionFilter
from .trajectory import TrajectoryClassifier, ShotAnalysis, TrackingState

# BallDetector pulls in ultralytics/torch; import it from .detector directly.
__all__ = ["DetectionFilter", "TrajectoryClassifier", "ShotAnalysis", "TrackingState"]
