"""
Shot-tracking session.

Owns one TrajectoryClassifier (and optionally a HomographyCalibrator)
and everything the classifier deliberately does not: the cooldown
between shots, the shot list, the running score and subscriber
callbacks. One session per camera/game; every public method takes the
session lock, so a multi-session host may drive sessions from worker
threads.
"""
from __future__ import annotations
import threading
import time
from typing import Callable, Dict, List, Optional

from .ball.trajectory import ShotAnalysis, TrajectoryClassifier
from .court.calibrator import HomographyCalibrator
from .models.ball import (BallDetection, ShootingStats, Shot, ShotTrajectory,
                          TrajectoryPoint)
from .models.geometry import Point
from .stats import calculate_stats
import config

ShotCallback = Callable[[Shot], None]


class ShotSession:
    """Turns a per-tick detection stream into a list of scored shots."""

    def __init__(
        self,
        calibrator:            Optional[HomographyCalibrator] = None,
        min_trajectory_points: int   = config.MIN_TRAJECTORY_POINTS,
        cooldown_ms:           float = config.SHOT_COOLDOWN_MS,
        make_threshold:        float = config.MAKE_THRESHOLD,
        use_calibration:       bool  = config.USE_CALIBRATION,
        on_shot_detected:      Optional[ShotCallback] = None,
        classifier:            Optional[TrajectoryClassifier] = None,
        clock:                 Callable[[], float] = time.time,
    ):
        self.calibrator  = calibrator
        self.cooldown_ms = cooldown_ms
        self.classifier  = classifier or TrajectoryClassifier(
            calibrator=calibrator,
            min_trajectory_points=min_trajectory_points,
            make_threshold=make_threshold,
            use_calibration=use_calibration,
        )
        self._clock = clock
        self._lock  = threading.RLock()
        self._subscribers: List[ShotCallback] = []
        if on_shot_detected is not None:
            self._subscribers.append(on_shot_detected)

        self._shots:        List[Shot]            = []
        self._trajectories: List[ShotTrajectory]  = []
        self._score:        Dict[str, int]        = {"team1": 0, "team2": 0}
        self._last_shot_ms: Optional[float]       = None
        self._last_make_position: Optional[Point] = None

    # ── Subscriptions ─────────────────────────────────────────────────────────

    def subscribe(self, callback: ShotCallback) -> Callable[[], None]:
        """Register a shot callback; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)
        return unsubscribe

    # ── Per-tick entry point ──────────────────────────────────────────────────

    def process_detection(self, detection: Optional[BallDetection]) -> Optional[Shot]:
        """
        Feed one tick (a detection, or None when the ball was not seen).

        Returns the Shot emitted on this tick, if any.
        """
        with self._lock:
            completed = self.classifier.push(detection)
            if completed is None:
                return None

            now_ms = self._clock() * 1000.0
            if (self._last_shot_ms is not None
                    and now_ms - self._last_shot_ms < self.cooldown_ms):
                return None

            analysis = self.classifier.analyze(completed)
            if not analysis.is_valid_shot:
                return None

            self._record(analysis, now_ms)
            subscribers = list(self._subscribers)

        for callback in subscribers:
            callback(analysis.shot)
        return analysis.shot

    def _record(self, analysis: ShotAnalysis, now_ms: float) -> None:
        shot, trajectory = analysis.shot, analysis.trajectory
        self._shots.append(shot)
        self._trajectories.append(trajectory)
        if shot.is_made:
            self._score["team1"] += (config.POINTS_THREE if shot.is_three_point
                                     else config.POINTS_TWO)
            self._last_make_position = Point(trajectory.end.x, trajectory.end.y)
        self._last_shot_ms = now_ms
        result = "MADE" if shot.is_made else "MISSED"
        kind = "3PT" if shot.is_three_point else "2PT"
        print(f"[ShotSession] {kind} {result}  "
              f"angle={trajectory.launch_angle:.1f}°  score={self._score['team1']}")

    # ── Rim / reset ───────────────────────────────────────────────────────────

    def set_rim_position(self, position: Optional[Point]) -> None:
        with self._lock:
            self.classifier.rim_position = position

    @property
    def rim_position(self) -> Optional[Point]:
        with self._lock:
            return self.classifier.rim_position

    def reset(self) -> None:
        """Forget buffered points, shots, score and cooldown."""
        with self._lock:
            self.classifier.reset()
            self._shots = []
            self._trajectories = []
            self._score = {"team1": 0, "team2": 0}
            self._last_shot_ms = None
            self._last_make_position = None

    # ── Accessors ─────────────────────────────────────────────────────────────

    @property
    def is_tracking(self) -> bool:
        with self._lock:
            return bool(self.classifier.buffer)

    @property
    def trajectory_points(self) -> List[TrajectoryPoint]:
        with self._lock:
            return self.classifier.buffer

    @property
    def shots(self) -> List[Shot]:
        with self._lock:
            return list(self._shots)

    @property
    def trajectories(self) -> List[ShotTrajectory]:
        with self._lock:
            return list(self._trajectories)

    @property
    def score(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._score)

    @property
    def last_make_position(self) -> Optional[Point]:
        """Where the most recent made shot ended (for make animations)."""
        with self._lock:
            return self._last_make_position

    def stats(self) -> ShootingStats:
        return calculate_stats(self.shots)

    def to_dict(self) -> dict:
        with self._lock:
            return {
                "shots": [s.to_dict() for s in self._shots],
                "score": dict(self._score),
                "stats": calculate_stats(self._shots).to_dict(),
            }
