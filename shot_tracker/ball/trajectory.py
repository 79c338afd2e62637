"""
Shot trajectory classification.

Ball detections are buffered while the ball stays visible. The first
frame without a detection closes the sequence: if enough points were
collected it is evaluated as a possible shot, otherwise it is dropped.

A sequence counts as a shot when it rises to a peak above both its
start and end, leaves at a plausible launch angle and travels far
enough vertically. Screen y grows downward throughout, so "higher" means
smaller y and velocities are positive when the ball falls.

Make/miss, in order of preference:
  1. Rim known     – compare vertical speed just before and after the
                     first point near the rim (a net slows the ball down).
  2. Long sequence – final vertical speed vs. overall vertical speed.
  3. Otherwise     – coin flip placeholder until net sensing exists.

Three-pointers use the court homography when calibrated, else a raw
pixel-distance heuristic.
"""
from __future__ import annotations
import math
import random
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from ..models.ball import BallDetection, Shot, ShotTrajectory, TrajectoryPoint
from ..models.geometry import Point
from ..court.calibrator import HomographyCalibrator
import config

Sample = Union[BallDetection, TrajectoryPoint]


class TrackingState(Enum):
    IDLE         = "idle"
    ACCUMULATING = "accumulating"


@dataclass(frozen=True)
class ShotAnalysis:
    """Outcome of evaluating one buffered sequence."""
    is_valid_shot: bool
    trajectory: Optional[ShotTrajectory] = None
    shot: Optional[Shot] = None

    @classmethod
    def rejected(cls) -> "ShotAnalysis":
        return cls(is_valid_shot=False)


class TrajectoryClassifier:
    """Buffers ball positions and turns completed flights into Shots."""

    def __init__(
        self,
        calibrator:            Optional[HomographyCalibrator] = None,
        min_trajectory_points: int   = config.MIN_TRAJECTORY_POINTS,
        make_threshold:        float = config.MAKE_THRESHOLD,
        use_calibration:       bool  = config.USE_CALIBRATION,
        rim_position:          Optional[Point] = None,
        rng:                   Optional[random.Random] = None,
    ):
        self.calibrator            = calibrator
        self.min_trajectory_points = min_trajectory_points
        self.make_threshold        = make_threshold
        self.use_calibration       = use_calibration
        self.rim_position          = rim_position
        self._rng                  = rng or random.Random()
        self._buffer: List[TrajectoryPoint] = []

    # ── Buffering ─────────────────────────────────────────────────────────────

    @property
    def state(self) -> TrackingState:
        return TrackingState.ACCUMULATING if self._buffer else TrackingState.IDLE

    @property
    def buffer(self) -> List[TrajectoryPoint]:
        return list(self._buffer)

    def reset(self) -> None:
        self._buffer = []

    def push(self, detection: Optional[Sample]) -> Optional[List[TrajectoryPoint]]:
        """
        Feed one tick.

        Returns the completed sequence when a gap closes a buffer that is
        long enough to evaluate; None otherwise. Short buffers are dropped.
        """
        if detection is not None:
            self._buffer.append(_to_trajectory_point(detection))
            return None

        completed, self._buffer = self._buffer, []
        if len(completed) >= self.min_trajectory_points:
            return completed
        return None

    def update(self, detection: Optional[Sample]) -> Optional[ShotAnalysis]:
        """Feed one tick; evaluate and return the analysis when a sequence closes."""
        completed = self.push(detection)
        if completed is None:
            return None
        return self.analyze(completed)

    # ── Evaluation ────────────────────────────────────────────────────────────

    def analyze(
        self,
        points: Sequence[Sample],
        rim_position: Optional[Point] = None,
        use_calibration: Optional[bool] = None,
    ) -> ShotAnalysis:
        """
        Decide whether `points` (chronological) form a shot.

        Args:
            rim_position:    Overrides the classifier's rim for this call.
            use_calibration: Overrides `use_calibration` for this call.
        """
        if len(points) < self.min_trajectory_points:
            return ShotAnalysis.rejected()

        traj = [_to_trajectory_point(p) for p in points]
        rim = rim_position if rim_position is not None else self.rim_position
        calibrated = self.use_calibration if use_calibration is None else use_calibration

        start, end = traj[0], traj[-1]
        peak = min(traj, key=lambda p: p.y)

        vertical   = end.y - start.y
        horizontal = end.x - start.x
        elapsed_s  = (end.timestamp - start.timestamp) / 1000.0
        if elapsed_s <= 0:
            return ShotAnalysis.rejected()
        vertical_velocity = vertical / elapsed_s

        launch_angle = _launch_angle(traj)

        has_peak     = peak.y < start.y and peak.y < end.y
        angle_ok     = config.MIN_LAUNCH_ANGLE_DEG <= launch_angle <= config.MAX_LAUNCH_ANGLE_DEG
        travel_ok    = abs(vertical) > config.MIN_VERTICAL_TRAVEL_PX
        if not (has_peak and angle_ok and travel_ok):
            return ShotAnalysis.rejected()

        if rim is not None:
            is_made = self._made_at_rim(traj, rim)
        elif len(traj) > self.min_trajectory_points + 2:
            is_made = _made_by_slowdown(traj, vertical_velocity)
        else:
            # Placeholder until real net-crossing sensing is available.
            is_made = self._rng.random() > config.RANDOM_MAKE_CUTOFF

        is_three, court = self._three_point(start, horizontal, vertical, calibrated)

        trajectory = ShotTrajectory(
            points=tuple(traj),
            start_time=start.timestamp,
            end_time=end.timestamp,
            peak_height=peak.y,
            launch_angle=launch_angle,
            is_made=is_made,
            is_three_point=is_three,
            court_start_x=court.x if court else None,
            court_start_y=court.y if court else None,
        )
        shot = Shot(
            id=f"shot_{uuid.uuid4().hex[:12]}",
            x=start.x,
            y=start.y,
            court_x=court.x if court else None,
            court_y=court.y if court else None,
            is_three_point=is_three,
            is_made=is_made,
            timestamp=time.time() * 1000.0,
            trajectory=trajectory,
        )
        return ShotAnalysis(is_valid_shot=True, trajectory=trajectory, shot=shot)

    # ── Internals ─────────────────────────────────────────────────────────────

    def _made_at_rim(self, traj: List[TrajectoryPoint], rim: Point) -> bool:
        near = [i for i, p in enumerate(traj)
                if math.hypot(p.x - rim.x, p.y - rim.y) < config.RIM_PROXIMITY_PX]
        if not near:
            return False

        i = near[0]
        if i == 0 or i == len(traj) - 1:
            return False

        before, at, after = traj[i - 1], traj[i], traj[i + 1]
        dt_in  = at.timestamp - before.timestamp
        dt_out = after.timestamp - at.timestamp
        if dt_in <= 0 or dt_out <= 0:
            return False

        approaching = (at.y - before.y) / dt_in      # px/ms, > 0 = falling
        departing   = (after.y - at.y) / dt_out
        if approaching <= 0:
            return False
        return (departing < self.make_threshold
                or abs(departing) < abs(approaching) * config.RIM_SLOWDOWN_RATIO)

    def _three_point(
        self,
        start: TrajectoryPoint,
        horizontal: float,
        vertical: float,
        use_calibration: bool,
    ) -> Tuple[bool, Optional[Point]]:
        cal = self.calibrator
        if use_calibration and cal is not None and cal.is_calibrated:
            projected = cal.screen_to_court(start.x, start.y)
            if not projected:
                return False, None
            court = projected.value
            return cal.is_three_point_shot(court.x, court.y), court

        # Uncalibrated fallback: not geometric, just "travelled far on screen".
        return math.hypot(horizontal, vertical) > config.THREE_POINT_PIXEL_DIST, None


def _to_trajectory_point(sample: Sample) -> TrajectoryPoint:
    if isinstance(sample, TrajectoryPoint):
        return sample
    return TrajectoryPoint(x=sample.x, y=sample.y, timestamp=sample.timestamp)


def _launch_angle(traj: List[TrajectoryPoint]) -> float:
    """Angle above horizontal from the start to the point one third in."""
    start = traj[0]
    launch = traj[len(traj) // 3]
    return math.degrees(math.atan2(-(launch.y - start.y), launch.x - start.x))


def _made_by_slowdown(traj: List[TrajectoryPoint], vertical_velocity: float) -> bool:
    """A ball caught by the net ends much slower than it travelled overall."""
    first, last = traj[-3], traj[-1]
    dt_s = (last.timestamp - first.timestamp) / 1000.0
    if dt_s <= 0:
        return False
    final_velocity = (last.y - first.y) / dt_s
    return abs(final_velocity) < abs(vertical_velocity) * config.NET_SLOWDOWN_RATIO
