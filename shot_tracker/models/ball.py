"""
Ball, trajectory and shot data models.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class BallDetection:
    """Single-frame ball detection (center + radius)."""
    x: float
    y: float
    radius: float
    confidence: float
    timestamp: float          # milliseconds

    def to_dict(self) -> dict:
        return {
            "x": round(self.x, 2),
            "y": round(self.y, 2),
            "radius": round(self.radius, 2),
            "confidence": round(self.confidence, 3),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class TrajectoryPoint:
    x: float
    y: float
    timestamp: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, d: dict) -> "TrajectoryPoint":
        return cls(x=float(d["x"]), y=float(d["y"]), timestamp=float(d["timestamp"]))


@dataclass(frozen=True)
class ShotTrajectory:
    """
    A validated ball flight.

    `points` stay in capture order. `peak_height` is the minimum screen y
    (screen y grows downward, so that is the visually highest point).
    """
    points: Tuple[TrajectoryPoint, ...]
    start_time: float
    end_time: float
    peak_height: float
    launch_angle: float       # degrees above horizontal
    is_made: bool
    is_three_point: bool
    court_start_x: Optional[float] = None
    court_start_y: Optional[float] = None

    @property
    def start(self) -> TrajectoryPoint:
        return self.points[0]

    @property
    def end(self) -> TrajectoryPoint:
        return self.points[-1]

    @property
    def duration_ms(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> dict:
        return {
            "points": [p.to_dict() for p in self.points],
            "start_time": self.start_time,
            "end_time": self.end_time,
            "peak_height": self.peak_height,
            "launch_angle": self.launch_angle,
            "is_made": self.is_made,
            "is_three_point": self.is_three_point,
            "court_start_x": self.court_start_x,
            "court_start_y": self.court_start_y,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ShotTrajectory":
        return cls(
            points=tuple(TrajectoryPoint.from_dict(p) for p in d["points"]),
            start_time=float(d["start_time"]),
            end_time=float(d["end_time"]),
            peak_height=float(d["peak_height"]),
            launch_angle=float(d["launch_angle"]),
            is_made=bool(d["is_made"]),
            is_three_point=bool(d["is_three_point"]),
            court_start_x=d.get("court_start_x"),
            court_start_y=d.get("court_start_y"),
        )


@dataclass(frozen=True)
class Shot:
    """One scored (or missed) attempt, as handed to persistence/analytics."""
    id: str
    x: float                  # screen start
    y: float
    is_three_point: bool
    is_made: bool
    timestamp: float          # wall clock, ms
    court_x: Optional[float] = None
    court_y: Optional[float] = None
    trajectory: Optional[ShotTrajectory] = field(default=None, compare=False)

    @property
    def point_value(self) -> int:
        """Points this shot is worth if made."""
        return 3 if self.is_three_point else 2

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "court_x": self.court_x,
            "court_y": self.court_y,
            "is_three_point": self.is_three_point,
            "is_made": self.is_made,
            "timestamp": self.timestamp,
            "trajectory": self.trajectory.to_dict() if self.trajectory else None,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Shot":
        traj = d.get("trajectory")
        return cls(
            id=str(d["id"]),
            x=float(d["x"]),
            y=float(d["y"]),
            court_x=d.get("court_x"),
            court_y=d.get("court_y"),
            is_three_point=bool(d["is_three_point"]),
            is_made=bool(d["is_made"]),
            timestamp=float(d["timestamp"]),
            trajectory=ShotTrajectory.from_dict(traj) if traj else None,
        )


@dataclass
class ShootingStats:
    """Aggregate shooting numbers for a list of shots."""
    total_shots: int = 0
    made_shots: int = 0
    missed_shots: int = 0
    two_point_attempts: int = 0
    two_point_made: int = 0
    three_point_attempts: int = 0
    three_point_made: int = 0
    shot_percentage: float = 0.0
    two_point_percentage: float = 0.0
    three_point_percentage: float = 0.0
    points_scored: int = 0

    def to_dict(self) -> dict:
        return {
            "total_shots": self.total_shots,
            "made_shots": self.made_shots,
            "missed_shots": self.missed_shots,
            "two_point_attempts": self.two_point_attempts,
            "two_point_made": self.two_point_made,
            "three_point_attempts": self.three_point_attempts,
            "three_point_made": self.three_point_made,
            "shot_percentage": round(self.shot_percentage, 1),
            "two_point_percentage": round(self.two_point_percentage, 1),
            "three_point_percentage": round(self.three_point_percentage, 1),
            "points_scored": self.points_scored,
        }
