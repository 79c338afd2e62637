"""
Geometry and calibration data models.
"""
from dataclasses import dataclass, field, fields, replace
from typing import List, Optional, Tuple
import numpy as np

import config


@dataclass(frozen=True)
class Point:
    """2D point; screen pixels unless stated otherwise."""
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class BoundingBox:
    """Axis-aligned box in pixel coordinates."""
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def iou(self, other: "BoundingBox") -> float:
        """Intersection over union; 0 when the union is empty."""
        ix1 = max(self.x1, other.x1)
        iy1 = max(self.y1, other.y1)
        ix2 = min(self.x2, other.x2)
        iy2 = min(self.y2, other.y2)
        inter = max(0.0, ix2 - ix1) * max(0.0, iy2 - iy1)
        union = self.area + other.area - inter
        return inter / union if union > 0 else 0.0

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)

    def to_int_tuple(self) -> Tuple[int, int, int, int]:
        return (int(self.x1), int(self.y1), int(self.x2), int(self.y2))


@dataclass(frozen=True)
class CalibrationPoint:
    """A screen click paired with its known court position."""
    x: float
    y: float
    label: str            # e.g. "baseline-left", "free-throw-center"
    court_x: float
    court_y: float

    @property
    def screen(self) -> Point:
        return Point(self.x, self.y)

    @property
    def court(self) -> Point:
        return Point(self.court_x, self.court_y)

    def to_dict(self) -> dict:
        return {
            "x": self.x, "y": self.y, "label": self.label,
            "court_x": self.court_x, "court_y": self.court_y,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CalibrationPoint":
        return cls(
            x=float(d["x"]), y=float(d["y"]), label=str(d["label"]),
            court_x=float(d["court_x"]), court_y=float(d["court_y"]),
        )


@dataclass(frozen=True)
class CourtDimensions:
    """Physical court measurements (feet by default)."""
    width: float = config.COURT_WIDTH
    height: float = config.COURT_HEIGHT
    three_point_radius: float = config.THREE_POINT_RADIUS
    key_width: float = config.KEY_WIDTH
    key_height: float = config.KEY_HEIGHT

    def merged(self, overrides: Optional[dict]) -> "CourtDimensions":
        """Return a copy with any known keys from `overrides` applied."""
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        return replace(self, **{k: float(v) for k, v in overrides.items() if k in known})

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class CourtCalibration:
    """
    Snapshot of a calibrator: the unit of save/restore.

    Matrices are kept as numpy arrays here and emitted as nested lists by
    `to_dict`, so the dict form is plain JSON.
    """
    points: List[CalibrationPoint]
    homography: Optional[np.ndarray]
    court_dimensions: CourtDimensions = field(default_factory=CourtDimensions)
    calibration_timestamp: float = 0.0
    inverse_homography: Optional[np.ndarray] = None

    def to_dict(self) -> dict:
        return {
            "points": [p.to_dict() for p in self.points],
            "homography": _matrix_to_list(self.homography),
            "inverse_homography": _matrix_to_list(self.inverse_homography),
            "court_dimensions": self.court_dimensions.to_dict(),
            "calibration_timestamp": self.calibration_timestamp,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CourtCalibration":
        """
        Parse without validating geometry; HomographyCalibrator.load_calibration
        decides whether the snapshot is usable.
        """
        return cls(
            points=[CalibrationPoint.from_dict(p) for p in d["points"]],
            homography=_list_to_matrix(d.get("homography")),
            inverse_homography=_list_to_matrix(d.get("inverse_homography")),
            court_dimensions=CourtDimensions().merged(d.get("court_dimensions")),
            calibration_timestamp=float(d.get("calibration_timestamp", 0.0)),
        )


def _matrix_to_list(m: Optional[np.ndarray]) -> Optional[list]:
    return None if m is None else np.asarray(m, dtype=float).tolist()


def _list_to_matrix(m: Optional[list]) -> Optional[np.ndarray]:
    return None if m is None else np.array(m, dtype=np.float64)
