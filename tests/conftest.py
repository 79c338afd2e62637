"""
Pytest fixtures for shot tracker tests.
"""
import cv2
import numpy as np
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from shot_tracker.court.calibrator import HomographyCalibrator
from shot_tracker.models import (BallDetection, CalibrationPoint, Shot,
                                 TrajectoryPoint)


FRAME_MS = 33.0


def arc(n=11, x0=100.0, y0=400.0, step=10.0, a=16.0, b=2.0, t0=1000.0, dt=FRAME_MS):
    """
    Parabolic flight y = y0 - a·i + b·i² (screen y grows downward).

    With the defaults the ball leaves at 45°, peaks at i=4 (y=368) and
    lands 40 px below where it started.
    """
    return [TrajectoryPoint(x=x0 + step * i, y=y0 - a * i + b * i * i, timestamp=t0 + dt * i)
            for i in range(n)]


def as_detections(points, confidence=0.9, radius=5.0):
    return [BallDetection(x=p.x, y=p.y, radius=radius, confidence=confidence,
                          timestamp=p.timestamp) for p in points]


class FixedRng:
    """Stand-in for random.Random with a fixed draw."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def make_arc():
    return arc


@pytest.fixture
def scenario_points():
    """Axis-aligned corners: court = (0.94·x, 0.5·y)."""
    return [
        CalibrationPoint(x=0, y=0, label="top-left", court_x=0, court_y=0),
        CalibrationPoint(x=100, y=0, label="top-right", court_x=94, court_y=0),
        CalibrationPoint(x=0, y=100, label="bottom-left", court_x=0, court_y=50),
        CalibrationPoint(x=100, y=100, label="bottom-right", court_x=94, court_y=50),
    ]


@pytest.fixture
def perspective_points():
    """A trapezoid as seen from a sideline camera."""
    return [
        CalibrationPoint(x=120, y=400, label="baseline-left", court_x=0, court_y=0),
        CalibrationPoint(x=520, y=390, label="baseline-right", court_x=94, court_y=0),
        CalibrationPoint(x=600, y=120, label="far-right", court_x=94, court_y=50),
        CalibrationPoint(x=80, y=130, label="far-left", court_x=0, court_y=50),
    ]


@pytest.fixture
def calibrated(scenario_points):
    cal = HomographyCalibrator()
    cal.set_points(scenario_points)
    assert cal.compute_homography()
    return cal


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sample_frame():
    """A plain 640x480 BGR frame."""
    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    frame[:] = (30, 100, 180)
    return frame


@pytest.fixture
def sample_shots():
    return [
        Shot(id="s1", x=100, y=400, is_three_point=False, is_made=True, timestamp=1.0),
        Shot(id="s2", x=110, y=390, is_three_point=False, is_made=False, timestamp=2.0),
        Shot(id="s3", x=300, y=420, is_three_point=True, is_made=True, timestamp=3.0),
        Shot(id="s4", x=310, y=410, is_three_point=True, is_made=False, timestamp=4.0),
        Shot(id="s5", x=320, y=400, is_three_point=True, is_made=False, timestamp=5.0),
    ]


@pytest.fixture
def temp_video_file(tmp_path):
    """One second of 640x480 video at 30 fps."""
    path = tmp_path / "clip.mp4"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"mp4v"), 30.0, (640, 480))
    for i in range(30):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        cv2.circle(frame, (100 + i * 10, 240), 12, (0, 140, 255), -1)
        writer.write(frame)
    writer.release()
    return path
