"""
Tests for TrajectoryClassifier.
"""
import math
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import FRAME_MS, FixedRng, arc, as_detections
from shot_tracker.ball.trajectory import TrackingState, TrajectoryClassifier
from shot_tracker.court.calibrator import HomographyCalibrator
from shot_tracker.models import Point, TrajectoryPoint


def net_catch():
    """Default arc, then the ball hangs in the net for two frames."""
    pts = arc()
    t = pts[-1].timestamp
    return pts + [TrajectoryPoint(210, 440, t + FRAME_MS), TrajectoryPoint(220, 440, t + 2 * FRAME_MS)]


def big_arc(n=11, **kw):
    return arc(n=n, step=20, a=32, b=4, **kw)


def rim_make():
    """Ball drops onto a rim at (290, 445) and is slowed by the net."""
    pts = big_arc(n=10)
    t = pts[-1].timestamp
    return pts + [TrajectoryPoint(290, 440, t + FRAME_MS), TrajectoryPoint(300, 444, t + 2 * FRAME_MS)]


class TestValidation:

    @pytest.fixture
    def classifier(self):
        return TrajectoryClassifier(rng=FixedRng(0.9))

    def test_valid_arc(self, classifier):
        analysis = classifier.analyze(arc())
        assert analysis.is_valid_shot
        traj = analysis.trajectory
        assert traj.launch_angle == pytest.approx(45.0)
        assert traj.peak_height == 368
        assert traj.start_time == 1000
        assert traj.end_time == pytest.approx(1000 + 10 * FRAME_MS)
        assert len(traj.points) == 11

    def test_shot_fields(self, classifier):
        shot = classifier.analyze(arc()).shot
        assert shot.id.startswith("shot_")
        assert (shot.x, shot.y) == (100, 400)
        assert shot.court_x is None
        assert shot.trajectory is not None

    def test_accepts_detections(self, classifier):
        assert classifier.analyze(as_detections(arc())).is_valid_shot

    def test_too_few_points(self, classifier):
        assert not classifier.analyze(arc(n=4)).is_valid_shot

    def test_flat_line_rejected(self, classifier):
        pts = [TrajectoryPoint(100 + 10 * i, 300, 1000 + FRAME_MS * i) for i in range(10)]
        assert not classifier.analyze(pts).is_valid_shot

    def test_rising_only_rejected(self, classifier):
        pts = [TrajectoryPoint(100 + 10 * i, 400 - 10 * i, 1000 + FRAME_MS * i) for i in range(10)]
        assert not classifier.analyze(pts).is_valid_shot

    def test_near_vertical_launch_rejected(self, classifier):
        # 3 px across for 60 px up: ~87 degrees
        assert not classifier.analyze(arc(step=1, a=32, b=4)).is_valid_shot

    def test_eight_point_85_degree_drop_rejected(self, classifier):
        # 8 points, launch measured at index 2: (2a - 4b) up over 2*step across
        b = 6.0
        a = 2 * math.tan(math.radians(85)) + 2 * b
        steep = arc(n=8, step=2.0, a=a, b=b)
        rise = steep[0].y - steep[2].y
        assert math.degrees(math.atan2(rise, steep[2].x - steep[0].x)) == pytest.approx(85.0)
        assert steep[-1].y - steep[0].y > 20
        assert not classifier.analyze(steep).is_valid_shot

        # the same drop with a wider stride leaves at ~49 degrees and counts
        assert classifier.analyze(arc(n=8, step=20.0, a=a, b=b)).is_valid_shot

    def test_small_vertical_travel_rejected(self, classifier):
        # lands at the release height
        assert not classifier.analyze(arc(n=9)).is_valid_shot

    def test_zero_elapsed_time_rejected(self, classifier):
        assert not classifier.analyze(arc(dt=0)).is_valid_shot


class TestMakeMiss:

    def test_slowdown_miss(self):
        assert classifier_for().analyze(arc()).shot.is_made is False

    def test_slowdown_make(self):
        assert classifier_for().analyze(net_catch()).shot.is_made is True

    def test_short_sequence_uses_rng(self):
        # 7 points: too short for the slowdown rule
        assert TrajectoryClassifier(rng=FixedRng(0.9)).analyze(arc(n=7)).shot.is_made
        assert not TrajectoryClassifier(rng=FixedRng(0.1)).analyze(arc(n=7)).shot.is_made

    def test_rim_make(self):
        c = classifier_for(rim=Point(290, 445))
        assert c.analyze(rim_make()).shot.is_made is True

    def test_rim_miss(self):
        c = classifier_for(rim=Point(290, 445))
        assert c.analyze(big_arc()).shot.is_made is False

    def test_rim_override_per_call(self):
        c = classifier_for()
        assert c.analyze(rim_make(), rim_position=Point(290, 445)).shot.is_made is True

    def test_rim_never_reached(self):
        c = classifier_for(rim=Point(600, 50))
        assert c.analyze(net_catch()).shot.is_made is False

    def test_rim_at_release_point(self):
        c = classifier_for(rim=Point(100, 420))
        assert c.analyze(net_catch()).shot.is_made is False


class TestThreePoint:

    def test_pixel_heuristic_two(self):
        # 100 px across, 40 px down
        assert classifier_for().analyze(arc()).shot.is_three_point is False

    def test_pixel_heuristic_three(self):
        # 200 px across, 80 px down
        assert classifier_for().analyze(big_arc()).shot.is_three_point is True

    def test_calibrated_three(self, calibrated):
        shot = classifier_for(calibrator=calibrated).analyze(arc()).shot
        assert shot.is_three_point is True
        assert shot.court_x == pytest.approx(94.0)
        assert shot.court_y == pytest.approx(200.0)

    def test_calibrated_overrides_pixels(self, calibrated):
        # long on screen but released near the basket
        pts = big_arc(x0=10, y0=20)
        c = classifier_for(calibrator=calibrated)
        shot = c.analyze(pts).shot
        assert shot.is_three_point is False
        assert shot.court_x == pytest.approx(9.4)
        assert c.analyze(pts, use_calibration=False).shot.is_three_point is True

    def test_uncalibrated_calibrator_falls_back(self):
        c = classifier_for(calibrator=HomographyCalibrator())
        shot = c.analyze(big_arc()).shot
        assert shot.is_three_point is True
        assert shot.court_x is None

    def test_failed_projection_is_two(self, scenario_points):
        cal = HomographyCalibrator()
        # release point x = 100 maps to infinity
        cal.load_calibration({"points": [p.to_dict() for p in scenario_points],
                              "homography": [[1, 0, 0], [0, 1, 0], [1, 0, -100]]})
        shot = classifier_for(calibrator=cal).analyze(big_arc()).shot
        assert shot.is_three_point is False
        assert shot.court_x is None
        assert shot.trajectory.court_start_x is None


class TestBuffering:

    def test_state_machine(self):
        c = classifier_for()
        assert c.state == TrackingState.IDLE
        for d in as_detections(arc()):
            assert c.push(d) is None
        assert c.state == TrackingState.ACCUMULATING
        assert len(c.buffer) == 11
        completed = c.push(None)
        assert len(completed) == 11
        assert c.state == TrackingState.IDLE

    def test_short_buffer_dropped(self):
        c = classifier_for()
        for d in as_detections(arc(n=4)):
            c.push(d)
        assert c.push(None) is None
        assert c.buffer == []

    def test_gap_while_idle(self):
        assert classifier_for().push(None) is None

    def test_update_emits_on_gap(self):
        c = classifier_for()
        results = [c.update(d) for d in as_detections(arc())]
        assert all(r is None for r in results)
        analysis = c.update(None)
        assert analysis.is_valid_shot

    def test_reset(self):
        c = classifier_for()
        c.push(as_detections(arc())[0])
        c.reset()
        assert c.state == TrackingState.IDLE


def classifier_for(calibrator=None, rim=None):
    return TrajectoryClassifier(calibrator=calibrator, rim_position=rim, rng=FixedRng(0.9))
