"""
Tests for DetectionFilter (non-maximum suppression).
"""
import time
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from shot_tracker.ball.nms import DetectionFilter
from shot_tracker.models import BoundingBox


class TestDetectionFilter:

    @pytest.fixture
    def nms(self):
        return DetectionFilter()

    def test_default_threshold(self, nms):
        assert nms.iou_threshold == 0.45

    def test_overlapping_keeps_highest(self, nms):
        low = (BoundingBox(1, 1, 11, 11), 0.8)
        high = (BoundingBox(0, 0, 10, 10), 0.9)
        kept = nms.suppress([low, high])
        assert kept == [high]

    def test_disjoint_all_kept_in_score_order(self, nms):
        boxes = [(BoundingBox(100 * i, 0, 100 * i + 10, 10), s)
                 for i, s in enumerate([0.3, 0.9, 0.5, 0.7])]
        kept = nms.suppress(boxes)
        assert [s for _, s in kept] == [0.9, 0.7, 0.5, 0.3]

    def test_equal_scores_keep_input_order(self, nms):
        a = (BoundingBox(0, 0, 10, 10), 0.6)
        b = (BoundingBox(50, 50, 60, 60), 0.6)
        assert nms.suppress([a, b]) == [a, b]
        assert nms.suppress([b, a]) == [b, a]

    def test_iou_at_threshold_is_suppressed(self):
        nms = DetectionFilter(iou_threshold=0.5)
        # overlap 100, union 200
        kept = nms.suppress([(BoundingBox(0, 0, 10, 10), 0.9),
                             (BoundingBox(0, 0, 10, 20), 0.8)])
        assert len(kept) == 1

    def test_suppressed_box_does_not_suppress(self, nms):
        # b overlaps both, c only overlaps b: c must survive
        a = (BoundingBox(0, 0, 10, 10), 0.9)
        b = (BoundingBox(4, 0, 14, 10), 0.8)
        c = (BoundingBox(9, 0, 19, 10), 0.7)
        assert nms.suppress([a, b, c]) == [a, c]

    def test_empty(self, nms):
        assert nms.suppress([]) == []
        assert nms.filter([]) == []
        assert nms.best([]) is None

    def test_filter_converts_to_detections(self, nms):
        dets = nms.filter([(BoundingBox(100, 200, 120, 230), 0.75)], timestamp_ms=500.0)
        assert len(dets) == 1
        d = dets[0]
        assert (d.x, d.y) == (110, 215)
        assert d.radius == 15
        assert d.confidence == 0.75
        assert d.timestamp == 500.0

    def test_filter_default_timestamp_is_now(self, nms):
        before = time.time() * 1000.0
        d = nms.best([(BoundingBox(0, 0, 10, 10), 0.9)])
        assert before <= d.timestamp <= time.time() * 1000.0

    def test_best(self, nms):
        best = nms.best([(BoundingBox(0, 0, 10, 10), 0.5),
                         (BoundingBox(50, 50, 60, 60), 0.95)], timestamp_ms=0)
        assert best.confidence == 0.95
        assert best.x == 55
