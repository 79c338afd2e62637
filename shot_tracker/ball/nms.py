"""
Greedy non-maximum suppression for raw ball candidates.

The detector hands us every box that passed its confidence/class gate.
Candidates are visited in descending score order; each survivor
suppresses every later candidate overlapping it by IoU ≥ threshold.
Equal scores keep their input order (stable sort).
"""
from __future__ import annotations
import time
from typing import List, Optional, Sequence, Tuple

from ..models.ball import BallDetection
from ..models.geometry import BoundingBox
import config

ScoredBox = Tuple[BoundingBox, float]


class DetectionFilter:
    """Deduplicates per-frame candidates and converts them to BallDetections."""

    def __init__(self, iou_threshold: float = config.NMS_IOU_THRESHOLD):
        self.iou_threshold = iou_threshold

    def suppress(self, candidates: Sequence[ScoredBox]) -> List[ScoredBox]:
        """Return the surviving (box, score) pairs, highest score first."""
        order = sorted(range(len(candidates)),
                       key=lambda i: candidates[i][1], reverse=True)
        ranked = [candidates[i] for i in order]
        suppressed = [False] * len(ranked)
        kept: List[ScoredBox] = []

        for i, (box_i, score_i) in enumerate(ranked):
            if suppressed[i]:
                continue
            kept.append((box_i, score_i))
            for j in range(i + 1, len(ranked)):
                if not suppressed[j] and box_i.iou(ranked[j][0]) >= self.iou_threshold:
                    suppressed[j] = True
        return kept

    def filter(
        self,
        candidates: Sequence[ScoredBox],
        timestamp_ms: Optional[float] = None,
    ) -> List[BallDetection]:
        """
        Run NMS and convert survivors to BallDetections.

        Args:
            candidates:   (box, score) pairs already confidence/class filtered.
            timestamp_ms: Capture time of the frame. When omitted the
                          wall-clock time at filtering is used, which lags
                          capture under load.
        """
        ts = time.time() * 1000.0 if timestamp_ms is None else timestamp_ms
        detections = []
        for box, score in self.suppress(candidates):
            cx, cy = box.center
            detections.append(BallDetection(
                x=cx, y=cy,
                radius=max(box.width, box.height) / 2,
                confidence=float(score),
                timestamp=ts,
            ))
        return detections

    def best(
        self,
        candidates: Sequence[ScoredBox],
        timestamp_ms: Optional[float] = None,
    ) -> Optional[BallDetection]:
        """Highest-confidence surviving detection, or None for an empty frame."""
        detections = self.filter(candidates, timestamp_ms)
        return detections[0] if detections else None
