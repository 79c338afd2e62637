"""
Ball detector – YOLO candidates → DetectionFilter.

The model is asked for raw candidates of the ball class above the
confidence gate; our own NMS (DetectionFilter) then keeps the strongest
box of each overlapping cluster, so dedup behaves identically whether
boxes come from YOLO or from a recorded detection log.
"""
from __future__ import annotations
from typing import List, Optional, Tuple
import numpy as np
from ultralytics import YOLO

from ..models.ball import BallDetection
from ..models.geometry import BoundingBox
from .nms import DetectionFilter
import config


class BallDetector:
    """Detects the basketball in each frame."""

    def __init__(
        self,
        model_name:           str   = config.BALL_MODEL,
        confidence_threshold: float = config.DETECTION_CONF,
        iou_threshold:        float = config.NMS_IOU_THRESHOLD,
        class_id:             int   = config.BALL_CLASS_ID,
        device:               Optional[str] = config.DEVICE,
    ):
        self._model = YOLO(model_name)
        self.confidence_threshold = confidence_threshold
        self.class_id = class_id
        self.device = device
        self._filter = DetectionFilter(iou_threshold=iou_threshold)

    # ── Public API ─────────────────────────────────────────────────────────────

    def candidates(self, frame: np.ndarray) -> List[Tuple[BoundingBox, float]]:
        """Raw (box, score) pairs for the ball class above the confidence gate."""
        results = self._model.predict(
            frame,
            conf=self.confidence_threshold,
            # let every box through; suppression happens in DetectionFilter
            iou=1.0,
            classes=[self.class_id],
            imgsz=config.DETECTION_IMG_SIZE,
            device=self.device,
            verbose=False,
        )
        out: List[Tuple[BoundingBox, float]] = []
        for res in results:
            if res.boxes is None or len(res.boxes) == 0:
                continue
            boxes = res.boxes.xyxy.cpu().numpy()
            confs = res.boxes.conf.cpu().numpy()
            for (x1, y1, x2, y2), conf in zip(boxes, confs):
                out.append((BoundingBox(float(x1), float(y1), float(x2), float(y2)),
                            float(conf)))
        return out

    def detect_all(self, frame: np.ndarray, timestamp_ms: float) -> List[BallDetection]:
        """Every surviving detection, highest confidence first."""
        return self._filter.filter(self.candidates(frame), timestamp_ms)

    def detect(self, frame: np.ndarray, timestamp_ms: float) -> Optional[BallDetection]:
        """The single best ball detection for this frame, or None."""
        return self._filter.best(self.candidates(frame), timestamp_ms)
