"""
Frame source for offline shot tracking.

Every frame is stamped with its capture time (frame index / fps), so
trajectory timing and the session cooldown follow the footage, not how
fast the detector happens to run.
"""
from __future__ import annotations
import math
from typing import Iterator, NamedTuple, Optional
import cv2
import numpy as np

from ..models.video import VideoMetadata

FALLBACK_FPS = 30.0


class CapturedFrame(NamedTuple):
    number: int
    timestamp_ms: float
    image: np.ndarray


class VideoLoader:
    """Context manager over cv2.VideoCapture yielding CapturedFrames."""

    def __init__(self, path: str, fallback_fps: float = FALLBACK_FPS):
        self.path = path
        self.fallback_fps = fallback_fps
        self._cap: Optional[cv2.VideoCapture] = None
        self._meta: Optional[VideoMetadata] = None

    def __enter__(self) -> "VideoLoader":
        cap = cv2.VideoCapture(self.path)
        if not cap.isOpened():
            cap.release()
            raise IOError(f"Cannot open video: {self.path}")
        self._cap = cap
        self._meta = self._inspect(cap)
        return self

    def __exit__(self, *_) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def _inspect(self, cap: cv2.VideoCapture) -> VideoMetadata:
        fps = cap.get(cv2.CAP_PROP_FPS)
        # some containers report 0 or NaN
        if not fps or math.isnan(fps):
            fps = self.fallback_fps
        total = max(0, int(cap.get(cv2.CAP_PROP_FRAME_COUNT)))
        return VideoMetadata(
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            fps=fps,
            total_frames=total,
            duration_s=total / fps,
            path=self.path,
        )

    @property
    def metadata(self) -> VideoMetadata:
        if self._meta is None:
            raise RuntimeError("VideoLoader not opened; use it as a context manager")
        return self._meta

    def capture_time_ms(self, frame_number: int) -> float:
        """Media time of a frame index."""
        return frame_number * 1000.0 / self.metadata.fps

    def frames(self, skip: int = 0, max_frames: Optional[int] = None) -> Iterator[CapturedFrame]:
        """
        Decode every (skip+1)-th frame, stopping after `max_frames` yields.

        Skipped frames are grabbed without decoding. Frame numbers and
        timestamps always refer to the position in the source video.
        """
        if self._cap is None:
            raise RuntimeError("VideoLoader not opened; use it as a context manager")
        number, yielded = 0, 0
        while max_frames is None or yielded < max_frames:
            ok, image = self._cap.read()
            if not ok:
                return
            yield CapturedFrame(number, self.capture_time_ms(number), image)
            yielded += 1
            for _ in range(skip):
                if not self._cap.grab():
                    return
            number += skip + 1
