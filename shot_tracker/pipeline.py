"""
Pipeline – detections in, scored shots out.

Two sources:
  process(video)  – frames → BallDetector (YOLO) → DetectionFilter →
                    ShotSession, with optional annotated video
  replay(frames)  – a recorded detection log (timestamp + raw boxes per
                    frame) through the same DetectionFilter → ShotSession

Detection log format (JSON):

    {"frames": [{"timestamp": 0.0, "boxes": [[x1, y1, x2, y2, score], ...]},
                ...]}

A bare list of frame objects is accepted too. A frame with no boxes is
a gap and may close a trajectory.
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union
import numpy as np
from tqdm import tqdm

from .ball.nms import DetectionFilter, ScoredBox
from .court.calibrator import HomographyCalibrator
from .exporter import Exporter
from .models import BallDetection, BoundingBox, Point, Shot
from .session import ShotSession
from .storage import ShotStorage
from .visualizer import Visualizer
from .video.loader import VideoLoader
import config

LogFrame = Tuple[float, List[ScoredBox]]


def load_detection_log(path: Union[str, Path]) -> List[LogFrame]:
    """
    Parse a detection log into (timestamp_ms, [(box, score), ...]) frames.

    Raises:
        ValueError: when the file is not in the documented format.
    """
    with open(path) as f:
        data = json.load(f)
    raw_frames = data.get("frames") if isinstance(data, dict) else data
    if not isinstance(raw_frames, list):
        raise ValueError(f"{path}: expected a list of frames")

    frames: List[LogFrame] = []
    for i, fr in enumerate(raw_frames):
        try:
            ts = float(fr["timestamp"])
            boxes = [(BoundingBox(float(b[0]), float(b[1]), float(b[2]), float(b[3])), float(b[4]))
                     for b in fr.get("boxes", [])]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ValueError(f"{path}: frame {i} is malformed ({e})") from e
        frames.append((ts, boxes))
    return frames


class Pipeline:
    """Runs detections through filtering, classification and export."""

    def __init__(
        self,
        output_dir:       str  = str(config.RESULTS_DIR),
        calibration_path: Optional[str] = None,
        rim_position:     Optional[Tuple[float, float]] = None,
        frame_skip:       int  = config.DEFAULT_SKIP,
        save_video:       bool = True,
        save_json:        bool = True,
        show_progress:    bool = True,
        detector=None,
    ):
        self.output_dir    = Path(output_dir)
        self.frame_skip    = frame_skip
        self.save_video    = save_video
        self.save_json     = save_json
        self.show_progress = show_progress

        self.calibrator = HomographyCalibrator()
        if calibration_path:
            self._load_calibration(calibration_path)

        # Cooldown runs on media time so replays and offline video behave
        # like a live feed.
        self._media_ms = 0.0
        self.session = ShotSession(calibrator=self.calibrator,
                                   clock=lambda: self._media_ms / 1000.0)
        if rim_position is not None:
            self.session.set_rim_position(Point(*rim_position))

        self._filter     = DetectionFilter()
        self._detector   = detector
        self._visualizer = Visualizer()
        self._exporter   = Exporter(output_dir)

    def _load_calibration(self, path: str) -> None:
        data = ShotStorage.load_calibration(path)
        if data is None:
            print(f"[Pipeline] No calibration at {path}; using pixel heuristics")
            return
        result = self.calibrator.load_calibration(data)
        if not result:
            print(f"[Pipeline] Calibration rejected ({result.error.value}); "
                  f"using pixel heuristics")

    # ── Recorded detections ───────────────────────────────────────────────────

    def replay(self, frames: Iterable[LogFrame], output_name: Optional[str] = None) -> List[Shot]:
        """Feed recorded frames through the session; returns the emitted shots."""
        emitted: List[Shot] = []
        frames = list(frames)
        iterator = tqdm(frames, desc="Replaying", unit="frames") if self.show_progress else frames
        for ts, boxes in iterator:
            self._media_ms = ts
            shot = self.session.process_detection(self._filter.best(boxes, ts))
            if shot is not None:
                emitted.append(shot)

        # close a trajectory still open at the end of the log
        shot = self.session.process_detection(None)
        if shot is not None:
            emitted.append(shot)

        if self.save_json:
            name = output_name or "replay"
            path = self._exporter.export_json(self.session, f"{name}_shots.json", game_id=name)
            print(f"[Pipeline] Saved shots → {path}")
        return emitted

    # ── Video ─────────────────────────────────────────────────────────────────

    def process(
        self,
        video_path:  str,
        max_frames:  Optional[int] = None,
        output_name: Optional[str] = None,
    ) -> List[Shot]:
        if self._detector is None:
            from .ball.detector import BallDetector
            self._detector = BallDetector()

        base = output_name or Path(video_path).stem
        emitted: List[Shot] = []

        with VideoLoader(video_path) as loader:
            meta = loader.metadata
            writer = None
            if self.save_video:
                writer = self._exporter.create_video_writer(meta, filename=f"{base}_annotated.mp4")

            frames_iter = loader.frames(skip=self.frame_skip, max_frames=max_frames)
            if self.show_progress:
                frames_iter = tqdm(frames_iter, total=meta.total_frames,
                                   desc="Processing", unit="frames")

            try:
                for captured in frames_iter:
                    self._media_ms = captured.timestamp_ms
                    ball = self._detector.detect(captured.image, captured.timestamp_ms)
                    shot = self.session.process_detection(ball)
                    if shot is not None:
                        emitted.append(shot)
                    if writer is not None:
                        writer.write(self._annotate(captured.image, captured.number, ball))
            finally:
                if writer is not None:
                    writer.release()

            shot = self.session.process_detection(None)
            if shot is not None:
                emitted.append(shot)

            if self.save_json:
                path = self._exporter.export_json(self.session, f"{base}_shots.json", meta, game_id=base)
                print(f"[Pipeline] Saved shots → {path}")
        return emitted

    def _annotate(self, frame: np.ndarray, frame_number: int,
                  ball: Optional[BallDetection]) -> np.ndarray:
        stats = self.session.stats()
        out = self._visualizer.draw_rim(frame, self.session.rim_position)
        out = self._visualizer.draw_trajectory(out, self.session.trajectory_points)
        out = self._visualizer.draw_ball(out, ball)
        out = self._visualizer.draw_shots(out, self.session.shots)
        return self._visualizer.draw_score(out, self.session.score,
                                           stats.made_shots, stats.total_shots, frame_number)
