"""
Export session results to JSON and annotated video.
"""
import json
import cv2
from pathlib import Path
from typing import Optional

from .models import VideoMetadata
from .session import ShotSession
from .stats import generate_game_analytics
import config


class Exporter:
    """Writes session reports and annotated video into an output directory."""

    def __init__(self, output_dir: str = str(config.RESULTS_DIR)):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def build_report(
        self,
        session: ShotSession,
        metadata: Optional[VideoMetadata] = None,
        game_id: Optional[str] = None,
    ) -> dict:
        report = session.to_dict()
        report["analytics"] = generate_game_analytics(session.shots, game_id).to_dict()
        report["video"] = metadata.to_dict() if metadata else None
        calibration = session.calibrator.get_calibration() if session.calibrator else None
        report["calibration"] = calibration.to_dict() if calibration else None
        return report

    def export_json(
        self,
        session: ShotSession,
        filename: str = "shots.json",
        metadata: Optional[VideoMetadata] = None,
        game_id: Optional[str] = None,
    ) -> Path:
        """Write shots, score, stats, analytics (and calibration, if any) to JSON."""
        output_path = self.output_dir / filename
        with open(output_path, "w") as f:
            json.dump(self.build_report(session, metadata, game_id), f, indent=2)
        return output_path

    def create_video_writer(
        self,
        metadata: VideoMetadata,
        filename: str = "annotated_output.mp4",
        fps: Optional[float] = None,
    ) -> cv2.VideoWriter:
        """
        Open a VideoWriter, falling back through a few codecs.

        Raises:
            RuntimeError: when no codec could be opened.
        """
        output_path = self.output_dir / filename
        output_fps = fps if fps is not None else metadata.fps
        codecs = [config.OUTPUT_CODEC, "XVID", "MJPG"]

        for codec in codecs:
            writer = cv2.VideoWriter(
                str(output_path),
                cv2.VideoWriter_fourcc(*codec),
                output_fps,
                (metadata.width, metadata.height),
            )
            if writer.isOpened():
                print(f"[Exporter] Using video codec: {codec}")
                return writer
            writer.release()

        raise RuntimeError(
            f"Could not create video writer for {output_path}. "
            f"Tried codecs: {codecs}."
        )

