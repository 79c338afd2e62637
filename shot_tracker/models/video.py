"""
Video-level models.
"""
from dataclasses import dataclass


@dataclass
class VideoMetadata:
    width: int
    height: int
    fps: float
    total_frames: int
    duration_s: float
    path: str = ""

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "total_frames": self.total_frames,
            "duration_s": round(self.duration_s, 2),
        }
