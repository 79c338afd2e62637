"""
Visualization utilities for drawing shot-tracking annotations on frames.

All draw_* methods return an annotated copy; the input frame is never
modified.
"""
import cv2
import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple

from .models import BallDetection, Point, Shot, TrajectoryPoint
import config


# BGR
BALL_COLOR    = (0, 140, 255)     # orange
TRAIL_COLOR   = (0, 200, 255)
RIM_COLOR     = (0, 0, 255)
MADE_COLOR    = (0, 200, 0)
MISSED_COLOR  = (0, 0, 220)
TEXT_COLOR    = (255, 255, 255)


class Visualizer:
    """Draws ball, trajectory, rim, shot markers and the score overlay."""

    def __init__(
        self,
        box_thickness: int = config.BOX_THICKNESS,
        font_scale: float = config.FONT_SCALE,
        font_thickness: int = config.FONT_THICKNESS,
        trail_length: int = config.TRAIL_LENGTH,
        rim_radius: int = int(config.RIM_PROXIMITY_PX),
    ):
        self.box_thickness = box_thickness
        self.font_scale = font_scale
        self.font_thickness = font_thickness
        self.trail_length = trail_length
        self.rim_radius = rim_radius
        self.font = cv2.FONT_HERSHEY_SIMPLEX

    def draw_ball(self, frame: np.ndarray, ball: Optional[BallDetection]) -> np.ndarray:
        annotated = frame.copy()
        if ball is None:
            return annotated
        center = (int(ball.x), int(ball.y))
        cv2.circle(annotated, center, max(2, int(ball.radius)), BALL_COLOR, self.box_thickness)
        self._draw_label(annotated, f"{ball.confidence:.2f}",
                         (center[0] + int(ball.radius) + 4, center[1]), BALL_COLOR)
        return annotated

    def draw_trajectory(self, frame: np.ndarray,
                        points: Sequence[TrajectoryPoint]) -> np.ndarray:
        """Buffered flight as a line thickening toward the newest point."""
        annotated = frame.copy()
        pts = list(points)[-self.trail_length:]
        for i in range(1, len(pts)):
            p1 = (int(pts[i - 1].x), int(pts[i - 1].y))
            p2 = (int(pts[i].x), int(pts[i].y))
            thickness = max(1, int(self.box_thickness * 2 * i / len(pts)))
            cv2.line(annotated, p1, p2, TRAIL_COLOR, thickness)
        return annotated

    def draw_rim(self, frame: np.ndarray, rim: Optional[Point]) -> np.ndarray:
        """Rim marker plus the proximity circle used for make detection."""
        annotated = frame.copy()
        if rim is None:
            return annotated
        center = (int(rim.x), int(rim.y))
        cv2.circle(annotated, center, 4, RIM_COLOR, -1)
        cv2.circle(annotated, center, self.rim_radius, RIM_COLOR, 1)
        return annotated

    def draw_shots(self, frame: np.ndarray, shots: List[Shot]) -> np.ndarray:
        """Release points: filled = made, hollow = missed."""
        annotated = frame.copy()
        for shot in shots:
            center = (int(shot.x), int(shot.y))
            if shot.is_made:
                cv2.circle(annotated, center, 8, MADE_COLOR, -1)
            else:
                cv2.circle(annotated, center, 8, MISSED_COLOR, self.box_thickness)
            if shot.is_three_point:
                cv2.putText(annotated, "3", (center[0] - 4, center[1] - 12),
                            self.font, self.font_scale * 0.8, TEXT_COLOR, self.font_thickness)
        return annotated

    def draw_score(self, frame: np.ndarray, score: Dict[str, int],
                   made: int, attempts: int,
                   frame_number: Optional[int] = None) -> np.ndarray:
        """Score / FG overlay in the top-left corner."""
        annotated = frame.copy()
        pct = made / attempts * 100 if attempts else 0.0
        lines = [f"Score: {score.get('team1', 0)}",
                 f"FG: {made}/{attempts} ({pct:.0f}%)"]
        if frame_number is not None:
            lines.append(f"Frame: {frame_number}")

        y_offset = 30
        for line in lines:
            cv2.putText(annotated, line, (10, y_offset), self.font,
                        self.font_scale, MADE_COLOR, self.font_thickness)
            y_offset += 25
        return annotated

    def _draw_label(self, frame: np.ndarray, label: str,
                    position: Tuple[int, int], color: Tuple[int, int, int]) -> None:
        """Text label with a filled background."""
        x, y = position
        (text_w, text_h), baseline = cv2.getTextSize(label, self.font, self.font_scale, self.font_thickness)
        cv2.rectangle(frame, (x, y - text_h - baseline - 5), (x + text_w, y), color, -1)
        cv2.putText(frame, label, (x, y - baseline - 2), self.font, self.font_scale, TEXT_COLOR, self.font_thickness)
