"""
Tests for video loading and the video pipeline (with a stub detector).
"""
import json
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import arc
from shot_tracker.models import BallDetection
from shot_tracker.pipeline import Pipeline
from shot_tracker.video import VideoLoader


class ScriptedDetector:
    """Returns a fixed ball path, one position per processed frame."""

    def __init__(self, positions):
        self.positions = positions
        self.calls = 0

    def detect(self, frame, timestamp_ms):
        i = self.calls
        self.calls += 1
        if i >= len(self.positions):
            return None
        x, y = self.positions[i]
        return BallDetection(x=x, y=y, radius=6, confidence=0.9, timestamp=timestamp_ms)


class TestVideoLoader:

    def test_metadata(self, temp_video_file):
        with VideoLoader(str(temp_video_file)) as loader:
            meta = loader.metadata
        assert (meta.width, meta.height) == (640, 480)
        assert meta.fps == pytest.approx(30.0)
        assert meta.path == str(temp_video_file)

    def test_frames_and_timestamps(self, temp_video_file):
        with VideoLoader(str(temp_video_file)) as loader:
            frames = list(loader.frames(max_frames=5))
        assert [fn for fn, _, _ in frames] == [0, 1, 2, 3, 4]
        assert frames[3][1] == pytest.approx(100.0)
        assert frames[0][2].shape == (480, 640, 3)

    def test_skip(self, temp_video_file):
        with VideoLoader(str(temp_video_file)) as loader:
            numbers = [fn for fn, _, _ in loader.frames(skip=4, max_frames=3)]
        assert numbers == [0, 5, 10]

    def test_skip_keeps_source_timestamps(self, temp_video_file):
        with VideoLoader(str(temp_video_file)) as loader:
            frames = list(loader.frames(skip=2, max_frames=3))
        assert [f.number for f in frames] == [0, 3, 6]
        assert [f.timestamp_ms for f in frames] == pytest.approx([0.0, 100.0, 200.0])
        assert frames[1].image.shape == (480, 640, 3)

    def test_runs_to_end_of_video(self, temp_video_file):
        with VideoLoader(str(temp_video_file)) as loader:
            assert len(list(loader.frames())) == 30

    def test_capture_time(self, temp_video_file):
        with VideoLoader(str(temp_video_file)) as loader:
            assert loader.capture_time_ms(45) == pytest.approx(1500.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(IOError):
            with VideoLoader(str(tmp_path / "missing.mp4")):
                pass

    def test_metadata_requires_open(self, temp_video_file):
        with pytest.raises(RuntimeError):
            VideoLoader(str(temp_video_file)).metadata


class TestVideoPipeline:

    @pytest.fixture
    def positions(self):
        pts = arc()
        return [(p.x, p.y) for p in pts] + [(210, 440), (220, 440)]

    def test_process(self, tmp_path, temp_video_file, positions):
        detector = ScriptedDetector(positions)
        pipeline = Pipeline(output_dir=str(tmp_path / "out"), show_progress=False,
                            detector=detector)
        shots = pipeline.process(str(temp_video_file), output_name="clip")

        assert detector.calls == 30
        assert len(shots) == 1
        assert shots[0].is_made
        assert (tmp_path / "out" / "clip_annotated.mp4").exists()

        report = json.loads((tmp_path / "out" / "clip_shots.json").read_text())
        assert report["video"]["width"] == 640
        assert report["stats"]["made_shots"] == 1

    def test_max_frames_without_video(self, tmp_path, temp_video_file, positions):
        detector = ScriptedDetector(positions)
        pipeline = Pipeline(output_dir=str(tmp_path), save_video=False, save_json=False,
                            show_progress=False, detector=detector)
        # cut off after 10 frames the flight lands only 18 px below its release
        shots = pipeline.process(str(temp_video_file), max_frames=10)
        assert detector.calls == 10
        assert shots == []
        assert not list(tmp_path.glob("*.mp4"))
