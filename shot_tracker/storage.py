"""
JSON persistence for shots, games and court calibrations.

Each key becomes one `<key>.json` file under the storage directory; the
list of saved game ids lives under its own key. Nothing here raises on
I/O or decode problems: failures are reported and surface as False/None.
"""
from __future__ import annotations
import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from .models.ball import Shot
from .models.geometry import CourtCalibration
import config

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class ShotStorage:
    """Key/value JSON store rooted at a directory."""

    def __init__(self, root_dir: Union[str, Path] = config.STORAGE_DIR):
        self.root_dir = Path(root_dir)

    # ── Raw key/value ─────────────────────────────────────────────────────────

    def _path(self, key: str) -> Path:
        return self.root_dir / f"{_SAFE_KEY.sub('_', key)}.json"

    def _write(self, key: str, data: Any) -> bool:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(data, f, indent=2)
            return True
        except (OSError, TypeError, ValueError) as e:
            print(f"[ShotStorage] Failed to write {path}: {e}")
            return False

    def _read(self, key: str) -> Any:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path) as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            print(f"[ShotStorage] Failed to read {path}: {e}")
            return None

    def _remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    # ── Shots ─────────────────────────────────────────────────────────────────

    def save_shots(self, shots: List[Shot], key: str = config.SHOTS_KEY) -> bool:
        return self._write(key, [s.to_dict() for s in shots])

    def load_shots(self, key: str = config.SHOTS_KEY) -> Optional[List[Shot]]:
        data = self._read(key)
        if data is None:
            return None
        try:
            return [Shot.from_dict(d) for d in data]
        except (KeyError, TypeError, ValueError) as e:
            print(f"[ShotStorage] Invalid shot data under '{key}': {e}")
            return None

    # ── Games ─────────────────────────────────────────────────────────────────

    def list_games(self) -> List[str]:
        games = self._read(config.GAMES_LIST_KEY)
        return list(games) if isinstance(games, list) else []

    def save_game(self, game_data: Any, game_id: str) -> bool:
        games = self.list_games()
        if game_id not in games:
            games.append(game_id)
            if not self._write(config.GAMES_LIST_KEY, games):
                return False
        return self._write(f"game_{game_id}", game_data)

    def load_game(self, game_id: str) -> Any:
        return self._read(f"game_{game_id}")

    def delete_game(self, game_id: str) -> bool:
        try:
            games = [g for g in self.list_games() if g != game_id]
            if not self._write(config.GAMES_LIST_KEY, games):
                return False
            self._remove(f"game_{game_id}")
            return True
        except OSError as e:
            print(f"[ShotStorage] Failed to delete game {game_id}: {e}")
            return False

    def clear_all_games(self) -> bool:
        try:
            for game_id in self.list_games():
                self._remove(f"game_{game_id}")
            self._remove(config.GAMES_LIST_KEY)
            return True
        except OSError as e:
            print(f"[ShotStorage] Failed to clear games: {e}")
            return False

    # ── Export / import ───────────────────────────────────────────────────────

    def export_all(self) -> Optional[str]:
        """All saved games as one JSON document."""
        try:
            return json.dumps({
                "games": [{"gameId": g, "data": self.load_game(g)}
                          for g in self.list_games()],
                "exportDate": datetime.now(timezone.utc).isoformat(),
                "version": config.EXPORT_VERSION,
            })
        except (TypeError, ValueError) as e:
            print(f"[ShotStorage] Export failed: {e}")
            return None

    def import_data(self, json_data: str) -> bool:
        """Merge games from an `export_all` document; entries missing an id or data are skipped."""
        try:
            imported = json.loads(json_data)
        except ValueError as e:
            print(f"[ShotStorage] Import failed: {e}")
            return False
        if not isinstance(imported, dict) or not isinstance(imported.get("games"), list):
            print("[ShotStorage] Import failed: invalid import data format")
            return False

        for game in imported["games"]:
            if isinstance(game, dict) and game.get("gameId") and game.get("data"):
                self.save_game(game["data"], str(game["gameId"]))
        return True

    # ── Calibration ───────────────────────────────────────────────────────────

    @staticmethod
    def save_calibration(path: Union[str, Path], calibration: CourtCalibration) -> bool:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(calibration.to_dict(), f, indent=2)
        except OSError as e:
            print(f"[ShotStorage] Failed to save calibration → {path}: {e}")
            return False
        print(f"[ShotStorage] Saved calibration → {path}")
        return True

    @staticmethod
    def load_calibration(path: Union[str, Path]) -> Optional[dict]:
        """
        Read a calibration file as its plain dict form; pass the result to
        HomographyCalibrator.load_calibration to validate and apply it.
        """
        path = Path(path)
        if not path.exists():
            return None
        try:
            with open(path) as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            print(f"[ShotStorage] Calibration load failed: {e}")
            return None
