"""
Shooting statistics and shot-location analytics.

  calculate_stats         – counts, percentages, points
  generate_shot_chart     – shots that carry court coordinates
  generate_heatmap        – those shots binned into square court cells
  generate_game_analytics – all of the above for one game
"""
from __future__ import annotations
import time
from typing import Iterable, List, Optional
import numpy as np

from .models.analytics import GameAnalytics, HeatmapData, HeatmapPoint, ShotChartData
from .models.ball import ShootingStats, Shot
import config


def _pct(made: int, attempts: int) -> float:
    return made / attempts * 100.0 if attempts > 0 else 0.0


def calculate_stats(shots: Iterable[Shot]) -> ShootingStats:
    """Counts, percentages (0 with no attempts) and points for a list of shots."""
    shots = list(shots)
    twos   = [s for s in shots if not s.is_three_point]
    threes = [s for s in shots if s.is_three_point]

    made       = sum(1 for s in shots if s.is_made)
    two_made   = sum(1 for s in twos if s.is_made)
    three_made = sum(1 for s in threes if s.is_made)

    return ShootingStats(
        total_shots=len(shots),
        made_shots=made,
        missed_shots=len(shots) - made,
        two_point_attempts=len(twos),
        two_point_made=two_made,
        three_point_attempts=len(threes),
        three_point_made=three_made,
        shot_percentage=_pct(made, len(shots)),
        two_point_percentage=_pct(two_made, len(twos)),
        three_point_percentage=_pct(three_made, len(threes)),
        points_scored=two_made * config.POINTS_TWO + three_made * config.POINTS_THREE,
    )


def _located(shots: Iterable[Shot]) -> List[Shot]:
    return [s for s in shots if s.court_x is not None and s.court_y is not None]


def _bin(shots: List[Shot], grid_size: float) -> List[HeatmapPoint]:
    """Count shots per grid cell; cells come back sorted by (column, row)."""
    if not shots:
        return []
    coords = np.array([[s.court_x, s.court_y] for s in shots], dtype=np.float64)
    cells = np.floor(coords / grid_size).astype(np.int64)
    unique, counts = np.unique(cells, axis=0, return_counts=True)
    half = grid_size / 2
    return [HeatmapPoint(x=float(gx * grid_size + half), y=float(gy * grid_size + half),
                         value=int(n))
            for (gx, gy), n in zip(unique, counts)]


def generate_shot_chart(shots: Iterable[Shot]) -> ShotChartData:
    return ShotChartData(shots=_located(shots))


def generate_heatmap(shots: Iterable[Shot],
                     grid_size: float = config.HEATMAP_GRID_SIZE) -> HeatmapData:
    """
    Bin shots by court position. Shots without court coordinates
    (uncalibrated sessions) are skipped.
    """
    if grid_size <= 0:
        raise ValueError(f"grid_size must be positive, got {grid_size}")
    located = _located(shots)
    return HeatmapData(
        makes=_bin([s for s in located if s.is_made], grid_size),
        misses=_bin([s for s in located if not s.is_made], grid_size),
        all_shots=_bin(located, grid_size),
    )


def generate_game_analytics(
    shots: Iterable[Shot],
    game_id: Optional[str] = None,
    grid_size: float = config.HEATMAP_GRID_SIZE,
) -> GameAnalytics:
    shots = list(shots)
    now_ms = time.time() * 1000.0
    return GameAnalytics(
        game_id=game_id or f"game_{int(now_ms)}",
        timestamp=now_ms,
        stats=calculate_stats(shots),
        shot_chart=generate_shot_chart(shots),
        heatmap=generate_heatmap(shots, grid_size),
    )
