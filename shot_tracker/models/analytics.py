"""
Shot chart and heatmap models.
"""
from dataclasses import dataclass, field
from typing import List

from .ball import ShootingStats, Shot


@dataclass(frozen=True)
class HeatmapPoint:
    """Shot count for one grid cell, placed at the cell centre (court units)."""
    x: float
    y: float
    value: int

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "value": self.value}


@dataclass
class HeatmapData:
    makes: List[HeatmapPoint] = field(default_factory=list)
    misses: List[HeatmapPoint] = field(default_factory=list)
    all_shots: List[HeatmapPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "makes": [p.to_dict() for p in self.makes],
            "misses": [p.to_dict() for p in self.misses],
            "all_shots": [p.to_dict() for p in self.all_shots],
        }


@dataclass
class ShotChartData:
    """Shots that carry court coordinates."""
    shots: List[Shot] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"shots": [s.to_dict() for s in self.shots]}


@dataclass
class GameAnalytics:
    game_id: str
    timestamp: float          # wall clock, ms
    stats: ShootingStats
    shot_chart: ShotChartData
    heatmap: HeatmapData

    def to_dict(self) -> dict:
        return {
            "game_id": self.game_id,
            "timestamp": self.timestamp,
            "stats": self.stats.to_dict(),
            "shot_chart": self.shot_chart.to_dict(),
            "heatmap": self.heatmap.to_dict(),
        }
