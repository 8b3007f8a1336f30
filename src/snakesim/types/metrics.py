from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    births: int
    food_eaten: int
    moves: int
    fallback_moves: int
    stays: int
    total_segments: int
    average_length: float
    min_length: int
    max_length: int
    tick_duration_ms: float = 0.0
