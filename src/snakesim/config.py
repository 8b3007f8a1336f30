from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# The initial snake spans x = 1..4 on row y = 1.
MIN_GRID_WIDTH = 5
MIN_GRID_HEIGHT = 2


@dataclass
class ViewerConfig:
    square_size: int = 17
    frame_rate: int = 100
    show_grid: bool = True
    background: tuple[int, int, int] = (255, 255, 255)
    grid_color: tuple[int, int, int] = (200, 200, 200)


@dataclass
class SimulationConfig:
    grid_width: int = 40
    grid_height: int = 40
    max_snake_size: int = 8
    seed: int = 42
    config_version: str = "v1"
    viewer: ViewerConfig = field(default_factory=ViewerConfig)

    def validate(self) -> None:
        if self.grid_width < MIN_GRID_WIDTH or self.grid_height < MIN_GRID_HEIGHT:
            raise ValueError(
                f"Grid must be at least {MIN_GRID_WIDTH}x{MIN_GRID_HEIGHT}, "
                f"got {self.grid_width}x{self.grid_height}"
            )
        if self.max_snake_size < 2 or self.max_snake_size % 2:
            raise ValueError(f"max_snake_size must be an even number >= 2, got {self.max_snake_size}")
        if self.viewer.square_size <= 0:
            raise ValueError(f"square_size must be positive, got {self.viewer.square_size}")
        if self.viewer.frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {self.viewer.frame_rate}")

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)


def load_config(raw: dict) -> SimulationConfig:
    def _color(value: tuple[int, int, int] | list[int] | None, default: tuple[int, int, int]) -> tuple[int, int, int]:
        if isinstance(value, (tuple, list)) and len(value) == 3:
            return (int(value[0]), int(value[1]), int(value[2]))
        return default

    default_viewer = ViewerConfig()
    viewer_raw = dict(raw.get("viewer", {}) or {})
    viewer_values = {k: v for k, v in viewer_raw.items() if k not in {"background", "grid_color"}}
    viewer = ViewerConfig(
        background=_color(viewer_raw.get("background"), default_viewer.background),
        grid_color=_color(viewer_raw.get("grid_color"), default_viewer.grid_color),
        **viewer_values,
    )
    sim_values = {k: v for k, v in raw.items() if k != "viewer"}
    config = SimulationConfig(viewer=viewer, **sim_values)
    config.validate()
    return config
