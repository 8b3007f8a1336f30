from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Optional

from .config import SimulationConfig
from .types.metrics import TickMetrics
from .world import World

logger = logging.getLogger(__name__)

_BASIC_HEADER = [
    "tick",
    "population",
    "births",
    "food_eaten",
    "avg_length",
    "tick_ms",
]

_DETAILED_HEADER = [
    "tick",
    "population",
    "births",
    "food_eaten",
    "moves",
    "fallback_moves",
    "stays",
    "total_segments",
    "avg_length",
    "min_length",
    "max_length",
    "tick_ms",
    "fallback_ratio",
    "occupied_cells",
    "occupancy_ratio",
    "stale_paths",
    "food_x",
    "food_y",
]


def _format_basic_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.births,
        metrics.food_eaten,
        f"{metrics.average_length:.4f}",
        f"{tick_ms:.3f}",
    ]


def _format_detailed_row(world: World, metrics: TickMetrics, tick_ms: float) -> list[object]:
    occupied_cells = world.occupancy.occupied_count()
    area = world.width * world.height
    fallback_ratio = metrics.fallback_moves / metrics.moves if metrics.moves > 0 else 0.0
    stale_paths = sum(1 for snake in world.agents if snake.path_stale)
    food = world.food
    return [
        metrics.tick,
        metrics.population,
        metrics.births,
        metrics.food_eaten,
        metrics.moves,
        metrics.fallback_moves,
        metrics.stays,
        metrics.total_segments,
        f"{metrics.average_length:.4f}",
        metrics.min_length,
        metrics.max_length,
        f"{tick_ms:.3f}",
        f"{fallback_ratio:.4f}",
        occupied_cells,
        f"{occupied_cells / area:.6f}",
        stale_paths,
        food.x if food is not None else "",
        food.y if food is not None else "",
    ]


def _population_stats(values: list[int]) -> dict[str, float]:
    if not values:
        return {"min": 0, "max": 0, "avg": 0.0}
    return {"min": min(values), "max": max(values), "avg": sum(values) / len(values)}


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    log_format: str = "detailed",
    summary_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> World:
    log_mode = log_format.lower().strip()
    if log_mode not in {"basic", "detailed"}:
        raise ValueError(f"Unknown log format: {log_format}")

    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    world = World(config)
    logger.info(
        "Running %d ticks on a %dx%d grid (seed=%d)", steps, world.width, world.height, config.seed
    )

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_DETAILED_HEADER if log_mode == "detailed" else _BASIC_HEADER)

    population_series: list[int] = []
    total_moves = 0
    total_fallbacks = 0
    total_births = 0
    total_food = 0

    try:
        for _ in range(steps):
            metrics = world.tick()
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            total_births += metrics.births
            total_food += metrics.food_eaten
            population_series.append(metrics.population)
            total_moves += metrics.moves
            total_fallbacks += metrics.fallback_moves

            if writer:
                if log_mode == "detailed":
                    writer.writerow(_format_detailed_row(world, metrics, tick_ms))
                else:
                    writer.writerow(_format_basic_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    logger.info("Finished: %d snakes, %d births, %d food eaten", len(world.agents), total_births, total_food)

    if summary_path:
        summary = {
            "steps": steps,
            "seed": config.seed,
            "grid": {"width": world.width, "height": world.height},
            "log_format": log_mode,
            "deterministic_log": deterministic_log,
            "births": total_births,
            "food_eaten": total_food,
            "final_population": len(world.agents),
            "population": _population_stats(population_series),
            "fallback_moves": {
                "total": total_fallbacks,
                "ratio": total_fallbacks / total_moves if total_moves else 0.0,
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless snake simulation")
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--log-format",
        choices=["basic", "detailed"],
        default="detailed",
        help="CSV format to write when --log is provided.",
    )
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write summary stats.")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="[%(levelname)s] %(name)s: %(message)s")
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        log_format=args.log_format,
        summary_path=args.summary,
        config_path=args.config,
    )


if __name__ == "__main__":
    main()
