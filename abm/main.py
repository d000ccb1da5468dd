"""Headless run of the visual predator model.

Generates a predator population and a random prey population, then runs
the predator engine for a fixed number of ticks, logging as it goes.
Settings come from ABM_* environment variables (see abm.config).
"""

from __future__ import annotations

import argparse
import random
from typing import Optional

import structlog

from abm.config import Settings
from abm.core.colour import rand_rgb
from abm.core.engine import PredatorEngine
from abm.core.geometry import rand_vector
from abm.core.predator import generate_predators
from abm.core.prey import ColourPolymorphicPrey
from abm.core.spatial import PreyGrid

logger = structlog.get_logger()


def configure_logging(level: str = "info") -> None:
    """Configure structlog for console output at the given minimum level."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level=level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def run(
    ticks: int,
    predator_count: int = 10,
    prey_count: int = 200,
    seed: Optional[int] = None,
    settings: Optional[Settings] = None,
    use_grid: bool = True,
) -> PredatorEngine:
    """Build a model and run it for a number of ticks.

    Args:
        ticks: Number of ticks to run; stops early if all predators die.
        predator_count: Size of the initial predator population.
        prey_count: Size of the initial prey population.
        seed: Seed for a reproducible run.
        settings: Model context; loaded from the environment if None.
        use_grid: Restrict prey searches with the sector grid index.

    Returns:
        The engine after the final tick, for inspection.
    """
    settings = settings or Settings()
    rng = random.Random(seed)

    predators = generate_predators(predator_count, settings, rng)
    prey = [
        ColourPolymorphicPrey(pos=rand_vector(settings.bounds, rng), colouration=rand_rgb(rng))
        for _ in range(prey_count)
    ]
    grid = PreyGrid(settings.sector_size, settings.sector_count) if use_grid else None

    engine = PredatorEngine(settings, predators, prey, rng=rng, grid=grid)
    logger.info(
        "run_starting",
        ticks=ticks,
        predators=predator_count,
        prey=prey_count,
        seed=seed,
        use_grid=use_grid,
    )
    for _ in range(ticks):
        engine.tick()
        if not engine.predators:
            logger.info("predators_extinct", tick=engine.tick_counter)
            break

    logger.info(
        "run_finished",
        tick=engine.tick_counter,
        predators=len(engine.predators),
        prey=len(engine.prey),
        kills=engine.kills,
    )
    return engine


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run the visual predator model headless.")
    parser.add_argument("--ticks", type=int, default=200)
    parser.add_argument("--predators", type=int, default=10)
    parser.add_argument("--prey", type=int, default=200)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--no-grid", action="store_true", help="scan the full prey population")
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings.log_level)
    run(
        args.ticks,
        predator_count=args.predators,
        prey_count=args.prey,
        seed=args.seed,
        settings=settings,
        use_grid=not args.no_grid,
    )


if __name__ == "__main__":
    main()
