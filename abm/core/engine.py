"""Predator engine — drives visual predators through one tick at a time.

This module provides the PredatorEngine class which runs the per-tick
predator pipeline (ageing, prey search, pursuit, attack), removes dead
agents, and exports a draw list for rendering. Prey behaviour is owned
elsewhere; the engine only removes prey that predators have killed.
"""

from __future__ import annotations

import random
from typing import Optional

import structlog

from abm.config import Settings
from abm.core.errors import AgentError
from abm.core.lifecycle import LifecycleState
from abm.core.predator import VisualPredator
from abm.core.prey import ColourPolymorphicPrey
from abm.core.render import AgentRender, DrawList
from abm.core.spatial import PreyGrid

logger = structlog.get_logger()


class PredatorEngine:
    """Synchronous scheduler for a predator population.

    Coordinates:
    - Predator lifecycle (ageing, death, removal)
    - Hunting (prey search, intercept, attack)
    - Removal of killed prey
    - Statistics collection
    """

    def __init__(
        self,
        settings: Settings,
        predators: list[VisualPredator],
        prey: list[ColourPolymorphicPrey],
        rng: Optional[random.Random] = None,
        grid: Optional[PreyGrid] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Model context (chances, imprint factor, lifecycle limits).
            predators: Initial predator population. The engine owns this list.
            prey: Prey population shared with the prey scheduler.
            rng: Random source for attack draws.
            grid: Optional spatial index, rebuilt at the start of every tick.
        """
        self.settings = settings
        self.predators = predators
        self.prey = prey
        self.rng = rng
        self.grid = grid

        self.tick_counter = 0
        self.kills = 0

        # Predator deaths by cause ("old_age" | "starvation")
        self.death_stats: dict[str, int] = {}

    def tick(self) -> DrawList:
        """Run one tick for every predator and return the draw list.

        Note:
            An AgentError aborts only the failing predator's tick; the
            predator is kept and the remaining predators still run.
        """
        self.tick_counter += 1

        if self.grid is not None:
            self.grid.rebuild(self.prey)

        survivors: list[VisualPredator] = []
        for predator in self.predators:
            try:
                state = predator.age(self.settings)
                if self._act(predator, state):
                    survivors.append(predator)
            except AgentError as exc:
                logger.error(
                    "predator_tick_error",
                    tick=self.tick_counter,
                    predator_id=predator.id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                survivors.append(predator)
        self.predators = survivors

        self.prey[:] = [p for p in self.prey if p.is_alive()]

        if self.tick_counter % self.settings.stats_interval_ticks == 0:
            self._log_statistics()

        return self.draw_list()

    def _act(self, predator: VisualPredator, state: LifecycleState) -> bool:
        """Carry out the behaviour for a lifecycle state.

        Returns:
            False if the predator died and must be removed.
        """
        if state is LifecycleState.DEATH:
            self._record_death(predator)
            return False
        if state is LifecycleState.PREY_SEARCH:
            self._hunt(predator)
        elif state is LifecycleState.MATE_SEARCH or state is LifecycleState.PATROL:
            # Mating is handled outside this engine; keep moving meanwhile
            predator.move()
        else:
            raise ValueError(f"unhandled lifecycle state: {state!r}")
        return True

    def _hunt(self, predator: VisualPredator) -> None:
        target = predator.prey_search(
            self.prey, self.settings.vp_search_chance, grid=self.grid
        )
        if target is None:
            predator.move()
            return
        if predator.intercept(target):
            if predator.attack(
                target.prey,
                self.settings.vp_attack_chance,
                self.settings.vp_imprint_factor,
                rng=self.rng,
            ):
                self.kills += 1

    def _record_death(self, predator: VisualPredator) -> None:
        cause = "old_age" if predator.lifespan <= 0 else "starvation"
        self.death_stats[cause] = self.death_stats.get(cause, 0) + 1
        logger.info(
            "predator_died",
            tick=self.tick_counter,
            predator_id=predator.id,
            cause=cause,
            hunger=predator.hunger,
        )

    def draw_list(self) -> DrawList:
        """Draw records for all current predators and living prey."""
        drawlist = DrawList()
        for predator in self.predators:
            drawlist.add(predator.get_draw_info())
        for prey in self.prey:
            drawlist.add(
                AgentRender(
                    kind="prey",
                    x=prey.pos[0],
                    y=prey.pos[1],
                    heading=0.0,
                    colour=prey.colouration.to_256(),
                )
            )
        return drawlist

    def _log_statistics(self) -> None:
        if self.predators:
            avg_hunger = sum(p.hunger for p in self.predators) / len(self.predators)
        else:
            avg_hunger = 0.0
        logger.info(
            "engine_stats",
            tick=self.tick_counter,
            predators=len(self.predators),
            prey=len(self.prey),
            kills=self.kills,
            avg_hunger=round(avg_hunger, 2),
            deaths=dict(self.death_stats),
        )
