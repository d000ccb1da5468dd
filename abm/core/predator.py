"""Visual predator — perceives, pursues, attacks and imprints on prey."""

from __future__ import annotations

import math
import random
import uuid
from dataclasses import InitVar, dataclass, field
from typing import Iterable, Optional, TYPE_CHECKING

import structlog

from abm.core.colour import BLACK, RGB, imprint, rand_rgb
from abm.core.errors import GeometryError
from abm.core.geometry import (
    WORLD_MAX,
    WORLD_MIN,
    Vector,
    as_vector,
    rand_vector,
    relative_angle,
    unit_angle,
    unit_vector,
    vector_add,
    vector_scale,
    wrap_float_in,
)
from abm.core.lifecycle import LifecycleState, next_state
from abm.core.perception import Candidate, rank_candidates, recognise
from abm.core.prey import ColourPolymorphicPrey
from abm.core.render import AgentRender
from abm.core.spatial import Sector, sector_samples

if TYPE_CHECKING:
    from abm.config import Settings
    from abm.core.spatial import PreyGrid

logger = structlog.get_logger()

# Lifespan given to predators when ageing is disabled
UNBOUNDED_LIFESPAN = 99999

# Hunger removed by one successful kill
SATIETY = 5


@dataclass
class VisualPredator:
    """A visually-guided predator agent.

    Heading and direction are kept in lockstep: heading is only changed via
    turn(), which recomputes the unit direction from the wrapped angle.

    Attributes:
        pos: Position in the toroidal [-1, 1] x [-1, 1] world.
        speed: Base per-tick displacement.
        acceleration: Multiplier on speed for normal moves.
        turn_rate: Largest heading change (radians) in one pursuit step.
        vsr: Visual search range.
        acuity: Visual acuity γ; 1.0 is the reference value.
        colour_imprint: Learned expected prey colour.
        lifespan: Countdown; the predator dies once it reaches 0.
        hunger: Ticks of hunger accumulated, reduced by kills.
        fertility: Mating counter, carried for the mating subsystem.
        gravid: Pregnancy flag, carried for the mating subsystem.
        attack_success: True only for the tick a kill happened.
    """

    pos: Vector
    speed: float
    acceleration: float
    turn_rate: float
    vsr: float
    acuity: float = 1.0
    colour_imprint: RGB = field(default_factory=lambda: RGB(0.5, 0.5, 0.5))
    lifespan: int = UNBOUNDED_LIFESPAN
    hunger: int = 0
    fertility: int = 1
    gravid: bool = False
    attack_success: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    initial_heading: InitVar[float] = 0.0

    # Random source for attack draws; None means the random module
    rng: Optional[random.Random] = field(default=None, repr=False, compare=False)

    _heading: float = field(default=0.0, init=False, repr=False)
    _direction: Vector = field(default=(1.0, 0.0), init=False, repr=False)

    def __post_init__(self, initial_heading: float) -> None:
        self.turn(initial_heading)

    @property
    def heading(self) -> float:
        """Heading angle in [0, 2π)."""
        return self._heading

    @property
    def direction(self) -> Vector:
        """Unit vector of the heading."""
        return self._direction

    # -------------------------------------------------------------------------
    # Steering
    # -------------------------------------------------------------------------

    def turn(self, theta: float) -> None:
        """Offset the heading by theta radians."""
        self._heading = unit_angle(self._heading + theta)
        self._direction = unit_vector(self._heading)

    def move(self) -> None:
        """Advance speed * acceleration along the current direction.

        Raises:
            GeometryError: If the position or direction is malformed. The
                position is left unchanged.
        """
        self.pos = self._step(self._direction)

    def _step(self, direction: Vector) -> Vector:
        """Wrapped position one normal move along direction from pos."""
        try:
            offset = vector_scale(direction, self.speed * self.acceleration)
            x, y = vector_add(self.pos, offset)
        except GeometryError as exc:
            raise GeometryError(f"agent move failed: {exc}") from exc
        return (
            wrap_float_in(x, WORLD_MIN, WORLD_MAX),
            wrap_float_in(y, WORLD_MIN, WORLD_MAX),
        )

    def intercept(self, target: Optional[Candidate]) -> bool:
        """Pursue a target for one tick.

        Args:
            target: Candidate returned by prey_search(), or None.

        Returns:
            True if the target was reached and an attack should be made.

        Raises:
            GeometryError: If the predator or prey position is malformed.
                Heading and position are then both left unchanged.

        Note:
            When the distance measured during the search is below speed the
            predator lands on the prey and faces it exactly, ignoring
            turn_rate. Otherwise it turns at most turn_rate toward the prey
            and makes a normal move.
        """
        if target is None:
            return False
        psi = relative_angle(self.pos, self._heading, target.prey.pos)
        if target.distance < self.speed:
            self.pos = as_vector(target.prey.pos, "prey position")
            self.turn(psi)
            return True
        heading = unit_angle(self._heading + max(-self.turn_rate, min(psi, self.turn_rate)))
        direction = unit_vector(heading)
        pos = self._step(direction)
        self._heading, self._direction, self.pos = heading, direction, pos
        return False

    # -------------------------------------------------------------------------
    # Perception
    # -------------------------------------------------------------------------

    def vsr_sector_samples(self, d: float, n: int) -> tuple[Sector, Sector, Sector, Sector]:
        """Grid sectors under the NE, NW, SW and SE points of the search circle."""
        return sector_samples(self.pos, self.vsr, d, n)

    def prey_search(
        self,
        population: Iterable[ColourPolymorphicPrey],
        search_chance: float,
        grid: Optional[PreyGrid] = None,
    ) -> Optional[Candidate]:
        """Try to recognise one nearby prey agent to attack.

        Args:
            population: Prey agents to scan. Ignored when grid is given.
            search_chance: Recognition permissiveness in [0, 1].
            grid: Optional spatial index; when given, only prey bucketed in
                the sectors around this predator are scanned.

        Returns:
            The recognised candidate, or None if nothing passed the test.

        Raises:
            GeometryError: If a distance measurement fails.
            ValueError: If search_chance is outside [0, 1].
        """
        if grid is not None:
            population = grid.query(self.pos, self.vsr)
        candidates = rank_candidates(self.pos, self.colour_imprint, population, self.vsr)
        return recognise(candidates, self.acuity, search_chance)

    # -------------------------------------------------------------------------
    # Attack
    # -------------------------------------------------------------------------

    def attack(
        self,
        prey: Optional[ColourPolymorphicPrey],
        attack_chance: float,
        imprint_factor: float,
        rng: Optional[random.Random] = None,
    ) -> bool:
        """Attempt to eat a prey agent.

        Args:
            prey: The prey to attack, or None for a no-op.
            attack_chance: Probability of success in [0, 1].
            imprint_factor: How strongly a kill pulls the colour imprint
                toward the prey's colouration, in [0, 1].
            rng: Random source for the success draw. Defaults to the
                predator's own rng, then the random module.

        Returns:
            True if the prey was killed.
        """
        if prey is None:
            return False
        if not 0.0 <= attack_chance <= 1.0:
            raise ValueError(f"attack chance must be within [0, 1], got {attack_chance}")

        alpha = (rng or self.rng or random).random()
        if alpha < 1.0 - attack_chance:
            logger.debug("attack_missed", predator_id=self.id, prey_id=prey.id, alpha=alpha)
            return False

        self.colour_imprint = imprint(self.colour_imprint, prey.colouration, imprint_factor)
        self.hunger -= SATIETY
        prey.lifespan = 0
        self.attack_success = True
        logger.info("prey_eaten", eaten=str(prey), eater=self.dump())
        return True

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def age(self, settings: Settings) -> LifecycleState:
        """Advance one tick of hunger and (if enabled) ageing.

        Clears the attack_success cue from the previous tick and returns the
        state the scheduler should act on.
        """
        self.hunger += 1
        if settings.vp_ageing:
            self.lifespan -= 1
        self.attack_success = False
        return next_state(self.lifespan, self.hunger, settings)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def get_draw_info(self) -> AgentRender:
        """Draw record for this tick; black marks a kill made this tick."""
        colour = BLACK if self.attack_success else self.colour_imprint
        return AgentRender(
            kind="predator",
            x=self.pos[0],
            y=self.pos[1],
            heading=self._heading,
            colour=colour.to_256(),
        )

    def dump(self) -> str:
        return (
            f"id={self.id}\n"
            f"pos=({self.pos[0]},{self.pos[1]})\n"
            f"speed={self.speed}\n"
            f"acceleration={self.acceleration}\n"
            f"heading={self._heading}\n"
            f"direction=({self._direction[0]},{self._direction[1]})\n"
            f"turn_rate={self.turn_rate}\n"
            f"vsr={self.vsr}\n"
            f"acuity={self.acuity}\n"
            f"lifespan={self.lifespan}\n"
            f"hunger={self.hunger}\n"
            f"fertility={self.fertility}\n"
            f"gravid={self.gravid}\n"
            f"attack_success={self.attack_success}\n"
            f"colour_imprint={self.colour_imprint}\n"
        )

    def __str__(self) -> str:
        return self.dump()


def generate_predators(
    count: int,
    settings: Settings,
    rng: Optional[random.Random] = None,
) -> list[VisualPredator]:
    """Create a fresh predator population.

    Args:
        count: Number of predators to create.
        settings: Model context supplying bounds, kinematics and perception.
        rng: Random source for positions, headings, lifespans and imprints.

    Returns:
        Predators with random position, heading and colour imprint, zero
        hunger, fertility 1 and not gravid. With random_ages the lifespan is
        drawn from [0.7, 1.3] x vp_lifespan; with ageing disabled it is
        UNBOUNDED_LIFESPAN.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    source = rng or random

    population: list[VisualPredator] = []
    for _ in range(count):
        if not settings.vp_ageing:
            lifespan = UNBOUNDED_LIFESPAN
        elif settings.random_ages:
            lifespan = source.randint(
                int(settings.vp_lifespan * 0.7), int(settings.vp_lifespan * 1.3)
            )
        else:
            lifespan = settings.vp_lifespan

        population.append(
            VisualPredator(
                pos=rand_vector(settings.bounds, rng),
                initial_heading=source.random() * 2 * math.pi,
                speed=settings.vp_mov_s,
                acceleration=settings.vp_mov_a,
                turn_rate=settings.vp_turn,
                vsr=settings.vsr,
                acuity=settings.v_gamma,
                colour_imprint=rand_rgb(rng),
                lifespan=lifespan,
                rng=rng,
            )
        )

    logger.info("predators_generated", count=count, ageing=settings.vp_ageing)
    return population
