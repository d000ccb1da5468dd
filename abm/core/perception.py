"""Perception — ranking visible prey and the visual recognition test.

A scan produces Candidate records that pair each visible prey with the
distance and colour difference measured by the scanning predator. The
measurements live on the candidate, never on the prey, so several
predators can scan the same population without sharing scratch state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from abm.core.colour import RGB, rgb_distance
from abm.core.geometry import Vector, vector_distance
from abm.core.prey import ColourPolymorphicPrey


@dataclass(frozen=True)
class Candidate:
    """A prey agent within visual range, as measured by one predator.

    Attributes:
        prey: The perceived prey agent.
        distance: Euclidean distance from the predator (δ).
        colour_difference: Normalised distance between the predator's
            colour imprint and the prey's colouration (𝛘).
    """

    prey: ColourPolymorphicPrey
    distance: float
    colour_difference: float

    def recognition_score(self, acuity: float) -> float:
        """(1 - 𝛘) * (1 - δ) * γ; higher means easier to recognise."""
        return (1.0 - self.colour_difference) * (1.0 - self.distance) * acuity


def visual_difference_key(candidate: Candidate) -> tuple[float, float, str]:
    """Sort key: colour difference first, then distance, then prey id.

    The prey id makes the order total, so equal measurements still sort
    the same way on every run.
    """
    return (candidate.colour_difference, candidate.distance, candidate.prey.id)


def rank_candidates(
    origin: Vector,
    colour_imprint: RGB,
    population: Iterable[ColourPolymorphicPrey],
    vsr: float,
) -> list[Candidate]:
    """Measure every living prey and keep those within visual range.

    Args:
        origin: Predator position.
        colour_imprint: Predator's learned prey colour.
        population: Prey agents to consider.
        vsr: Visual search range; prey further than this are excluded.

    Returns:
        Candidates sorted by visual_difference_key, most salient first.

    Raises:
        GeometryError: If any distance measurement fails. The scan is
            aborted rather than skipping the offending prey.
    """
    candidates: list[Candidate] = []
    for prey in population:
        if not prey.is_alive():
            continue
        distance = vector_distance(origin, prey.pos)
        if distance <= vsr:
            candidates.append(
                Candidate(
                    prey=prey,
                    distance=distance,
                    colour_difference=rgb_distance(colour_imprint, prey.colouration),
                )
            )
    candidates.sort(key=visual_difference_key)
    return candidates


def recognise(
    candidates: Iterable[Candidate],
    acuity: float,
    search_chance: float,
) -> Optional[Candidate]:
    """Return the first candidate that passes the recognition test.

    A candidate is recognised when its recognition score exceeds
    1 - search_chance. No random draw is involved.
    """
    if not 0.0 <= search_chance <= 1.0:
        raise ValueError(f"search chance must be within [0, 1], got {search_chance}")
    threshold = 1.0 - search_chance
    for candidate in candidates:
        if candidate.recognition_score(acuity) > threshold:
            return candidate
    return None
