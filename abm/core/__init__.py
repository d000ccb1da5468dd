"""Core model — predator agents, perception, pursuit, lifecycle, and the tick engine."""

from abm.core.engine import PredatorEngine
from abm.core.lifecycle import LifecycleState
from abm.core.perception import Candidate
from abm.core.predator import VisualPredator, generate_predators
from abm.core.prey import ColourPolymorphicPrey

__all__ = [
    "PredatorEngine",
    "LifecycleState",
    "Candidate",
    "VisualPredator",
    "generate_predators",
    "ColourPolymorphicPrey",
]
