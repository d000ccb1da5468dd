"""Lifecycle states returned to the scheduler after each aging step."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from abm.config import Settings


class LifecycleState(str, Enum):
    """What the scheduler should do with a predator this tick."""

    PATROL = "PATROL"
    MATE_SEARCH = "MATE SEARCH"
    PREY_SEARCH = "PREY SEARCH"
    DEATH = "DEATH"


def next_state(lifespan: int, hunger: int, settings: Settings) -> LifecycleState:
    """Decide the lifecycle state from already-updated counters.

    Rules are checked in order:
    1. lifespan <= 0 -> DEATH
    2. hunger above vp_hunger_limit with starvation enabled -> DEATH
    3. hunger below vp_sexual_readiness -> MATE_SEARCH
    4. otherwise -> PREY_SEARCH

    PATROL is never produced here; it is the scheduler's idle default.
    """
    if lifespan <= 0:
        return LifecycleState.DEATH
    if settings.vp_starvation and hunger > settings.vp_hunger_limit:
        return LifecycleState.DEATH
    if hunger < settings.vp_sexual_readiness:
        return LifecycleState.MATE_SEARCH
    return LifecycleState.PREY_SEARCH
