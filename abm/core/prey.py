"""Colour-polymorphic prey — the fields the predator core reads and writes.

Prey behaviour and reproduction live outside this package; this record only
carries what a visual predator perceives (position, colouration) and the
lifespan it zeroes on a kill.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from abm.core.colour import RGB
from abm.core.geometry import Vector


@dataclass
class ColourPolymorphicPrey:
    """A prey agent as seen by predators.

    A lifespan of 0 is the death sentinel: the scheduler removes the prey
    on its next pass.
    """

    pos: Vector
    colouration: RGB
    lifespan: int = 100
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def is_alive(self) -> bool:
        return self.lifespan > 0

    def __str__(self) -> str:
        return (
            f"id={self.id}\n"
            f"pos=({self.pos[0]},{self.pos[1]})\n"
            f"lifespan={self.lifespan}\n"
            f"colouration={self.colouration}\n"
        )
