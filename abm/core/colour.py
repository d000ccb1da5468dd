"""Colour model — RGB values, colour distance, and predator imprinting."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

# Largest possible Euclidean distance between two colours in the unit cube
_MAX_RGB_DISTANCE = math.sqrt(3.0)


@dataclass(frozen=True)
class RGB256:
    """8-bit colour used by render exports."""

    red: int
    green: int
    blue: int


@dataclass(frozen=True)
class RGB:
    """Colour with each channel in [0, 1]."""

    red: float
    green: float
    blue: float

    def to_256(self) -> RGB256:
        """Convert to 8-bit channels, rounding and clamping into [0, 255]."""
        return RGB256(*(min(max(round(c * 255), 0), 255) for c in (self.red, self.green, self.blue)))

    def __str__(self) -> str:
        return f"{{{self.red} {self.green} {self.blue}}}"


BLACK = RGB(0.0, 0.0, 0.0)


def rgb_distance(a: RGB, b: RGB) -> float:
    """Normalised colour difference between two colours, in [0, 1]."""
    return math.sqrt(
        (a.red - b.red) ** 2 + (a.green - b.green) ** 2 + (a.blue - b.blue) ** 2
    ) / _MAX_RGB_DISTANCE


def rand_rgb(rng: random.Random | None = None) -> RGB:
    rng = rng or random
    return RGB(rng.random(), rng.random(), rng.random())


def imprint(old: RGB, prey_colour: RGB, factor: float) -> RGB:
    """Pull a learned colour toward an eaten prey's colour.

    Args:
        old: The predator's current colour imprint.
        prey_colour: Colouration of the prey just eaten.
        factor: Pull strength in [0, 1]. 0 leaves the imprint unchanged,
            1 adopts the prey colour outright.

    Returns:
        The new imprint. Each channel moves independently:
        new = old - (old - prey) * factor.

    Raises:
        ValueError: If factor is outside [0, 1].
    """
    if not 0.0 <= factor <= 1.0:
        raise ValueError(f"imprint factor must be within [0, 1], got {factor}")
    # the general formula can land one ulp away from the prey colour
    if factor == 1.0:
        return prey_colour
    return RGB(
        old.red - (old.red - prey_colour.red) * factor,
        old.green - (old.green - prey_colour.green) * factor,
        old.blue - (old.blue - prey_colour.blue) * factor,
    )
