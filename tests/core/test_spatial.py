"""Unit tests for sector sampling and the prey grid index."""

from __future__ import annotations

import random

import pytest

from abm.core.colour import RGB, rand_rgb
from abm.core.geometry import rand_vector, vector_distance
from abm.core.predator import VisualPredator
from abm.core.prey import ColourPolymorphicPrey
from abm.core.spatial import PreyGrid, sector_samples

GREY = RGB(0.5, 0.5, 0.5)


def create_random_prey(count: int, seed: int) -> list[ColourPolymorphicPrey]:
    """Helper to scatter prey uniformly across the world.

    Args:
        count: Number of prey.
        seed: Seed for positions and colours.

    Returns:
        A list of living prey agents.
    """
    rng = random.Random(seed)
    return [
        ColourPolymorphicPrey(
            pos=rand_vector((-1.0, -1.0, 1.0, 1.0), rng),
            colouration=rand_rgb(rng),
            id=f"prey-{i:04d}",
        )
        for i in range(count)
    ]


def test_sector_samples_at_origin():
    """Test the four compass samples around the world centre."""
    samples = sector_samples((0.0, 0.0), 0.5, 0.25, 8)

    # NE, NW, SW, SE with row 0 at the top edge
    assert samples == ((2, 5), (2, 2), (5, 2), (5, 5))


def test_sector_samples_ignore_heading():
    """Test that samples are fixed to world axes, not the predator heading."""
    a = VisualPredator(pos=(0.0, 0.0), speed=0.1, acceleration=1.0, turn_rate=0.3, vsr=0.5)
    b = VisualPredator(
        pos=(0.0, 0.0), speed=0.1, acceleration=1.0, turn_rate=0.3, vsr=0.5, initial_heading=2.0
    )

    assert a.vsr_sector_samples(0.25, 8) == b.vsr_sector_samples(0.25, 8)


def test_sector_samples_clamp_at_world_edge():
    """Test samples near a corner stay on the grid."""
    samples = sector_samples((0.95, 0.95), 0.5, 0.25, 8)

    for row, col in samples:
        assert 0 <= row < 8
        assert 0 <= col < 8


def test_grid_rejects_bad_dimensions():
    """Test that the grid needs a positive sector size and count."""
    with pytest.raises(ValueError):
        PreyGrid(0.0, 8)
    with pytest.raises(ValueError):
        PreyGrid(0.25, -1)


def test_grid_rebuild_skips_dead_prey():
    """Test that only living prey are bucketed."""
    prey = create_random_prey(20, seed=1)
    prey[0].lifespan = 0
    grid = PreyGrid(0.25, 8)

    grid.rebuild(prey)

    assert len(grid) == 19


def test_grid_insert_and_cell_of():
    """Test that prey are bucketed into their sector."""
    grid = PreyGrid(0.25, 8)
    prey = ColourPolymorphicPrey(pos=(-0.9, 0.9), colouration=GREY)

    grid.insert(prey)

    assert grid.cell_of(prey) == (0, 0)
    assert grid.query((-0.9, 0.9), 0.05) == [prey]


def test_grid_clear():
    """Test that clearing empties the grid."""
    grid = PreyGrid(0.25, 8)
    grid.rebuild(create_random_prey(10, seed=2))

    grid.clear()

    assert len(grid) == 0


def test_grid_query_excludes_distant_sectors():
    """Test that prey far from the search circle are not returned."""
    grid = PreyGrid(0.25, 8)
    far = ColourPolymorphicPrey(pos=(0.9, 0.9), colouration=GREY)
    grid.insert(far)

    assert grid.query((-0.9, -0.9), 0.1) == []


@pytest.mark.parametrize("vsr", [0.05, 0.2, 0.5, 1.1])
@pytest.mark.parametrize("d,n", [(0.25, 8), (0.1, 20), (0.5, 4)])
def test_grid_query_covers_whole_search_circle(vsr, d, n):
    """Test that every prey within range is returned by the grid query."""
    prey = create_random_prey(400, seed=5)
    grid = PreyGrid(d, n)
    grid.rebuild(prey)
    rng = random.Random(9)

    for _ in range(25):
        origin = rand_vector((-1.0, -1.0, 1.0, 1.0), rng)
        in_range = {p.id for p in prey if vector_distance(origin, p.pos) <= vsr}
        returned = {p.id for p in grid.query(origin, vsr)}
        assert in_range <= returned


def test_prey_search_same_with_and_without_grid():
    """Test that the grid narrows the scan without changing the selected prey."""
    prey = create_random_prey(300, seed=13)
    grid = PreyGrid(0.25, 8)
    grid.rebuild(prey)
    rng = random.Random(21)

    for _ in range(30):
        predator = VisualPredator(
            pos=rand_vector((-1.0, -1.0, 1.0, 1.0), rng),
            speed=0.1,
            acceleration=1.0,
            turn_rate=0.3,
            vsr=0.3,
            colour_imprint=rand_rgb(rng),
        )
        plain = predator.prey_search(prey, 0.6)
        indexed = predator.prey_search(prey, 0.6, grid=grid)
        assert (plain is None) == (indexed is None)
        if plain is not None:
            assert plain.prey is indexed.prey
