"""Configuration settings for the colour-polymorphism ABM — loaded from environment variables."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Model context with env-driven overrides.

    All values can be overridden via environment variables prefixed with ABM_.
    Example: ABM_VSR=0.3 overrides vsr.
    """

    # World rectangle as (x_min, y_min, x_max, y_max)
    bounds: tuple[float, float, float, float] = (-1.0, -1.0, 1.0, 1.0)

    # Visual predator lifecycle
    vp_ageing: bool = True
    random_ages: bool = True
    vp_lifespan: int = 100
    vp_hunger_limit: int = 30
    vp_starvation: bool = False
    vp_sexual_readiness: int = 5

    # Visual predator kinematics
    vp_mov_s: float = 0.1  # speed
    vp_mov_a: float = 1.0  # acceleration
    vp_turn: float = 0.3  # max radians per pursuit step

    # Visual predator perception and attack
    vsr: float = 0.25  # visual search range
    v_gamma: float = 1.0  # visual acuity
    vp_search_chance: float = 0.5
    vp_attack_chance: float = 0.5
    vp_imprint_factor: float = 0.2

    # Sector grid used by the prey spatial index
    sector_size: float = 0.25
    sector_count: int = 8

    # Engine
    stats_interval_ticks: int = 50
    log_level: str = "info"

    model_config = SettingsConfigDict(
        env_prefix="ABM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("vp_search_chance", "vp_attack_chance", "vp_imprint_factor")
    @classmethod
    def probability_in_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("must be within [0, 1]")
        return v

    @field_validator("vp_mov_s", "vp_mov_a", "vp_turn", "vsr", "v_gamma", "vp_lifespan")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be non-negative")
        return v

    @field_validator("sector_size", "sector_count", "stats_interval_ticks")
    @classmethod
    def positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("bounds")
    @classmethod
    def bounds_ordered(cls, v: tuple[float, float, float, float]) -> tuple[float, float, float, float]:
        x_min, y_min, x_max, y_max = v
        if x_min >= x_max or y_min >= y_max:
            raise ValueError("bounds must be (x_min, y_min, x_max, y_max) with min < max")
        return v
