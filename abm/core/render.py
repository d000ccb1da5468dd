"""Render exports — per-agent draw records and the per-tick draw list."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from abm.core.colour import RGB256


@dataclass
class AgentRender:
    """Everything a client needs to draw one agent.

    Attributes:
        kind: Agent type tag, "predator" or "prey".
        x: World x position in [-1, 1].
        y: World y position in [-1, 1].
        heading: Heading in radians.
        colour: 8-bit draw colour.
    """

    kind: str
    x: float
    y: float
    heading: float
    colour: RGB256


@dataclass
class DrawList:
    """Draw records for one tick, grouped by agent kind."""

    predators: list[AgentRender] = field(default_factory=list)
    prey: list[AgentRender] = field(default_factory=list)

    def add(self, record: AgentRender) -> None:
        if record.kind == "predator":
            self.predators.append(record)
        elif record.kind == "prey":
            self.prey.append(record)
        else:
            raise ValueError(f"unknown agent kind: {record.kind!r}")

    def as_dict(self) -> dict:
        """JSON-ready payload in the {"type": "drawlist", "data": ...} shape."""
        return {"type": "drawlist", "data": asdict(self)}
