"""Exceptions raised by the visual predator core."""

from __future__ import annotations


class AgentError(Exception):
    """Base class for failures inside a single agent operation.

    Raising one aborts only the current operation; the engine logs it and
    moves on to the next predator.
    """


class GeometryError(AgentError):
    """A vector primitive received malformed input (wrong shape or non-finite)."""
