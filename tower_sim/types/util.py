"""Define type aliases and helpers shared across the simulation."""
import math

Callsign = str
Ticks = int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up (20.5 -> 21, not 20)."""
    return math.floor(value + 0.5)
