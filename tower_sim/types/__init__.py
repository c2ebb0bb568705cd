"""Define types used in the control tower simulation."""
from tower_sim.types.aircraft import (
    Aircraft,
    AircraftCharacteristics,
    AircraftType,
    FreightAircraft,
    PassengerAircraft,
    aircraft_class_for,
)
from tower_sim.types.task import Task, TaskList, TaskType
from tower_sim.types.terminal import AirplaneTerminal, Gate, HelicopterTerminal, Terminal
from tower_sim.types.util import Callsign, Ticks

__all__ = [
    "Callsign",
    "Ticks",
    "Task",
    "TaskList",
    "TaskType",
    "Aircraft",
    "AircraftCharacteristics",
    "AircraftType",
    "PassengerAircraft",
    "FreightAircraft",
    "aircraft_class_for",
    "Gate",
    "Terminal",
    "AirplaneTerminal",
    "HelicopterTerminal",
]
