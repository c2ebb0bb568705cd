"""Define types for terminals and the gates inside them."""
from dataclasses import dataclass, field
from typing import Optional

from tower_sim.exceptions import NoSpaceError
from tower_sim.types.aircraft import Aircraft, AircraftType
from tower_sim.types.util import round_half_up

# Maximum number of gates a single terminal may contain
MAX_NUM_GATES = 6


@dataclass(eq=False)
class Gate:
    """A gate where a single aircraft can park.

    Attributes:
        gate_number: The number identifying the gate within its terminal.
        aircraft_at_gate: The aircraft parked at the gate, if any.
    """

    gate_number: int
    aircraft_at_gate: Optional[Aircraft] = None

    @property
    def is_occupied(self) -> bool:
        return self.aircraft_at_gate is not None

    def park_aircraft(self, aircraft: Aircraft) -> None:
        """Park an aircraft at this gate.

        Raises:
            NoSpaceError: if another aircraft is already parked here.
        """
        if self.is_occupied:
            raise NoSpaceError(
                f"Gate {self.gate_number} is occupied by "
                f"{self.aircraft_at_gate.callsign}"
            )
        self.aircraft_at_gate = aircraft

    def aircraft_leaves(self) -> None:
        self.aircraft_at_gate = None

    def __str__(self) -> str:
        occupant = self.aircraft_at_gate.callsign if self.is_occupied else "empty"
        return f"Gate {self.gate_number} [{occupant}]"

    def encode(self) -> str:
        occupant = self.aircraft_at_gate.callsign if self.is_occupied else "empty"
        return f"{self.gate_number}:{occupant}"


@dataclass(eq=False)
class Terminal:
    """A terminal building containing up to MAX_NUM_GATES gates.

    Concrete terminals only accept aircraft of a single AircraftType.

    Attributes:
        terminal_number: The number identifying the terminal.
        emergency: Whether the terminal is in a state of emergency. Terminals
            under emergency are not offered to landing aircraft.
    """

    terminal_number: int
    emergency: bool = False
    _gates: list[Gate] = field(default_factory=list, init=False, repr=False)

    accepted_type = None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Terminal):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.terminal_number == other.terminal_number
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.terminal_number))

    def accepts(self, aircraft_type: AircraftType) -> bool:
        return aircraft_type == self.accepted_type

    @property
    def gates(self) -> list[Gate]:
        """The gates in this terminal, in the order they were added."""
        return list(self._gates)

    def add_gate(self, gate: Gate) -> None:
        """Add a gate to this terminal.

        Raises:
            NoSpaceError: if the terminal already has MAX_NUM_GATES gates.
        """
        if len(self._gates) >= MAX_NUM_GATES:
            raise NoSpaceError(
                f"Maximum number of gates reached ({MAX_NUM_GATES}) in "
                f"terminal {self.terminal_number}"
            )
        self._gates.append(gate)

    def find_unoccupied_gate(self) -> Optional[Gate]:
        """Return the first unoccupied gate, or None if every gate is occupied."""
        for gate in self._gates:
            if not gate.is_occupied:
                return gate
        return None

    @property
    def has_emergency(self) -> bool:
        return self.emergency

    def declare_emergency(self) -> None:
        self.emergency = True

    def clear_emergency(self) -> None:
        self.emergency = False

    def calculate_occupancy_level(self) -> int:
        """Percentage of gates that are occupied, rounded to the nearest whole."""
        if not self._gates:
            return 0
        occupied = sum(1 for gate in self._gates if gate.is_occupied)
        return round_half_up(100 * occupied / len(self._gates))

    def __str__(self) -> str:
        return (
            f"{type(self).__name__} {self.terminal_number}, "
            f"{len(self._gates)} gates" + (" (EMERGENCY)" if self.emergency else "")
        )

    def encode(self) -> str:
        header = ":".join(
            [
                type(self).__name__,
                str(self.terminal_number),
                "true" if self.emergency else "false",
                str(len(self._gates)),
            ]
        )
        return "\n".join([header] + [gate.encode() for gate in self._gates])


@dataclass(eq=False)
class AirplaneTerminal(Terminal):
    """A terminal for airplanes."""

    accepted_type = AircraftType.AIRPLANE


@dataclass(eq=False)
class HelicopterTerminal(Terminal):
    """A terminal for helicopters."""

    accepted_type = AircraftType.HELICOPTER
