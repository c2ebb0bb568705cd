"""Define the control tower that advances the airport one tick at a time."""
import logging
from dataclasses import dataclass, field
from typing import Optional

from tower_sim.exceptions import BookkeepingError, NoSpaceError, NoSuitableGateError
from tower_sim.queues import LandingQueue, TakeoffQueue
from tower_sim.types import Aircraft, Gate, TaskType, Terminal, Ticks

logger = logging.getLogger(__name__)

# Task types that are completed automatically on every tick
AUTOMATIC_TASK_TYPES = (TaskType.AWAY, TaskType.WAIT)

# Task types for which an aircraft must be parked at a gate
GROUNDED_TASK_TYPES = (TaskType.WAIT, TaskType.LOAD)


@dataclass(eq=False)
class ControlTower:
    """The control tower of an airport.

    The control tower owns the landing and takeoff queues and the map of loading
    aircraft, and is the only thing that changes them. Each call to tick()
    advances every aircraft by one step of the simulation.

    Attributes:
        ticks_elapsed: The number of ticks that have elapsed.
        aircraft: All aircraft managed by the control tower, in the order added.
        landing_queue: Aircraft waiting in the air to land.
        takeoff_queue: Aircraft waiting on the ground to take off.
        loading_aircraft: Aircraft loading cargo at a gate, mapped to the number
            of ticks of loading remaining.
        terminals: The terminals of the airport, in the order added.
        ticks_at_commencement: ticks_elapsed when the tower was created. The
            landing/takeoff alternation is counted from here.
    """

    ticks_elapsed: Ticks = 0
    aircraft: list[Aircraft] = field(default_factory=list)
    landing_queue: LandingQueue = field(default_factory=LandingQueue)
    takeoff_queue: TakeoffQueue = field(default_factory=TakeoffQueue)
    loading_aircraft: dict[Aircraft, Ticks] = field(default_factory=dict)
    terminals: list[Terminal] = field(default_factory=list)
    ticks_at_commencement: Ticks = field(init=False)

    def __post_init__(self):
        self.ticks_at_commencement = self.ticks_elapsed

    def add_terminal(self, terminal: Terminal) -> None:
        self.terminals.append(terminal)

    def add_aircraft(self, aircraft: Aircraft) -> None:
        """Bring an aircraft under the control of this tower.

        Aircraft currently on a WAIT or LOAD task are parked at a suitable gate.
        The aircraft is then placed in the queue matching its current task.

        Args:
            aircraft: The aircraft to add.

        Raises:
            NoSuitableGateError: if the aircraft needs a gate and none is free.
        """
        if aircraft.task_list.current_task.type in GROUNDED_TASK_TYPES:
            gate = self.find_unoccupied_gate(aircraft)
            if gate is None:
                raise NoSuitableGateError(f"No gate available for {aircraft.callsign}")
            self._park(aircraft, gate)

        self.aircraft.append(aircraft)
        self.place_aircraft_in_queues(aircraft)

    def find_unoccupied_gate(self, aircraft: Aircraft) -> Optional[Gate]:
        """Find an unoccupied gate in a terminal compatible with the given aircraft.

        Terminals are searched in the order they were added, skipping terminals
        of the wrong type and terminals in a state of emergency.

        Returns:
            The first suitable gate, or None if there is none.
        """
        for terminal in self.terminals:
            if not terminal.accepts(aircraft.aircraft_type) or terminal.has_emergency:
                continue

            gate = terminal.find_unoccupied_gate()
            if gate is not None:
                return gate

        return None

    def find_gate_of_aircraft(self, aircraft: Aircraft) -> Optional[Gate]:
        """Return the gate the given aircraft is parked at, or None."""
        for terminal in self.terminals:
            for gate in terminal.gates:
                if gate.aircraft_at_gate == aircraft:
                    return gate
        return None

    def _park(self, aircraft: Aircraft, gate: Gate) -> None:
        # The gate has just been reported as unoccupied, so refusal means the
        # terminals and the tower disagree about who is parked where.
        try:
            gate.park_aircraft(aircraft)
        except NoSpaceError as e:
            raise BookkeepingError(
                f"Gate {gate.gate_number} was reported free but refused "
                f"{aircraft.callsign}"
            ) from e

    def try_land_aircraft(self) -> bool:
        """Attempt to land the highest priority aircraft in the landing queue.

        On success the aircraft leaves the landing queue, is parked at a gate,
        unloads its cargo and moves on to its next task.

        Returns:
            True if an aircraft landed, False if the queue was empty or there was
            no suitable gate for the aircraft at the front of the queue.
        """
        aircraft = self.landing_queue.peek_aircraft()
        if aircraft is None:
            return False

        gate = self.find_unoccupied_gate(aircraft)
        if gate is None:
            logger.debug("No gate for %s; holding in landing queue", aircraft.callsign)
            return False

        # Park before dequeuing so a refused gate leaves the aircraft queued
        self._park(aircraft, gate)
        self.landing_queue.remove_aircraft()
        aircraft.unload()
        aircraft.task_list.move_to_next_task()
        logger.debug("%s landed and parked at gate %d", aircraft.callsign, gate.gate_number)
        return True

    def try_take_off_aircraft(self) -> None:
        """Allow the aircraft at the front of the takeoff queue to take off, if any."""
        aircraft = self.takeoff_queue.remove_aircraft()
        if aircraft is None:
            return

        aircraft.task_list.move_to_next_task()
        logger.debug("%s took off", aircraft.callsign)

    def load_aircraft(self) -> None:
        """Count down loading aircraft and release those that have finished.

        Aircraft that finish loading leave the loading map, vacate their gate and
        move on to their next task. Aircraft are processed in callsign order.
        """
        for aircraft in sorted(self.loading_aircraft, key=lambda a: a.callsign):
            ticks_remaining = self.loading_aircraft[aircraft] - 1
            if ticks_remaining > 0:
                self.loading_aircraft[aircraft] = ticks_remaining
                continue

            del self.loading_aircraft[aircraft]
            gate = self.find_gate_of_aircraft(aircraft)
            if gate is None:
                logger.warning("%s finished loading but is not at a gate", aircraft.callsign)
            else:
                gate.aircraft_leaves()
            aircraft.task_list.move_to_next_task()
            logger.debug("%s finished loading", aircraft.callsign)

    def place_aircraft_in_queues(self, aircraft: Aircraft) -> None:
        """File the aircraft wherever its current task says it should be.

        LAND aircraft join the landing queue, TAKEOFF aircraft join the takeoff
        queue and LOAD aircraft join the loading map, in each case only if they
        are not already there.
        """
        current_type = aircraft.task_list.current_task.type
        if current_type == TaskType.LAND:
            if not self.landing_queue.contains_aircraft(aircraft):
                self.landing_queue.add_aircraft(aircraft)
        elif current_type == TaskType.TAKEOFF:
            if not self.takeoff_queue.contains_aircraft(aircraft):
                self.takeoff_queue.add_aircraft(aircraft)
        elif current_type == TaskType.LOAD:
            if aircraft not in self.loading_aircraft:
                self.loading_aircraft[aircraft] = aircraft.loading_time

    def place_all_aircraft_in_queues(self) -> None:
        for aircraft in self.aircraft:
            self.place_aircraft_in_queues(aircraft)

    @property
    def is_landing_tick(self) -> bool:
        """Whether the tick about to run gives the runway to landing aircraft first.

        Landing is attempted on every second tick since commencement, starting
        with the second call to tick().
        """
        tick_number = self.ticks_elapsed - self.ticks_at_commencement + 1
        return tick_number % 2 == 0

    def tick(self) -> None:
        """Advance the simulation by one tick.

        In order:
            1. tick every aircraft
            2. move AWAY and WAIT aircraft on to their next task
            3. process loading aircraft
            4. on landing ticks, land an aircraft (and a second one if the first
               landed), taking off instead if none could land; on other ticks,
               take off an aircraft
            5. place every aircraft in the queue for its current task
            6. increment the elapsed tick count
        """
        for aircraft in self.aircraft:
            aircraft.tick()

        for aircraft in self.aircraft:
            if aircraft.task_list.current_task.type in AUTOMATIC_TASK_TYPES:
                aircraft.task_list.move_to_next_task()

        self.load_aircraft()

        if self.is_landing_tick:
            if self.try_land_aircraft():
                self.try_land_aircraft()
            else:
                self.try_take_off_aircraft()
        else:
            self.try_take_off_aircraft()

        self.place_all_aircraft_in_queues()

        self.ticks_elapsed += 1

    def queue_members(self) -> dict:
        """Return the callsigns in each queue, in queue order."""
        return {
            "TakeoffQueue": self.takeoff_queue.callsigns(),
            "LandingQueue": self.landing_queue.callsigns(),
            "LoadingAircraft": {
                aircraft.callsign: ticks
                for aircraft, ticks in sorted(
                    self.loading_aircraft.items(), key=lambda item: item[0].callsign
                )
            },
        }

    def snapshot(self) -> dict:
        """Return counts describing the current state, for recording history."""
        return {
            "tick": self.ticks_elapsed,
            "landing": len(self.landing_queue),
            "takeoff": len(self.takeoff_queue),
            "loading": len(self.loading_aircraft),
            "aircraft": len(self.aircraft),
            "occupied_gates": sum(
                gate.is_occupied for terminal in self.terminals for gate in terminal.gates
            ),
        }

    def encode_queues(self) -> str:
        """Encode the takeoff queue, landing queue and loading map."""
        loading = self.queue_members()["LoadingAircraft"]
        return "\n".join(
            [
                self.takeoff_queue.encode(),
                self.landing_queue.encode(),
                f"LoadingAircraft:{len(loading)}",
                ",".join(f"{callsign}:{ticks}" for callsign, ticks in loading.items()),
            ]
        )

    def __str__(self) -> str:
        return (
            f"ControlTower: {len(self.terminals)} terminals, "
            f"{len(self.aircraft)} total aircraft "
            f"({len(self.landing_queue)} LAND, {len(self.takeoff_queue)} TAKEOFF, "
            f"{len(self.loading_aircraft)} LOAD)"
        )
