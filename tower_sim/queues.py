"""Define the queues aircraft wait in to use the runway."""
from abc import ABC, abstractmethod
from typing import Callable, Optional

from tower_sim.types import Aircraft

# Aircraft at or below this fuel percentage are prioritised for landing
LOW_FUEL_PERCENT = 20


class AircraftQueue(ABC):
    """A queue of aircraft waiting to use the runway.

    Aircraft are added at the back. Which aircraft counts as the "front" (and so
    is peeked or removed next) depends on the concrete queue.
    """

    @abstractmethod
    def add_aircraft(self, aircraft: Aircraft) -> None:
        """Add an aircraft to the back of the queue."""

    @abstractmethod
    def remove_aircraft(self) -> Optional[Aircraft]:
        """Remove and return the aircraft at the front, or None if empty."""

    @abstractmethod
    def peek_aircraft(self) -> Optional[Aircraft]:
        """Return the aircraft at the front without removing it, or None if empty."""

    @abstractmethod
    def get_aircraft_in_order(self) -> list[Aircraft]:
        """Return all aircraft in the order they would be removed.

        The returned list is a copy; changing it does not affect the queue.
        """

    @abstractmethod
    def contains_aircraft(self, aircraft: Aircraft) -> bool:
        """Return True if the given aircraft is in the queue."""

    def __len__(self) -> int:
        return len(self.get_aircraft_in_order())

    def __contains__(self, aircraft) -> bool:
        return self.contains_aircraft(aircraft)

    def callsigns(self) -> list[str]:
        return [aircraft.callsign for aircraft in self.get_aircraft_in_order()]

    def __str__(self) -> str:
        return f"{type(self).__name__} [{', '.join(self.callsigns())}]"

    def encode(self) -> str:
        """Encode the queue as `QueueType:numAircraft` followed by its callsigns."""
        callsigns = self.callsigns()
        return f"{type(self).__name__}:{len(callsigns)}\n{','.join(callsigns)}"


class TakeoffQueue(AircraftQueue):
    """A first-in-first-out queue of aircraft waiting to take off."""

    def __init__(self):
        self._aircraft: list[Aircraft] = []

    def add_aircraft(self, aircraft: Aircraft) -> None:
        self._aircraft.append(aircraft)

    def remove_aircraft(self) -> Optional[Aircraft]:
        if not self._aircraft:
            return None
        return self._aircraft.pop(0)

    def peek_aircraft(self) -> Optional[Aircraft]:
        if not self._aircraft:
            return None
        return self._aircraft[0]

    def get_aircraft_in_order(self) -> list[Aircraft]:
        return list(self._aircraft)

    def contains_aircraft(self, aircraft: Aircraft) -> bool:
        return aircraft in self._aircraft


def _has_emergency(aircraft: Aircraft) -> bool:
    return aircraft.has_emergency


def _is_low_on_fuel(aircraft: Aircraft) -> bool:
    return aircraft.fuel_percent_remaining <= LOW_FUEL_PERCENT


def _is_passenger_aircraft(aircraft: Aircraft) -> bool:
    return aircraft.is_passenger_category


class LandingQueue(AircraftQueue):
    """A rule-based queue of aircraft waiting in the air to land.

    Aircraft are prioritised by urgency. The front of the queue is the earliest
    added aircraft in the first of these bands that is non-empty:

        1. aircraft that have declared an emergency
        2. aircraft with LOW_FUEL_PERCENT or less fuel remaining
        3. passenger aircraft
        4. any other aircraft
    """

    priority_bands: tuple[Callable[[Aircraft], bool], ...] = (
        _has_emergency,
        _is_low_on_fuel,
        _is_passenger_aircraft,
    )

    def __init__(self):
        self._aircraft: list[Aircraft] = []

    def _band_of(self, aircraft: Aircraft) -> int:
        for band, matches in enumerate(self.priority_bands):
            if matches(aircraft):
                return band
        return len(self.priority_bands)

    def add_aircraft(self, aircraft: Aircraft) -> None:
        self._aircraft.append(aircraft)

    def peek_aircraft(self) -> Optional[Aircraft]:
        if not self._aircraft:
            return None

        for matches in self.priority_bands:
            for aircraft in self._aircraft:
                if matches(aircraft):
                    return aircraft

        return self._aircraft[0]

    def remove_aircraft(self) -> Optional[Aircraft]:
        front = self.peek_aircraft()
        if front is not None:
            self._aircraft.remove(front)
        return front

    def get_aircraft_in_order(self) -> list[Aircraft]:
        # Sorting is stable, so aircraft within a band keep their arrival order,
        # which matches repeatedly removing from the front.
        return sorted(self._aircraft, key=self._band_of)

    def contains_aircraft(self, aircraft: Aircraft) -> bool:
        return aircraft in self._aircraft
