"""Define types for the aircraft managed by a control tower."""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from tower_sim.types.task import TaskList, TaskType
from tower_sim.types.util import Callsign, round_half_up

# Fraction of fuel capacity burned on each tick spent AWAY
AWAY_FUEL_BURN = 0.1


class AircraftType(Enum):
    """The broad category of an aircraft, used to match it with a terminal."""

    AIRPLANE = "AIRPLANE"
    HELICOPTER = "HELICOPTER"


class AircraftCharacteristics(Enum):
    """Physical characteristics of the aircraft models known to the simulation.

    Attributes:
        aircraft_type: airplane or helicopter.
        empty_weight: weight of the aircraft with no fuel or cargo (kg).
        max_takeoff_weight: maximum weight the aircraft can take off with (kg).
        fuel_capacity: maximum fuel onboard (litres).
        passenger_capacity: maximum number of passengers.
        freight_capacity: maximum freight onboard (kg).
    """

    AIRBUS_A320 = (AircraftType.AIRPLANE, 42600, 78000, 27200, 150, 0)
    BOEING_747_8F = (AircraftType.AIRPLANE, 197131, 447700, 226117, 0, 137756)
    BOEING_787 = (AircraftType.AIRPLANE, 119950, 227930, 126206, 242, 0)
    FOKKER_100 = (AircraftType.AIRPLANE, 24375, 44450, 13365, 97, 0)
    ROBINSON_R44 = (AircraftType.HELICOPTER, 658, 1088, 190, 4, 0)
    SIKORSKY_SKYCRANE = (AircraftType.HELICOPTER, 8724, 19050, 3328, 0, 9100)

    def __init__(
        self,
        aircraft_type: AircraftType,
        empty_weight: int,
        max_takeoff_weight: int,
        fuel_capacity: float,
        passenger_capacity: int,
        freight_capacity: int,
    ):
        self.aircraft_type = aircraft_type
        self.empty_weight = empty_weight
        self.max_takeoff_weight = max_takeoff_weight
        self.fuel_capacity = fuel_capacity
        self.passenger_capacity = passenger_capacity
        self.freight_capacity = freight_capacity


@dataclass(eq=False)
class Aircraft(ABC):
    """An aircraft that moves through the airport's operational cycle.

    Aircraft is abstract: PassengerAircraft and FreightAircraft say how cargo
    is counted, loaded and unloaded.

    Aircraft are compared and hashed by callsign only, so the same aircraft is
    recognised across the master list, the queues, the loading map and gates.

    Attributes:
        callsign: The unique callsign of the aircraft.
        characteristics: The model of the aircraft.
        task_list: The circular list of tasks the aircraft cycles through.
        fuel_amount: The fuel currently onboard, in litres.
        emergency: Whether the aircraft has declared an emergency.
    """

    callsign: Callsign
    characteristics: AircraftCharacteristics
    task_list: TaskList
    fuel_amount: float
    emergency: bool = field(default=False, kw_only=True)

    def __post_init__(self):
        if not 0 <= self.fuel_amount <= self.characteristics.fuel_capacity:
            raise ValueError(
                f"Fuel amount {self.fuel_amount} outside [0, "
                f"{self.characteristics.fuel_capacity}] for {self.callsign}"
            )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Aircraft):
            return NotImplemented
        return self.callsign == other.callsign

    def __hash__(self) -> int:
        return hash(self.callsign)

    @property
    def aircraft_type(self) -> AircraftType:
        return self.characteristics.aircraft_type

    @property
    def fuel_percent_remaining(self) -> int:
        """Fuel onboard as a percentage of capacity, rounded to the nearest whole."""
        return round_half_up(100 * self.fuel_amount / self.characteristics.fuel_capacity)

    @property
    def has_emergency(self) -> bool:
        return self.emergency

    def declare_emergency(self) -> None:
        self.emergency = True

    def clear_emergency(self) -> None:
        self.emergency = False

    @property
    def is_passenger_category(self) -> bool:
        return False

    @property
    @abstractmethod
    def cargo_amount(self) -> int:
        """Passengers or kg of freight currently onboard."""

    @property
    @abstractmethod
    def loading_time(self) -> int:
        """Number of ticks needed to complete the upcoming LOAD task."""

    @abstractmethod
    def unload(self) -> None:
        """Remove all cargo from the aircraft."""

    def upcoming_load_percent(self) -> int:
        """Load percentage of the current or next LOAD task, or 0 if there is none."""
        for task in self.task_list.upcoming_tasks():
            if task.type == TaskType.LOAD:
                return task.load_percent
        return 0

    def tick(self) -> None:
        """Update fuel for one tick of the simulation.

        Aircraft burn fuel while AWAY and are refuelled while they LOAD.
        """
        current_type = self.task_list.current_task.type
        capacity = self.characteristics.fuel_capacity
        if current_type == TaskType.AWAY:
            self.fuel_amount = max(0.0, self.fuel_amount - AWAY_FUEL_BURN * capacity)
        elif current_type == TaskType.LOAD:
            self.fuel_amount = min(
                capacity, self.fuel_amount + capacity / self.loading_time
            )

    def __str__(self) -> str:
        return (
            f"{type(self).__name__} {self.callsign} "
            f"{self.characteristics.name} {self.task_list.current_task.type.value}"
            + (" (EMERGENCY)" if self.emergency else "")
        )

    def encode(self) -> str:
        return ":".join(
            [
                self.callsign,
                self.characteristics.name,
                self.task_list.encode(),
                f"{self.fuel_amount:.2f}",
                "true" if self.emergency else "false",
                str(self.cargo_amount),
            ]
        )


@dataclass(eq=False)
class PassengerAircraft(Aircraft):
    """An aircraft that carries passengers.

    Attributes:
        num_passengers: The number of passengers currently onboard.
    """

    num_passengers: int = 0

    def __post_init__(self):
        super().__post_init__()
        capacity = self.characteristics.passenger_capacity
        if not 0 <= self.num_passengers <= capacity:
            raise ValueError(
                f"{self.num_passengers} passengers outside [0, {capacity}] "
                f"for {self.callsign}"
            )

    @property
    def is_passenger_category(self) -> bool:
        return True

    @property
    def cargo_amount(self) -> int:
        return self.num_passengers

    @property
    def loading_time(self) -> int:
        passengers_to_load = round_half_up(
            self.characteristics.passenger_capacity * self.upcoming_load_percent() / 100
        )
        if passengers_to_load <= 0:
            return 1
        return max(1, round_half_up(math.log10(passengers_to_load)))

    def unload(self) -> None:
        self.num_passengers = 0


@dataclass(eq=False)
class FreightAircraft(Aircraft):
    """An aircraft that carries freight.

    Attributes:
        freight_amount: The freight currently onboard, in kg.
    """

    freight_amount: int = 0

    def __post_init__(self):
        super().__post_init__()
        capacity = self.characteristics.freight_capacity
        if not 0 <= self.freight_amount <= capacity:
            raise ValueError(
                f"{self.freight_amount} kg of freight outside [0, {capacity}] "
                f"for {self.callsign}"
            )

    @property
    def cargo_amount(self) -> int:
        return self.freight_amount

    @property
    def loading_time(self) -> int:
        freight_to_load = round_half_up(
            self.characteristics.freight_capacity * self.upcoming_load_percent() / 100
        )
        if freight_to_load < 1000:
            return 1
        elif freight_to_load <= 50000:
            return 2
        return 3

    def unload(self) -> None:
        self.freight_amount = 0


def aircraft_class_for(characteristics: AircraftCharacteristics) -> type[Aircraft]:
    """Return the aircraft class for a model, by whichever capacity is larger.

    Raises:
        ValueError: if the passenger and freight capacities are equal, so the
            model is neither a passenger nor a freight aircraft.
    """
    if characteristics.passenger_capacity > characteristics.freight_capacity:
        return PassengerAircraft
    elif characteristics.freight_capacity > characteristics.passenger_capacity:
        return FreightAircraft
    raise ValueError(f"Cannot tell passenger from freight aircraft: {characteristics.name}")
