"""Utilities for loading and saving control towers on disk."""
import os

import pandas as pd

from tower_sim.control_tower import ControlTower
from tower_sim.exceptions import MalformedSaveError
from tower_sim.initialiser import create_control_tower, read_task_list, write_control_tower
from tower_sim.types import Aircraft, AircraftCharacteristics, aircraft_class_for

# Names of the files making up a saved control tower
TICK_FILE = "tick.txt"
AIRCRAFT_FILE = "aircraft.txt"
QUEUES_FILE = "queues.txt"
TERMINALS_FILE = "terminalsWithGates.txt"

ROSTER_COLUMNS = ["callsign", "model", "tasks", "fuel", "emergency", "cargo"]


def load_save_directory(directory: str) -> ControlTower:
    """Load a control tower from the save files in the given directory."""
    with open(os.path.join(directory, TICK_FILE)) as tick, open(
        os.path.join(directory, AIRCRAFT_FILE)
    ) as aircraft, open(os.path.join(directory, QUEUES_FILE)) as queues, open(
        os.path.join(directory, TERMINALS_FILE)
    ) as terminals:
        return create_control_tower(tick, aircraft, queues, terminals)


def save_to_directory(tower: ControlTower, directory: str) -> None:
    """Write a control tower's save files into the given directory."""
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, TICK_FILE), "w") as tick, open(
        os.path.join(directory, AIRCRAFT_FILE), "w"
    ) as aircraft, open(os.path.join(directory, QUEUES_FILE), "w") as queues, open(
        os.path.join(directory, TERMINALS_FILE), "w"
    ) as terminals:
        write_control_tower(tower, tick, aircraft, queues, terminals)


def parse_aircraft(roster_row) -> Aircraft:
    """
    Parse a row of a roster into an Aircraft object.

    Args:
        roster_row: a row with the following items
            - callsign
            - model: name of an AircraftCharacteristics member
            - tasks: encoded task list, e.g. "AWAY,LAND,WAIT,LOAD@60,TAKEOFF"
            - fuel: fuel onboard, in litres
            - emergency: whether the aircraft has declared an emergency
            - cargo: passengers or kg of freight onboard
    """
    try:
        characteristics = AircraftCharacteristics[roster_row["model"]]
    except KeyError:
        raise MalformedSaveError("Unknown aircraft model", roster_row["model"]) from None

    emergency = roster_row["emergency"]
    if isinstance(emergency, str):
        emergency = emergency.strip().lower() == "true"

    try:
        return aircraft_class_for(characteristics)(
            str(roster_row["callsign"]),
            characteristics,
            read_task_list(roster_row["tasks"]),
            float(roster_row["fuel"]),
            int(roster_row["cargo"]),
            emergency=bool(emergency),
        )
    except ValueError as e:
        raise MalformedSaveError(str(e), roster_row["callsign"]) from e


def parse_roster(roster_df: pd.DataFrame) -> list[Aircraft]:
    """Parse a pandas dataframe of aircraft into a list of Aircraft.

    Args:
        roster_df: A pandas dataframe with the columns in ROSTER_COLUMNS.

    Returns:
        a list of aircraft, in the order of the dataframe's rows
    """
    missing = set(ROSTER_COLUMNS) - set(roster_df.columns)
    if missing:
        raise MalformedSaveError(f"Roster is missing columns {sorted(missing)}")

    return [parse_aircraft(row) for _, row in roster_df.iterrows()]


def load_roster(path: str) -> list[Aircraft]:
    """Load a CSV roster of aircraft."""
    roster_df = pd.read_csv(path, dtype={"callsign": str, "model": str, "tasks": str})
    return parse_roster(roster_df)
