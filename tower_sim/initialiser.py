"""Define methods for loading and saving a control tower.

A saved control tower is made up of four text streams:

    tick: the number of ticks elapsed, on a single line
    aircraft: the number of aircraft, then one encoded aircraft per line
    terminals: the number of terminals, then each terminal's header line
        followed by one line per gate
    queues: the takeoff queue, the landing queue and the loading aircraft, each
        as a `Name:count` line followed by a comma-separated line of members
"""
import re
from collections import deque
from typing import Iterable, Optional, TextIO

from tower_sim.control_tower import ControlTower
from tower_sim.exceptions import InvalidTaskListError, MalformedSaveError, NoSpaceError
from tower_sim.queues import AircraftQueue, LandingQueue, TakeoffQueue
from tower_sim.types import (
    Aircraft,
    AircraftCharacteristics,
    AirplaneTerminal,
    Gate,
    HelicopterTerminal,
    PassengerAircraft,
    Task,
    TaskList,
    TaskType,
    Terminal,
    Ticks,
    aircraft_class_for,
)
from tower_sim.types.terminal import MAX_NUM_GATES

TERMINAL_TYPES: dict[str, type[Terminal]] = {
    "AirplaneTerminal": AirplaneTerminal,
    "HelicopterTerminal": HelicopterTerminal,
}

EMPTY_GATE = "empty"

# Numbers are plain ASCII digits: no surrounding whitespace or "_" separators
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
DECIMAL_PATTERN = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)")


def _split_fields(line: str, num_fields: int, sep: str = ":") -> list[str]:
    """Split a line on `sep`, requiring exactly `num_fields` fields."""
    fields = line.split(sep)
    if len(fields) != num_fields:
        raise MalformedSaveError(
            f"Expected {num_fields} '{sep}'-separated fields, got {len(fields)}", line
        )
    return fields


def _parse_int(text: Optional[str], minimum: Optional[int] = None) -> int:
    if text is None:
        raise MalformedSaveError("Unexpected end of file")
    if not INTEGER_PATTERN.fullmatch(text):
        raise MalformedSaveError("Expected an integer", text)
    value = int(text)

    if minimum is not None and value < minimum:
        raise MalformedSaveError(f"Expected an integer of at least {minimum}", text)
    return value


def _parse_bool(text: str) -> bool:
    return text == "true"


def _lines(reader: TextIO) -> deque[str]:
    return deque(reader.read().splitlines())


def _find_aircraft(callsign: str, aircraft: Iterable[Aircraft]) -> Aircraft:
    for candidate in aircraft:
        if candidate.callsign == callsign:
            return candidate
    raise MalformedSaveError("Unknown callsign", callsign)


def load_tick(reader: TextIO) -> Ticks:
    """Load the number of ticks elapsed.

    Raises:
        MalformedSaveError: if the first line is not an integer of at least zero.
    """
    lines = _lines(reader)
    return _parse_int(lines[0] if lines else None, minimum=0)


def read_task_list(text: str) -> TaskList:
    """Read a task list from its encoded form, e.g. `AWAY,LAND,WAIT,LOAD@60,TAKEOFF`.

    Raises:
        MalformedSaveError: if a task type is unknown, a load percentage is not
            a non-negative integer, a task has more than one '@', or the tasks
            are not in a legal order.
    """
    tasks = []
    for encoded_task in text.split(","):
        if encoded_task.count("@") > 1:
            raise MalformedSaveError("Task has more than one '@'", encoded_task)

        type_name, _, percent = encoded_task.partition("@")
        try:
            task_type = TaskType[type_name]
        except KeyError:
            raise MalformedSaveError("Unknown task type", encoded_task) from None

        if "@" in encoded_task:
            tasks.append(Task(task_type, _parse_int(percent, minimum=0)))
        else:
            tasks.append(Task(task_type))

    try:
        return TaskList(tasks)
    except InvalidTaskListError as e:
        raise MalformedSaveError(str(e), text) from e


def read_aircraft(line: str) -> Aircraft:
    """Read an aircraft from its encoded form.

    The encoded form is `callsign:MODEL:tasks:fuel:emergency:cargo`. Whether the
    aircraft carries passengers or freight follows from which capacity of its
    model is larger.

    Raises:
        MalformedSaveError: if the line does not have exactly six fields, the
            model is unknown, the fuel or cargo amount is not a number within
            the model's capacity, or the task list is invalid.
    """
    callsign, model, tasks, fuel, emergency, cargo = _split_fields(line, 6)

    try:
        characteristics = AircraftCharacteristics[model]
    except KeyError:
        raise MalformedSaveError("Unknown aircraft model", line) from None

    if not DECIMAL_PATTERN.fullmatch(fuel):
        raise MalformedSaveError("Fuel amount is not a number", line)
    fuel_amount = float(fuel)
    if not 0 <= fuel_amount <= characteristics.fuel_capacity:
        raise MalformedSaveError("Fuel amount outside the aircraft's capacity", line)

    cargo_amount = _parse_int(cargo, minimum=0)
    task_list = read_task_list(tasks)

    try:
        aircraft_class = aircraft_class_for(characteristics)
    except ValueError as e:
        raise MalformedSaveError(str(e), line) from e

    if aircraft_class is PassengerAircraft:
        capacity = characteristics.passenger_capacity
    else:
        capacity = characteristics.freight_capacity
    if cargo_amount > capacity:
        raise MalformedSaveError("Cargo amount above the aircraft's capacity", line)

    return aircraft_class(
        callsign,
        characteristics,
        task_list,
        fuel_amount,
        cargo_amount,
        emergency=_parse_bool(emergency),
    )


def load_aircraft(reader: TextIO) -> list[Aircraft]:
    """Load the list of all aircraft.

    Raises:
        MalformedSaveError: if the count on the first line is not an integer or
            does not match the number of aircraft lines, or any aircraft line
            is invalid.
    """
    lines = _lines(reader)
    num_aircraft = _parse_int(lines.popleft() if lines else None, minimum=0)
    if len(lines) != num_aircraft:
        raise MalformedSaveError(
            f"Expected {num_aircraft} aircraft but found {len(lines)}"
        )
    return [read_aircraft(line) for line in lines]


def read_gate(line: str, aircraft: list[Aircraft]) -> Gate:
    """Read a gate from its encoded form, `number:callsign` or `number:empty`.

    Raises:
        MalformedSaveError: if the line does not have exactly two fields, the
            gate number is less than one, or the callsign is not a known aircraft.
    """
    number, occupant = _split_fields(line, 2)
    gate = Gate(_parse_int(number, minimum=1))
    if occupant != EMPTY_GATE:
        gate.park_aircraft(_find_aircraft(occupant, aircraft))
    return gate


def read_terminal(line: str, lines: deque[str], aircraft: list[Aircraft]) -> Terminal:
    """Read a terminal from its header line, consuming its gate lines from `lines`.

    The header is `TerminalType:number:emergency:numGates`.

    Raises:
        MalformedSaveError: if the header does not have exactly four fields, the
            terminal type is unknown, the terminal number is less than one, the
            number of gates is not between 0 and MAX_NUM_GATES, a gate line is
            missing, or a gate line is invalid.
    """
    terminal_type, number, emergency, num_gates = _split_fields(line, 4)

    terminal_class = TERMINAL_TYPES.get(terminal_type)
    if terminal_class is None:
        raise MalformedSaveError("Unknown terminal type", line)

    terminal = terminal_class(_parse_int(number, minimum=1), emergency=_parse_bool(emergency))

    num_gates = _parse_int(num_gates, minimum=0)
    if num_gates > MAX_NUM_GATES:
        raise MalformedSaveError(f"More than {MAX_NUM_GATES} gates", line)

    for _ in range(num_gates):
        if not lines:
            raise MalformedSaveError("Expected a gate but reached end of file", line)
        try:
            terminal.add_gate(read_gate(lines.popleft(), aircraft))
        except NoSpaceError as e:
            raise MalformedSaveError(str(e), line) from e

    return terminal


def load_terminals_with_gates(reader: TextIO, aircraft: list[Aircraft]) -> list[Terminal]:
    """Load the list of terminals and their gates.

    Args:
        reader: the stream to read from.
        aircraft: all aircraft, used to resolve the callsigns parked at gates.

    Raises:
        MalformedSaveError: if the count on the first line is not an integer or
            does not match the number of terminals, or any terminal is invalid.
    """
    lines = _lines(reader)
    num_terminals = _parse_int(lines.popleft() if lines else None, minimum=0)

    terminals = []
    while lines:
        if len(terminals) == num_terminals:
            raise MalformedSaveError(f"More than {num_terminals} terminals")
        terminals.append(read_terminal(lines.popleft(), lines, aircraft))

    if len(terminals) != num_terminals:
        raise MalformedSaveError(
            f"Expected {num_terminals} terminals but found {len(terminals)}"
        )
    return terminals


def _read_section(lines: deque[str], name: str) -> list[str]:
    """Read a `name:count` line and the comma-separated line of entries after it."""
    if not lines:
        raise MalformedSaveError(f"Expected {name} but reached end of file")

    header = lines.popleft()
    section_name, count = _split_fields(header, 2)
    if section_name != name:
        raise MalformedSaveError(f"Expected {name}", header)

    count = _parse_int(count, minimum=0)
    if count == 0:
        # An empty section may be followed by a blank entries line
        if lines and lines[0] == "":
            lines.popleft()
        return []

    if not lines:
        raise MalformedSaveError(f"Expected {count} entries in {name}", header)

    entries = lines.popleft().split(",")
    if len(entries) != count:
        raise MalformedSaveError(
            f"Expected {count} entries in {name} but found {len(entries)}", header
        )
    return entries


def read_queue(lines: deque[str], aircraft: list[Aircraft], queue: AircraftQueue) -> None:
    """Read an aircraft queue, adding its aircraft to `queue` in order.

    Raises:
        MalformedSaveError: if the header is missing or names a different kind
            of queue, the count does not match the callsigns listed, or a
            callsign is not a known aircraft.
    """
    for callsign in _read_section(lines, type(queue).__name__):
        queue.add_aircraft(_find_aircraft(callsign, aircraft))


def read_loading_aircraft(
    lines: deque[str], aircraft: list[Aircraft], loading_aircraft: dict[Aircraft, Ticks]
) -> None:
    """Read the loading aircraft, as `callsign:ticksRemaining` pairs.

    Raises:
        MalformedSaveError: if the header is missing, the count does not match
            the entries listed, an entry is not a single callsign/ticks pair, a
            callsign is unknown or a ticks value is less than one.
    """
    for entry in _read_section(lines, "LoadingAircraft"):
        callsign, ticks_remaining = _split_fields(entry, 2)
        ticks_remaining = _parse_int(ticks_remaining, minimum=1)
        loading_aircraft[_find_aircraft(callsign, aircraft)] = ticks_remaining


def load_queues(
    reader: TextIO,
    aircraft: list[Aircraft],
    takeoff_queue: TakeoffQueue,
    landing_queue: LandingQueue,
    loading_aircraft: dict[Aircraft, Ticks],
) -> None:
    """Load the takeoff queue, landing queue and loading aircraft, in that order."""
    lines = _lines(reader)
    read_queue(lines, aircraft, takeoff_queue)
    read_queue(lines, aircraft, landing_queue)
    read_loading_aircraft(lines, aircraft, loading_aircraft)


def create_control_tower(
    tick: TextIO, aircraft: TextIO, queues: TextIO, terminals: TextIO
) -> ControlTower:
    """Create a control tower from the four streams making up a save.

    The streams are read in the order tick, aircraft, terminals, queues, since
    terminals and queues refer to aircraft by callsign.

    Raises:
        MalformedSaveError: if any stream is invalid. No control tower is
            returned in that case.
    """
    ticks_elapsed = load_tick(tick)
    all_aircraft = load_aircraft(aircraft)
    all_terminals = load_terminals_with_gates(terminals, all_aircraft)

    takeoff_queue = TakeoffQueue()
    landing_queue = LandingQueue()
    loading_aircraft: dict[Aircraft, Ticks] = {}
    load_queues(queues, all_aircraft, takeoff_queue, landing_queue, loading_aircraft)

    tower = ControlTower(
        ticks_elapsed=ticks_elapsed,
        aircraft=all_aircraft,
        landing_queue=landing_queue,
        takeoff_queue=takeoff_queue,
        loading_aircraft=loading_aircraft,
    )
    for terminal in all_terminals:
        tower.add_terminal(terminal)
    return tower


def write_control_tower(
    tower: ControlTower, tick: TextIO, aircraft: TextIO, queues: TextIO, terminals: TextIO
) -> None:
    """Write a control tower to the four streams making up a save.

    The result can be read back with create_control_tower().
    """
    tick.write(f"{tower.ticks_elapsed}\n")

    aircraft.write(f"{len(tower.aircraft)}\n")
    for plane in tower.aircraft:
        aircraft.write(plane.encode() + "\n")

    queues.write(tower.encode_queues() + "\n")

    terminals.write(f"{len(tower.terminals)}\n")
    for terminal in tower.terminals:
        terminals.write(terminal.encode() + "\n")
