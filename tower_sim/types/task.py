"""Define types for the tasks aircraft cycle through."""
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from tower_sim.exceptions import InvalidTaskListError


class TaskType(Enum):
    """The phases an aircraft can be in.

    AWAY: flying away from the airport
    LAND: waiting in the air to land
    WAIT: parked at a gate, waiting
    LOAD: parked at a gate, loading cargo
    TAKEOFF: waiting on the ground to take off
    """

    AWAY = "AWAY"
    LAND = "LAND"
    WAIT = "WAIT"
    LOAD = "LOAD"
    TAKEOFF = "TAKEOFF"


# Allowed successors of each task type. Every adjacent pair in a task list
# (including the last -> first wrap-around) must appear here.
LEGAL_SUCCESSORS: dict[TaskType, frozenset[TaskType]] = {
    TaskType.AWAY: frozenset({TaskType.AWAY, TaskType.LAND}),
    TaskType.LAND: frozenset({TaskType.WAIT, TaskType.LOAD}),
    TaskType.WAIT: frozenset({TaskType.WAIT, TaskType.LOAD}),
    TaskType.LOAD: frozenset({TaskType.TAKEOFF}),
    TaskType.TAKEOFF: frozenset({TaskType.AWAY}),
}

# Task types that may form a task list on their own
SELF_LOOPING_TYPES = frozenset({TaskType.AWAY, TaskType.WAIT})


@dataclass(frozen=True)
class Task:
    """A single task to be completed by an aircraft.

    Attributes:
        type: The type of the task.
        load_percent: The percentage of the aircraft's capacity to load. Only
            meaningful for LOAD tasks.
    """

    type: TaskType
    load_percent: int = 0

    def __post_init__(self):
        if self.load_percent < 0:
            raise ValueError(f"Load percentage must be non-negative: {self.load_percent}")

    def __str__(self) -> str:
        if self.type == TaskType.LOAD:
            return f"LOAD at {self.load_percent}%"
        return self.type.value

    def encode(self) -> str:
        if self.type == TaskType.LOAD:
            return f"LOAD@{self.load_percent}"
        return self.type.value


def is_legal_transition(current: TaskType, following: TaskType) -> bool:
    """Return True if a task of type `following` may come after `current`."""
    return following in LEGAL_SUCCESSORS[current]


class TaskList:
    """A circular list of tasks for an aircraft to cycle through.

    The current task starts at the first task in the list and only ever moves
    forward one step at a time, wrapping back to the start after the last task.
    """

    def __init__(self, tasks: Sequence[Task]):
        """Create a task list, validating the ordering of the given tasks.

        Args:
            tasks: the tasks to cycle through, in order.

        Raises:
            InvalidTaskListError: if the list is empty, is a single task other
                than AWAY or WAIT, or any adjacent pair (including the last and
                first tasks) is not a legal transition.
        """
        tasks = tuple(tasks)
        self._validate(tasks)
        self._tasks = tasks
        self._current_task_idx = 0

    @staticmethod
    def _validate(tasks: tuple[Task, ...]) -> None:
        if not tasks:
            raise InvalidTaskListError("Task list must contain at least one task")

        if len(tasks) == 1 and tasks[0].type not in SELF_LOOPING_TYPES:
            raise InvalidTaskListError(
                f"A single {tasks[0].type.value} task cannot repeat on its own"
            )

        for idx, task in enumerate(tasks):
            following = tasks[(idx + 1) % len(tasks)]
            if not is_legal_transition(task.type, following.type):
                raise InvalidTaskListError(
                    f"{following.type.value} cannot follow {task.type.value} "
                    f"(position {idx + 1} of {len(tasks)})"
                )

    @property
    def current_task(self) -> Task:
        return self._tasks[self._current_task_idx]

    @property
    def next_task(self) -> Task:
        """The task after the current one. Does not move the current task."""
        return self._tasks[(self._current_task_idx + 1) % len(self._tasks)]

    @property
    def current_task_index(self) -> int:
        return self._current_task_idx

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def move_to_next_task(self) -> None:
        self._current_task_idx = (self._current_task_idx + 1) % len(self._tasks)

    def upcoming_tasks(self) -> list[Task]:
        """Return every task in the list, starting from the current one."""
        idx = self._current_task_idx
        return list(self._tasks[idx:] + self._tasks[:idx])

    def __len__(self) -> int:
        return len(self._tasks)

    def __str__(self) -> str:
        return (
            f"TaskList currently on {self.current_task} "
            f"[{self._current_task_idx + 1}/{len(self._tasks)}]"
        )

    def encode(self) -> str:
        """Encode the task list, starting from the current task.

        Saving from the current task means a reloaded list resumes where this
        one left off.
        """
        return ",".join(task.encode() for task in self.upcoming_tasks())
