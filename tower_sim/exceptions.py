"""Define the errors raised by the control tower simulation."""


class TowerSimError(Exception):
    """Base exception for control tower simulation errors."""

    pass


class InvalidTaskListError(TowerSimError, ValueError):
    """Raised when a task list violates the task ordering rules."""

    pass


class NoSpaceError(TowerSimError):
    """Raised when a gate or terminal has no room for what is being added."""

    pass


class NoSuitableGateError(TowerSimError):
    """Raised when an aircraft must be parked but no compatible gate is free."""

    pass


class MalformedSaveError(TowerSimError):
    """Raised when the contents of a save file are invalid."""

    def __init__(self, message="Malformed save file", line=None):
        self.line = line
        super().__init__(f"{message} [line: {line!r}]" if line is not None else message)


class BookkeepingError(TowerSimError):
    """Raised when gate occupancy disagrees with the control tower's records.

    This should never happen: it means a gate reported as free refused an
    aircraft, so the tower and its terminals have drifted out of sync.
    """

    pass
