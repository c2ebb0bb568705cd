"""Run a control tower for a number of ticks and record what happens."""
import logging

import pandas as pd
from tqdm import tqdm

from tower_sim.control_tower import ControlTower

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = ["tick", "landing", "takeoff", "loading", "aircraft", "occupied_gates"]


def run_simulation(
    tower: ControlTower, num_ticks: int, progress: bool = False
) -> pd.DataFrame:
    """
    Advance a control tower and record its state after every tick.

    The tower is modified in place. Ticks are fully deterministic, so running
    the same starting state for the same number of ticks gives the same history.

    Args:
        tower: the control tower to advance
        num_ticks: the number of ticks to run
        progress: whether to show a progress bar

    Returns:
        a dataframe with one row per tick and the columns in HISTORY_COLUMNS
    """
    if num_ticks < 0:
        raise ValueError(f"Number of ticks must be non-negative: {num_ticks}")

    logger.info("Running %s for %d ticks", tower, num_ticks)

    rows = []
    for _ in tqdm(range(num_ticks), disable=not progress, desc="ticks"):
        tower.tick()
        rows.append(tower.snapshot())

    logger.info("Finished at tick %d: %s", tower.ticks_elapsed, tower)
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)
