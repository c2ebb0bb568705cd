"""Run a saved control tower for a number of ticks."""
import logging
import os

from click import command, option

from tower_sim.simulation import run_simulation
from tower_sim.utils.dataloader import load_save_directory, save_to_directory


@command()
@option("--save-dir", required=True, help="Directory containing the save files")
@option("--n-ticks", default=20, type=int, help="# of ticks to run")
@option("--history-file", default="", help="CSV file to write the per-tick history to")
@option("--output-dir", default="", help="Directory to save the final state to")
@option("--progress", is_flag=True, help="Show a progress bar")
@option(
    "--log-level",
    default="WARNING",
    help="Logging level (DEBUG shows every landing, takeoff and load)",
)
def run(save_dir, n_ticks, history_file, output_dir, progress, log_level):
    """Load a control tower, tick it and report what happened."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    tower = load_save_directory(save_dir)
    print(f"Loaded {tower}")

    history = run_simulation(tower, n_ticks, progress=progress)
    print(f"After {n_ticks} ticks: {tower}")
    for name, members in tower.queue_members().items():
        print(f"\t{name}: {members}")

    if history_file:
        os.makedirs(os.path.dirname(history_file) or ".", exist_ok=True)
        history.to_csv(history_file, index=False)

    if output_dir:
        save_to_directory(tower, output_dir)


if __name__ == "__main__":
    run()
