"""Plot the queue lengths recorded while running a control tower."""
import matplotlib
import matplotlib.pyplot as plt
import pandas as pd
from click import command, option


@command()
@option("--history-file", required=True, help="CSV history written by run_tower.py")
@option("--output", default="history.png", help="Image file to save the plot to")
def plot(history_file, output):
    """Plot landing, takeoff and loading counts against tick."""
    matplotlib.use("Agg")
    matplotlib.rcParams["figure.dpi"] = 300

    history = pd.read_csv(history_file)

    fig, axs = plt.subplots(2, 1, figsize=(8, 6), sharex=True, layout="constrained")
    for column, label in [
        ("landing", "Waiting to land"),
        ("takeoff", "Waiting to take off"),
        ("loading", "Loading"),
    ]:
        axs[0].step(history["tick"], history[column], where="post", label=label)
    axs[0].set_ylabel("# aircraft")
    axs[0].legend()

    axs[1].step(history["tick"], history["occupied_gates"], where="post")
    axs[1].set_ylabel("# occupied gates")
    axs[1].set_xlabel("Tick")

    fig.savefig(output)
    plt.close(fig)


if __name__ == "__main__":
    plot()
