import json
import argparse
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from typing import Dict, List, Optional, Tuple


def load_samples(json_file: str) -> Tuple[str, List[float], Dict]:
    """
    Load a results file written by sample_distribution.py.

    Returns
    -------
    tuple
        (description, samples, properties)
    """
    with open(json_file, "r") as f:
        data: Dict = json.load(f)

    description: str = data["metadata"].get("description", "No description available")
    samples: List[float] = [s for s in data["samples"] if s == s]  # drop NaN
    return description, samples, data["properties"]


def plot_samples(json_files: List[str], output_image: str, title: Optional[str] = None,
                 bins: int = 50) -> None:
    """
    Draw one histogram per results file, with the expected mean marked.

    Parameters
    ----------
    json_files : List[str]
        Paths to results files.
    output_image : str
        Path for saving the output figure.
    title : Optional[str], optional
        Custom title for the figure.
    bins : int
        Number of histogram bins.
    """
    if not json_files:
        raise ValueError("At least one JSON file must be provided")

    plt.rcParams["figure.facecolor"] = "white"
    plt.rcParams["axes.grid"] = True
    plt.rcParams["grid.linestyle"] = "--"
    plt.rcParams["grid.alpha"] = 0.5

    fig, axes = plt.subplots(len(json_files), 1, figsize=(10, 4 * len(json_files)), squeeze=False)

    for ax, json_file in zip(axes[:, 0], json_files):
        description, samples, properties = load_samples(json_file)
        if samples:
            ax.hist(samples, bins=bins, color="#1f77b4", alpha=0.75, edgecolor="white")
        else:
            print(f"Warning: no finite samples in {json_file}")

        mean = properties.get("mean")
        if mean is not None and mean == mean and abs(mean) != float("inf"):
            ax.axvline(mean, color="#d62728", linestyle="--", linewidth=2, label=f"mean = {mean:.3f}")
            ax.legend(fontsize=10, loc="best")

        ax.set_title(description, fontsize=12, fontweight="bold")
        ax.set_xlabel("Value", fontsize=11)
        ax.set_ylabel("Count", fontsize=11)

    if title:
        fig.suptitle(title, fontsize=14, fontweight="bold")

    fig.tight_layout()
    plt.savefig(output_image, dpi=150, bbox_inches="tight", facecolor="white")
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Plot histograms of sampled distributions from JSON results files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python plot_samples.py samples.json --output histogram.png
  python plot_samples.py --title "Normal vs Logistic" normal.json logistic.json --output out.png
        """
    )

    parser.add_argument("json_files", nargs="+", help="One or more results files")
    parser.add_argument("--output", dest="output_image", default="samples.png",
                        help="Output image file path (default: samples.png)")
    parser.add_argument("--title", type=str, help="Custom title for the plot")
    parser.add_argument("--bins", type=int, default=50, help="Number of histogram bins")

    args = parser.parse_args(argv)

    print(f"Processing {len(args.json_files)} JSON files: {args.json_files}")
    plot_samples(args.json_files, args.output_image, args.title, args.bins)
    print(f"Saved plot to {args.output_image}")


if __name__ == "__main__":
    main()
