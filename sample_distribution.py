"""
Draw samples from a distribution described by a parameters string.
"""

import argparse
import json
from datetime import datetime
from typing import Any, Dict, Optional

import numpy as np

from randomize import (
    DistributionParameters,
    RandomizeOptions,
    RandomNumberGenerator,
    format_parameters,
    new_seed,
    parse,
)


def calculate_stats(samples: np.ndarray) -> Dict[str, float]:
    """Summary statistics of a sample array (NaN-aware)."""
    if samples.size == 0 or np.all(np.isnan(samples)):
        return {"count": int(samples.size), "mean": float("nan"), "std": float("nan"),
                "variance": float("nan"), "min": float("nan"), "max": float("nan"),
                "median": float("nan")}
    return {
        "count": int(samples.size),
        "mean": float(np.nanmean(samples)),
        "std": float(np.nanstd(samples)),
        "variance": float(np.nanvar(samples)),
        "min": float(np.nanmin(samples)),
        "max": float(np.nanmax(samples)),
        "median": float(np.nanmedian(samples)),
    }


def build_options(options_file: Optional[str] = None, floating_policy: Optional[str] = None,
                  integral_policy: Optional[str] = None) -> RandomizeOptions:
    """Options from a JSON file (or the environment), with command-line policies taking precedence."""
    if options_file:
        config = RandomizeOptions.from_file(options_file).to_dict()
    else:
        config = RandomizeOptions.from_env().to_dict()
    if floating_policy:
        config["invalid_floating_range"] = floating_policy
    if integral_policy:
        config["invalid_integral_range"] = integral_policy
    return RandomizeOptions.from_dict(config)


def run_sampling(parameters: DistributionParameters, count: int, seed: int,
                 options: RandomizeOptions) -> Dict[str, Any]:
    """Sample *count* values and collect them with metadata, properties and statistics."""
    generator = RandomNumberGenerator(seed, options)
    samples = parameters.sample_array(generator, count)
    return {
        "metadata": {
            "timestamp": datetime.now().isoformat(),
            "parameters": format_parameters(parameters, "r"),
            "description": format_parameters(parameters, "g"),
            "distribution": parameters.distribution_type.label,
            "seed": seed,
            "count": count,
            "options": options.to_dict(),
        },
        "properties": parameters.get_properties().to_dict(),
        "statistics": calculate_stats(samples),
        "samples": samples.tolist(),
    }


def main(argv=None):
    """Parse arguments, sample, print a summary and save the results."""
    parser = argparse.ArgumentParser(description="Sample a distribution from a parameters string")

    parser.add_argument("--parameters", required=True,
                        help="Parameters in general or round-trip form (e.g., '9:0;10:5;2:2' or 'Normal distribution [5;2]')")
    parser.add_argument("--count", type=int, default=1000, help="Number of samples")
    parser.add_argument("--seed", type=int, help="Generator seed (random when omitted)")

    parser.add_argument("--floating-policy", help="Policy for inverted floating ranges (e.g., swap, nan)")
    parser.add_argument("--integral-policy", help="Policy for inverted integral ranges (e.g., swap, exception)")
    parser.add_argument("--options-file", help="Path to an options JSON file")

    parser.add_argument("--results-file", default="samples.json", help="Output file for results")

    args = parser.parse_args(argv)

    parameters = parse(args.parameters)
    options = build_options(args.options_file, args.floating_policy, args.integral_policy)
    seed = args.seed if args.seed is not None else new_seed()

    print(f"Sampling {args.count} values from: {format_parameters(parameters, 'g')}")
    print(f"Seed: {seed}")

    results = run_sampling(parameters, args.count, seed, options)

    stats = results["statistics"]
    properties = results["properties"]
    print(f"  Sample mean: {stats['mean']:.4f} (expected {properties['mean']:.4f})")
    print(f"  Sample variance: {stats['variance']:.4f} (expected {properties['variance']:.4f})")
    print(f"  Range: [{stats['min']:.4f}, {stats['max']:.4f}]")

    with open(args.results_file, 'w') as f:
        json.dump(results, f, indent=2)

    print(f"\nResults saved to {args.results_file}")
    return results


if __name__ == "__main__":
    main()
