"""Time Gauss-Jordan inversion against NumPy and PyTorch built-ins."""

import argparse
import logging
import os
import time

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import torch

from .gauss_jordan import inverse

LOGGER = logging.getLogger(__name__)

DEFAULT_SIZES = [10, 50, 100, 200]
DEFAULT_TRIALS = 3


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def make_matrix(n, rng):
    A = rng.random((n, n))
    A += n * np.eye(n)  # improve conditioning
    return A


def identity_error(A, A_inv):
    A = np.asarray(A)
    return float(np.max(np.abs(A @ np.asarray(A_inv) - np.eye(A.shape[0]))))


def time_fn(fn, A, trials):
    t0 = time.perf_counter()
    for _ in range(trials):
        result = fn(A)
    return (time.perf_counter() - t0) / trials, result


def benchmark(n=100, trials=DEFAULT_TRIALS, rng=None):
    """
    Time one matrix size.

    Returns a dict with per-call seconds and max |A @ A_inv - I| for the
    Gauss-Jordan, NumPy and PyTorch (CPU) inverses.
    """
    if rng is None:
        rng = np.random.default_rng()
    A = make_matrix(n, rng)
    A_torch = torch.from_numpy(A)

    t_gj, inv_gj = time_fn(inverse, A, trials)
    t_np, inv_np = time_fn(np.linalg.inv, A, trials)
    t_torch, inv_torch = time_fn(torch.linalg.inv, A_torch, trials)

    result = {
        "n": n,
        "gauss_jordan": t_gj,
        "numpy": t_np,
        "torch": t_torch,
        "gauss_jordan_error": identity_error(A, inv_gj),
        "numpy_error": identity_error(A, inv_np),
        "torch_error": identity_error(A, inv_torch.numpy()),
    }
    LOGGER.debug("Benchmark result: %s", result)
    return result


def print_results(results):
    print("Matrix inversion (time per call in ms, max |A A^-1 - I| in brackets):")
    print(f"{'N':>6} | {'Gauss-Jordan':>22} | {'NumPy':>22} | {'PyTorch':>22}")
    print("-" * 82)
    for r in results:
        cells = [
            f"{r[name] * 1000:10.3f} ({r[name + '_error']:.1e})"
            for name in ("gauss_jordan", "numpy", "torch")
        ]
        print(f"{r['n']:6d} | {cells[0]:>22} | {cells[1]:>22} | {cells[2]:>22}")


def save_plot(results, plot_dir="plots"):
    os.makedirs(plot_dir, exist_ok=True)
    sizes = [r["n"] for r in results]

    plt.figure()
    plt.plot(sizes, [r["gauss_jordan"] * 1000 for r in results], label="Gauss-Jordan")
    plt.plot(sizes, [r["numpy"] * 1000 for r in results], label="numpy.linalg.inv")
    plt.plot(sizes, [r["torch"] * 1000 for r in results], label="torch.linalg.inv (CPU)")
    plt.yscale("log")
    plt.xlabel("Matrix size (N x N)")
    plt.ylabel("Time per inversion (ms)")
    plt.title("Matrix Inversion Benchmark")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    path = os.path.join(plot_dir, "inverse_benchmark.png")
    plt.savefig(path)
    plt.close()
    return path


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--sizes", type=int, nargs="+", default=DEFAULT_SIZES, help="matrix sizes to time")
    parser.add_argument("--trials", type=int, default=DEFAULT_TRIALS, help="calls averaged per size")
    parser.add_argument("--seed", type=int, default=0, help="seed for the random test matrices")
    parser.add_argument("--plot-dir", default="plots", help="directory for the timing plot")
    parser.add_argument("--no-plot", action="store_true", help="skip saving the plot")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    _configure_logging(args.verbose)

    rng = np.random.default_rng(args.seed)
    results = []
    for n in args.sizes:
        LOGGER.info("Benchmarking %dx%d", n, n)
        results.append(benchmark(n, args.trials, rng))
    print_results(results)

    if not args.no_plot:
        path = save_plot(results, args.plot_dir)
        print(f"\nBenchmark plot saved to {path}")
    return results


if __name__ == "__main__":
    main()
