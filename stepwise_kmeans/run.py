# run.py

import argparse
import logging

import matplotlib.pyplot as plt

from stepwise_kmeans.config import SessionConfig
from stepwise_kmeans.errors import ClusteringError
from stepwise_kmeans.initializer import InitializationMethod
from stepwise_kmeans.plotter import plot_state
from stepwise_kmeans.report import print_report, save_cluster_labels
from stepwise_kmeans.session import KMeansSession
from stepwise_kmeans.synthetic_data import generate_blob_dataset, generate_uniform_dataset


def build_parser():
    defaults = SessionConfig()
    p = argparse.ArgumentParser(description="Step through K-Means on a synthetic 2-D dataset.")
    p.add_argument("--method", default=InitializationMethod.KMEANS_PLUS_PLUS.value,
                   choices=[m.value for m in InitializationMethod if m is not InitializationMethod.MANUAL])
    p.add_argument("-k", type=int, default=defaults.k)
    p.add_argument("--n-samples", type=int, default=defaults.n_samples)
    p.add_argument("--low", type=float, default=defaults.low)
    p.add_argument("--high", type=float, default=defaults.high)
    p.add_argument("--blobs", type=int, default=0,
                   help="draw this many Gaussian blobs instead of uniform points")
    p.add_argument("--epsilon", type=float, default=defaults.epsilon)
    p.add_argument("--max-iter", type=int, default=defaults.max_iter)
    p.add_argument("--seed", type=int, default=defaults.random_state)
    p.add_argument("--plot", help="save the final state plot to this path")
    p.add_argument("--labels-csv", help="save the final labels to this CSV path")
    p.add_argument("--log-level", default="WARNING")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    config = SessionConfig(
        k=args.k,
        epsilon=args.epsilon,
        max_iter=args.max_iter,
        n_samples=args.n_samples,
        low=args.low,
        high=args.high,
        random_state=args.seed,
    )

    # 1) Generate the dataset
    if args.blobs:
        points = generate_blob_dataset(config.n_samples, centers=args.blobs, low=config.low,
                                       high=config.high, random_state=config.random_state)
    else:
        points = generate_uniform_dataset(config.n_samples, low=config.low, high=config.high,
                                          random_state=config.random_state)

    # 2) Initialize
    session = KMeansSession(points, method=args.method, config=config)
    try:
        session.initialize()
    except ClusteringError as exc:
        print(f"Initialization failed: {exc}")
        return 1
    print_report(session.state)

    # 3) Run to convergence, one report per step
    try:
        for state in session.run_to_convergence():
            print_report(state)
    except ClusteringError as exc:
        print(f"Stopped: {exc}")
        return 1

    # 4) Save outputs
    if args.plot:
        ax = plot_state(session.state, savepath=args.plot)
        plt.close(ax.figure)
    if args.labels_csv:
        save_cluster_labels(session.state, args.labels_csv)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
