# synthetic_data.py

import numpy as np
from sklearn.datasets import make_blobs

from stepwise_kmeans.geometry import to_points


def generate_uniform_dataset(n_samples=100, low=0.0, high=10.0, random_state=None):
    """
    n_samples points drawn uniformly from the square [low, high) x [low, high).
    Returns a tuple of Points.
    """
    rs = np.random.RandomState(random_state)
    X = rs.uniform(low=low, high=high, size=(n_samples, 2))
    return to_points(X)


def generate_blob_dataset(n_samples=100, centers=3, cluster_std=0.6, low=0.0, high=10.0, random_state=None):
    """
    Gaussian blobs rescaled into [low, high] on both axes, for datasets
    with visible cluster structure.
    """
    X, _ = make_blobs(
        n_samples=n_samples,
        centers=centers,
        n_features=2,
        cluster_std=cluster_std,
        random_state=random_state,
    )
    span = X.max(axis=0) - X.min(axis=0)
    span[span == 0] = 1.0
    X = (X - X.min(axis=0)) / span * (high - low) + low
    return to_points(X)
