class ClusteringError(Exception):
    """Base class for errors reported by the clustering core."""


class InvalidK(ClusteringError, ValueError):
    def __init__(self, k, n_points=None):
        if n_points is None:
            msg = f"k must be >= 1, got {k}"
        else:
            msg = f"k={k} is out of range for a dataset of {n_points} points"
        super().__init__(msg)
        self.k = k
        self.n_points = n_points


class NoMethodSelected(ClusteringError, ValueError):
    def __init__(self):
        super().__init__("Select an initialization method before initializing")


class DegenerateInitialization(ClusteringError, RuntimeError):
    """KMeans++ ran out of points with non-zero selection probability."""

    def __init__(self, chosen, k):
        super().__init__(
            f"KMeans++ found no further candidate after {chosen} of {k} centroids; "
            "every remaining point coincides with a chosen centroid"
        )
        self.chosen = chosen
        self.k = k


class ConvergenceNotReached(ClusteringError, RuntimeError):
    def __init__(self, max_iter, state=None):
        super().__init__(f"Centroids still moving after {max_iter} iterations")
        self.max_iter = max_iter
        self.state = state
