import logging
from enum import Enum

import numpy as np

from stepwise_kmeans.errors import DegenerateInitialization, InvalidK, NoMethodSelected
from stepwise_kmeans.geometry import Point, as_array, pairwise_distances, to_points

logger = logging.getLogger(__name__)


class InitializationMethod(Enum):
    RANDOM = "Random"
    FARTHEST_FIRST = "Farthest First"
    KMEANS_PLUS_PLUS = "KMeans++"
    MANUAL = "Manual"

    @classmethod
    def parse(cls, value):
        """Accept a member, its value ("KMeans++") or its name ("kmeans_plus_plus")."""
        if value is None or isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value or str(value).upper().replace("-", "_") == member.name:
                return member
        raise ValueError(f"Unknown initialization method: {value!r}")


def make_rng(random_state=None):
    """
    Private generator for one initialization: None gives a fresh unseeded
    RandomState, an int seeds one, anything else is used as-is.
    """
    if random_state is None:
        return np.random.RandomState()
    if isinstance(random_state, (int, np.integer)):
        return np.random.RandomState(int(random_state))
    return random_state


def _min_distances(X, centroids):
    # distance from each point to its nearest chosen centroid
    return pairwise_distances(X, centroids).min(axis=1)


def random_init(X, k, random_state=None) -> np.ndarray:
    """k distinct points: the first k entries of a random permutation."""
    rng = make_rng(random_state)
    idx = rng.permutation(X.shape[0])[:k]
    return X[idx]


def farthest_first(X, k, random_state=None, seed_index=None) -> np.ndarray:
    """
    Greedy farthest-point traversal. The seed is uniform at random unless
    `seed_index` is given; every later pick is the unchosen point whose
    distance to its nearest chosen centroid is largest, first index on ties.
    """
    if seed_index is None:
        seed_index = int(make_rng(random_state).randint(X.shape[0]))
    chosen = [seed_index]
    while len(chosen) < k:
        d = _min_distances(X, X[chosen])
        d[chosen] = -np.inf
        chosen.append(int(np.argmax(d)))
    return X[chosen]


def kmeans_plus_plus(X, k, random_state=None) -> np.ndarray:
    """
    KMeans++ seeding weighted by plain (not squared) distance to the
    nearest chosen centroid.
    """
    rng = make_rng(random_state)
    chosen = [int(rng.randint(X.shape[0]))]
    while len(chosen) < k:
        d = _min_distances(X, X[chosen])
        d[chosen] = 0.0
        total = d.sum()
        if total <= 0:
            raise DegenerateInitialization(len(chosen), k)
        cumulative = np.cumsum(d / total)
        r = rng.random_sample()
        idx = int(np.searchsorted(cumulative, r, side="right"))
        # rounding can leave cumulative[-1] just under 1
        idx = min(idx, int(np.flatnonzero(d)[-1]))
        chosen.append(idx)
    return X[chosen]


def add_centroid(centroids, point) -> tuple:
    """Append `point` unless a centroid already sits at exactly those coordinates."""
    point = Point(float(point[0]), float(point[1]))
    if any(c[0] == point.x and c[1] == point.y for c in centroids):
        logger.debug("Centroid at %s already placed", point)
        return tuple(centroids)
    return tuple(centroids) + (point,)


def initialize(dataset, k, method, random_state=None, manual_points=()) -> tuple:
    """
    Build the initial centroid set for `method`.

    Args:
      dataset       : points to cluster
      k             : number of centroids, 1 <= k <= len(dataset) for sampling methods
      method        : InitializationMethod (or its value / name)
      random_state  : None, int seed or RandomState-like generator
      manual_points : centroids placed so far; returned as-is for Manual

    Returns:
      tuple of Points
    """
    method = InitializationMethod.parse(method)
    if method is None:
        raise NoMethodSelected()
    if k < 1:
        raise InvalidK(k)

    if method is InitializationMethod.MANUAL:
        return tuple(Point(float(p[0]), float(p[1])) for p in manual_points)

    X = as_array(dataset)
    if k > X.shape[0]:
        raise InvalidK(k, X.shape[0])

    if method is InitializationMethod.RANDOM:
        centroids = random_init(X, k, random_state)
    elif method is InitializationMethod.FARTHEST_FIRST:
        centroids = farthest_first(X, k, random_state)
    else:
        centroids = kmeans_plus_plus(X, k, random_state)

    logger.info("Initialized %d centroids with %s", k, method.value)
    return to_points(centroids)
