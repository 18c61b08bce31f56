import logging
from dataclasses import dataclass, replace
from enum import Enum

import numpy as np

from stepwise_kmeans.geometry import Point, as_array, paired_distances, pairwise_distances, to_points

logger = logging.getLogger(__name__)

UNASSIGNED = -1
EPSILON = 1e-4


class EngineStatus(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    STEPPING = "stepping"
    CONVERGED = "converged"


@dataclass(frozen=True)
class ClusteringState:
    """
    Snapshot of one clustering run.

    dataset and centroids are tuples of Points; assignment holds one label
    per dataset point (UNASSIGNED before the first step). Each step
    produces a new snapshot rather than mutating this one.
    """
    dataset: tuple = ()
    centroids: tuple = ()
    assignment: tuple = ()
    step: int = 0
    converged: bool = False

    @classmethod
    def start(cls, dataset, centroids=()):
        dataset = to_points(as_array(dataset))
        return cls(
            dataset=dataset,
            centroids=to_points(as_array(centroids)) if len(centroids) else (),
            assignment=(UNASSIGNED,) * len(dataset),
        )

    @property
    def k(self):
        return len(self.centroids)

    @property
    def status(self):
        if not self.centroids:
            return EngineStatus.UNINITIALIZED
        if self.converged:
            return EngineStatus.CONVERGED
        if self.step == 0:
            return EngineStatus.INITIALIZED
        return EngineStatus.STEPPING

    def labels(self) -> np.ndarray:
        return np.asarray(self.assignment, dtype=int)


def assign_labels(X, centroids) -> np.ndarray:
    """Index of the nearest centroid for every row of X, lowest index on ties."""
    return pairwise_distances(X, centroids).argmin(axis=1)


def update_centroids(X, labels, centroids) -> np.ndarray:
    """
    Mean of each cluster's points. A centroid with no assigned points
    stays where it was.
    """
    new = np.array(centroids, dtype=float, copy=True)
    for i in range(len(centroids)):
        pts = X[labels == i]
        if len(pts):
            new[i] = pts.mean(axis=0)
        else:
            logger.warning("Cluster %d is empty; keeping its previous centroid", i)
    return new


def has_converged(old, new, epsilon=EPSILON) -> bool:
    """True when every centroid moved strictly less than epsilon."""
    shift = paired_distances(old, new)
    return bool(np.all(shift < epsilon))


def step(state: ClusteringState, epsilon=EPSILON) -> ClusteringState:
    """
    One assign/update iteration. Returns `state` itself when there are no
    centroids or the run has already converged.
    """
    if not state.centroids or state.converged:
        return state

    X = as_array(state.dataset)
    old = as_array(state.centroids)
    labels = assign_labels(X, old)
    new = update_centroids(X, labels, old)
    converged = has_converged(old, new, epsilon)

    logger.debug(
        "Step %d: max centroid shift %.3g",
        state.step + 1,
        float(paired_distances(old, new).max()),
    )
    if converged:
        logger.info("Converged after %d steps", state.step + 1)

    return replace(
        state,
        centroids=tuple(Point(float(x), float(y)) for x, y in new),
        assignment=tuple(int(lab) for lab in labels),
        step=state.step + 1,
        converged=converged,
    )
