import logging
from dataclasses import replace

from stepwise_kmeans import runner
from stepwise_kmeans.config import SessionConfig
from stepwise_kmeans.engine import ClusteringState, step
from stepwise_kmeans.errors import ConvergenceNotReached
from stepwise_kmeans.initializer import InitializationMethod, add_centroid, initialize, make_rng
from stepwise_kmeans.report import summarize

logger = logging.getLogger(__name__)


class KMeansSession:
    """
    Interactive K-Means session: one dataset, one initialization method,
    one k, and the current ClusteringState.

    Changing the dataset, the method or k resets the clustering. The
    session owns its random generator, so two sessions never share
    random state.
    """

    def __init__(self, dataset=(), method=None, k=None, *, config=None, random_state=None):
        self.config = config or SessionConfig()
        if random_state is None:
            random_state = self.config.random_state
        self._rng = make_rng(random_state)
        self._method = InitializationMethod.parse(method)
        self._k = max(1, int(self.config.k if k is None else k))
        # bumped whenever an outstanding run must stop
        self._generation = 0
        self._state = ClusteringState.start(dataset)

    # ── read accessors ───────────────────────────────────────────────────────

    @property
    def state(self):
        return self._state

    @property
    def dataset(self):
        return self._state.dataset

    @property
    def centroids(self):
        return self._state.centroids

    @property
    def assignment(self):
        return self._state.assignment

    @property
    def step_count(self):
        return self._state.step

    @property
    def converged(self):
        return self._state.converged

    @property
    def method(self):
        return self._method

    @property
    def k(self):
        return self._k

    @property
    def status(self):
        return self._state.status

    # ── configuration (each resets the clustering) ──────────────────────────

    def load_dataset(self, points):
        self._cancel()
        self._state = ClusteringState.start(points)
        logger.info("Loaded dataset of %d points", len(self._state.dataset))
        return self._state

    def select_method(self, method):
        self._method = InitializationMethod.parse(method)
        return self.reset()

    def set_k(self, k):
        k = int(k)
        if k < 1:
            logger.warning("k=%d clamped to 1", k)
        self._k = max(1, k)
        return self.reset()

    def reset(self):
        """Drop centroids, assignment, step count and converged flag."""
        self._cancel()
        self._state = ClusteringState.start(self._state.dataset)
        logger.info("Clustering reset")
        return self._state

    # ── clustering ───────────────────────────────────────────────────────────

    def initialize(self):
        """
        Compute the initial centroids for the selected method. Under Manual
        this returns the centroids placed so far and changes nothing.
        """
        if self._method is InitializationMethod.MANUAL:
            return initialize(
                self._state.dataset, self._k, self._method, manual_points=self._state.centroids
            )
        self._cancel()
        centroids = initialize(self._state.dataset, self._k, self._method, random_state=self._rng)
        self._state = ClusteringState.start(self._state.dataset, centroids)
        return self._state.centroids

    def add_manual_centroid(self, point):
        if self._method is not InitializationMethod.MANUAL:
            logger.warning("Manual placement ignored: method is %s", self._method)
            return self._state.centroids
        if len(self._state.centroids) >= self._k:
            logger.warning("Manual placement ignored: %d centroids already placed", self._k)
            return self._state.centroids

        centroids = add_centroid(self._state.centroids, point)
        if len(centroids) != len(self._state.centroids):
            self._cancel()
            self._state = replace(self._state, centroids=centroids)
        return self._state.centroids

    def step(self):
        """Run one iteration; a no-op until k centroids exist or after convergence."""
        self._cancel()
        if self._ready():
            self._state = step(self._state, epsilon=self.config.epsilon)
        return self._state

    def run_to_convergence(self, max_iter=None):
        """
        Generator of states, one per completed step, until convergence.

        Any later call that changes the session (another run, step, reset,
        a non-Manual initialize, set_k, select_method, load_dataset, a
        manual placement) cancels this one:
        its next resumption ends without recording another step.
        """
        self._cancel()
        if max_iter is None:
            max_iter = self.config.max_iter
        return self._run(self._generation, max_iter)

    def summary(self):
        return summarize(self._state)

    # ── internals ────────────────────────────────────────────────────────────

    def _ready(self):
        return len(self._state.centroids) == self._k

    def _cancel(self):
        self._generation += 1

    def _run(self, generation, max_iter):
        if not self._ready():
            return
        steps = runner.run_to_convergence(
            self._state, max_iter=max_iter, epsilon=self.config.epsilon
        )
        try:
            for state in steps:
                if generation != self._generation:
                    logger.warning("Run cancelled after step %d", self._state.step)
                    return
                self._state = state
                yield state
        except ConvergenceNotReached:
            if generation != self._generation:
                logger.warning("Run cancelled after step %d", self._state.step)
                return
            raise
        finally:
            steps.close()
