import logging

from stepwise_kmeans.engine import EPSILON, step
from stepwise_kmeans.errors import ConvergenceNotReached

logger = logging.getLogger(__name__)

MAX_ITER = 300


def run_to_convergence(state, *, max_iter=MAX_ITER, epsilon=EPSILON):
    """
    Step `state` until it converges, yielding every new state.

    Stops without error when a step is a no-op (no centroids, or already
    converged). Raises ConvergenceNotReached once `max_iter` steps have
    run without converging; `state` on the exception is the last one yielded.
    Each yield is a suspension point: a caller that stops iterating or
    closes the generator gets no further steps.
    """
    for _ in range(max_iter):
        new = step(state, epsilon=epsilon)
        if new is state:
            return
        state = new
        yield state
        if state.converged:
            return
    logger.warning("Stopping after %d steps without convergence", max_iter)
    raise ConvergenceNotReached(max_iter, state)
