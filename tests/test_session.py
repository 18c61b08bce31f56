# test_session.py

import numpy as np
import pytest

from stepwise_kmeans.config import SessionConfig
from stepwise_kmeans.engine import UNASSIGNED, EngineStatus
from stepwise_kmeans.errors import ConvergenceNotReached, InvalidK, NoMethodSelected
from stepwise_kmeans.geometry import Point
from stepwise_kmeans.initializer import InitializationMethod
from stepwise_kmeans.session import KMeansSession
from stepwise_kmeans.synthetic_data import generate_uniform_dataset


class FixedPermutation:
    def __init__(self, order):
        self.order = order

    def permutation(self, n):
        return np.array(self.order)

    def randint(self, n):
        return self.order[0]


@pytest.fixture
def session(two_clusters):
    """Random-initialized session whose draw picks (0,0) and (10,10)."""
    s = KMeansSession(two_clusters, method="Random", k=2,
                      random_state=FixedPermutation([0, 2, 1, 3]))
    s.initialize()
    return s


def test_defaults_come_from_config():
    s = KMeansSession(config=SessionConfig(k=4))
    assert s.k == 4
    assert s.method is None
    assert s.dataset == ()
    assert s.status is EngineStatus.UNINITIALIZED


def test_initialize_then_two_steps(session):
    assert session.centroids == (Point(0, 0), Point(10, 10))
    assert session.status is EngineStatus.INITIALIZED
    assert session.assignment == (UNASSIGNED,) * 4

    session.step()
    assert session.assignment == (0, 0, 1, 1)
    assert session.centroids == (Point(0, 0.5), Point(10, 10.5))
    assert not session.converged

    session.step()
    assert session.assignment == (0, 0, 1, 1)
    assert session.centroids == (Point(0, 0.5), Point(10, 10.5))
    assert session.converged
    assert session.step_count == 2
    assert session.status is EngineStatus.CONVERGED


def test_step_after_convergence_changes_nothing(session):
    session.step()
    done = session.step()
    for _ in range(3):
        assert session.step() == done
    assert session.step_count == 2


def test_run_to_convergence_yields_two_states(session):
    states = list(session.run_to_convergence())
    assert [s.step for s in states] == [1, 2]
    assert states[-1].converged
    assert session.state == states[-1]


def test_run_is_lazy_until_iterated(session):
    gen = session.run_to_convergence()
    assert session.step_count == 0
    next(gen)
    assert session.step_count == 1


def test_reset_cancels_a_run(session):
    gen = session.run_to_convergence()
    next(gen)
    session.reset()
    with pytest.raises(StopIteration):
        next(gen)
    assert session.step_count == 0
    assert session.centroids == ()


def test_closing_a_run_keeps_last_completed_step(session):
    gen = session.run_to_convergence()
    first = next(gen)
    gen.close()
    assert session.state == first
    assert session.step_count == 1
    assert not session.converged


def test_single_step_cancels_a_run(session):
    gen = session.run_to_convergence()
    next(gen)
    session.step()
    with pytest.raises(StopIteration):
        next(gen)
    assert session.step_count == 2


def test_new_run_cancels_previous_run(session):
    old = session.run_to_convergence()
    next(old)
    new = session.run_to_convergence()
    with pytest.raises(StopIteration):
        next(old)
    assert [s.step for s in new] == [2]


def test_cancelled_run_at_iteration_cap_ends_quietly(session):
    gen = session.run_to_convergence(max_iter=1)
    next(gen)
    session.reset()
    # the cap is reached on resumption, but the run no longer owns the session
    assert list(gen) == []
    assert session.step_count == 0


def test_manual_initialize_keeps_a_run_going(two_clusters):
    s = KMeansSession(two_clusters, method="Manual", k=2)
    s.add_manual_centroid((0, 0))
    s.add_manual_centroid((10, 10))
    gen = s.run_to_convergence()
    assert next(gen).step == 1
    s.initialize()
    assert [state.step for state in gen] == [2]
    assert s.converged


def test_run_hits_iteration_cap(session):
    with pytest.raises(ConvergenceNotReached):
        list(session.run_to_convergence(max_iter=1))
    assert session.step_count == 1


def test_set_k_resets(session):
    session.step()
    session.set_k(3)
    assert session.k == 3
    assert session.centroids == ()
    assert session.assignment == (UNASSIGNED,) * 4
    assert session.step_count == 0
    assert session.converged is False
    assert session.dataset == (Point(0, 0), Point(0, 1), Point(10, 10), Point(10, 11))


def test_set_k_clamps_to_one(session):
    session.set_k(0)
    assert session.k == 1
    session.set_k(-5)
    assert session.k == 1


def test_select_method_and_load_dataset_reset(session):
    session.step()
    session.select_method("Farthest First")
    assert session.method is InitializationMethod.FARTHEST_FIRST
    assert session.centroids == ()
    assert session.step_count == 0

    session.initialize()
    session.load_dataset([(1, 1), (2, 2), (3, 3)])
    assert len(session.dataset) == 3
    assert session.centroids == ()
    assert session.assignment == (UNASSIGNED,) * 3
    assert session.method is InitializationMethod.FARTHEST_FIRST


def test_step_without_initialization_is_a_noop(two_clusters):
    s = KMeansSession(two_clusters, method="Random", k=2)
    state = s.step()
    assert state.step == 0
    assert list(s.run_to_convergence()) == []


def test_initialize_errors_leave_session_usable(two_clusters):
    s = KMeansSession(two_clusters, k=2, random_state=0)
    with pytest.raises(NoMethodSelected):
        s.initialize()
    s.select_method(InitializationMethod.KMEANS_PLUS_PLUS)
    s.set_k(5)
    with pytest.raises(InvalidK):
        s.initialize()
    assert s.centroids == ()
    s.set_k(2)
    assert len(s.initialize()) == 2
    assert list(s.run_to_convergence())[-1].converged


def test_manual_placement(two_clusters):
    s = KMeansSession(two_clusters, method="Manual", k=2)
    assert s.add_manual_centroid((1, 1)) == (Point(1, 1),)
    assert s.add_manual_centroid(Point(1, 1)) == (Point(1, 1),)
    assert s.add_manual_centroid((9, 9)) == (Point(1, 1), Point(9, 9))
    # k reached: further placements are ignored
    assert s.add_manual_centroid((5, 5)) == (Point(1, 1), Point(9, 9))
    # initialize under Manual keeps what was placed
    assert s.initialize() == (Point(1, 1), Point(9, 9))

    s.step()
    assert s.assignment == (0, 0, 1, 1)
    assert s.step_count == 1


def test_manual_partial_set_does_not_step(two_clusters):
    s = KMeansSession(two_clusters, method="Manual", k=3)
    s.add_manual_centroid((0, 0))
    assert s.step().step == 0
    assert s.status is EngineStatus.INITIALIZED


def test_manual_placement_outside_manual_mode_is_ignored(session):
    before = session.centroids
    assert session.add_manual_centroid((5, 5)) == before


def test_manual_allows_k_above_dataset_size():
    s = KMeansSession([(0, 0), (1, 1)], method="Manual", k=3)
    for p in [(0, 0), (1, 1), (2, 2)]:
        s.add_manual_centroid(p)
    assert len(s.initialize()) == 3
    s.step()
    # the third centroid has no members and stays put
    assert s.centroids[2] == Point(2, 2)


def test_sessions_have_independent_generators():
    points = generate_uniform_dataset(n_samples=30, random_state=2)
    a = KMeansSession(points, method="Random", k=4, random_state=9)
    b = KMeansSession(points, method="Random", k=4, random_state=9)
    assert a.initialize() == b.initialize()

    np.random.seed(0)
    before = np.random.get_state()[1].copy()
    KMeansSession(points, method="KMeans++", k=4).initialize()
    assert np.array_equal(np.random.get_state()[1], before)


def test_summary_matches_step(session):
    session.step()
    df = session.summary()
    assert list(df.index) == [0, 1]
    assert list(df["population"]) == [2, 2]
