import matplotlib

matplotlib.use("Agg")

import pytest

from stepwise_kmeans.geometry import Point


@pytest.fixture
def two_clusters():
    """Two well-separated pairs of points."""
    return (Point(0, 0), Point(0, 1), Point(10, 10), Point(10, 11))
