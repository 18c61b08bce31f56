import numpy as np
from sklearn.metrics import silhouette_score


def compute_inertia(X, labels, centroids):
    """Sum of squared distances from each assigned point to its centroid."""
    mask = labels >= 0
    if not mask.any():
        return np.nan
    return float(np.sum((X[mask] - centroids[labels[mask]]) ** 2))


def compute_wcss_per_cluster(X, labels, centroids):
    """
    Returns dict {cluster_id: within-cluster sum of squares}.
    """
    wcss = {}
    for idx, c in enumerate(centroids):
        pts = X[labels == idx]
        wcss[idx] = float(np.sum((pts - c) ** 2)) if len(pts) else 0.0
    return wcss


def cluster_population_distribution(labels, k):
    # empty clusters are reported with a count of 0
    counts = np.bincount(labels[labels >= 0], minlength=k)
    return {i: int(counts[i]) for i in range(k)}


def average_distance_to_centroids(X, labels, centroids):
    distances = {}
    for idx, center in enumerate(centroids):
        pts = X[labels == idx]
        if len(pts) > 0:
            distances[idx] = float(np.mean(np.linalg.norm(pts - center, axis=1)))
        else:
            distances[idx] = np.nan
    return distances


def compute_silhouette(X, labels):
    used = set(labels[labels >= 0].tolist())
    if 1 < len(used) < len(X) and (labels >= 0).all():
        return float(silhouette_score(X, labels))
    return np.nan


def compute_all_metrics(X, labels, centroids):
    return {
        "inertia": compute_inertia(X, labels, centroids),
        "silhouette": compute_silhouette(X, labels),
        "wcss": compute_wcss_per_cluster(X, labels, centroids),
        "population": cluster_population_distribution(labels, len(centroids)),
        "avg_distance": average_distance_to_centroids(X, labels, centroids),
    }
