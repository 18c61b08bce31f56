import numpy as np
import pandas as pd

from stepwise_kmeans.geometry import as_array
from stepwise_kmeans.metrics import compute_all_metrics


def assignment_frame(state) -> pd.DataFrame:
    """One row per dataset point: x, y and its current cluster label."""
    df = pd.DataFrame(as_array(state.dataset), columns=["x", "y"])
    df["cluster"] = state.labels()
    return df


def summarize(state) -> pd.DataFrame:
    """
    Per-cluster table for the current step, indexed by cluster label:
    centroid coordinates, population, WCSS and mean distance to centroid.
    """
    columns = ["centroid_x", "centroid_y", "population", "wcss", "avg_distance"]
    if not state.centroids:
        return pd.DataFrame(columns=columns).rename_axis("cluster")

    X = as_array(state.dataset)
    cents = as_array(state.centroids)
    m = compute_all_metrics(X, state.labels(), cents)
    df = pd.DataFrame({
        "centroid_x": cents[:, 0],
        "centroid_y": cents[:, 1],
        "population": pd.Series(m["population"]),
        "wcss": pd.Series(m["wcss"]),
        "avg_distance": pd.Series(m["avg_distance"]),
    })
    df.index.name = "cluster"
    return df


def print_report(state):
    print(f"\n=== STEP {state.step} ({state.status.value}) ===")
    if not state.centroids:
        print("No centroids")
        return
    X = as_array(state.dataset)
    labels = state.labels()
    m = compute_all_metrics(X, labels, as_array(state.centroids))
    print(summarize(state))
    if np.isnan(m["inertia"]):
        print("Points not assigned yet")
    else:
        print(f"Inertia: {m['inertia']:.4f}  Silhouette: {m['silhouette']:.4f}")


def save_cluster_labels(state, filepath):
    """Write the current step's points and labels to CSV."""
    assignment_frame(state).to_csv(filepath, index=False)
    print(f"Saved cluster labels to {filepath}")
