import matplotlib.pyplot as plt
import numpy as np

from stepwise_kmeans.engine import UNASSIGNED
from stepwise_kmeans.geometry import as_array


def plot_clusters(
        X: np.ndarray,
        labels: np.ndarray,
        centroids: np.ndarray = None,
        title: str = None,
        palette: list = None,
        figsize: tuple = (6, 6),
        savepath: str = None,
        point_size: int = 20,
        alpha: float = 0.7,
        ax: plt.Axes = None
) -> plt.Axes:
    """
    Scatter-plot X colored by `labels`.  Optionally overplot `centroids`.

    Args:
      X          : array-like, shape (n_samples, 2)
      labels     : int array, shape (n_samples,); UNASSIGNED points drawn grey
      centroids  : array, shape (n_clusters, 2), optional
      title      : axes title
      palette    : list of colors, defaults to tab10 (cycled for k > 10)
      figsize    : figure size when a new figure is created
      savepath   : if given, calls fig.savefig(savepath)
      point_size : marker size for data points
      alpha      : point transparency
      ax         : draw into this Axes instead of a new figure

    Returns:
      ax : the matplotlib Axes instance
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    if palette is None:
        palette = list(plt.get_cmap('tab10').colors)
    unassigned_color = '#444444'

    for lab in np.unique(labels):
        mask = labels == lab
        if lab == UNASSIGNED:
            col, label_text = unassigned_color, "Unassigned"
        else:
            col, label_text = palette[int(lab) % len(palette)], f"Cluster {lab}"
        ax.scatter(
            X[mask, 0], X[mask, 1],
            c=[col],
            s=point_size,
            alpha=alpha,
            label=label_text,
            edgecolor='k' if lab != UNASSIGNED else None,
            linewidth=0.2
        )

    if centroids is not None and len(centroids):
        ax.scatter(
            centroids[:, 0], centroids[:, 1],
            c='red',
            s=200,
            marker='X',
            edgecolor='black',
            linewidth=1.5,
            label='Centroids'
        )

    ax.set_aspect('equal', 'box')
    if title:
        ax.set_title(title)
    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc='best', fontsize='small', framealpha=0.8)
    ax.grid(True)
    fig.tight_layout()

    if savepath:
        fig.savefig(savepath)
    return ax


def plot_state(state, title=None, **kwargs) -> plt.Axes:
    """Plot a ClusteringState; the default title shows step and convergence."""
    if title is None:
        title = f"Step {state.step}" + (" (converged)" if state.converged else "")
    X = as_array(state.dataset)
    cents = as_array(state.centroids) if state.centroids else None
    return plot_clusters(X, state.labels(), centroids=cents, title=title, **kwargs)
