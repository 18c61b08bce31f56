from dataclasses import dataclass
from typing import Optional


@dataclass
class SessionConfig:
    """Defaults for an interactive clustering session."""
    k: int = 3
    epsilon: float = 1e-4
    max_iter: int = 300
    # synthetic dataset: n_samples uniform points in [low, high) x [low, high)
    n_samples: int = 100
    low: float = 0.0
    high: float = 10.0
    random_state: Optional[int] = None
