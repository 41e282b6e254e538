"""
Reproducible train/holdout split.

The split is driven by an explicit seed passed in by the caller, never by
numpy's global random state, so the same (n, fraction, seed) always gives
the same partition and tests can assert exact membership.

Usage:

    from shooting_analysis.model.split import train_test_frames

    train_df, test_df = train_test_frames(featured_df, fraction=0.7, seed=1234)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Split:
    """Disjoint positional row indices, each sorted ascending."""

    train: np.ndarray
    test: np.ndarray

    @property
    def n(self) -> int:
        return len(self.train) + len(self.test)


def train_size(n: int, fraction: float) -> int:
    """round(n * fraction) with halves rounded up (7 * 0.7 -> 5, 5 * 0.7 -> 4)."""
    # 5 * 0.7 is 3.4999999999999996 in binary floating point
    return int(math.floor(round(n * fraction, 9) + 0.5))


def split_indices(n: int, fraction: float = 0.7, seed: int = 1234) -> Split:
    """
    Partition range(n) into train and test index sets.

    Args:
        n: Number of rows, at least 1.
        fraction: Share of rows going to train, strictly between 0 and 1.
        seed: Seed for numpy.random.default_rng.

    Returns:
        Split with |train| = train_size(n, fraction) and |test| = n - |train|.

    Raises:
        ValueError: If n < 1 or fraction is not in (0, 1).
    """
    if n < 1:
        raise ValueError(f"Cannot split {n} rows; need at least 1")
    if not 0.0 < fraction < 1.0:
        raise ValueError(f"fraction must be in (0, 1), got {fraction}")

    rng = np.random.default_rng(seed)
    order = rng.permutation(n)
    n_train = train_size(n, fraction)
    return Split(
        train=np.sort(order[:n_train]),
        test=np.sort(order[n_train:]),
    )


def train_test_frames(
    df: pd.DataFrame,
    fraction: float = 0.7,
    seed: int = 1234,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Split a DataFrame by position; both halves keep the input's row order."""
    split = split_indices(len(df), fraction=fraction, seed=seed)
    return (
        df.iloc[split.train].reset_index(drop=True),
        df.iloc[split.test].reset_index(drop=True),
    )
