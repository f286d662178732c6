"""Shared test fixtures for heatcanvas."""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def small_matrix_df():
    """4x3 matrix DataFrame for basic tests."""
    data = np.array([
        [1.0, 2.0, 3.0],
        [4.0, 5.0, 6.0],
        [7.0, 8.0, 9.0],
        [10.0, 11.0, 12.0],
    ])
    return pd.DataFrame(
        data,
        index=["gene_A", "gene_B", "gene_C", "gene_D"],
        columns=["sample_1", "sample_2", "sample_3"],
    )


@pytest.fixture
def missing_matrix():
    """3x3 matrix with one missing cell; row means 1.5, 5, 8."""
    return [
        [1, 2, None],
        [4, 5, 6],
        [7, 8, 9],
    ]


@pytest.fixture
def means_matrix():
    """Rows with means 3, 1, 2 (missing cells ignored)."""
    return np.array([
        [3.0, np.nan, 3.0],
        [1.0, 1.0, np.nan],
        [2.0, 2.0, 2.0],
    ])


@pytest.fixture
def random_matrix_df():
    """6x5 random matrix for permutation properties."""
    rng = np.random.default_rng(42)
    data = rng.standard_normal((6, 5))
    rows = [f"gene_{i}" for i in range(6)]
    cols = [f"sample_{j}" for j in range(5)]
    return pd.DataFrame(data, index=rows, columns=cols)
