"""Shared fixtures for clustree unit tests."""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def split_table():
    """Six samples: one cluster at K1, split 3/3 at K2."""
    return pd.DataFrame({
        'K1': [1, 1, 1, 1, 1, 1],
        'K2': [1, 1, 1, 2, 2, 2],
    })


@pytest.fixture
def unequal_table():
    """Six samples: one cluster at K1, split 4/2 at K2."""
    return pd.DataFrame({
        'K1': [1, 1, 1, 1, 1, 1],
        'K2': [1, 1, 1, 1, 2, 2],
    })


@pytest.fixture
def missing_table():
    """Six samples, the last one unlabelled at K2."""
    return pd.DataFrame({
        'K1': [1, 1, 1, 1, 1, 1],
        'K2': [1, 1, 1, 2, 2, np.nan],
    })


@pytest.fixture
def three_level_table():
    """Ten samples over three resolutions with attributes."""
    return pd.DataFrame({
        'K1': [1] * 10,
        'K2': [1, 1, 1, 1, 1, 2, 2, 2, 2, 2],
        'K3': [1, 1, 1, 3, 3, 2, 2, 2, 2, 3],
        'length': [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0],
        'species': ['a', 'a', 'a', 'b', 'b', 'c', 'c', 'c', 'b', 'b'],
    })
