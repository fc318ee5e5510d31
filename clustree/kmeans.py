#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Generate clusterings at increasing resolution with k-means.

The resulting table has one ``{prefix}{k}`` column per k and is ready for
``build_clustree``.
"""

import logging
import numpy as np
import pandas as pd
from sklearn.cluster import KMeans
from sklearn.preprocessing import StandardScaler
from typing import Iterable, Optional

from .exceptions import ConfigurationError, DataError

logger = logging.getLogger(__name__)

DEFAULT_K_VALUES = range(1, 6)
DEFAULT_RANDOM_STATE = 42
DEFAULT_N_INIT = 10


def kmeans_resolutions(data,
                       k_values: Iterable[int] = DEFAULT_K_VALUES,
                       prefix: str = "K",
                       random_state: Optional[int] = DEFAULT_RANDOM_STATE,
                       n_init: int = DEFAULT_N_INIT,
                       scale: bool = False) -> pd.DataFrame:
    """
    Cluster the same samples with k-means for every k in ``k_values``.

    Parameters
    ----------
    data : array-like or DataFrame
        Samples x features
    k_values : iterable of int
        Numbers of clusters, in the order the columns should appear
    prefix : str
        Column name prefix
    random_state : int, optional
        Seed passed to KMeans for reproducible labels
    n_init : int
        Number of KMeans initialisations per k
    scale : bool
        Standardise features before clustering

    Returns
    -------
    pd.DataFrame
        One column per k, labels starting at 1, index matching ``data``
    """
    index = data.index if isinstance(data, pd.DataFrame) else None
    values = np.asarray(data, dtype=float)
    if values.ndim == 1:
        values = values.reshape(-1, 1)

    if values.shape[0] == 0:
        raise DataError("Cannot cluster an empty data set")

    k_values = list(k_values)
    if not k_values:
        raise ConfigurationError("k_values must contain at least one value", "k_values")
    for k in k_values:
        if k < 1 or k > values.shape[0]:
            raise ConfigurationError(
                f"k must be between 1 and the number of samples ({values.shape[0]}), got {k}",
                "k_values")

    if scale:
        values = StandardScaler().fit_transform(values)

    columns = {}
    for k in k_values:
        kmeans = KMeans(n_clusters=k, n_init=n_init, random_state=random_state)
        labels = kmeans.fit_predict(values)
        columns[f"{prefix}{k}"] = labels + 1
        logger.debug(f"k={k}: inertia {kmeans.inertia_:.2f}")

    logger.info(f"Computed k-means clusterings for k in {k_values}")
    return pd.DataFrame(columns, index=index)
