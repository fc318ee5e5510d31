#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SC3 stability index for clusters across resolutions.

For a cluster c and N resolutions:

    S(c) = 1/N * sum_l sum_{c' at l overlapping c} (|c & c'| / |c'|) / k_l^2

where k_l is the number of clusters at resolution l sharing samples with c.
A cluster reproduced unchanged at every resolution scores 1; clusters that
split and merge across resolutions score lower.
"""

import logging
import pandas as pd
from typing import Dict, Hashable, Mapping, Sequence, Tuple

from .adapters import as_dataframe
from .labels import clean_labels, partition

logger = logging.getLogger(__name__)


def sc3_stability(labels: Mapping[Hashable, pd.Series]) -> Dict[Tuple[Hashable, Hashable], float]:
    """
    Stability of every cluster given cleaned label columns.

    Parameters
    ----------
    labels : mapping
        Resolution column -> cleaned label Series (see ``clean_labels``),
        all sharing the same positional index.

    Returns
    -------
    dict
        ``(resolution, cluster)`` -> stability
    """
    n_resolutions = len(labels)
    parts = {res: partition(series) for res, series in labels.items()}
    sizes = {res: {key: len(rows) for key, rows in part.items()} for res, part in parts.items()}

    stability = {}
    for res, part in parts.items():
        for cluster, rows in part.items():
            score = 0.0
            for other, series in labels.items():
                overlaps = series.iloc[rows].dropna().value_counts(sort=False)
                k = len(overlaps)
                if k == 0:
                    continue
                for other_cluster, overlap in overlaps.items():
                    score += (overlap / sizes[other][other_cluster]) / k ** 2
            stability[(res, cluster)] = score / n_resolutions

    logger.debug(f"Computed SC3 stability for {len(stability)} clusters")
    return stability


def calc_sc3_stability(table, resolution_columns: Sequence[Hashable]) -> pd.DataFrame:
    """
    SC3 stability for every cluster in a table of assignments.

    Returns a DataFrame with columns ``resolution``, ``cluster`` and
    ``stability``.
    """
    frame = as_dataframe(table).reset_index(drop=True)
    labels = {col: clean_labels(frame[col], col) for col in resolution_columns}
    scores = sc3_stability(labels)
    return pd.DataFrame(
        [(res, cluster, value) for (res, cluster), value in scores.items()],
        columns=['resolution', 'cluster', 'stability'],
    )
