#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Cluster label handling: validation, normalisation, ordering and partitions.
"""

import numbers
import numpy as np
import pandas as pd
from typing import Dict, Hashable, List

from .exceptions import DataError


def _all_real_with_floats(present: pd.Series) -> bool:
    """Object column whose labels are all real numbers, some of them floats"""
    if not pd.api.types.is_object_dtype(present):
        return False
    values = present.tolist()
    return (all(is_numeric_label(v) and isinstance(v, numbers.Real) for v in values)
            and any(isinstance(v, (float, np.floating)) for v in values))


def clean_labels(series: pd.Series, column: Hashable = None) -> pd.Series:
    """
    Validate one resolution column and return it as an object Series of
    native Python labels, with ``None`` for missing labels.

    Integral floats (pandas' representation of integer labels next to missing
    values) become ints. Non-integral floats are taken as continuous values
    and rejected, as are unhashable labels.
    """
    column = series.name if column is None else column
    series = series.reset_index(drop=True)
    missing = series.isna()

    if missing.all():
        raise DataError(f"Resolution column '{column}' has no cluster labels", column)

    present = series[~missing]
    if pd.api.types.is_float_dtype(present) or _all_real_with_floats(present):
        values = present.to_numpy(dtype=float)
        if not np.all(np.mod(values, 1) == 0):
            raise DataError(
                f"Resolution column '{column}' contains continuous values; "
                f"cluster labels must be discrete", column)
        present = present.astype(np.int64)

    labels = []
    for value in present.tolist():
        try:
            hash(value)
        except TypeError:
            raise DataError(
                f"Resolution column '{column}' contains unhashable label {value!r}", column
            ) from None
        labels.append(value)

    cleaned = pd.Series(None, index=series.index, dtype=object, name=column)
    cleaned.loc[~missing] = labels
    return cleaned


def is_numeric_label(value) -> bool:
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


def ordered_labels(labels: pd.Series) -> List[Hashable]:
    """
    Distinct labels in output order: ascending when every label is numeric,
    otherwise in order of first appearance.
    """
    distinct = pd.unique(labels.dropna())
    distinct = [v.item() if isinstance(v, np.generic) else v for v in distinct]
    if all(is_numeric_label(v) for v in distinct):
        return sorted(distinct)
    return distinct


def partition(labels: pd.Series) -> Dict[Hashable, np.ndarray]:
    """Row positions of each label; rows with a missing label belong to no part"""
    present = labels.dropna()
    return {
        key: present.index.to_numpy()[positions]
        for key, positions in present.groupby(present, sort=False).indices.items()
    }
