#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Per-node aggregation of sample attributes.

Reductions receive a pandas Series holding the non-missing attribute values
of the samples in one node and return a scalar.
"""

import numpy as np
import pandas as pd
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import ConfigurationError

AggregationSpec = Union[str, Callable, Sequence[Union[str, Callable]]]


def _mode(values: pd.Series):
    # Series.mode() is sorted, so ties resolve to the smallest value
    modes = values.mode()
    if modes.empty:
        return np.nan
    return modes.iloc[0]


AGGREGATIONS: Dict[str, Callable[[pd.Series], object]] = {
    'mean': lambda s: s.mean(),
    'median': lambda s: s.median(),
    'mode': _mode,
    'min': lambda s: s.min(),
    'max': lambda s: s.max(),
    'sum': lambda s: s.sum(),
    'std': lambda s: s.std(),
    'var': lambda s: s.var(),
    'count': lambda s: int(s.count()),
    'nunique': lambda s: int(s.nunique()),
}


def function_name(func: Union[str, Callable]) -> str:
    """Name used for the aggregate column, e.g. ``mean`` in ``mean_petal``"""
    if isinstance(func, str):
        return func
    return getattr(func, '__name__', type(func).__name__)


def resolve_function(func: Union[str, Callable]) -> Callable[[pd.Series], object]:
    """Turn a reduction name or callable into a callable"""
    if callable(func):
        return func
    try:
        return AGGREGATIONS[func]
    except (KeyError, TypeError):
        raise ConfigurationError(
            f"Unknown aggregation function '{func}'. "
            f"Use a callable or one of: {', '.join(AGGREGATIONS)}",
            "attributes"
        ) from None


def default_function(values: pd.Series) -> str:
    """Default reduction for an attribute column: mean if numeric, else mode"""
    if pd.api.types.is_numeric_dtype(values) and not pd.api.types.is_bool_dtype(values):
        return 'mean'
    return 'mode'


def normalize_aggregations(
    table: pd.DataFrame,
    attribute_columns: Optional[Sequence[str]] = None,
    aggregation_functions: Optional[Mapping[str, AggregationSpec]] = None,
) -> List[Tuple[str, str, Callable]]:
    """
    Expand attribute/function requests into ``(attribute, name, callable)`` triples.

    Attributes listed without a function fall back to :func:`default_function`.
    Raises ``ConfigurationError`` for attributes absent from the table and for
    unknown reduction names.
    """
    requests: Dict[str, List[Union[str, Callable]]] = {}

    for attribute in attribute_columns or []:
        requests.setdefault(attribute, [])

    for attribute, spec in (aggregation_functions or {}).items():
        if isinstance(spec, (str, bytes)) or callable(spec):
            funcs = [spec]
        else:
            funcs = list(spec)
        requests.setdefault(attribute, []).extend(funcs)

    triples = []
    for attribute, funcs in requests.items():
        if attribute not in table.columns:
            raise ConfigurationError(
                f"Attribute column '{attribute}' not found in table", "attributes")
        if not funcs:
            funcs = [default_function(table[attribute])]
        seen = set()
        for func in funcs:
            name = function_name(func)
            if name in seen:
                continue
            seen.add(name)
            triples.append((attribute, name, resolve_function(func)))
    return triples


def aggregate(values: pd.Series, func: Callable[[pd.Series], object],
              name: Optional[str] = None, attribute: Optional[str] = None):
    """
    Apply a reduction to the non-missing values; NaN when there are none.

    A reduction that cannot handle the attribute's values (``mean`` of
    strings) raises ``ConfigurationError``.
    """
    values = values.dropna()
    if values.empty:
        return np.nan
    try:
        return func(values)
    except (TypeError, ValueError) as e:
        name = name or function_name(func)
        attribute = values.name if attribute is None else attribute
        raise ConfigurationError(
            f"Cannot apply '{name}' to attribute '{attribute}': {e}", "attributes") from e
