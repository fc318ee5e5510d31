#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Input adapters: turn caller tables into a DataFrame and pick resolution columns.

Anything exposing ``resolution_columns()`` (and optionally
``attribute_columns()`` and ``to_dataframe()``) can be handed to the builder;
plain DataFrames and column mappings are accepted as well.
"""

import re
import logging
import pandas as pd
from typing import Any, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from .exceptions import ConfigurationError, DataError

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r'^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$')


@runtime_checkable
class ClusteringSource(Protocol):
    """Narrow interface for containers holding clusterings at several resolutions"""

    def resolution_columns(self) -> Sequence[str]:
        ...


def as_dataframe(table: Any) -> pd.DataFrame:
    """
    Coerce a table-like object into a DataFrame.

    Parameters
    ----------
    table : DataFrame, mapping of columns, or object with ``to_dataframe()``

    Returns
    -------
    pd.DataFrame
    """
    if isinstance(table, pd.DataFrame):
        return table
    if hasattr(table, 'to_dataframe'):
        return as_dataframe(table.to_dataframe())
    if isinstance(table, Mapping):
        lengths = {name: len(values) for name, values in table.items()}
        if len(set(lengths.values())) > 1:
            detail = ", ".join(f"{name}={n}" for name, n in lengths.items())
            raise DataError(f"Columns have mismatched row counts: {detail}")
        return pd.DataFrame(dict(table))
    raise DataError(f"Unsupported table type: {type(table).__name__}")


def _resolution_key(value: str):
    if _NUMBER.match(value):
        return (0, float(value), value)
    return (1, 0.0, value)


def select_resolution_columns(
    columns: Sequence[str],
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
    explicit: Optional[Sequence[str]] = None,
) -> List[str]:
    """
    Select and order resolution columns.

    An explicit list is returned as given (after checking it exists). With a
    prefix, columns ``{prefix}<res>{suffix}`` are selected and ordered by the
    numeric value of ``<res>``; non-numeric remainders sort after numeric
    ones, lexically.
    """
    columns = list(columns)

    if explicit is not None:
        if prefix is not None or suffix is not None:
            raise ConfigurationError(
                "Give either an explicit column list or a prefix/suffix, not both", "columns")
        explicit = list(explicit)
        missing = [c for c in explicit if c not in columns]
        if missing:
            raise ConfigurationError(
                f"Resolution column(s) not found in table: {', '.join(map(str, missing))}",
                "columns")
        return explicit

    if prefix is None:
        raise ConfigurationError(
            "No resolution columns given: set a prefix or an explicit column list", "prefix")

    suffix = suffix or ""
    selected = []
    for column in columns:
        name = str(column)
        if not name.startswith(prefix) or not name.endswith(suffix):
            continue
        res = name[len(prefix):len(name) - len(suffix)] if suffix else name[len(prefix):]
        if res == "":
            continue
        selected.append((_resolution_key(res), column))

    if not selected:
        raise ConfigurationError(
            f"No columns match prefix '{prefix}'" + (f" and suffix '{suffix}'" if suffix else ""),
            "prefix")

    selected.sort(key=lambda item: item[0])
    ordered = [column for _, column in selected]
    logger.debug(f"Selected resolution columns: {ordered}")
    return ordered


def source_columns(source: Any):
    """
    Read resolution and attribute columns from a source object.

    Returns ``(resolution_columns, attribute_columns)``; the latter is
    ``None`` when the source does not expose it.
    """
    resolutions = list(source.resolution_columns())
    attributes = None
    if hasattr(source, 'attribute_columns'):
        attributes = list(source.attribute_columns())
    return resolutions, attributes
