#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Clustering tree construction.

Builds a ``ClusterTree`` from a table holding one cluster label per sample
for each of an ordered sequence of resolutions. Nodes partition the labelled
samples at each resolution; edges count the samples shared by clusters at
adjacent resolutions.
"""

import logging
import numpy as np
import pandas as pd
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Sequence, Union

from .adapters import ClusteringSource, as_dataframe, select_resolution_columns, source_columns
from .aggregation import aggregate, normalize_aggregations
from .config import ClustreeConfig
from .exceptions import ConfigurationError, DataError
from .graph import ClusterEdge, ClusterNode, ClusterTree, node_id
from .labels import clean_labels, ordered_labels, partition
from .stability import sc3_stability

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Build clustering trees according to a ``ClustreeConfig``"""

    def __init__(self, config: Optional[ClustreeConfig] = None):
        self.config = config or ClustreeConfig()

    def build(self,
              table: Any,
              resolution_columns: Optional[Sequence[Hashable]] = None,
              attribute_columns: Optional[Sequence[Hashable]] = None,
              aggregation_functions: Optional[Mapping[Hashable, Any]] = None) -> ClusterTree:
        """
        Build a clustering tree.

        Parameters
        ----------
        table : DataFrame, mapping of columns, or ClusteringSource
            Rows are samples
        resolution_columns : sequence, optional
            Ordered resolution columns. Defaults to the source's columns, then
            to the configured explicit list or prefix/suffix selection.
        attribute_columns : sequence, optional
            Columns aggregated per node with their default reduction
        aggregation_functions : mapping, optional
            Attribute -> reduction name, callable, or list of these.
            Defaults to ``config.attributes``.

        Returns
        -------
        ClusterTree
        """
        source_attributes = None
        if resolution_columns is None and not isinstance(table, pd.DataFrame) \
                and isinstance(table, ClusteringSource):
            resolution_columns, source_attributes = source_columns(table)

        frame = as_dataframe(table)

        if resolution_columns is None:
            resolution_columns = select_resolution_columns(
                frame.columns,
                prefix=self.config.prefix,
                suffix=self.config.suffix,
                explicit=self.config.columns,
            )

        if attribute_columns is None:
            attribute_columns = source_attributes
        if aggregation_functions is None:
            aggregation_functions = self.config.attributes

        return build_clustree(
            frame,
            resolution_columns,
            attribute_columns=attribute_columns,
            aggregation_functions=aggregation_functions,
            compute_stability=self.config.compute_stability,
        )


def _check_resolutions(frame: pd.DataFrame, resolution_columns: List[Hashable]):
    if len(resolution_columns) < 2:
        raise ConfigurationError(
            f"At least two resolution columns are required to build a tree, "
            f"got {len(resolution_columns)}", "columns")

    duplicates = sorted({str(c) for c in resolution_columns if resolution_columns.count(c) > 1})
    if duplicates:
        raise ConfigurationError(
            f"Resolution columns listed more than once: {', '.join(duplicates)}", "columns")

    missing = [c for c in resolution_columns if c not in frame.columns]
    if missing:
        raise ConfigurationError(
            f"Resolution column(s) not found in table: {', '.join(map(str, missing))}",
            "columns")


def _native(value):
    return value.item() if isinstance(value, np.generic) else value


def build_clustree(table: Any,
                   resolution_columns: Sequence[Hashable],
                   attribute_columns: Optional[Sequence[Hashable]] = None,
                   aggregation_functions: Optional[Mapping[Hashable, Union[str, Callable, Sequence]]] = None,
                   compute_stability: bool = False) -> ClusterTree:
    """
    Build a clustering tree from per-sample cluster assignments.

    Samples with a missing label at a resolution are left out of that
    resolution's nodes and of every edge touching it.

    Parameters
    ----------
    table : DataFrame or mapping of columns
        Rows are samples
    resolution_columns : sequence
        Resolution columns in ascending order of granularity
    attribute_columns : sequence, optional
        Columns aggregated with their default reduction (mean for numeric
        columns, mode otherwise)
    aggregation_functions : mapping, optional
        Attribute -> reduction name, callable, or list of these
    compute_stability : bool
        Fill the SC3 stability index on every node

    Returns
    -------
    ClusterTree

    Raises
    ------
    ConfigurationError
        Fewer than two resolutions, unknown columns or reductions
    DataError
        Empty table, mismatched column lengths, non-discrete labels
    """
    frame = as_dataframe(table)
    resolution_columns = list(resolution_columns)
    _check_resolutions(frame, resolution_columns)

    if len(frame) == 0:
        raise DataError("Cannot build a clustering tree from an empty table")

    frame = frame.reset_index(drop=True)
    aggregations = normalize_aggregations(frame, attribute_columns, aggregation_functions)

    logger.info(f"Building clustering tree: {len(frame)} samples, "
                f"{len(resolution_columns)} resolutions")

    labels = {col: clean_labels(frame[col], col) for col in resolution_columns}
    orders = {col: ordered_labels(labels[col]) for col in resolution_columns}
    parts = {col: partition(labels[col]) for col in resolution_columns}

    nodes: List[ClusterNode] = []
    sizes: Dict[Hashable, Dict[Hashable, int]] = {}
    for index, col in enumerate(resolution_columns):
        part = parts[col]
        sizes[col] = {cluster: len(part[cluster]) for cluster in orders[col]}

        n_labelled = sum(sizes[col].values())
        if n_labelled > 1 and len(part) == n_labelled:
            logger.warning(f"Every cluster at resolution '{col}' holds a single sample; "
                           f"labels may not be discrete")

        for cluster in orders[col]:
            rows = part[cluster]
            aggregates = {}
            for attribute, name, func in aggregations:
                value = aggregate(frame[attribute].iloc[rows], func, name, attribute)
                aggregates[f"{name}_{attribute}"] = _native(value)
            nodes.append(ClusterNode(
                resolution=col,
                cluster=cluster,
                resolution_index=index,
                size=len(rows),
                aggregates=aggregates,
            ))

        logger.debug(f"Resolution '{col}': {len(part)} clusters, "
                     f"{len(frame) - n_labelled} unlabelled samples")

    edges: List[ClusterEdge] = []
    for lower, upper in zip(resolution_columns[:-1], resolution_columns[1:]):
        edges.extend(_adjacent_edges(labels[lower], labels[upper], lower, upper,
                                     orders, sizes))

    if compute_stability:
        scores = sc3_stability(labels)
        for node in nodes:
            node.stability = float(scores[(node.resolution, node.cluster)])

    tree = ClusterTree(resolutions=resolution_columns, nodes=nodes, edges=edges)
    logger.info(f"Clustering tree built: {len(nodes)} nodes, {len(edges)} edges")
    return tree


def _adjacent_edges(lower_labels: pd.Series,
                    upper_labels: pd.Series,
                    lower: Hashable,
                    upper: Hashable,
                    orders: Dict[Hashable, List[Hashable]],
                    sizes: Dict[Hashable, Dict[Hashable, int]]) -> List[ClusterEdge]:
    """Edges between two adjacent resolutions, in node output order"""
    pairs = pd.DataFrame({'source': lower_labels, 'target': upper_labels}).dropna()
    if pairs.empty:
        return []

    counts = pairs.groupby(['source', 'target'], sort=False).size()

    lower_rank = {cluster: i for i, cluster in enumerate(orders[lower])}
    upper_rank = {cluster: i for i, cluster in enumerate(orders[upper])}

    edges = []
    for (source, target), count in counts.items():
        source, target, count = _native(source), _native(target), int(count)
        edges.append(ClusterEdge(
            source=node_id(lower, source),
            target=node_id(upper, target),
            from_resolution=lower,
            to_resolution=upper,
            from_cluster=source,
            to_cluster=target,
            count=count,
            in_proportion=count / sizes[upper][target],
        ))

    edges.sort(key=lambda e: (lower_rank[e.from_cluster], upper_rank[e.to_cluster]))
    return edges
