#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
clustree - clustering trees for clusterings at several resolutions

A clustering tree relates clusterings of the same samples at increasing
resolution (e.g. k = 1..5 in k-means). Nodes are clusters, edges count the
samples shared by clusters at adjacent resolutions.

Basic usage:
    import clustree

    tree = clustree.build_clustree(table, ["K1", "K2", "K3"],
                                   aggregation_functions={"petal_length": "mean"})
    tree.node_table()
    tree.edge_table()
"""

__version__ = "1.0.0"

from .exceptions import ClustreeError, ConfigurationError, DataError
from .config import ClustreeConfig, load_config, save_config
from .adapters import ClusteringSource, as_dataframe, select_resolution_columns
from .aggregation import AGGREGATIONS
from .graph import ClusterNode, ClusterEdge, ClusterTree
from .builder import TreeBuilder, build_clustree
from .stability import calc_sc3_stability
from .export import save_tree_json, save_tree_csv, load_tree_json

__all__ = [
    # Errors
    'ClustreeError',
    'ConfigurationError',
    'DataError',

    # Configuration
    'ClustreeConfig',
    'load_config',
    'save_config',

    # Input
    'ClusteringSource',
    'as_dataframe',
    'select_resolution_columns',
    'AGGREGATIONS',

    # Graph
    'ClusterNode',
    'ClusterEdge',
    'ClusterTree',
    'TreeBuilder',
    'build_clustree',
    'calc_sc3_stability',

    # Export
    'save_tree_json',
    'save_tree_csv',
    'load_tree_json',
]
