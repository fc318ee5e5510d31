#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Clustering tree graph: nodes are clusters at a resolution, edges carry the
samples shared by clusters at adjacent resolutions.
"""

import math
import numpy as np
import pandas as pd
import networkx as nx
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Hashable, List, Optional

from .exceptions import DataError


def node_id(resolution: Hashable, cluster: Hashable) -> str:
    """String identifier of a node, e.g. ``K2C1``"""
    return f"{resolution}C{cluster}"


def convert_numpy_types(obj):
    """Recursively convert numpy types to native Python types for JSON serialization"""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return None if np.isnan(obj) else float(obj)
    elif isinstance(obj, float):
        return None if math.isnan(obj) else obj
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.ndarray):
        return [convert_numpy_types(item) for item in obj.tolist()]
    elif isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy_types(item) for item in obj]
    else:
        return obj


@dataclass
class ClusterNode:
    """
    A cluster at one resolution.

    Attributes:
        resolution: Column identifying the resolution
        cluster: Cluster label at that resolution
        resolution_index: Position of the resolution in the ordered sequence
        size: Number of samples assigned to the cluster
        aggregates: ``"{function}_{attribute}"`` -> value over the node's samples
        stability: SC3 stability index, None unless computed
    """
    resolution: Hashable
    cluster: Hashable
    resolution_index: int
    size: int
    aggregates: Dict[str, Any] = field(default_factory=dict)
    stability: Optional[float] = None

    @property
    def id(self) -> str:
        return node_id(self.resolution, self.cluster)


@dataclass
class ClusterEdge:
    """
    Sample flow from a cluster at resolution i to one at resolution i+1.

    Attributes:
        source: Id of the node at the lower resolution
        target: Id of the node at the higher resolution
        count: Number of samples in both clusters
        in_proportion: count / size of the target node
    """
    source: str
    target: str
    from_resolution: Hashable
    to_resolution: Hashable
    from_cluster: Hashable
    to_cluster: Hashable
    count: int
    in_proportion: float


@dataclass
class ClusterTree:
    """Nodes and edges of a clustering tree, grouped by resolution"""
    resolutions: List[Hashable]
    nodes: List[ClusterNode]
    edges: List[ClusterEdge]

    def __post_init__(self):
        self._index = {}
        for node in self.nodes:
            other = self._index.setdefault(node.id, node)
            if other is not node:
                raise DataError(
                    f"Clusters {other.cluster!r} at '{other.resolution}' and "
                    f"{node.cluster!r} at '{node.resolution}' share the node id '{node.id}'; "
                    f"rename the resolution columns or cluster labels",
                    node.resolution)

    def __repr__(self) -> str:
        return (f"ClusterTree(resolutions={len(self.resolutions)}, "
                f"nodes={len(self.nodes)}, edges={len(self.edges)})")

    def node(self, key: str) -> ClusterNode:
        """Look up a node by its id"""
        return self._index[key]

    def nodes_at(self, resolution: Hashable) -> List[ClusterNode]:
        return [n for n in self.nodes if n.resolution == resolution]

    def incoming(self, key: str) -> List[ClusterEdge]:
        return [e for e in self.edges if e.target == key]

    def outgoing(self, key: str) -> List[ClusterEdge]:
        return [e for e in self.edges if e.source == key]

    def filter_edges(self, count_filter: int = 0, prop_filter: float = 0.0) -> "ClusterTree":
        """
        Return a tree with the same nodes and only the edges whose count is at
        least ``count_filter`` and whose in-proportion is at least ``prop_filter``.
        """
        kept = [e for e in self.edges
                if e.count >= count_filter and e.in_proportion >= prop_filter]
        return ClusterTree(
            resolutions=list(self.resolutions),
            nodes=[replace(n, aggregates=dict(n.aggregates)) for n in self.nodes],
            edges=kept,
        )

    def node_table(self) -> pd.DataFrame:
        """One row per node with size, stability and aggregate columns"""
        records = []
        for n in self.nodes:
            record = {
                'node': n.id,
                'resolution': n.resolution,
                'resolution_index': n.resolution_index,
                'cluster': n.cluster,
                'size': n.size,
            }
            if n.stability is not None:
                record['stability'] = n.stability
            record.update(n.aggregates)
            records.append(record)
        return pd.DataFrame(records)

    def edge_table(self) -> pd.DataFrame:
        """One row per edge"""
        columns = ['source', 'target', 'from_resolution', 'to_resolution',
                   'from_cluster', 'to_cluster', 'count', 'in_proportion']
        return pd.DataFrame(
            [[getattr(e, c) for c in columns] for e in self.edges],
            columns=columns,
        )

    def to_networkx(self) -> nx.DiGraph:
        """Directed graph with node and edge attributes"""
        graph = nx.DiGraph()
        for n in self.nodes:
            attrs = {
                'resolution': n.resolution,
                'resolution_index': n.resolution_index,
                'cluster': n.cluster,
                'size': n.size,
                **n.aggregates,
            }
            if n.stability is not None:
                attrs['stability'] = n.stability
            graph.add_node(n.id, **attrs)
        for e in self.edges:
            graph.add_edge(e.source, e.target, count=e.count, in_proportion=e.in_proportion)
        return graph

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable representation; missing values become None"""
        return convert_numpy_types({
            'resolutions': [str(r) for r in self.resolutions],
            'nodes': [
                {
                    'id': n.id,
                    'resolution': str(n.resolution),
                    'resolution_index': n.resolution_index,
                    'cluster': n.cluster,
                    'size': n.size,
                    'stability': n.stability,
                    'aggregates': dict(n.aggregates),
                }
                for n in self.nodes
            ],
            'edges': [
                {
                    'source': e.source,
                    'target': e.target,
                    'count': e.count,
                    'in_proportion': e.in_proportion,
                }
                for e in self.edges
            ],
        })
