#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Writers for clustering trees: JSON for the whole graph, CSV for the node
and edge tables.
"""

import os
import json
import logging
from pathlib import Path
from typing import Tuple

from .graph import ClusterTree

logger = logging.getLogger(__name__)


def save_tree_json(tree: ClusterTree, output_path: str) -> str:
    """Write the tree as JSON; missing aggregates are written as null"""
    output_path = str(output_path)
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(tree.to_dict(), f, indent=2)
    logger.info(f"Clustering tree saved: {output_path}")
    return output_path


def load_tree_json(input_path: str) -> dict:
    """Read a tree written by ``save_tree_json`` back as a dictionary"""
    with open(input_path, 'r') as f:
        return json.load(f)


def save_tree_csv(tree: ClusterTree, output_dir: str, stem: str = "clustree") -> Tuple[Path, Path]:
    """
    Write ``{stem}_nodes.csv`` and ``{stem}_edges.csv`` into ``output_dir``.

    Returns
    -------
    tuple
        (nodes_path, edges_path)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    nodes_path = output_dir / f"{stem}_nodes.csv"
    edges_path = output_dir / f"{stem}_edges.csv"

    tree.node_table().to_csv(nodes_path, index=False, float_format='%.6g')
    tree.edge_table().to_csv(edges_path, index=False, float_format='%.6g')

    logger.info(f"Node table saved: {nodes_path}")
    logger.info(f"Edge table saved: {edges_path}")
    return nodes_path, edges_path
