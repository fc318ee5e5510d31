"""Tests for clustree.export writers."""

import pandas as pd
import pytest

from clustree import build_clustree, load_tree_json, save_tree_csv, save_tree_json


@pytest.fixture
def tree(three_level_table):
    return build_clustree(three_level_table, ['K1', 'K2', 'K3'],
                          aggregation_functions={'species': 'mode'})


def test_save_tree_json(tree, tmp_path):
    path = save_tree_json(tree, tmp_path / "out" / "tree.json")
    data = load_tree_json(path)

    assert data['resolutions'] == ['K1', 'K2', 'K3']
    assert len(data['nodes']) == 6
    assert len(data['edges']) == 6
    assert data['nodes'][0]['aggregates'] == {'mode_species': 'b'}


def test_save_tree_csv(tree, tmp_path):
    nodes_path, edges_path = save_tree_csv(tree, tmp_path, stem="demo")

    assert nodes_path.name == "demo_nodes.csv"
    assert edges_path.name == "demo_edges.csv"

    nodes = pd.read_csv(nodes_path)
    edges = pd.read_csv(edges_path)
    assert nodes['size'].tolist() == [10, 5, 5, 3, 4, 3]
    assert edges['count'].sum() == 20
