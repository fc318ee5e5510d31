#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
clustree k-means example

Clusters the iris measurements with k-means for k = 1..5 and builds a
clustering tree to judge how many clusters the data supports.
"""

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sklearn.datasets import load_iris

import clustree
from clustree.kmeans import kmeans_resolutions
from clustree.plotting import plot_clustree


def load_iris_table():
    """Iris measurements with underscore column names"""
    iris = load_iris(as_frame=True)
    frame = iris.frame.rename(columns=lambda c: c.replace(' (cm)', '').replace(' ', '_'))
    frame['species'] = iris.target_names[iris.target]
    return frame


def example_basic_tree(output_dir):
    """Example: tree over k-means clusterings with a mean attribute"""
    print("=== Basic clustering tree ===\n")

    iris = load_iris_table()
    features = iris[['sepal_length', 'sepal_width', 'petal_length', 'petal_width']]

    table = kmeans_resolutions(features, k_values=range(1, 6), prefix="K")
    table['petal_length'] = iris['petal_length']
    table['species'] = iris['species']

    config = clustree.ClustreeConfig(
        prefix="K",
        attributes={'petal_length': 'mean', 'species': 'mode'},
        compute_stability=True,
        node_aesthetics={'colour': 'mean_petal_length'},
    )
    tree = clustree.TreeBuilder(config).build(table)

    print(tree)
    print(tree.node_table().to_string(index=False))
    print()
    print(tree.edge_table()[['source', 'target', 'count', 'in_proportion']].to_string(index=False))

    plot_clustree(tree, config, save_path=os.path.join(output_dir, "iris_clustree.png"))
    clustree.save_tree_json(tree, os.path.join(output_dir, "iris_clustree.json"))


def example_stability_choice():
    """Example: pick the resolution with the most stable clusters"""
    print("\n=== Choosing a resolution by stability ===\n")

    iris = load_iris_table()
    features = iris[['sepal_length', 'sepal_width', 'petal_length', 'petal_width']]
    table = kmeans_resolutions(features, k_values=range(1, 8), prefix="K", scale=True)

    stability = clustree.calc_sc3_stability(table, list(table.columns))
    mean_stability = stability.groupby('resolution', sort=False)['stability'].mean()
    print(mean_stability.to_string())
    print(f"\nMost stable resolution above K1: {mean_stability.iloc[1:].idxmax()}")


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "output")
    os.makedirs(out, exist_ok=True)
    example_basic_tree(out)
    example_stability_choice()
