#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Drawing of clustering trees.

Layout is delegated to networkx (one layer per resolution, top to bottom)
and drawing to matplotlib. Aesthetics are either static values or names of
node attributes (``size``, ``stability`` or an aggregate such as
``mean_petal_length``) mapped through a colormap or size range.
"""

import logging
import numbers
import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
from matplotlib.patches import Patch
import networkx as nx
import seaborn as sns
from typing import Any, Dict, List, Optional, Tuple

from .config import ClustreeConfig
from .exceptions import ConfigurationError
from .graph import ClusterTree

logger = logging.getLogger(__name__)

NODE_SIZE_RANGE = (200.0, 2000.0)
EDGE_WIDTH_RANGE = (0.5, 6.0)
DEFAULT_CMAP = 'viridis'
MISSING_COLOUR = 'lightgrey'


def _scale(values: np.ndarray, out_range: Tuple[float, float]) -> np.ndarray:
    values = np.asarray(values, dtype=float)
    low, high = out_range
    finite = np.isfinite(values)
    if not finite.any():
        return np.full(values.shape, low)
    vmin, vmax = np.nanmin(values[finite]), np.nanmax(values[finite])
    if vmax == vmin:
        return np.full(values.shape, (low + high) / 2)
    scaled = low + (values - vmin) / (vmax - vmin) * (high - low)
    return np.where(finite, scaled, low)


def _raw_values(graph: nx.DiGraph, attribute: str) -> list:
    """Attribute of every node, with None for missing values"""
    values = []
    for n in graph.nodes:
        value = graph.nodes[n].get(attribute)
        values.append(None if value is None or pd.isna(value) else value)
    return values


def _is_numeric(values: list) -> bool:
    present = [v for v in values if v is not None]
    return all(isinstance(v, numbers.Real) and not isinstance(v, bool) for v in present)


def _node_values(graph: nx.DiGraph, attribute: str) -> np.ndarray:
    values = _raw_values(graph, attribute)
    if not _is_numeric(values):
        raise ConfigurationError(
            f"Node attribute '{attribute}' is not numeric and cannot be scaled",
            "node_aesthetics")
    return np.array([np.nan if v is None else float(v) for v in values])


def _is_attribute(graph: nx.DiGraph, value: Any) -> bool:
    return isinstance(value, str) and any(value in data for _, data in graph.nodes(data=True))


def _node_colours(graph: nx.DiGraph, colour: Any, n_layers: int):
    """
    Colours for every node plus the scale to explain them: a ``(norm, cmap)``
    pair for numeric attributes, a category -> colour dict for others.
    """
    if colour is None:
        palette = sns.color_palette(DEFAULT_CMAP, max(n_layers, 1))
        return [palette[graph.nodes[n]['resolution_index']] for n in graph.nodes], None

    if _is_attribute(graph, colour):
        raw = _raw_values(graph, colour)
        if not _is_numeric(raw):
            categories = list(dict.fromkeys(v for v in raw if v is not None))
            palette = dict(zip(categories, sns.color_palette('tab10', len(categories))))
            return [MISSING_COLOUR if v is None else palette[v] for v in raw], palette

        values = _node_values(graph, colour)
        finite = np.isfinite(values)
        cmap = plt.get_cmap(DEFAULT_CMAP)
        if not finite.any():
            return [MISSING_COLOUR] * len(values), None
        norm = mcolors.Normalize(vmin=values[finite].min(), vmax=values[finite].max())
        colours = [cmap(norm(v)) if np.isfinite(v) else MISSING_COLOUR for v in values]
        return colours, (norm, cmap)

    return [colour] * graph.number_of_nodes(), None


def plot_clustree(tree: ClusterTree,
                  config: Optional[ClustreeConfig] = None,
                  ax: Optional[plt.Axes] = None,
                  save_path: Optional[str] = None,
                  figsize: Tuple[float, float] = (10, 8),
                  show_labels: bool = True,
                  title: Optional[str] = None) -> plt.Figure:
    """
    Draw a clustering tree.

    Edges below ``config.count_filter`` or ``config.prop_filter`` are hidden.
    Node colour defaults to the resolution, node size to the number of
    samples, edge width to the edge count and edge shade to the
    in-proportion.

    Parameters
    ----------
    tree : ClusterTree
        Tree to draw
    config : ClustreeConfig, optional
        Filters and aesthetic overrides
    ax : matplotlib Axes, optional
        Axes to draw into; a new figure is created otherwise
    save_path : str, optional
        Save the figure to this path
    figsize : tuple
        Size of a newly created figure
    show_labels : bool
        Draw cluster labels on the nodes
    title : str, optional
        Axes title

    Returns
    -------
    matplotlib.figure.Figure
    """
    config = config or ClustreeConfig()
    if config.layout != 'tree':
        logger.warning(f"Layout '{config.layout}' is not available, using layered tree layout")

    view = tree.filter_edges(config.count_filter, config.prop_filter)
    graph = view.to_networkx()
    logger.debug(f"Drawing {graph.number_of_nodes()} nodes and {graph.number_of_edges()} edges "
                 f"({len(tree.edges) - len(view.edges)} edges filtered)")

    pos = nx.multipartite_layout(graph, subset_key='resolution_index', align='horizontal')
    # Lowest resolution at the top
    pos = {n: (x, -y) for n, (x, y) in pos.items()}

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    node_style = config.node_aesthetics
    edge_style = config.edge_aesthetics

    colours, colour_scale = _node_colours(graph, node_style.get('colour'), len(tree.resolutions))

    size = node_style.get('size', 'size')
    if _is_attribute(graph, size):
        node_sizes = _scale(_node_values(graph, size), NODE_SIZE_RANGE)
    else:
        node_sizes = [float(size)] * graph.number_of_nodes()

    edgelist: List[Tuple[str, str]] = list(graph.edges)
    width = edge_style.get('width', 'count')
    if width in ('count', 'in_proportion'):
        widths = _scale([graph.edges[e][width] for e in edgelist], EDGE_WIDTH_RANGE)
    else:
        widths = [float(width)] * len(edgelist)

    edge_colour = edge_style.get('colour', 'in_proportion')
    edge_kwargs: Dict[str, Any] = {}
    if edge_colour in ('count', 'in_proportion'):
        edge_kwargs.update(
            edge_color=[graph.edges[e][edge_colour] for e in edgelist],
            edge_cmap=plt.get_cmap('Greys'),
            edge_vmin=0.0,
            edge_vmax=1.0 if edge_colour == 'in_proportion' else None,
        )
    else:
        edge_kwargs['edge_color'] = edge_colour

    if edgelist:
        nx.draw_networkx_edges(
            graph, pos, ax=ax, edgelist=edgelist, width=list(widths),
            alpha=edge_style.get('alpha', 1.0), arrows=False, **edge_kwargs
        )
    nx.draw_networkx_nodes(
        graph, pos, ax=ax, node_color=colours, node_size=list(node_sizes),
        alpha=node_style.get('alpha', 1.0), edgecolors='black', linewidths=1.0
    )
    if show_labels:
        nx.draw_networkx_labels(
            graph, pos, ax=ax,
            labels={n: str(graph.nodes[n]['cluster']) for n in graph.nodes},
            font_size=9, font_weight='bold'
        )

    if isinstance(colour_scale, dict):
        handles = [Patch(facecolor=c, edgecolor='black', label=str(category))
                   for category, c in colour_scale.items()]
        ax.legend(handles=handles, title=str(node_style['colour']),
                  loc='upper left', bbox_to_anchor=(1.0, 1.0), frameon=False)
    elif colour_scale is not None:
        norm, cmap = colour_scale
        smap = plt.cm.ScalarMappable(norm=norm, cmap=cmap)
        smap.set_array([])
        cbar = fig.colorbar(smap, ax=ax, shrink=0.6)
        cbar.set_label(str(node_style['colour']))

    for index, resolution in enumerate(tree.resolutions):
        layer = [p for n, p in pos.items() if graph.nodes[n]['resolution_index'] == index]
        if layer:
            ax.text(min(x for x, _ in layer) - 0.1, layer[0][1], str(resolution),
                    ha='right', va='center', fontsize=10, fontweight='bold')

    ax.set_title(title or "Clustering tree", fontweight='bold')
    ax.axis('off')

    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches='tight')
        logger.info(f"Clustering tree plot saved: {save_path}")

    return fig
