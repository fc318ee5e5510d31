"""Tests for clustree.builder tree construction."""

import logging

import numpy as np
import pandas as pd
import pytest

from clustree import ClustreeConfig, TreeBuilder, build_clustree
from clustree.exceptions import ConfigurationError, DataError


def edge_counts(tree):
    return {(e.source, e.target): e.count for e in tree.edges}


class TestScenarios:
    """Worked examples of small trees."""

    def test_even_split(self, split_table):
        tree = build_clustree(split_table, ['K1', 'K2'])

        assert [(n.id, n.size) for n in tree.nodes_at('K1')] == [('K1C1', 6)]
        assert [(n.id, n.size) for n in tree.nodes_at('K2')] == [('K2C1', 3), ('K2C2', 3)]
        assert edge_counts(tree) == {('K1C1', 'K2C1'): 3, ('K1C1', 'K2C2'): 3}
        assert all(e.in_proportion == 1.0 for e in tree.edges)

    def test_unequal_split(self, unequal_table):
        tree = build_clustree(unequal_table, ['K1', 'K2'])

        assert [e.count for e in tree.edges] == [4, 2]
        assert [e.in_proportion for e in tree.edges] == [1.0, 1.0]

    def test_missing_label_excluded(self, missing_table):
        tree = build_clustree(missing_table, ['K1', 'K2'])

        assert tree.node('K1C1').size == 6
        assert tree.node('K2C1').size == 3
        assert tree.node('K2C2').size == 2
        assert sum(e.count for e in tree.edges) == 5

    def test_merge_gives_partial_in_proportion(self):
        table = pd.DataFrame({
            'A': [1, 1, 2, 2],
            'B': [1, 1, 1, 2],
        })
        tree = build_clustree(table, ['A', 'B'])

        proportions = {(e.source, e.target): e.in_proportion for e in tree.edges}
        assert proportions[('AC1', 'BC1')] == pytest.approx(2 / 3)
        assert proportions[('AC2', 'BC1')] == pytest.approx(1 / 3)
        assert proportions[('AC2', 'BC2')] == 1.0


class TestInvariants:
    """Structural properties that hold for every tree."""

    def test_partition_complete_and_disjoint(self, three_level_table):
        tree = build_clustree(three_level_table, ['K1', 'K2', 'K3'])

        for col in ['K1', 'K2', 'K3']:
            assert sum(n.size for n in tree.nodes_at(col)) == len(three_level_table)
            assert len({n.cluster for n in tree.nodes_at(col)}) == len(tree.nodes_at(col))

    def test_incoming_counts_sum_to_size(self, three_level_table):
        tree = build_clustree(three_level_table, ['K1', 'K2', 'K3'])

        for node in tree.nodes:
            if node.resolution_index == 0:
                assert tree.incoming(node.id) == []
            else:
                assert sum(e.count for e in tree.incoming(node.id)) == node.size

    def test_incoming_counts_exclude_unlabelled_sources(self):
        table = pd.DataFrame({
            'K1': [1, 1, np.nan, np.nan, 2],
            'K2': [1, 1, 1, 2, 2],
        })
        tree = build_clustree(table, ['K1', 'K2'])

        assert tree.node('K2C1').size == 3
        assert sum(e.count for e in tree.incoming('K2C1')) == 2
        assert sum(e.count for e in tree.incoming('K2C2')) == 1

    def test_in_proportion_bounds(self, three_level_table):
        tree = build_clustree(three_level_table, ['K1', 'K2', 'K3'])

        for edge in tree.edges:
            assert 0 < edge.in_proportion <= 1

    def test_edges_only_between_adjacent_resolutions(self, three_level_table):
        tree = build_clustree(three_level_table, ['K1', 'K2', 'K3'])

        for edge in tree.edges:
            source = tree.node(edge.source)
            target = tree.node(edge.target)
            assert target.resolution_index == source.resolution_index + 1

    def test_row_permutation_does_not_change_statistics(self, three_level_table):
        columns = ['K1', 'K2', 'K3']
        funcs = {'length': ['mean', 'median'], 'species': 'mode'}
        tree = build_clustree(three_level_table, columns, aggregation_functions=funcs)
        shuffled = three_level_table.sample(frac=1.0, random_state=7)
        other = build_clustree(shuffled, columns, aggregation_functions=funcs)

        assert edge_counts(tree) == edge_counts(other)
        for node in tree.nodes:
            match = other.node(node.id)
            assert match.size == node.size
            assert match.aggregates['mean_length'] == pytest.approx(node.aggregates['mean_length'])
            assert match.aggregates['median_length'] == node.aggregates['median_length']
            assert match.aggregates['mode_species'] == node.aggregates['mode_species']

    def test_idempotent(self, three_level_table):
        first = build_clustree(three_level_table, ['K1', 'K2', 'K3'], attribute_columns=['length'])
        second = build_clustree(three_level_table, ['K1', 'K2', 'K3'], attribute_columns=['length'])

        pd.testing.assert_frame_equal(first.node_table(), second.node_table())
        pd.testing.assert_frame_equal(first.edge_table(), second.edge_table())


class TestOrdering:
    """Deterministic node and edge order."""

    def test_numeric_labels_ascending(self):
        table = pd.DataFrame({'A': [1, 1, 1, 1], 'B': [3, 1, 2, 3]})
        tree = build_clustree(table, ['A', 'B'])

        assert [n.cluster for n in tree.nodes_at('B')] == [1, 2, 3]
        assert [e.to_cluster for e in tree.edges] == [1, 2, 3]

    def test_string_labels_first_seen(self):
        table = pd.DataFrame({'A': ['x'] * 4, 'B': ['beta', 'alpha', 'beta', 'gamma']})
        tree = build_clustree(table, ['A', 'B'])

        assert [n.cluster for n in tree.nodes_at('B')] == ['beta', 'alpha', 'gamma']

    def test_nodes_grouped_by_resolution(self, three_level_table):
        tree = build_clustree(three_level_table, ['K1', 'K2', 'K3'])

        indices = [n.resolution_index for n in tree.nodes]
        assert indices == sorted(indices)

    def test_float_labels_with_missing_become_ints(self, missing_table):
        tree = build_clustree(missing_table, ['K1', 'K2'])

        assert [n.cluster for n in tree.nodes_at('K2')] == [1, 2]
        assert all(type(n.cluster) is int for n in tree.nodes)

    def test_integral_floats_in_object_column_become_ints(self):
        table = pd.DataFrame({
            'A': [1, 1, 1, 1],
            'B': pd.Series([2.0, 1, 2.0, None], dtype=object),
        })
        tree = build_clustree(table, ['A', 'B'])

        assert [n.id for n in tree.nodes_at('B')] == ['BC1', 'BC2']
        assert all(type(n.cluster) is int for n in tree.nodes)


class TestAggregation:
    """Node attribute aggregation."""

    def test_mean_per_node(self, three_level_table):
        tree = build_clustree(three_level_table, ['K1', 'K2', 'K3'],
                              aggregation_functions={'length': 'mean'})

        assert tree.node('K1C1').aggregates['mean_length'] == pytest.approx(5.5)
        assert tree.node('K2C1').aggregates['mean_length'] == pytest.approx(3.0)
        assert tree.node('K3C3').aggregates['mean_length'] == pytest.approx(19 / 3)

    def test_default_functions(self, three_level_table):
        tree = build_clustree(three_level_table, ['K1', 'K2'],
                              attribute_columns=['length', 'species'])

        aggregates = tree.node('K2C2').aggregates
        assert set(aggregates) == {'mean_length', 'mode_species'}
        assert aggregates['mode_species'] == 'c'

    def test_mode_tie_takes_smallest(self):
        table = pd.DataFrame({'A': [1, 1, 1, 1], 'B': [1, 1, 1, 1], 'v': [5, 2, 5, 2]})
        tree = build_clustree(table, ['A', 'B'], aggregation_functions={'v': 'mode'})

        assert tree.node('AC1').aggregates['mode_v'] == 2

    def test_callable_function(self, three_level_table):
        def spread(values):
            return values.max() - values.min()

        tree = build_clustree(three_level_table, ['K1', 'K2'],
                              aggregation_functions={'length': spread})

        assert tree.node('K1C1').aggregates['spread_length'] == pytest.approx(9.0)

    def test_all_missing_attribute_is_nan(self):
        table = pd.DataFrame({
            'A': [1, 1, 1, 1],
            'B': [1, 1, 2, 2],
            'v': [1.0, 2.0, np.nan, np.nan],
        })
        tree = build_clustree(table, ['A', 'B'], aggregation_functions={'v': 'mean'})

        assert tree.node('BC1').aggregates['mean_v'] == pytest.approx(1.5)
        assert np.isnan(tree.node('BC2').aggregates['mean_v'])


class TestErrors:
    """Invalid arguments and data."""

    def test_single_resolution_rejected(self, split_table):
        with pytest.raises(ConfigurationError):
            build_clustree(split_table, ['K1'])

    def test_error_carries_code_and_key(self, split_table):
        with pytest.raises(ConfigurationError) as excinfo:
            build_clustree(split_table, ['K1'])
        payload = excinfo.value.to_dict()
        assert payload['error'] == 'CONFIG_ERROR'
        assert payload['details']['config_key'] == 'columns'

    def test_missing_resolution_column(self, split_table):
        with pytest.raises(ConfigurationError):
            build_clustree(split_table, ['K1', 'K9'])

    def test_duplicate_resolution_column(self, split_table):
        with pytest.raises(ConfigurationError):
            build_clustree(split_table, ['K1', 'K1'])

    def test_aggregation_on_missing_attribute(self, split_table):
        with pytest.raises(ConfigurationError):
            build_clustree(split_table, ['K1', 'K2'], aggregation_functions={'nope': 'mean'})

    def test_unknown_aggregation_name(self, three_level_table):
        with pytest.raises(ConfigurationError):
            build_clustree(three_level_table, ['K1', 'K2'],
                           aggregation_functions={'length': 'geometric'})

    def test_reduction_incompatible_with_attribute(self, three_level_table):
        with pytest.raises(ConfigurationError) as excinfo:
            build_clustree(three_level_table, ['K1', 'K2'],
                           aggregation_functions={'species': 'mean'})
        assert "'mean'" in excinfo.value.message
        assert "'species'" in excinfo.value.message
        assert excinfo.value.details['config_key'] == 'attributes'

    def test_empty_table(self):
        table = pd.DataFrame({'K1': [], 'K2': []})
        with pytest.raises(DataError):
            build_clustree(table, ['K1', 'K2'])

    def test_continuous_labels(self):
        table = pd.DataFrame({'K1': [1, 1, 1], 'K2': [0.13, 0.57, 0.92]})
        with pytest.raises(DataError):
            build_clustree(table, ['K1', 'K2'])

    def test_continuous_labels_in_object_column(self):
        table = pd.DataFrame({
            'K1': [1, 1, 1],
            'K2': pd.Series([0.13, 0.57, None], dtype=object),
        })
        with pytest.raises(DataError):
            build_clustree(table, ['K1', 'K2'])

    def test_mismatched_column_lengths(self):
        with pytest.raises(DataError):
            build_clustree({'K1': [1, 1, 1], 'K2': [1, 2]}, ['K1', 'K2'])

    def test_unlabelled_resolution(self):
        table = pd.DataFrame({'K1': [1, 1], 'K2': [np.nan, np.nan]})
        with pytest.raises(DataError):
            build_clustree(table, ['K1', 'K2'])

    def test_singleton_resolution_warns(self, caplog):
        table = pd.DataFrame({'K1': [1, 1, 1], 'K2': [1, 2, 3]})
        logger = logging.getLogger('clustree.builder')
        logger.addHandler(caplog.handler)
        try:
            tree = build_clustree(table, ['K1', 'K2'])
        finally:
            logger.removeHandler(caplog.handler)

        assert len(tree.nodes_at('K2')) == 3
        assert "single sample" in caplog.text


class TestTreeBuilder:
    """Config-driven builder."""

    def test_prefix_selection(self):
        table = pd.DataFrame({
            'K10': [1, 2, 3, 4],
            'K2': [1, 1, 2, 2],
            'K1': [1, 1, 1, 1],
            'other': [0, 0, 0, 0],
        })
        tree = TreeBuilder(ClustreeConfig(prefix='K')).build(table)

        assert tree.resolutions == ['K1', 'K2', 'K10']

    def test_config_attributes_and_stability(self, three_level_table):
        config = ClustreeConfig(prefix='K', attributes={'length': 'max'},
                                compute_stability=True)
        tree = TreeBuilder(config).build(three_level_table)

        assert tree.node('K2C2').aggregates['max_length'] == 10.0
        assert all(n.stability is not None for n in tree.nodes)

    def test_mapping_input(self):
        tree = TreeBuilder(ClustreeConfig(columns=['a', 'b'])).build(
            {'a': [1, 1, 1], 'b': [1, 2, 2]})

        assert [n.size for n in tree.nodes_at('b')] == [1, 2]

    def test_clustering_source(self, three_level_table):
        class Source:
            def resolution_columns(self):
                return ['K1', 'K2']

            def attribute_columns(self):
                return ['length']

            def to_dataframe(self):
                return three_level_table

        tree = TreeBuilder().build(Source())

        assert tree.resolutions == ['K1', 'K2']
        assert tree.node('K1C1').aggregates['mean_length'] == pytest.approx(5.5)

    def test_no_columns_configured(self, split_table):
        with pytest.raises(ConfigurationError):
            TreeBuilder().build(split_table)
