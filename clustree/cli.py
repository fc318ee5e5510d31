#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
clustree command-line interface

Build a clustering tree from a CSV table of cluster assignments and write it
as JSON, CSV tables and/or a figure.
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from . import __version__
from .builder import TreeBuilder
from .config import load_config
from .exceptions import ClustreeError, ConfigurationError
from .export import save_tree_csv, save_tree_json
from .utils.log import get_logger, log_header, log_success


def parse_aggregations(items: Optional[List[str]]) -> Optional[Dict[str, List[str]]]:
    """Parse ``attribute:function`` pairs into attribute -> function names"""
    if not items:
        return None
    result: Dict[str, List[str]] = {}
    for item in items:
        attribute, sep, func = item.rpartition(':')
        if not sep or not attribute or not func:
            raise ConfigurationError(
                f"Aggregation '{item}' must look like attribute:function", "attributes")
        result.setdefault(attribute, []).append(func)
    return result


class ClustreeCLI:
    """Command-line application"""

    def __init__(self):
        self.logger = get_logger("clustree")
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='clustree',
            description='Build clustering trees from clusterings at several resolutions',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  clustree build clusters.csv --prefix K --output tree.json
  clustree build clusters.csv --prefix K --aggregate petal_length:mean --plot tree.png
  clustree build clusters.csv --columns low mid high --csv-dir results/
            """
        )

        parser.add_argument(
            '--version', action='version',
            version=f'clustree {__version__}'
        )

        parser.add_argument(
            '--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            default='INFO', help='Logging level'
        )

        subparsers = parser.add_subparsers(
            dest='command', help='Available commands', metavar='COMMAND'
        )

        build_parser = subparsers.add_parser(
            'build', help='Build a clustering tree from a CSV table',
            description='Build a clustering tree from a CSV table of cluster assignments'
        )
        build_parser.add_argument('table', type=Path, help='CSV file, one row per sample')
        build_parser.add_argument('--config', type=str, help='YAML configuration file')
        build_parser.add_argument('--prefix', help='Prefix of resolution columns')
        build_parser.add_argument('--suffix', help='Suffix of resolution columns')
        build_parser.add_argument('--columns', nargs='+',
                                  help='Explicit resolution columns, lowest resolution first')
        build_parser.add_argument('--aggregate', nargs='+', metavar='ATTR:FUNC',
                                  help='Node aggregations, e.g. petal_length:mean')
        build_parser.add_argument('--stability', action='store_true', default=None,
                                  help='Compute SC3 stability for every node')
        build_parser.add_argument('--count-filter', type=int,
                                  help='Hide edges with fewer samples when plotting')
        build_parser.add_argument('--prop-filter', type=float,
                                  help='Hide edges with lower in-proportion when plotting')
        build_parser.add_argument('--output', '-o', type=str, help='Write the tree as JSON')
        build_parser.add_argument('--csv-dir', type=str,
                                  help='Write node and edge tables into this directory')
        build_parser.add_argument('--plot', type=str, help='Save a drawing of the tree')

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        self.logger.setLevel(getattr(logging, args.log_level))

        if args.command is None:
            self.parser.print_help()
            return 1

        try:
            if args.command == 'build':
                return self.build(args)
        except ClustreeError as e:
            self.logger.error(str(e))
            return 2
        return 1

    def build(self, args) -> int:
        log_header(self.logger, "clustree build")

        config = load_config(
            args.config,
            prefix=args.prefix,
            suffix=args.suffix,
            columns=args.columns,
            attributes=parse_aggregations(args.aggregate),
            compute_stability=args.stability,
            count_filter=args.count_filter,
            prop_filter=args.prop_filter,
        )

        if not args.table.exists():
            raise ConfigurationError(f"Table not found: {args.table}", "table")
        table = pd.read_csv(args.table)
        self.logger.info(f"Loaded {len(table)} samples from {args.table}")

        tree = TreeBuilder(config).build(table)
        log_success(self.logger, f"{len(tree.nodes)} nodes, {len(tree.edges)} edges "
                                 f"across {len(tree.resolutions)} resolutions")

        if args.output:
            save_tree_json(tree, args.output)
        if args.csv_dir:
            save_tree_csv(tree, args.csv_dir, stem=args.table.stem)
        if args.plot:
            from .plotting import plot_clustree
            plot_clustree(tree, config=config, save_path=args.plot)

        if not (args.output or args.csv_dir or args.plot):
            print(tree.node_table().to_string(index=False))

        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point"""
    return ClustreeCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
