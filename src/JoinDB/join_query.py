#!/usr/bin/env python3

import os
import logging
import argparse
from .DataManager import load_config, dump_report
from .engine import MergeConfig, run, DB_EXT, DEFAULT_TARGET_DB

DEFAULT_CONFIG_FILE = 'config/JoinDB_parameters.yaml'

def build_config(args):
    param_config = {}
    if args.config:
        param_config = load_config(args.config)
    elif os.path.exists(DEFAULT_CONFIG_FILE):
        param_config = load_config(DEFAULT_CONFIG_FILE)

    overrides = {
        'sources': args.source,
        'destination': args.destination,
        'extensions': args.extension,
        'tables': args.table,
        'max_bind_parameters': args.max_params,
        'workers': args.workers,
    }
    param_config.update({key: value for key, value in overrides.items() if value not in (None, [])})

    unknown = set(param_config) - set(overrides)
    if unknown:
        raise ValueError(f"Unknown parameters in config file: {', '.join(sorted(unknown))}")
    return MergeConfig(**param_config)

def main(argv=None):
    parser = argparse.ArgumentParser(description="Copies tables from multiple sqlite databases into one.")
    parser.add_argument('source', nargs='*', help="Folders or files containing the databases. Default value: '.'")
    parser.add_argument('-d', '--destination', type=str, default=None, help=f"The database where the tables will be copied. If it does not exist, it will be created. Default value: '{DEFAULT_TARGET_DB}'")
    parser.add_argument('-e', '--extension', action='append', default=None, help=f"Database extension, can be given multiple times. Default value: {','.join(DB_EXT)}")
    parser.add_argument('-t', '--table', action='append', default=None, help="Table to copy, can be given multiple times. By default copies all tables")
    parser.add_argument('-c', '--config', type=str, default=None, help=f"YAML file with run parameters. Default: {DEFAULT_CONFIG_FILE} if present")
    parser.add_argument('-w', '--workers', type=int, default=None, help="Number of databases copied in parallel")
    parser.add_argument('--max-params', type=int, default=None, help="Maximum bind parameters per INSERT statement")
    parser.add_argument('--report', type=str, default=None, help="Write a per-table report to this file")
    parser.add_argument('--report-format', choices=['json', 'csv'], default='json', help="Format of the report file")
    parser.add_argument('-v', '--verbose', action='store_true', help="Print debug messages")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s')

    config = build_config(args)
    summary = run(config)

    if args.report:
        dump_report(summary, args.report, format=args.report_format)

    print("\n")
    print(summary)
    return summary

if __name__ == "__main__":
    main()
