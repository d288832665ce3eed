#!/usr/bin/env python3

import os
import json
import logging
import pandas as pd
import yaml

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ['source', 'table', 'status', 'rows_read', 'rows_inserted', 'error']

def load_config(config_file):
    with open(config_file, 'r') as f:
        return yaml.safe_load(f) or {}

def dump_report(summary, filename, format='json'):
    records = [outcome.to_dict() for outcome in summary.outcomes]
    directory = os.path.dirname(os.path.abspath(filename))
    os.makedirs(directory, exist_ok=True)

    if format == 'json':
        report = {
            'destination': summary.destination,
            'databases_found': summary.databases_found,
            'tables_copied': summary.tables_copied,
            'elapsed_seconds': summary.elapsed_seconds,
            'unreadable_sources': {result.source: result.error for result in summary.results if result.error},
            'tables': records,
        }
        with open(filename, "w") as json_file:
            json.dump(report, json_file, indent=4)
    elif format == 'csv':
        df = pd.DataFrame(records, columns=REPORT_COLUMNS)
        df.to_csv(filename, index=False)
    else:
        raise ValueError(f'{format} is an unsupported report format. It can only be json or csv')
    logger.info(f"Dumping run report to {filename}")
