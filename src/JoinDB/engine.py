import os
import logging
from datetime import datetime
from concurrent.futures import ThreadPoolExecutor

from .DB import SourceDBManager, DestinationDBManager
from .batching import SQLITE_MAX_VARIABLES
from .discovery import discover, normalize_extensions
from .errors import SourceUnreadableError
from .transfer import transfer_table, COPIED, FAILED

logger = logging.getLogger(__name__)

DB_EXT = ['db', 'sqlite']
DEFAULT_TARGET_DB = './result.db'


def _as_list(value):
    if isinstance(value, str):
        return [value]
    return list(value) if value else []


class MergeConfig:
    def __init__(self, sources=None, destination=DEFAULT_TARGET_DB, extensions=None, tables=None,
                 max_bind_parameters=SQLITE_MAX_VARIABLES, workers=8):
        self.sources = _as_list(sources) or ['.']
        self.destination = destination or DEFAULT_TARGET_DB
        self.extensions = sorted(normalize_extensions(_as_list(extensions) or DB_EXT))
        self.tables = _as_list(tables)
        self.max_bind_parameters = int(max_bind_parameters)
        self.workers = int(workers)

        if not self.extensions:
            raise ValueError("At least one database extension is required")
        if self.max_bind_parameters < 1:
            raise ValueError(f"max_bind_parameters must be positive, got {self.max_bind_parameters}")
        if self.workers < 1:
            raise ValueError(f"workers must be positive, got {self.workers}")


class SourceResult:
    def __init__(self, source, outcomes=None, error=None):
        self.source = source
        self.outcomes = outcomes or []
        self.error = error

    @property
    def tables_copied(self):
        return sum(1 for outcome in self.outcomes if outcome.status == COPIED)

    @property
    def tables_failed(self):
        return sum(1 for outcome in self.outcomes if outcome.status == FAILED)


class Summary:
    def __init__(self, databases_found, destination, elapsed_seconds, results):
        self.databases_found = databases_found
        self.destination = destination
        self.elapsed_seconds = elapsed_seconds
        self.results = results

    @property
    def tables_copied(self):
        return sum(result.tables_copied for result in self.results)

    @property
    def outcomes(self):
        return [outcome for result in self.results for outcome in result.outcomes]

    def __str__(self):
        return (f"{self.destination}\n"
                f"Copied {self.tables_copied} tables from {self.databases_found} databases "
                f"in {self.elapsed_seconds:.3f} seconds.")


def join_db(filename, destination, tables=None, max_params=SQLITE_MAX_VARIABLES):
    with SourceDBManager(filename) as source:
        try:
            db_tables = source.list_tables()
        except SourceUnreadableError as e:
            logger.error(f"Skipping {filename}: {e.reason}")
            return SourceResult(source.filename, error=str(e))

        outcomes = [transfer_table(source, destination, table, tables=tables, max_params=max_params)
                    for table in db_tables]
    result = SourceResult(source.filename, outcomes)
    if result.tables_failed:
        logger.warning(f"{result.tables_failed} of {len(outcomes)} tables from {filename} could not be copied")
    return result


def run(config):
    query_start = datetime.now()

    dbs = discover(config.sources, config.extensions)
    target = os.path.abspath(config.destination)
    dbs = [db for db in dbs if os.path.realpath(db) != os.path.realpath(target)]
    logger.info(f"Found {len(dbs)} databases")

    with DestinationDBManager(target) as destination:
        if dbs:
            with ThreadPoolExecutor(max_workers=min(config.workers, len(dbs))) as executor:
                futures = [executor.submit(join_db, db, destination, config.tables, config.max_bind_parameters)
                           for db in dbs]
                results = [future.result() for future in futures]
        else:
            results = []

    elapsed = (datetime.now() - query_start).total_seconds()
    return Summary(len(dbs), target, elapsed, results)
