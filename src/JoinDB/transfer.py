import re
import logging
import sqlalchemy as alc

from .batching import plan_batches, SQLITE_MAX_VARIABLES
from .errors import TransferError, WriteError

logger = logging.getLogger(__name__)

SKIPPED = 'skipped'
COPIED = 'copied'
FAILED = 'failed'

_create_table_re = re.compile(r'^(\s*CREATE\s+(?:VIRTUAL\s+)?TABLE\s+)(?!IF\s+NOT\s+EXISTS\b)', re.IGNORECASE)


def make_idempotent(create_statement):
    return _create_table_re.sub(r'\1IF NOT EXISTS ', create_statement, count=1)


class TransferOutcome:
    def __init__(self, source, table, status, rows_read=0, rows_inserted=0, error=None):
        self.source = source
        self.table = table
        self.status = status
        self.rows_read = rows_read
        self.rows_inserted = rows_inserted
        self.error = error

    def to_dict(self):
        return {
            'source': self.source,
            'table': self.table,
            'status': self.status,
            'rows_read': self.rows_read,
            'rows_inserted': self.rows_inserted,
            'error': self.error,
        }

    def __repr__(self):
        return f"TransferOutcome({self.source!r}, {self.table!r}, {self.status!r})"


def transfer_table(source, destination, table, tables=None, max_params=SQLITE_MAX_VARIABLES):
    """Copy one table from an open source into the shared destination.

    Failures are logged and reported in the returned outcome, never raised.
    """
    if tables and table.name not in tables:
        logger.debug(f"Skip {table.name} from {source.filename}")
        return TransferOutcome(source.filename, table.name, SKIPPED)

    logger.info(f"Copy {table.name} from {source.filename}")
    rows = []
    inserted = 0
    try:
        if not table.create_statement:
            raise TransferError("No CREATE statement in the source catalog")
        try:
            destination.create_table(make_idempotent(table.create_statement))
        except alc.exc.SQLAlchemyError as e:
            raise WriteError(f"Cannot create table: {e}") from e

        rows = source.query_data(table.name)
        if not rows:
            return TransferOutcome(source.filename, table.name, COPIED)

        for batch in plan_batches(rows, max_params):
            try:
                inserted += destination.insert_ignore(table.name, batch)
            except alc.exc.SQLAlchemyError as e:
                raise WriteError(f"Cannot insert rows: {e}") from e
    except (TransferError, alc.exc.SQLAlchemyError) as e:
        logger.error(f"Failed to copy {table.name} from {source.filename}: {e}")
        return TransferOutcome(source.filename, table.name, FAILED, rows_read=len(rows),
                               rows_inserted=inserted, error=str(e))

    logger.debug(f"Inserted {inserted} of {len(rows)} rows into {table.name}")
    return TransferOutcome(source.filename, table.name, COPIED, rows_read=len(rows), rows_inserted=inserted)
