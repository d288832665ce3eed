#!/usr/bin/env python3

import os
import sqlite3
import threading
from pathlib import Path
import sqlalchemy as alc
from sqlalchemy.pool import NullPool

from .errors import SourceUnreadableError


RESERVED_PREFIX = 'sqlite_'

class TableDescriptor:
    def __init__(self, name, create_statement):
        self.name = name
        self.create_statement = create_statement

    def __repr__(self):
        return f"TableDescriptor(name={self.name!r})"

    def __eq__(self, other):
        if not isinstance(other, TableDescriptor):
            return NotImplemented
        return (self.name, self.create_statement) == (other.name, other.create_statement)


class SourceDBManager:
    """Read-only access to one source database."""

    def __init__(self, filename):
        self.filename = os.path.abspath(filename)
        self.uri = Path(self.filename).as_uri() + '?mode=ro'
        self.engine = alc.create_engine('sqlite://', creator=self._open, poolclass=NullPool)
        self.connection = None

    def _open(self):
        conn = sqlite3.connect(self.uri, uri=True)
        # SQLite does not validate TEXT encoding
        conn.text_factory = lambda b: b.decode('utf-8', errors='replace')
        return conn

    def connect(self):
        if self.connection is None:
            try:
                self.connection = self.engine.connect()
            except alc.exc.SQLAlchemyError as e:
                raise SourceUnreadableError(self.filename, e) from e
        return self.connection

    def list_tables(self):
        master = alc.table('sqlite_master', alc.column('type'), alc.column('name'), alc.column('sql'))
        query = alc.select(master.c.name, master.c.sql).where(alc.and_(
            master.c.type == 'table',
            alc.func.lower(alc.func.substr(master.c.name, 1, len(RESERVED_PREFIX))) != RESERVED_PREFIX))
        try:
            result = self.connect().execute(query)
            return [TableDescriptor(name, sql) for name, sql in result.all()]
        except alc.exc.SQLAlchemyError as e:
            raise SourceUnreadableError(self.filename, e) from e

    def get_column_names(self, table_name):
        """Columns a row can be inserted with, generated and hidden ones excluded."""
        quoted = self.engine.dialect.identifier_preparer.quote_identifier(table_name)
        columns_info = self.connect().exec_driver_sql(f"PRAGMA table_xinfo({quoted})").all()
        return [info[1] for info in columns_info if info[6] == 0]  # hidden is the seventh field

    def query_data(self, table_name):
        columns = [alc.column(c) for c in self.get_column_names(table_name)] or [alc.literal_column('*')]
        query = alc.select(*columns).select_from(alc.table(table_name))
        result = self.connect().execute(query)
        return [dict(row) for row in result.mappings().all()]

    def close_connection(self):
        if self.connection is not None:
            self.connection.close()
            self.connection = None
        self.engine.dispose()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close_connection()


class DestinationDBManager:
    """The single writable handle shared by every source transfer.

    All statements go through self.lock, one call at a time.
    """

    def __init__(self, filename):
        self.filename = os.path.abspath(filename)
        os.makedirs(os.path.dirname(self.filename), exist_ok=True)
        self.engine = alc.create_engine(f'sqlite:///{self.filename}', connect_args={'check_same_thread': False})
        self.connection = self.engine.connect()
        self.lock = threading.Lock()

    def _write(self, statement, *args):
        with self.lock:
            try:
                if isinstance(statement, str):
                    result = self.connection.exec_driver_sql(statement, *args)
                else:
                    result = self.connection.execute(statement, *args)
                rowcount = result.rowcount
                self.connection.commit()
            except alc.exc.SQLAlchemyError:
                self.connection.rollback()
                raise
        return rowcount

    def create_table(self, create_statement):
        self._write(create_statement)

    def insert_ignore(self, table_name, rows):
        """INSERT OR IGNORE rows as a single multi-row statement.

        Returns the number of rows actually added.
        """
        columns = list(rows[0].keys())
        tab = alc.table(table_name, *[alc.column(c) for c in columns])
        statement = alc.insert(tab).prefix_with('OR IGNORE').values(rows)
        return max(self._write(statement), 0)

    def close_connection(self):
        with self.lock:
            if self.connection is not None:
                self.connection.close()
                self.connection = None
        self.engine.dispose()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close_connection()
