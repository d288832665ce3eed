"""Shared pytest fixtures for building SQLite files on disk."""

import sqlite3

import pytest


def create_db(path, tables):
    """Create a database at path.

    tables maps a table name to (CREATE statement, rows).
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    for name, (ddl, rows) in tables.items():
        conn.execute(ddl)
        if rows:
            placeholders = ", ".join("?" * len(rows[0]))
            conn.executemany(f"INSERT INTO {name} VALUES ({placeholders})", rows)
    conn.commit()
    conn.close()
    return path


def read_rows(path, table):
    conn = sqlite3.connect(path)
    try:
        return sorted(conn.execute(f"SELECT * FROM {table}").fetchall())
    finally:
        conn.close()


def table_names(path):
    conn = sqlite3.connect(path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        return {row[0] for row in rows}
    finally:
        conn.close()


@pytest.fixture
def make_db():
    return create_db


@pytest.fixture
def users_posts_logs():
    return {
        "USERS": ("CREATE TABLE USERS (id INTEGER PRIMARY KEY, name TEXT)", [(1, "ann"), (2, "bob")]),
        "POSTS": ("CREATE TABLE POSTS (id INTEGER PRIMARY KEY, user_id INTEGER, title TEXT)", [(1, 1, "hello")]),
        "LOGS": ("CREATE TABLE LOGS (line TEXT)", [("started",), ("stopped",)]),
    }


@pytest.fixture(name="read_rows")
def read_rows_fixture():
    return read_rows


@pytest.fixture(name="table_names")
def table_names_fixture():
    return table_names
