"""
Database Schema Definitions.

Contains SQL statements for schema creation. There are no incremental
migrations: a database recorded under any other version is wiped and
recreated from CREATE_SCHEMA_SQL.
"""

# Current schema version. Increment if schema structure changes.
SCHEMA_VERSION = 1

ITEMS_TABLE = "items"

# Full schema creation SQL for fresh databases
CREATE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    version INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    quantity INTEGER NOT NULL,
    price REAL NOT NULL
);
"""
