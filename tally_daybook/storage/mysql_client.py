# ==============================================
# MySQLClient
# ==============================================
#
# PURPOSE:
#   Manages the MySQL connection and every SQL operation the
#   loader needs: creating the DaybookStockData table, clearing it
#   before a run, inserting normalized entries one by one and
#   reading back summary statistics.
#
# WHY THIS CLASS EXISTS:
#   Loads are truncate-then-load: the table is emptied, then every
#   entry is inserted with its own statement. A bad row (constraint
#   violation, out-of-range value) must not abort the rest, so each
#   insert commits or rolls back on its own and failures are counted.
#
# CLASS: MySQLClient
# ------------------
#   Stateful, holds connection to MySQL.
#
#   Constructor:
#   ------------
#   - __init__(host, port, user, password, database)
#       Store connection params. Don't connect yet.
#
#   Methods:
#   --------
#   - connect() -> None
#       Establish connection. Create database if it doesn't exist.
#       Connection errors propagate (a run cannot continue without it).
#   - disconnect() -> None
#   - ensure_table(table_name) -> None
#       CREATE TABLE IF NOT EXISTS with the 51-column schema.
#   - clear_table(table_name) -> int
#       DELETE every row; returns rows removed.
#   - insert_entry(table_name, entry) -> None
#   - insert_batch(table_name, entries) -> InsertResult
#   - count_rows(table_name) -> int
#   - get_statistics(table_name) -> dict
#   - get_sample(table_name, limit) -> list[dict]
#   - execute(query, params) / fetch_all(query, params)
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MySQLClient(...) as db:` usage.
#
# ==============================================

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, cast

import pymysql
import pymysql.cursors

from tally_daybook.normalization.schema import COLUMNS, COLUMN_NAMES, NormalizedEntry

logger = logging.getLogger(__name__)


@dataclass
class InsertResult:
    """Counts from one insert_batch() call."""
    inserted: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return self.inserted + self.failed


def quote_identifier(name: str) -> str:
    return f"`{name}`"


class MySQLClient:
    MAX_ERRORS_KEPT = 20

    def __init__(self, host, port, user, password, database):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection = None

    def connect(self) -> None:
        # Establish connection to MySQL, create database if it doesn't exist
        self.connection = pymysql.connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            charset="utf8mb4",
        )
        cursor = self.connection.cursor()
        cursor.execute(f"CREATE DATABASE IF NOT EXISTS {quote_identifier(self.database)}")
        cursor.execute(f"USE {quote_identifier(self.database)}")
        cursor.close()

    def disconnect(self) -> None:
        if self.connection:
            self.connection.close()
            self.connection = None

    def ensure_table(self, table_name: str) -> None:
        columns_def = ",\n    ".join(
            f"{quote_identifier(column.name)} {column.sql_type} NULL" for column in COLUMNS
        )
        self.execute(
            f"CREATE TABLE IF NOT EXISTS {quote_identifier(table_name)} (\n    {columns_def}\n)"
        )

    def clear_table(self, table_name: str) -> int:
        connection = self._require_connection()
        cursor = connection.cursor()
        removed = cursor.execute(f"DELETE FROM {quote_identifier(table_name)}")
        connection.commit()
        cursor.close()
        return removed or 0

    def insert_entry(self, table_name: str, entry: NormalizedEntry) -> None:
        connection = self._require_connection()
        cursor = connection.cursor()
        try:
            cursor.execute(self._insert_query(table_name), tuple(entry))
            connection.commit()
        finally:
            cursor.close()

    def insert_batch(self, table_name: str, entries: Iterable[NormalizedEntry]) -> InsertResult:
        # One statement and one commit per entry; a failing entry is rolled back and counted
        connection = self._require_connection()
        query = self._insert_query(table_name)
        result = InsertResult()
        cursor = connection.cursor()

        for index, entry in enumerate(entries):
            try:
                cursor.execute(query, tuple(entry))
                connection.commit()
                result.inserted += 1
            except pymysql.MySQLError as e:
                connection.rollback()
                result.failed += 1
                message = f"entry {index + 1}: {str(e)[:100]}"
                if len(result.errors) < self.MAX_ERRORS_KEPT:
                    result.errors.append(message)
                logger.debug("✗ MySQL insert failed for %s", message)

        cursor.close()
        return result

    def count_rows(self, table_name: str) -> int:
        rows = self.fetch_all(f"SELECT COUNT(*) AS total FROM {quote_identifier(table_name)}")
        return int(rows[0]["total"]) if rows else 0

    def get_statistics(self, table_name: str) -> dict:
        rows = self.fetch_all(
            "SELECT "
            "SUM(`DEBIT_AMOUNT`) AS total_debit, "
            "SUM(`CREDIT_AMOUNT`) AS total_credit, "
            "COUNT(DISTINCT `VCHTYPE`) AS voucher_types, "
            "COUNT(DISTINCT `DATE`) AS unique_dates "
            f"FROM {quote_identifier(table_name)}"
        )
        stats = rows[0] if rows else {}
        return {
            "total_debit": stats.get("total_debit") or 0,
            "total_credit": stats.get("total_credit") or 0,
            "voucher_types": stats.get("voucher_types") or 0,
            "unique_dates": stats.get("unique_dates") or 0,
        }

    def get_sample(self, table_name: str, limit: int = 5) -> list[dict]:
        return self.fetch_all(
            f"SELECT * FROM {quote_identifier(table_name)} LIMIT %s", (int(limit),)
        )

    def execute(self, query: str, params: tuple | None = None) -> None:
        connection = self._require_connection()
        cursor = connection.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        connection.commit()
        cursor.close()

    def fetch_all(self, query: str, params: tuple | None = None) -> list[dict]:
        # Execute SELECT and return rows as dicts
        connection = self._require_connection()
        cursor = connection.cursor(pymysql.cursors.DictCursor)
        if params is not None:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        results = cast(list[dict[str, Any]], cursor.fetchall())
        cursor.close()
        return list(results)

    def _insert_query(self, table_name: str) -> str:
        column_names = ", ".join(quote_identifier(name) for name in COLUMN_NAMES)
        placeholders = ", ".join(["%s"] * len(COLUMN_NAMES))
        return f"INSERT INTO {quote_identifier(table_name)} ({column_names}) VALUES ({placeholders})"

    def _require_connection(self):
        if self.connection is None:
            raise RuntimeError("Not connected to MySQL")
        return self.connection

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
