# ==============================================
# SqlExporter
# ==============================================
#
# PURPOSE:
#   Write normalized entries to a standalone .sql script instead of
#   loading them into a live database: optional transaction wrapper,
#   CREATE TABLE, one INSERT per entry, optional indexes.
#
# DIALECTS:
# ---------
#   mysql     → `ident`,  'YYYY-MM-DD', START TRANSACTION
#   postgres  → "ident",  'YYYY-MM-DD', BEGIN
#   sqlserver → [ident],  'YYYYMMDD',   BEGIN TRANSACTION
#   oracle    → "ident",  'DD-MON-YYYY', implicit transaction, TEXT → CLOB
#
# ==============================================

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from tally_daybook.normalization.schema import COLUMNS, Column, ColumnKind, NormalizedEntry


@dataclass(frozen=True)
class SqlDialect:
    name: str
    quote: Callable[[str], str]
    format_date: Callable[[date], str]
    begin: Optional[str]
    create_if_not_exists: bool = True
    text_type: str = "TEXT"
    # MySQL treats backslash as an escape character inside string literals
    escape_backslash: bool = False


ORACLE_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def _oracle_date(value: date) -> str:
    return f"{value.day:02d}-{ORACLE_MONTHS[value.month - 1]}-{value.year}"


DIALECTS = {
    "mysql": SqlDialect(
        name="mysql",
        quote=lambda ident: f"`{ident}`",
        format_date=lambda value: value.isoformat(),
        begin="START TRANSACTION;",
        escape_backslash=True,
    ),
    "postgres": SqlDialect(
        name="postgres",
        quote=lambda ident: f'"{ident}"',
        format_date=lambda value: value.isoformat(),
        begin="BEGIN;",
    ),
    "sqlserver": SqlDialect(
        name="sqlserver",
        quote=lambda ident: f"[{ident}]",
        format_date=lambda value: value.strftime("%Y%m%d"),
        begin="BEGIN TRANSACTION;",
        create_if_not_exists=False,
    ),
    "oracle": SqlDialect(
        name="oracle",
        quote=lambda ident: f'"{ident}"',
        format_date=_oracle_date,
        begin=None,
        create_if_not_exists=False,
        text_type="CLOB",
    ),
}

INDEXED_COLUMNS = (
    ("date", ("DATE",)),
    ("vchtype", ("VCHTYPE",)),
    ("ledger_name", ("LEDGER_NAME",)),
    ("voucher_guid", ("VOUCHER_GUID",)),
    ("stock_item_name", ("STOCK_ITEM_NAME",)),
    ("date_vchtype", ("DATE", "VCHTYPE")),
)


@dataclass
class ExportResult:
    path: str
    rows: int
    size_bytes: int


def get_dialect(name: str) -> SqlDialect:
    try:
        return DIALECTS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown SQL dialect {name!r}; expected one of {', '.join(DIALECTS)}"
        ) from None


def escape_string(value: Optional[str], escape_backslash: bool = False) -> str:
    if value is None or value == "":
        return "NULL"
    text = str(value)
    if escape_backslash:
        text = text.replace("\\", "\\\\")
    return "'" + text.replace("'", "''") + "'"


class SqlExporter:
    def __init__(
        self,
        table_name: str = "daybook_entries",
        dialect: str = "mysql",
        create_table: bool = True,
        use_transaction: bool = True,
        add_indexes: bool = True,
    ):
        self.table_name = table_name
        self.dialect = get_dialect(dialect)
        self.create_table = create_table
        self.use_transaction = use_transaction
        self.add_indexes = add_indexes

    def render(self, entries: Iterable[NormalizedEntry]) -> str:
        parts: List[str] = []

        if self.use_transaction and self.dialect.begin:
            parts.append("-- Start Transaction\n")
            parts.append(f"{self.dialect.begin}\n\n")

        if self.create_table:
            parts.append(self.create_table_statement())

        parts.append("-- Insert Data\n")
        inserts = [self.insert_statement(entry) for entry in entries]
        parts.append("\n".join(inserts))

        if self.add_indexes:
            parts.append(self.index_statements())

        if self.use_transaction:
            parts.append("\n-- Commit Transaction\n")
            parts.append("COMMIT;\n")

        return "".join(parts)

    def write(self, entries: Iterable[NormalizedEntry], path: Union[str, Path]) -> ExportResult:
        entries = list(entries)
        sql = self.render(entries)
        path = Path(path)
        path.write_text(sql, encoding="utf-8")
        return ExportResult(path=str(path), rows=len(entries), size_bytes=len(sql.encode("utf-8")))

    def create_table_statement(self) -> str:
        quote = self.dialect.quote
        columns_def = ",\n".join(
            f"    {quote(column.name)} {self._sql_type(column)}" for column in COLUMNS
        )
        if_not_exists = "IF NOT EXISTS " if self.dialect.create_if_not_exists else ""
        return (
            "-- Create Table Statement\n"
            f"CREATE TABLE {if_not_exists}{quote(self.table_name)} (\n{columns_def}\n);\n\n"
        )

    def insert_statement(self, entry: NormalizedEntry) -> str:
        values = [self.format_value(column, value) for column, value in zip(COLUMNS, entry)]
        body = ",\n".join(f"    {value}" for value in values)
        return f"INSERT INTO {self.dialect.quote(self.table_name)} VALUES (\n{body}\n);\n"

    def index_statements(self) -> str:
        quote = self.dialect.quote
        lines = ["\n-- Create Indexes for Better Query Performance\n"]
        for suffix, columns in INDEXED_COLUMNS:
            index_name = f"idx_{self.table_name}_{suffix}"
            column_list = ", ".join(quote(name) for name in columns)
            lines.append(f"CREATE INDEX {index_name} ON {quote(self.table_name)}({column_list});\n")
        return "".join(lines)

    def format_value(self, column: Column, value) -> str:
        if value is None:
            return "NULL"
        if column.kind is ColumnKind.DATE:
            return "'" + self.dialect.format_date(date.fromisoformat(value)) + "'"
        if column.kind is ColumnKind.INTEGER:
            return str(int(value))
        if column.kind in (ColumnKind.AMOUNT, ColumnKind.SIGNED_AMOUNT):
            return format(Decimal(value), "f")
        return escape_string(value, self.dialect.escape_backslash)

    def _sql_type(self, column: Column) -> str:
        if column.sql_type == "TEXT":
            return self.dialect.text_type
        return column.sql_type
