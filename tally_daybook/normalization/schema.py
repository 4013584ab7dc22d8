# ==============================================
# Output Schema (Data Classes)
# ==============================================
#
# PURPOSE:
#   The fixed 51-column layout every normalized entry follows, in
#   the exact order the DaybookStockData table and the SQL export
#   expect.
#
# ENUMS:
# ------
# - ColumnKind(Enum): TEXT, CODE, DATE, INTEGER, AMOUNT, SIGNED_AMOUNT
#     How a column's raw string is coerced.
#
# CLASSES:
# --------
# - Column (dataclass)
#     name: str                 → column name, also its preferred source tag
#     kind: ColumnKind
#     aliases: tuple[str, ...]  → source tags in precedence order
#     sql_type: str             → MySQL column type
#     max_length: int | None    → truncation width for CODE columns
#
# - NormalizedEntry (namedtuple over COLUMN_NAMES)
#     One output row. Every field independently nullable.
#
# ==============================================

from collections import namedtuple
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from tally_daybook.extraction.aliases import aliases_for


class ColumnKind(Enum):
    """
    Coercion applied to a column.

    - TEXT: trimmed string
    - CODE: trimmed string truncated to max_length (voucher type / number)
    - DATE: ISO "YYYY-MM-DD" string
    - INTEGER: int
    - AMOUNT: absolute Decimal; direction comes from the column (debit vs credit)
    - SIGNED_AMOUNT: Decimal keeping its sign; "(x)" reads as -x
    """
    TEXT = "text"
    CODE = "code"
    DATE = "date"
    INTEGER = "integer"
    AMOUNT = "amount"
    SIGNED_AMOUNT = "signed_amount"


SQL_TYPES = {
    ColumnKind.TEXT: "VARCHAR(255)",
    ColumnKind.CODE: "VARCHAR(50)",
    ColumnKind.DATE: "DATE",
    ColumnKind.INTEGER: "INT",
    ColumnKind.AMOUNT: "DECIMAL(15,2)",
    ColumnKind.SIGNED_AMOUNT: "DECIMAL(15,2)",
}


@dataclass(frozen=True)
class Column:
    name: str
    kind: ColumnKind = ColumnKind.TEXT
    max_length: Optional[int] = None
    sql_type_override: Optional[str] = None

    @property
    def aliases(self) -> Tuple[str, ...]:
        return aliases_for(self.name)

    @property
    def sql_type(self) -> str:
        return self.sql_type_override or SQL_TYPES[self.kind]


TEXT = ColumnKind.TEXT
DATE = ColumnKind.DATE
INTEGER = ColumnKind.INTEGER
AMOUNT = ColumnKind.AMOUNT
SIGNED = ColumnKind.SIGNED_AMOUNT

COLUMNS: Tuple[Column, ...] = (
    Column("DATA_ROWS"),
    Column("ROW"),
    Column("ROW_NUMBER", INTEGER),
    Column("VOUCHER_NUMBER", INTEGER),
    Column("DATE", DATE),
    Column("DATE_CHANGED", INTEGER),
    Column("VCHTYPE", ColumnKind.CODE, max_length=50),
    Column("VCHNO", ColumnKind.CODE, max_length=50),
    Column("VOUCHER_GUID", sql_type_override="VARCHAR(100)"),
    Column("LEDGER_NAME"),
    Column("VOUCHER_AMOUNT", AMOUNT),
    Column("ROUND_OFF", SIGNED),
    Column("CREDIT_AMOUNT", AMOUNT),
    Column("DEBIT_AMOUNT", AMOUNT),
    Column("LEDGER_ADDRESS"),
    Column("LEDGER_CITY", sql_type_override="VARCHAR(100)"),
    Column("LEDGER_PINCODE", sql_type_override="VARCHAR(20)"),
    Column("LEDGER_STATE", sql_type_override="VARCHAR(100)"),
    Column("LEDGER_COUNTRY", sql_type_override="VARCHAR(100)"),
    Column("PARENT_GROUP", sql_type_override="VARCHAR(100)"),
    Column("GST_REGISTRATION", sql_type_override="VARCHAR(50)"),
    Column("OPENING_BALANCE_LEDGER", SIGNED),
    Column("CLOSING_BALANCE", SIGNED),
    Column("NARRATION", sql_type_override="TEXT"),
    Column("STOCK_ITEM_NUMBER", INTEGER),
    Column("STOCK_GUID", sql_type_override="VARCHAR(100)"),
    Column("STOCK_ITEM_NAME"),
    Column("STOCK_DATE_CONTEXT", DATE),
    Column("STOCK_RATE", sql_type_override="VARCHAR(50)"),
    Column("STOCK_ACTUAL_QTY", sql_type_override="VARCHAR(50)"),
    Column("STOCK_AMOUNT", AMOUNT),
    Column("STOCK_BASE_UNITS", sql_type_override="VARCHAR(20)"),
    Column("STOCK_BILLED_QTY", sql_type_override="VARCHAR(50)"),
    Column("STOCK_DISCOUNT", AMOUNT),
    Column("HAS_STOCK_DATA", sql_type_override="VARCHAR(10)"),
    Column("NO_STOCK_REASON"),
    Column("OPENING_QTY", sql_type_override="VARCHAR(50)"),
    Column("OPENING_VALUE", AMOUNT),
    Column("INWARDS_QTY", sql_type_override="VARCHAR(50)"),
    Column("INWARDS_VALUE", AMOUNT),
    Column("INWARDS_RATE", sql_type_override="VARCHAR(50)"),
    Column("OUTWARDS_QTY", sql_type_override="VARCHAR(50)"),
    Column("OUTWARDS_VALUE", AMOUNT),
    Column("OUTWARDS_RATE", sql_type_override="VARCHAR(50)"),
    Column("CLOSING_QTY", sql_type_override="VARCHAR(50)"),
    Column("CLOSING_VALUE", AMOUNT),
    Column("NET_CHANGE_QTY", sql_type_override="VARCHAR(50)"),
    Column("NET_CHANGE_VALUE", SIGNED),
    Column("MAPPING_METHOD", sql_type_override="VARCHAR(100)"),
    Column("GST_TYPE", sql_type_override="VARCHAR(50)"),
    Column("PARTY_GSTIN", sql_type_override="VARCHAR(50)"),
)

COLUMN_NAMES: Tuple[str, ...] = tuple(column.name for column in COLUMNS)

NormalizedEntry = namedtuple("NormalizedEntry", COLUMN_NAMES)
NormalizedEntry.__doc__ = "One daybook row in the fixed 51-column order; any field may be None."


def empty_entry() -> "NormalizedEntry":
    return NormalizedEntry(*([None] * len(COLUMNS)))
