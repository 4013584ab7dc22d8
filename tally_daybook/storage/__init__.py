# ==============================================
# SINKS: STORAGE
# ==============================================
#
# Where normalized entries end up.
#
# Modules:
# --------
# - mysql_client.py  → MySQL connection, truncate-then-load inserts, statistics
# - sql_exporter.py  → Standalone .sql script in one of several dialects
#
# ==============================================

from .mysql_client import MySQLClient, InsertResult
from .sql_exporter import SqlExporter, ExportResult, DIALECTS, get_dialect

__all__ = [
    "MySQLClient",
    "InsertResult",
    "SqlExporter",
    "ExportResult",
    "DIALECTS",
    "get_dialect",
]
