# ==============================================
# STAGE 3: NORMALIZATION
# ==============================================
#
# Maps an extracted record's aliased fields onto the fixed
# 51-column output schema, coercing each column on its own.
#
# Modules:
# --------
# - schema.py           → ColumnKind, Column, COLUMNS, NormalizedEntry
# - value_coercer.py    → Date / amount / integer / text coercion
# - entry_normalizer.py → Normalize a full record into a NormalizedEntry
#
# ==============================================

from .schema import COLUMNS, COLUMN_NAMES, Column, ColumnKind, NormalizedEntry
from .value_coercer import ValueCoercer
from .entry_normalizer import EntryNormalizer, normalize

__all__ = [
    "COLUMNS",
    "COLUMN_NAMES",
    "Column",
    "ColumnKind",
    "NormalizedEntry",
    "ValueCoercer",
    "EntryNormalizer",
    "normalize",
]
