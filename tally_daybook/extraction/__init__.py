# ==============================================
# STAGE 2: EXTRACTION
# ==============================================
#
# Splits decoded text into candidate record blocks and pulls a
# flat tag -> value map out of each one, tolerant of unknown tags
# and historical aliases.
#
# Modules:
# --------
# - aliases.py          → FIELD_ALIASES table, validity categories, container tags
# - strategies.py       → BlockStrategy / LineHeuristicStrategy
# - validity.py         → ValidityGate (configurable category threshold)
# - record_extractor.py → RecordExtractor: strategy selection + gate
#
# ==============================================

from .aliases import FIELD_ALIASES, VALIDITY_CATEGORIES, CONTAINER_TAGS, aliases_for
from .strategies import BlockStrategy, LineHeuristicStrategy, ExtractionStrategy
from .validity import ValidityGate
from .record_extractor import RecordExtractor, ExtractionStats, extract

__all__ = [
    "FIELD_ALIASES",
    "VALIDITY_CATEGORIES",
    "CONTAINER_TAGS",
    "aliases_for",
    "BlockStrategy",
    "LineHeuristicStrategy",
    "ExtractionStrategy",
    "ValidityGate",
    "RecordExtractor",
    "ExtractionStats",
    "extract",
]
