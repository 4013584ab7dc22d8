import logging
from collections import Counter
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .schema import COLUMNS, Column, NormalizedEntry, empty_entry
from .value_coercer import ValueCoercer

logger = logging.getLogger(__name__)


class EntryNormalizer:
    def __init__(self, value_coercer: Optional[ValueCoercer] = None):
        self.value_coercer = value_coercer or ValueCoercer()
        # column name -> number of present values that could not be coerced
        self.failed_coercions: Counter = Counter()

    def normalize(self, record: Optional[Mapping[str, str]]) -> NormalizedEntry:
        if not record:
            return empty_entry()

        values = [self._normalize_column(record, column) for column in COLUMNS]
        return NormalizedEntry(*values)

    def normalize_batch(self, records: Iterable[Mapping[str, str]]) -> List[NormalizedEntry]:
        entries = []
        for index, record in enumerate(records):
            try:
                entries.append(self.normalize(record))
            except Exception as e:
                logger.debug("Skipping record %d: %s", index + 1, e)
        return entries

    @staticmethod
    def pick(record: Mapping[str, str], aliases: Sequence[str]) -> Optional[str]:
        for alias in aliases:
            value = record.get(alias)
            if value is not None and str(value).strip():
                return str(value)
        return None

    def _normalize_column(self, record: Mapping[str, str], column: Column) -> Any:
        raw = self.pick(record, column.aliases)
        if raw is None:
            return None

        try:
            value = self.value_coercer.coerce(raw, column.kind, column.max_length)
        except Exception as e:
            logger.debug("Could not coerce %s=%r: %s", column.name, raw, e)
            value = None

        if value is None:
            self.failed_coercions[column.name] += 1
        return value


def normalize(record: Mapping[str, str]) -> NormalizedEntry:
    return EntryNormalizer().normalize(record)
