from dataclasses import dataclass
from typing import Mapping, List

from .aliases import VALIDITY_CATEGORIES


@dataclass
class ValidityGate:
    """
    Decides whether an extracted record carries enough accounting data to keep.

    A record is kept when at least `min_categories` of the five categories
    (date, voucher type, voucher number, amount, description) have a value.
    The default of 1 is very permissive and accepts sparse records; raise it
    to filter noise.
    """

    min_categories: int = 1

    def categories(self, record: Mapping[str, str]) -> List[str]:
        """Names of the categories the record populates."""
        return [
            name
            for name, aliases in VALIDITY_CATEGORIES.items()
            if any(record.get(alias) for alias in aliases)
        ]

    def is_valid(self, record: Mapping[str, str]) -> bool:
        if not record:
            return False
        return len(self.categories(record)) >= self.min_categories
