import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from .aliases import CONTAINER_TAGS
from .strategies import (
    BlockStrategy,
    ExtractionStrategy,
    LineHeuristicStrategy,
    container_pattern,
)
from .validity import ValidityGate

logger = logging.getLogger(__name__)


@dataclass
class ExtractionStats:
    """Counters for one extraction pass."""
    strategy: str = ""
    container_tag: Optional[str] = None
    candidates: int = 0
    accepted: int = 0
    rejected: int = 0
    failed: int = 0


class RecordExtractor:
    def __init__(self, validity_gate: Optional[ValidityGate] = None, container_tag: Optional[str] = None):
        """
        Args:
            validity_gate: Gate every candidate record must pass
            container_tag: Block tag to split on ahead of the usual priority
                order, e.g. VOUCHER for a Tally server response whose
                vouchers all sit inside one ENVELOPE
        """
        self.validity_gate = validity_gate or ValidityGate()
        self.container_tag = container_tag
        self.stats = ExtractionStats()

    @staticmethod
    def select_strategy(text: str, container_tag: Optional[str] = None) -> ExtractionStrategy:
        # A preferred tag that never appears leaves the priority order in charge
        if container_tag and container_pattern(container_tag).search(text):
            return BlockStrategy(container_tag.upper())
        for tag in CONTAINER_TAGS:
            if container_pattern(tag).search(text):
                return BlockStrategy(tag)
        return LineHeuristicStrategy()

    def extract(self, text: str) -> Iterator[Dict[str, str]]:
        strategy = self.select_strategy(text, self.container_tag)
        self.stats = ExtractionStats(
            strategy=strategy.name,
            container_tag=getattr(strategy, "container_tag", None)
        )

        if isinstance(strategy, BlockStrategy):
            logger.debug("Using %s blocks", strategy.container_tag)
            yield from self._extract_blocks(strategy, text)
        else:
            logger.debug("No container tags found, falling back to line heuristic")
            for record in strategy.records(text):
                if self._accept(record):
                    yield record

    def _extract_blocks(self, strategy: BlockStrategy, text: str) -> Iterator[Dict[str, str]]:
        for index, block in enumerate(strategy.blocks(text)):
            try:
                record = strategy.parse_block(block)
            except Exception as e:
                self.stats.candidates += 1
                self.stats.failed += 1
                logger.debug("Skipping block %d: %s", index + 1, e)
                continue
            if self._accept(record):
                yield record

    def _accept(self, record: Dict[str, str]) -> bool:
        self.stats.candidates += 1
        if self.validity_gate.is_valid(record):
            self.stats.accepted += 1
            return True
        self.stats.rejected += 1
        logger.debug("Rejected record with fields %s", list(record)[:5])
        return False


def extract(text: str, min_categories: int = 1, container_tag: Optional[str] = None) -> Iterator[Dict[str, str]]:
    return RecordExtractor(ValidityGate(min_categories), container_tag).extract(text)
