# ==============================================
# Extraction Strategies
# ==============================================
#
# PURPOSE:
#   The two ways of turning decoded text into raw field maps.
#   RecordExtractor picks exactly one of them up front.
#
# CLASSES:
# --------
# - BlockStrategy(container_tag)
#     Used when a recognised container tag (ENVELOPE, TALLYMESSAGE,
#     VOUCHER, DAYBOOK, ROW) appears in the text. Every
#     <TAG>...</TAG> block becomes one candidate record:
#       1. every alias in FIELD_ALIASES is searched, first match wins
#       2. any other <NAME>value</NAME> pair is added under NAME
#          unless NAME is already present
#
# - LineHeuristicStrategy()
#     Fallback for unknown / malformed layouts. Folds single-line
#     <NAME>value</NAME> pairs into an accumulating map and cuts a
#     record when the map has 3+ keys, the line closes a tag, or the
#     next line opens a tag not collected yet. Approximate by nature.
#
# Both yield plain dicts (uppercase tag -> trimmed non-empty value).
#
# ==============================================

import re
from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Pattern
from xml.sax.saxutils import unescape

from .aliases import all_alias_tags


XML_ENTITIES = {"&quot;": '"', "&apos;": "'"}


def clean_value(value: str) -> str:
    """Trim a captured tag value and resolve the basic XML entities."""
    return unescape(value.strip(), XML_ENTITIES).strip()


def container_pattern(tag: str) -> Pattern:
    return re.compile(rf"<{tag}(?:\s[^>]*)?>[\s\S]*?</{tag}>", re.IGNORECASE)


class ExtractionStrategy(ABC):
    """Turns decoded text into a stream of raw field maps."""

    name: str = ""

    @abstractmethod
    def records(self, text: str) -> Iterator[Dict[str, str]]:
        ...


class BlockStrategy(ExtractionStrategy):
    name = "block"

    GENERIC_TAG = re.compile(r"<([A-Z_][A-Z0-9_]*?)>(.*?)</\1>", re.IGNORECASE)

    _alias_patterns: Optional[List[tuple]] = None

    def __init__(self, container_tag: str):
        self.container_tag = container_tag
        self._container = container_pattern(container_tag)

    @classmethod
    def alias_patterns(cls) -> List[tuple]:
        # Compiled once per process; the alias table is constant
        if cls._alias_patterns is None:
            cls._alias_patterns = [
                (alias, re.compile(rf"<{alias}>(.*?)</{alias}>", re.IGNORECASE))
                for alias in all_alias_tags()
            ]
        return cls._alias_patterns

    def blocks(self, text: str) -> Iterator[str]:
        for match in self._container.finditer(text):
            yield match.group(0)

    def records(self, text: str) -> Iterator[Dict[str, str]]:
        for block in self.blocks(text):
            yield self.parse_block(block)

    def parse_block(self, block: str) -> Dict[str, str]:
        record: Dict[str, str] = {}

        for alias, pattern in self.alias_patterns():
            match = pattern.search(block)
            if match:
                value = clean_value(match.group(1))
                if value:
                    record[alias] = value

        # Scan inside the container only, or a one-line block matches itself
        body = block[block.find(">") + 1:block.rfind("<")]
        for match in self.GENERIC_TAG.finditer(body):
            name = match.group(1).upper()
            value = clean_value(match.group(2))
            if value and name not in record:
                record[name] = value

        return record


class LineHeuristicStrategy(ExtractionStrategy):
    name = "line_heuristic"

    LINE_TAG = re.compile(r"<([^>/\s]+)>(.*?)</\1>")
    OPENING_TAG = re.compile(r"<([^>/\s!?]+)")
    MAX_KEYS_PER_RECORD = 3

    def records(self, text: str) -> Iterator[Dict[str, str]]:
        lines = text.split("\n")
        current: Dict[str, str] = {}

        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            if self._is_skippable(line):
                continue

            for match in self.LINE_TAG.finditer(line):
                value = clean_value(match.group(2))
                if value:
                    current[match.group(1).upper()] = value

            if current and self._is_boundary(line, current, lines, index):
                yield current
                current = {}

        if current:
            yield current

    def _is_boundary(self, line: str, current: Dict[str, str], lines: List[str], index: int) -> bool:
        if len(current) >= self.MAX_KEYS_PER_RECORD:
            return True
        if "</" in line:
            return True
        next_tag = self._next_opening_tag(lines, index)
        return next_tag is not None and next_tag.upper() not in current

    def _next_opening_tag(self, lines: List[str], index: int) -> Optional[str]:
        for following in lines[index + 1:]:
            following = following.strip()
            if not following:
                continue
            if not following.startswith("<"):
                return None
            match = self.OPENING_TAG.match(following)
            return match.group(1) if match else None
        return None

    @staticmethod
    def _is_skippable(line: str) -> bool:
        return not line or line.startswith("<!--") or line.startswith("<?xml")
