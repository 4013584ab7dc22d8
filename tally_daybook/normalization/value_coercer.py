import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from dateutil import parser as date_parser

from .schema import ColumnKind


class ValueCoercer:
    MONTHS = {
        "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
        "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
    }

    ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
    DAY_MON_YY = re.compile(r"^(\d{1,2})-([A-Za-z]{3})-(\d{2})$")
    DAY_MON_YYYY = re.compile(r"^(\d{1,2})-([A-Za-z]{3})-(\d{4})$")
    DAY_MONTH_YYYY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
    DAY_MONTH_YY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2})$")
    COMPACT_YYYYMMDD = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
    YEAR_FIRST = re.compile(r"^\d{4}\D")

    # Two-digit years above this belong to the 1900s
    CENTURY_PIVOT = 50

    AMOUNT_NOISE = re.compile(r"[^0-9.\-]")
    LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
    INTEGER = re.compile(r"^-?\d+(?:\.0+)?$")

    # Two far-apart defaults: if a parse depends on them, the input was incomplete
    _DEFAULT_A = datetime(2000, 1, 1)
    _DEFAULT_B = datetime(2001, 2, 2)

    @classmethod
    def coerce(cls, value: Any, kind: ColumnKind, max_length: Optional[int] = None) -> Any:
        if value is None:
            return None

        if kind is ColumnKind.DATE:
            return cls.coerce_date(value)
        if kind is ColumnKind.AMOUNT:
            return cls.coerce_amount(value)
        if kind is ColumnKind.SIGNED_AMOUNT:
            return cls.coerce_amount(value, signed=True)
        if kind is ColumnKind.INTEGER:
            return cls.coerce_int(value)
        if kind is ColumnKind.CODE:
            return cls.coerce_text(value, max_length)
        return cls.coerce_text(value)

    @classmethod
    def coerce_date(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None

        if cls.ISO_DATE.match(text):
            year, month, day = text.split("-")
            return text if cls._build_date(year, month, day) else None

        match = cls.DAY_MON_YY.match(text)
        if match:
            day, month, year = match.groups()
            return cls._build_date(cls._expand_year(year), cls._month_number(month), day)

        match = cls.DAY_MON_YYYY.match(text)
        if match:
            day, month, year = match.groups()
            return cls._build_date(year, cls._month_number(month), day)

        match = cls.DAY_MONTH_YYYY.match(text)
        if match:
            day, month, year = match.groups()
            return cls._build_date(year, month, day)

        match = cls.DAY_MONTH_YY.match(text)
        if match:
            day, month, year = match.groups()
            return cls._build_date(cls._expand_year(year), month, day)

        # Tally's own date format
        match = cls.COMPACT_YYYYMMDD.match(text)
        if match:
            year, month, day = match.groups()
            return cls._build_date(year, month, day)

        return cls._parse_generic_date(text)

    @classmethod
    def coerce_amount(cls, value: Any, signed: bool = False) -> Decimal:
        if value is None:
            return Decimal("0")
        text = str(value).strip()

        in_parentheses = "(" in text and ")" in text
        cleaned = cls.AMOUNT_NOISE.sub("", text)
        match = cls.LEADING_NUMBER.match(cleaned)
        if not match:
            return Decimal("0")

        try:
            amount = Decimal(match.group(0))
        except InvalidOperation:
            return Decimal("0")

        if not signed:
            return abs(amount)
        if in_parentheses:
            return -abs(amount)
        return amount

    @classmethod
    def coerce_int(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        text = str(value).strip().replace(",", "")
        if not cls.INTEGER.match(text):
            return None
        return int(Decimal(text))

    @classmethod
    def coerce_text(cls, value: Any, max_length: Optional[int] = None) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        if max_length is not None:
            text = text[:max_length]
        return text

    @classmethod
    def _expand_year(cls, year: str) -> int:
        short = int(year)
        return 1900 + short if short > cls.CENTURY_PIVOT else 2000 + short

    @classmethod
    def _month_number(cls, month: str) -> Optional[int]:
        return cls.MONTHS.get(month.lower())

    @classmethod
    def _build_date(cls, year, month, day) -> Optional[str]:
        if month is None:
            return None
        try:
            return date(int(year), int(month), int(day)).isoformat()
        except ValueError:
            return None

    @classmethod
    def _parse_generic_date(cls, text: str) -> Optional[str]:
        if not any(ch.isdigit() for ch in text):
            return None
        # A leading four-digit year means year/month/day, never year/day/month
        year_first = bool(cls.YEAR_FIRST.match(text))
        options = {"dayfirst": not year_first, "yearfirst": year_first}
        try:
            first = date_parser.parse(text, default=cls._DEFAULT_A, **options)
            second = date_parser.parse(text, default=cls._DEFAULT_B, **options)
        except (ValueError, OverflowError):
            return None
        if first.date() != second.date():
            return None
        return first.date().isoformat()
