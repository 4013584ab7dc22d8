# ==============================================
# Tests for Normalization Module
# ==============================================

from decimal import Decimal

import pytest

from tally_daybook.extraction import extract
from tally_daybook.normalization import (
    COLUMN_NAMES,
    COLUMNS,
    ColumnKind,
    EntryNormalizer,
    NormalizedEntry,
    ValueCoercer,
    normalize,
)


# ==============================================
# Schema Tests
# ==============================================

class TestSchema:
    """Tests for the fixed output layout."""

    def test_fifty_one_columns_in_order(self):
        assert len(COLUMNS) == 51
        assert COLUMN_NAMES[:5] == ("DATA_ROWS", "ROW", "ROW_NUMBER", "VOUCHER_NUMBER", "DATE")
        assert COLUMN_NAMES[-3:] == ("MAPPING_METHOD", "GST_TYPE", "PARTY_GSTIN")
        assert NormalizedEntry._fields == COLUMN_NAMES

    def test_column_sql_types(self):
        by_name = {column.name: column for column in COLUMNS}
        assert by_name["DATE"].sql_type == "DATE"
        assert by_name["VCHTYPE"].sql_type == "VARCHAR(50)"
        assert by_name["DEBIT_AMOUNT"].sql_type == "DECIMAL(15,2)"
        assert by_name["NARRATION"].sql_type == "TEXT"
        assert by_name["ROW_NUMBER"].sql_type == "INT"

    def test_column_aliases(self):
        by_name = {column.name: column for column in COLUMNS}
        assert "DRAMT" in by_name["DEBIT_AMOUNT"].aliases
        assert by_name["LEDGER_CITY"].aliases == ("LEDGER_CITY",)


# ==============================================
# Value Coercion Tests
# ==============================================

class TestDateCoercion:
    """Tests for ValueCoercer.coerce_date."""

    @pytest.mark.parametrize("raw, expected", [
        ("10-Aug-24", "2024-08-10"),
        ("1-jan-99", "1999-01-01"),
        ("5-Mar-50", "2050-03-05"),
        ("5-Mar-51", "1951-03-05"),
        ("01-Apr-2024", "2024-04-01"),
        ("10-Aug-2024", "2024-08-10"),
        ("31/12/1999", "1999-12-31"),
        ("7/3/24", "2024-03-07"),
        ("2024-02-29", "2024-02-29"),
        ("  10-Aug-24  ", "2024-08-10"),
    ])
    def test_known_formats(self, raw, expected):
        assert ValueCoercer.coerce_date(raw) == expected

    @pytest.mark.parametrize("raw", [
        "not-a-date",
        "",
        "10-Foo-24",
        "31-Feb-2024",
        "2023-02-29",
        "32/01/2024",
    ])
    def test_unparseable_dates(self, raw):
        assert ValueCoercer.coerce_date(raw) is None

    def test_incomplete_date_rejected(self):
        """'2024' alone is not a date."""
        assert ValueCoercer.coerce_date("2024") is None

    def test_generic_fallback(self):
        """'10 August 2024' -> 2024-08-10"""
        assert ValueCoercer.coerce_date("10 August 2024") == "2024-08-10"

    @pytest.mark.parametrize("raw, expected", [
        ("20240810", "2024-08-10"),
        ("20240815", "2024-08-15"),
        ("2024/08/10", "2024-08-10"),
        ("2024.08.10", "2024-08-10"),
    ])
    def test_year_first_dates_keep_month_before_day(self, raw, expected):
        """Tally's YYYYMMDD and other year-first forms are never read day-first."""
        assert ValueCoercer.coerce_date(raw) == expected

    def test_compact_date_out_of_range(self):
        """20241310 has no month 13."""
        assert ValueCoercer.coerce_date("20241310") is None


class TestAmountCoercion:
    """Tests for ValueCoercer.coerce_amount."""

    @pytest.mark.parametrize("raw, expected", [
        ("1,234.56", Decimal("1234.56")),
        ("₹1,234.56", Decimal("1234.56")),
        ("-300.00", Decimal("300.00")),
        ("(500.00)", Decimal("500.00")),
        ("1250.50 Dr", Decimal("1250.50")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        (None, Decimal("0")),
    ])
    def test_absolute(self, raw, expected):
        assert ValueCoercer.coerce_amount(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("-300.00", Decimal("-300.00")),
        ("(1,200.00)", Decimal("-1200.00")),
        ("75.25", Decimal("75.25")),
    ])
    def test_signed(self, raw, expected):
        assert ValueCoercer.coerce_amount(raw, signed=True) == expected

    def test_absolute_never_negative(self):
        for raw in ("-1", "(2)", "--3", "-.5"):
            assert ValueCoercer.coerce_amount(raw) >= 0


class TestOtherCoercions:
    """Integer, code and text columns."""

    def test_integer(self):
        assert ValueCoercer.coerce_int("42") == 42
        assert ValueCoercer.coerce_int("1,024") == 1024
        assert ValueCoercer.coerce_int("7.0") == 7
        assert ValueCoercer.coerce_int("7.5") is None
        assert ValueCoercer.coerce_int("x") is None

    def test_code_truncated(self):
        value = ValueCoercer.coerce("X" * 80, ColumnKind.CODE, max_length=50)
        assert value == "X" * 50

    def test_text_trimmed(self):
        assert ValueCoercer.coerce("  Cash  ", ColumnKind.TEXT) == "Cash"
        assert ValueCoercer.coerce(None, ColumnKind.AMOUNT) is None


# ==============================================
# Entry Normalization Tests
# ==============================================

class TestEntryNormalizer:
    """Tests for record -> NormalizedEntry."""

    def test_empty_record_gives_all_none(self):
        entry = normalize({})
        assert all(value is None for value in entry)

    def test_alias_precedence(self):
        """The column's own tag beats any alias."""
        entry = normalize({"DRAMT": "5", "DEBIT_AMOUNT": "9"})
        assert entry.DEBIT_AMOUNT == Decimal("9")

    def test_alias_table_order_beats_record_order(self):
        """DRAMT is listed before DSPVCHDRAMT, whatever order the record holds them in."""
        entry = normalize({"DSPVCHDRAMT": "1,000.00", "DRAMT": "500.00"})
        assert entry.DEBIT_AMOUNT == Decimal("500.00")

    def test_tally_compact_date_column(self):
        """A voucher DATE written as YYYYMMDD lands on the right day."""
        assert normalize({"DATE": "20240810"}).DATE == "2024-08-10"

    def test_blank_value_falls_through_to_next_alias(self):
        entry = normalize({"VCHNO": "  ", "VCHNUMBER": "S-9"})
        assert entry.VCHNO == "S-9"

    def test_envelope_records(self, envelope_xml):
        first, second = [normalize(record) for record in extract(envelope_xml)]

        assert first.DATE == "2024-08-10"
        assert first.VCHTYPE == "Sales"
        assert first.VCHNO == "S-001"
        assert first.DEBIT_AMOUNT == Decimal("1250.50")
        assert first.CREDIT_AMOUNT is None
        assert first.LEDGER_NAME is None

        assert second.DATE == "1999-12-31"
        assert second.VCHNO == "P-017"
        assert second.DEBIT_AMOUNT == Decimal("300.00")

    def test_stock_export_rows(self, stock_export_xml):
        first, second = [normalize(record) for record in extract(stock_export_xml)]

        assert first.ROW_NUMBER == 1
        assert first.VOUCHER_NUMBER == 42
        assert first.DATE == "2024-04-01"
        assert first.VCHNO == "PUR/42"
        assert first.LEDGER_NAME == "Acme & Sons"
        assert first.CREDIT_AMOUNT == Decimal("5000.00")
        assert first.CLOSING_BALANCE == Decimal("-1200.00")
        assert first.STOCK_DATE_CONTEXT == "2024-04-01"
        assert first.STOCK_ITEM_NAME == "Widget"

        assert second.DEBIT_AMOUNT == Decimal("750")
        assert second.VOUCHER_NUMBER is None

    def test_failed_coercions_counted(self):
        normalizer = EntryNormalizer()
        entry = normalizer.normalize({"DATE": "sometime", "ROW_NUMBER": "first"})

        assert entry.DATE is None
        assert entry.ROW_NUMBER is None
        assert normalizer.failed_coercions == {"DATE": 1, "ROW_NUMBER": 1}

    def test_normalize_batch_skips_failures(self, monkeypatch):
        normalizer = EntryNormalizer()
        original = normalizer.normalize

        def flaky(record):
            if record.get("NARRATION") == "bad":
                raise RuntimeError("boom")
            return original(record)

        monkeypatch.setattr(normalizer, "normalize", flaky)
        entries = normalizer.normalize_batch([
            {"NARRATION": "ok"},
            {"NARRATION": "bad"},
            {"NARRATION": "fine"},
        ])

        assert [entry.NARRATION for entry in entries] == ["ok", "fine"]
