# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - envelope_xml      → two <ENVELOPE> blocks with date/type/number/debit
# - stock_export_xml  → DAYBOOK_EXPORT/DATA_ROWS/ROW layout
# - tally_response_xml → one ENVELOPE wrapping two TALLYMESSAGE/VOUCHER entries
# - app_config        → AppConfig with defaults, no .env involved
# - fake_db           → FakeConnection patched in place of pymysql.connect
#
# NOTES:
# ------
# - No test needs a live MySQL or Tally server.
# - Use tmp_path for temporary files.
# ==============================================

import pymysql
import pytest

from tally_daybook.config import AppConfig, ExtractionConfig, MySQLConfig, TallyConfig, reset_config


ENVELOPE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<ENVELOPE>
  <DATE>10-Aug-24</DATE>
  <VCHTYPE>Sales</VCHTYPE>
  <VCHNUMBER>S-001</VCHNUMBER>
  <DRAMT>1,250.50</DRAMT>
</ENVELOPE>
<ENVELOPE>
  <DATE>31/12/1999</DATE>
  <VCHTYPE>Payment</VCHTYPE>
  <VCHNUMBER>P-017</VCHNUMBER>
  <DRAMT>-300.00</DRAMT>
</ENVELOPE>
"""

STOCK_EXPORT_XML = """<DAYBOOK_EXPORT>
  <DATA_ROWS>
    <ROW>
      <ROW_NUMBER>1</ROW_NUMBER>
      <VOUCHER_NUMBER>42</VOUCHER_NUMBER>
      <DATE>01-Apr-2024</DATE>
      <VCHTYPE>Purchase</VCHTYPE>
      <VCHNO>PUR/42</VCHNO>
      <LEDGER_NAME>Acme &amp; Sons</LEDGER_NAME>
      <CREDIT_AMOUNT>₹5,000.00</CREDIT_AMOUNT>
      <STOCK_ITEM_NAME>Widget</STOCK_ITEM_NAME>
      <STOCK_DATE_CONTEXT>2024-04-01</STOCK_DATE_CONTEXT>
      <CLOSING_BALANCE>(1,200.00)</CLOSING_BALANCE>
    </ROW>
    <ROW>
      <ROW_NUMBER>2</ROW_NUMBER>
      <DATE>02-Apr-2024</DATE>
      <VCHTYPE>Sales</VCHTYPE>
      <VCHNO>SAL/7</VCHNO>
      <DEBIT_AMOUNT>750</DEBIT_AMOUNT>
    </ROW>
  </DATA_ROWS>
</DAYBOOK_EXPORT>
"""


# A Tally server reply: every voucher sits inside one ENVELOPE
TALLY_RESPONSE_XML = """<ENVELOPE>
  <HEADER>
    <TALLYREQUEST>Import Data</TALLYREQUEST>
  </HEADER>
  <BODY>
    <IMPORTDATA>
      <REQUESTDATA>
        <TALLYMESSAGE xmlns:UDF="TallyUDF">
          <VOUCHER REMOTEID="a1" VCHTYPE="Sales" ACTION="Create">
            <DATE>20240810</DATE>
            <VOUCHERTYPENAME>Sales</VOUCHERTYPENAME>
            <VOUCHERNUMBER>1</VOUCHERNUMBER>
            <PARTYLEDGERNAME>Acme Traders</PARTYLEDGERNAME>
            <ALLLEDGERENTRIES.LIST>
              <LEDGERNAME>Acme Traders</LEDGERNAME>
              <AMOUNT>-1250.50</AMOUNT>
            </ALLLEDGERENTRIES.LIST>
          </VOUCHER>
        </TALLYMESSAGE>
        <TALLYMESSAGE xmlns:UDF="TallyUDF">
          <VOUCHER REMOTEID="a2" VCHTYPE="Payment" ACTION="Create">
            <DATE>20240815</DATE>
            <VOUCHERTYPENAME>Payment</VOUCHERTYPENAME>
            <VOUCHERNUMBER>2</VOUCHERNUMBER>
            <PARTYLEDGERNAME>Cash</PARTYLEDGERNAME>
            <ALLLEDGERENTRIES.LIST>
              <LEDGERNAME>Cash</LEDGERNAME>
              <AMOUNT>300.00</AMOUNT>
            </ALLLEDGERENTRIES.LIST>
          </VOUCHER>
        </TALLYMESSAGE>
      </REQUESTDATA>
    </IMPORTDATA>
  </BODY>
</ENVELOPE>
"""


@pytest.fixture
def envelope_xml() -> str:
    """Two envelope blocks, each with DATE, VCHTYPE, VCHNUMBER and DRAMT."""
    return ENVELOPE_XML


@pytest.fixture
def stock_export_xml() -> str:
    """Stock-mapping export that already uses output column names."""
    return STOCK_EXPORT_XML


@pytest.fixture
def tally_response_xml() -> str:
    """One ENVELOPE holding two VOUCHER entries, as a Tally server answers an export request."""
    return TALLY_RESPONSE_XML


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        mysql=MySQLConfig(table="DaybookStockData"),
        tally=TallyConfig(),
        extraction=ExtractionConfig(),
    )


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self._result = []

    def execute(self, query, params=None):
        conn = self.connection
        conn.executed.append((query, params))
        normalized = " ".join(query.split())

        if normalized.startswith("INSERT INTO"):
            if conn.fail_when and conn.fail_when(params):
                raise pymysql.err.IntegrityError(1062, "Duplicate entry")
            conn.pending.append(params)
            return 1
        if normalized.startswith("DELETE FROM"):
            removed = len(conn.rows)
            conn.rows.clear()
            return removed
        if "COUNT(*)" in normalized:
            self._result = [{"total": len(conn.rows)}]
            return 1
        if normalized.startswith("SELECT SUM("):
            self._result = [conn.stats]
            return 1
        if normalized.startswith("SELECT *"):
            self._result = [{"ROW_NUMBER": row[2]} for row in conn.rows[: params[0]]]
            return len(self._result)
        return 0

    def fetchone(self):
        return self._result[0] if self._result else None

    def fetchall(self):
        return list(self._result)

    def close(self):
        pass


class FakeConnection:
    """Just enough of a pymysql connection to exercise MySQLClient."""

    def __init__(self):
        self.executed = []
        self.rows = []
        self.pending = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False
        self.fail_when = None
        self.stats = {"total_debit": 0, "total_credit": 0, "voucher_types": 0, "unique_dates": 0}

    def cursor(self, cursor_class=None):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1
        self.rows.extend(self.pending)
        self.pending = []

    def rollback(self):
        self.rollbacks += 1
        self.pending = []

    def close(self):
        self.closed = True

    def queries(self, prefix):
        return [q for q, _ in self.executed if " ".join(q.split()).startswith(prefix)]


@pytest.fixture
def fake_db(monkeypatch):
    """Patch pymysql.connect to hand out a single FakeConnection."""
    connection = FakeConnection()
    monkeypatch.setattr(pymysql, "connect", lambda **kwargs: connection)
    return connection
