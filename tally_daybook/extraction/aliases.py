# ==============================================
# Field Alias Table
# ==============================================
#
# PURPOSE:
#   Single source of truth for the tag names different Tally export
#   versions use for the same logical field.
#
# RULES:
# ------
#   - FIELD_ALIASES keys are canonical field names (the output column
#     they feed). Values are tags in order of preference: the first
#     tag carrying a value wins. The column's own tag comes first so
#     the stock-mapping export (which already uses column names)
#     always takes priority over older aliases.
#   - Supporting a new export variant means appending an alias here.
#     Extraction and normalization code never hardcodes tag names.
#   - VALIDITY_CATEGORIES are the groups the validity gate counts.
#   - CONTAINER_TAGS is the block-segmentation priority order.
#
# ==============================================

from types import MappingProxyType
from typing import Mapping, Tuple


FIELD_ALIASES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "DATE": (
        "DATE", "VCHDATE", "DSPVCHDATE", "EFFECTIVEDATE",
        "TRANSACTIONDATE", "ENTRYDATE",
    ),
    "VCHTYPE": ("VCHTYPE", "DSPVCHTYPE", "VOUCHERTYPENAME", "VOUCHER_TYPE"),
    "VCHNO": (
        "VCHNO", "VCHNUMBER", "DSPEXPLVCHNUMBER", "EXPLVCHNUMBER",
        "VOUCHERKEY", "VOUCHERNUMBER", "VCH_NO",
    ),
    "VOUCHER_NUMBER": ("VOUCHER_NUMBER", "SERIALNUMBER"),
    "VOUCHER_GUID": ("VOUCHER_GUID", "GUID"),
    "LEDGER_NAME": (
        "LEDGER_NAME", "LEDGERNAME", "DSPVCHLEDACCOUNT", "PARTYLEDGERNAME",
    ),
    "VOUCHER_AMOUNT": ("VOUCHER_AMOUNT", "AMOUNT", "VALUE", "TOTAL"),
    "DEBIT_AMOUNT": (
        "DEBIT_AMOUNT", "DRAMT", "DSPVCHDRAMT", "LVSUBDRTOTAL",
        "DEBITAMOUNT", "DEBIT", "DR_AMOUNT", "AMOUNT_DR",
    ),
    "CREDIT_AMOUNT": (
        "CREDIT_AMOUNT", "CRAMT", "DSPVCHCRAMT", "LVSUBCRTOTAL",
        "CREDITAMOUNT", "CREDIT", "CR_AMOUNT", "AMOUNT_CR",
    ),
    "ROUND_OFF": ("ROUND_OFF", "ROUNDOFF"),
    "LEDGER_ADDRESS": ("LEDGER_ADDRESS", "ADDRESS"),
    "LEDGER_PINCODE": ("LEDGER_PINCODE", "PINCODE"),
    "LEDGER_STATE": ("LEDGER_STATE", "LEDSTATENAME", "STATENAME"),
    "LEDGER_COUNTRY": ("LEDGER_COUNTRY", "COUNTRYNAME"),
    "PARENT_GROUP": ("PARENT_GROUP", "PARENT"),
    "GST_REGISTRATION": ("GST_REGISTRATION", "GSTREGISTRATIONTYPE"),
    "OPENING_BALANCE_LEDGER": ("OPENING_BALANCE_LEDGER", "OPENINGBALANCE"),
    "CLOSING_BALANCE": ("CLOSING_BALANCE", "CLOSINGBALANCE"),
    "NARRATION": ("NARRATION", "DESCRIPTION", "PARTICULARS"),
    "STOCK_ITEM_NAME": ("STOCK_ITEM_NAME", "STOCKITEMNAME"),
    "STOCK_RATE": ("STOCK_RATE", "RATE"),
    "STOCK_ACTUAL_QTY": ("STOCK_ACTUAL_QTY", "ACTUALQTY"),
    "STOCK_BILLED_QTY": ("STOCK_BILLED_QTY", "BILLEDQTY"),
    "STOCK_BASE_UNITS": ("STOCK_BASE_UNITS", "BASEUNITS"),
    "STOCK_DISCOUNT": ("STOCK_DISCOUNT", "DISCOUNT"),
    "PARTY_GSTIN": ("PARTY_GSTIN", "PARTYGSTIN"),
})


# Categories checked by the validity gate. A record counts for a
# category when any one of its tags carries a value.
VALIDITY_CATEGORIES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "date": (
        "DATE", "VCHDATE", "DSPVCHDATE", "EFFECTIVEDATE",
        "TRANSACTIONDATE", "ENTRYDATE",
    ),
    "voucher_type": (
        "VCHTYPE", "DSPVCHTYPE", "VOUCHERTYPENAME", "TYPE", "VOUCHER_TYPE",
    ),
    "voucher_number": (
        "VCHNUMBER", "VOUCHERKEY", "DSPEXPLVCHNUMBER", "EXPLVCHNUMBER",
        "NUMBER", "VOUCHER_NUMBER", "VCH_NO", "SERIALNUMBER",
    ),
    "amount": (
        "DRAMT", "DSPVCHDRAMT", "LVSUBDRTOTAL", "DEBITAMOUNT", "DEBIT",
        "DR_AMOUNT", "AMOUNT_DR", "CRAMT", "DSPVCHCRAMT", "LVSUBCRTOTAL",
        "CREDITAMOUNT", "CREDIT", "CR_AMOUNT", "AMOUNT_CR", "AMOUNT",
        "VALUE", "TOTAL",
    ),
    "description": (
        "LEDGERNAME", "DSPVCHLEDACCOUNT", "PARTYLEDGERNAME", "REFERENCE",
        "NARRATION", "DESCRIPTION", "PARTICULARS",
    ),
})


# ROW covers the DAYBOOK_EXPORT/DATA_ROWS/ROW layout of stock-mapping exports
CONTAINER_TAGS: Tuple[str, ...] = ("ENVELOPE", "TALLYMESSAGE", "VOUCHER", "DAYBOOK", "ROW")


def aliases_for(field: str) -> Tuple[str, ...]:
    """Tags feeding a canonical field; a field with no entry is read from its own tag."""
    return FIELD_ALIASES.get(field, (field,))


def all_alias_tags() -> Tuple[str, ...]:
    """Every tag the block extractor searches for explicitly, in table order, deduplicated."""
    seen = []
    groups = list(VALIDITY_CATEGORIES.values()) + list(FIELD_ALIASES.values())
    for aliases in groups:
        for alias in aliases:
            if alias not in seen:
                seen.append(alias)
    return tuple(seen)
