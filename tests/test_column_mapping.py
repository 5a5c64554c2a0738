"""Tests for column mapping auto-detection."""

from budgetkit.domain.column_mapping import detect_column_mapping


def test_detects_common_bank_headers():
    mapping = detect_column_mapping(["Date", "Description", "Amount", "Balance"])
    assert mapping == {"date": "Date", "amount": "Amount", "description": "Description"}


def test_matching_is_case_insensitive_substring():
    mapping = detect_column_mapping(["POSTED ON", "Payee Name", "Debit Amount"])
    assert mapping == {"date": "POSTED ON", "amount": "Debit Amount", "description": "Payee Name"}


def test_earlier_header_wins_ties():
    mapping = detect_column_mapping(["Debit", "Credit", "Memo"])
    assert mapping["amount"] == "Debit"


def test_unmatched_fields_are_absent():
    mapping = detect_column_mapping(["Foo", "Bar"])
    assert mapping == {}


def test_partial_match():
    mapping = detect_column_mapping(["Trans Date", "Total"])
    assert mapping == {"date": "Trans Date", "amount": "Total"}


def test_same_header_can_match_several_fields():
    # "Transaction Date" matches date; "name" is a description pattern
    mapping = detect_column_mapping(["Transaction Date", "Merchant Name"])
    assert mapping == {"date": "Transaction Date", "description": "Merchant Name"}


def test_empty_headers():
    assert detect_column_mapping([]) == {}
