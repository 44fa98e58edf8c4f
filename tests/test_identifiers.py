"""Identifier canonicalization and priority lookup tests."""

import pytest

from checkin.utils.identifiers import IDENTIFIER_FIELDS, canon, candidate_identifier


@pytest.mark.parametrize(
    "raw, expected",
    [
        (" ABC ", "abc"),
        ("abc", "abc"),
        ("\tA100\r\n", "a100"),
        (None, ""),
        ("", ""),
        (100, "100"),
    ],
)
def test_canon_trims_and_lowercases(raw, expected):
    assert canon(raw) == expected


@pytest.mark.parametrize("raw", [" MiXeD Case ", None, 42, "  ", "x123-VIP"])
def test_canon_is_idempotent(raw):
    assert canon(canon(raw)) == canon(raw)


def test_canon_is_case_and_whitespace_insensitive():
    assert canon(" ABC ") == canon("abc")


def test_priority_order_is_fixed():
    assert IDENTIFIER_FIELDS == ("registration_id", "RegistrationID", "registration_ID", "id")


def test_candidate_identifier_prefers_earlier_fields():
    record = {"id": "7", "RegistrationID": "R-7", "registration_id": "A100"}
    assert candidate_identifier(record) == "A100"


def test_candidate_identifier_falls_through_missing_and_empty_fields():
    record = {"registration_id": "", "RegistrationID": None, "id": "42"}
    assert candidate_identifier(record) == "42"


def test_candidate_identifier_absent():
    assert candidate_identifier({"display_name": "Alice"}) is None


def test_candidate_identifier_custom_fields():
    record = {"ticket": "T-9", "id": "1"}
    assert candidate_identifier(record, ("ticket", "id")) == "T-9"
