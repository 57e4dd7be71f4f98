"""
Tests for the record sanitizer.
"""
import math

import pytest

from symptom_svc.schemas import BOOLEAN_FIELD, INTEGER_FIELDS, STRING_FIELDS, SymptomRecord
from symptom_svc.services.sanitizer import apply_field_change, parse_leading_int, sanitize_record


# =============================================================================
# NUMERIC COERCION
# =============================================================================

@pytest.mark.parametrize("raw, expected", [
    ("7", 7),
    ("", None),
    ("abc", None),
    (None, None),
    ("72bpm", 72),
    ("  90 ", 90),
    ("7.9", 7),
    ("-3", -3),
    ("+5", 5),
    (140, 140),
    (98.6, 98),
    (True, None),
    (math.nan, None),
])
def test_integer_field_coercion(raw, expected):
    """Integer fields use leading-digit parsing and fall back to None."""
    assert sanitize_record({"heart_rate": raw})["heart_rate"] == expected


def test_missing_integer_field_becomes_none():
    result = sanitize_record({})
    for field in INTEGER_FIELDS:
        assert result[field] is None


def test_parse_leading_int_stops_at_first_non_digit():
    assert parse_leading_int("12/80") == 12
    assert parse_leading_int("x12") is None
    assert parse_leading_int("1e3") == 1


def test_parse_leading_int_digit_run_past_conversion_limit():
    assert parse_leading_int("9" * 5000) is None
    assert parse_leading_int("-" + "1" * 5000 + "bpm") is None
    assert sanitize_record({"heart_rate": "9" * 5000})["heart_rate"] is None


# =============================================================================
# BOOLEAN COERCION
# =============================================================================

@pytest.mark.parametrize("raw, expected", [
    ("true", True),
    (True, True),
    ("false", False),
    (None, False),
    ("True", False),
    (1, False),
    ("1", False),
    (False, False),
])
def test_ecg_taken_coercion(raw, expected):
    """Only the boolean True or the exact string "true" count as taken."""
    result = sanitize_record({"ecg_taken": raw})["ecg_taken"]
    assert result is expected


def test_missing_ecg_taken_defaults_false():
    assert sanitize_record({})["ecg_taken"] is False


# =============================================================================
# STRING COERCION
# =============================================================================

def test_string_field_null_becomes_empty():
    assert sanitize_record({"notes": None})["notes"] == ""


def test_string_field_number_is_stringified():
    assert sanitize_record({"notes": 42})["notes"] == "42"
    assert sanitize_record({"sleep_hours": 7.0})["sleep_hours"] == "7"
    assert sanitize_record({"sleep_hours": 6.5})["sleep_hours"] == "6.5"


def test_string_field_is_not_trimmed_or_lowercased():
    assert sanitize_record({"activity": "  Running "})["activity"] == "  Running "


def test_string_field_boolean_is_lowercase_text():
    assert sanitize_record({"sweating": True})["sweating"] == "true"


# =============================================================================
# PASS-THROUGH, PURITY, TOTALITY
# =============================================================================

def test_other_fields_pass_through_unchanged():
    draft = {"date": "not-a-date", "time": 1000, "id": 9, "user_name": "mina"}
    result = sanitize_record(draft)
    assert result["date"] == "not-a-date"
    assert result["time"] == 1000
    assert result["id"] == 9
    assert result["user_name"] == "mina"


def test_input_is_not_mutated(draft):
    before = dict(draft)
    sanitize_record(draft)
    assert draft == before


@pytest.mark.parametrize("draft_values", [
    {},
    {"heart_rate": "abc", "notes": None, "ecg_taken": "yes"},
    {"heart_rate": 3.7, "duration": "15min", "notes": ["a"], "ecg_taken": True},
    {f: "" for f in INTEGER_FIELDS + STRING_FIELDS},
    {f: None for f in INTEGER_FIELDS + STRING_FIELDS + (BOOLEAN_FIELD,)},
    {"breathing": math.inf, "stress": 0.5, "dizziness": "  4 of 5"},
    {"heart_rate": "9" * 5000, "duration": "1" * 10000 + "min"},
])
def test_sanitizer_is_total_and_idempotent(draft_values):
    """Every field gets its canonical type, and a second pass changes nothing."""
    once = sanitize_record(draft_values)
    for field in INTEGER_FIELDS:
        assert once[field] is None or (isinstance(once[field], int) and not isinstance(once[field], bool))
    for field in STRING_FIELDS:
        assert isinstance(once[field], str)
    assert isinstance(once[BOOLEAN_FIELD], bool)

    assert sanitize_record(once) == once


def test_sanitized_draft_fits_record_schema(draft):
    record = SymptomRecord.model_validate(dict(sanitize_record(draft), user_name="mina"))
    assert record.heart_rate == 140
    assert record.dizziness is None
    assert record.ecg_taken is True
    assert record.notes == ""


# =============================================================================
# FIELD EDITS
# =============================================================================

def test_apply_field_change_coerces_integer_fields(draft):
    updated = apply_field_change(draft, "heart_rate", "88x")
    assert updated["heart_rate"] == 88
    assert draft["heart_rate"] == "140"


def test_apply_field_change_keeps_other_values_raw(draft):
    updated = apply_field_change(draft, "notes", None)
    assert updated["notes"] is None
    assert apply_field_change(draft, "duration", "")["duration"] is None
