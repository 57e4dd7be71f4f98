"""
Tests for error formatting and the exception hierarchy.
"""
from symptom_svc.core.exceptions import (
    LOAD_FAILED,
    REMOTE_UNAVAILABLE,
    SAVE_FAILED,
    VALIDATION,
    CacheCorruptError,
    CacheError,
    RecordValidationError,
    RemoteUnavailableError,
    format_error,
)


def test_format_error_with_context_and_reason():
    assert format_error(REMOTE_UNAVAILABLE, SAVE_FAILED, "HTTP 500") == \
        "save failed: remote store unavailable (HTTP 500)"


def test_format_error_without_context():
    assert format_error(VALIDATION) == "invalid input"


def test_format_error_unknown_kind():
    assert format_error("quota_exceeded", LOAD_FAILED) == "load failed: quota exceeded"


def test_exception_detail_and_status():
    error = RemoteUnavailableError(context=LOAD_FAILED, reason="request timed out")
    assert error.status_code == 503
    assert str(error) == "load failed: remote store unavailable (request timed out)"
    assert error.to_dict() == {
        "detail": "load failed: remote store unavailable (request timed out)",
        "kind": REMOTE_UNAVAILABLE,
        "context": LOAD_FAILED,
    }


def test_validation_error_condition():
    condition = RecordValidationError(context=SAVE_FAILED, reason="date and time are required").to_condition()
    assert condition.kind == VALIDATION
    assert condition.context == SAVE_FAILED
    assert condition.message == "save failed: invalid input (date and time are required)"


def test_cache_errors_share_a_base():
    assert issubclass(CacheCorruptError, CacheError)
    assert CacheCorruptError().detail == "local cache entry is corrupt"
