"""
Pydantic schemas for API request/response validation.
"""
from symptom_svc.schemas.symptom import (
    BOOLEAN_FIELD,
    INTEGER_FIELDS,
    STRING_FIELDS,
    SymptomDraft,
    SymptomListResponse,
    SymptomRecord,
)
from symptom_svc.schemas.session import (
    ConnectionResponse,
    ConnectionStatus,
    ErrorConditionResponse,
    SessionResponse,
    UserSelect,
    UserSelectResponse,
)

__all__ = [
    # Record schemas
    "BOOLEAN_FIELD",
    "INTEGER_FIELDS",
    "STRING_FIELDS",
    "SymptomDraft",
    "SymptomListResponse",
    "SymptomRecord",
    # Session schemas
    "ConnectionResponse",
    "ConnectionStatus",
    "ErrorConditionResponse",
    "SessionResponse",
    "UserSelect",
    "UserSelectResponse",
]
