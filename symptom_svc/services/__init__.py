"""
Service layer for business logic.
"""
from symptom_svc.services.sanitizer import apply_field_change, parse_leading_int, sanitize_record
from symptom_svc.services.symptom_service import SymptomService

__all__ = [
    "SymptomService",
    "apply_field_change",
    "parse_leading_int",
    "sanitize_record",
]
