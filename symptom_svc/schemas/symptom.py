"""
Pydantic schemas for symptom records.

SymptomDraft is the loosely typed shape a form submits; SymptomRecord is the
canonical shape of a row in the remote `symptoms` table. The sanitizer
(services/sanitizer.py) is the only conversion between the two.
"""
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

INTEGER_FIELDS = (
    "heart_rate",
    "breathing",
    "dizziness",
    "speech_difficulty",
    "measured_heart_rate",
    "duration",
    "recovery_heart_rate",
)

STRING_FIELDS = (
    "activity",
    "body_part",
    "intake",
    "start_feeling",
    "start_type",
    "premonition",
    "sweating",
    "weakness",
    "chest_pain",
    "blood_pressure",
    "blood_sugar",
    "after_effects",
    "recovery_blood_pressure",
    "recovery_actions",
    "recovery_helpful",
    "sleep_hours",
    "stress",
    "medications",
    "notes",
)

BOOLEAN_FIELD = "ecg_taken"


class SymptomDraft(BaseModel):
    """Schema for a symptom record as entered in the form.

    Every field is optional and accepts any JSON value; nothing is coerced
    here. Unknown keys are dropped.
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "date": "2025-01-01",
                "time": "10:00",
                "activity": "walking",
                "heart_rate": "140",
                "dizziness": 3,
                "ecg_taken": "true",
                "notes": "felt it in the chest",
            }
        },
    )

    id: Optional[Any] = None
    date: Optional[Any] = None
    time: Optional[Any] = None

    activity: Optional[Any] = None
    body_part: Optional[Any] = None
    intake: Optional[Any] = None
    start_feeling: Optional[Any] = None
    start_type: Optional[Any] = None
    premonition: Optional[Any] = None
    heart_rate: Optional[Any] = None
    sweating: Optional[Any] = None
    breathing: Optional[Any] = None
    dizziness: Optional[Any] = None
    weakness: Optional[Any] = None
    speech_difficulty: Optional[Any] = None
    chest_pain: Optional[Any] = None
    measured_heart_rate: Optional[Any] = None
    ecg_taken: Optional[Any] = None
    blood_pressure: Optional[Any] = None
    blood_sugar: Optional[Any] = None
    duration: Optional[Any] = None
    after_effects: Optional[Any] = None
    recovery_heart_rate: Optional[Any] = None
    recovery_blood_pressure: Optional[Any] = None
    recovery_actions: Optional[Any] = None
    recovery_helpful: Optional[Any] = None
    sleep_hours: Optional[Any] = None
    stress: Optional[Any] = None
    medications: Optional[Any] = None
    notes: Optional[Any] = None


class SymptomRecord(BaseModel):
    """Schema for a persisted symptom record (one row of the `symptoms` table)."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[int, str]] = Field(None, description="Store-assigned identifier")
    user_name: str = Field(..., description="Owner of the record", examples=["mina"])
    date: str = Field(..., description="Episode date (YYYY-MM-DD)", examples=["2025-01-01"])
    time: str = Field(..., description="Episode time (HH:MM)", examples=["10:00"])
    created_at: Optional[str] = Field(None, description="UTC timestamp when the record was saved")

    activity: str = ""
    body_part: str = ""
    intake: str = ""
    start_feeling: str = ""
    start_type: str = ""
    premonition: str = ""
    sweating: str = ""
    weakness: str = ""
    chest_pain: str = ""
    blood_pressure: str = ""
    blood_sugar: str = ""
    after_effects: str = ""
    recovery_blood_pressure: str = ""
    recovery_actions: str = ""
    recovery_helpful: str = ""
    sleep_hours: str = ""
    stress: str = ""
    medications: str = ""
    notes: str = ""

    heart_rate: Optional[int] = None
    breathing: Optional[int] = None
    dizziness: Optional[int] = None
    speech_difficulty: Optional[int] = None
    measured_heart_rate: Optional[int] = None
    duration: Optional[int] = None
    recovery_heart_rate: Optional[int] = None

    ecg_taken: bool = False


class SymptomListResponse(BaseModel):
    """Result of loading a user's records."""
    records: List[SymptomRecord]
    source: str = Field(..., description="Where the list came from: remote, cache or none")
    error: Optional[str] = Field(None, description="Message of the error that forced a fallback, if any")
