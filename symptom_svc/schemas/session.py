"""
Pydantic schemas for the user session and connection status.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from symptom_svc.schemas.symptom import SymptomRecord


class ConnectionStatus(str, Enum):
    """Reachability of the remote store."""

    testing = "testing"
    connected = "connected"
    offline = "offline"


class ErrorConditionResponse(BaseModel):
    kind: str
    context: Optional[str] = None
    message: str


class SessionResponse(BaseModel):
    """Current session state as the form needs it."""
    user_name: Optional[str] = Field(None, description="Currently selected user, if any")
    connection_status: ConnectionStatus
    error: Optional[ErrorConditionResponse] = None


class UserSelect(BaseModel):
    user_name: str = Field(..., max_length=200, description="Name to log symptoms under", examples=["mina"])


class UserSelectResponse(BaseModel):
    user_name: str
    records: List[SymptomRecord]


class ConnectionResponse(BaseModel):
    connection_status: ConnectionStatus
