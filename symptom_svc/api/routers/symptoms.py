"""
Symptoms router - list, create and delete symptom records.

All endpoints require API key authentication.

Architecture:
    HTTP Request → Router (this file) → SymptomService → SupabaseClient / LocalCache

Errors raised by the service (RecordValidationError, RemoteUnavailableError)
are turned into JSON responses by the handlers registered in main.py.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import ValidationError

from symptom_svc.core.auth import verify_api_key
from symptom_svc.core.dependencies import get_symptom_service
from symptom_svc.core.exceptions import LOAD_FAILED, RecordValidationError
from symptom_svc.schemas import SymptomDraft, SymptomListResponse, SymptomRecord
from symptom_svc.services import SymptomService, sanitize_record
from symptom_svc.services.symptom_service import SOURCE_REMOTE

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/symptoms",
    tags=["Symptoms"],
    dependencies=[Depends(verify_api_key)],
)


def to_record_response(row: Dict[str, Any]) -> SymptomRecord:
    """Validate a stored row into the response model."""
    # Rows written by older form versions may hold nulls in text columns
    return SymptomRecord.model_validate(sanitize_record(row))


def to_record_list(rows: List[Dict[str, Any]]) -> List[SymptomRecord]:
    """Validate rows for a list response, skipping rows that cannot be shown."""
    records = []
    for row in rows:
        try:
            records.append(to_record_response(row))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed symptom row",
                extra={"record_id": row.get("id"), "error_count": e.error_count()}
            )
    return records


@router.get(
    "",
    response_model=SymptomListResponse,
    summary="List symptom records",
    description="Load the records of the selected user (or of `user`), most recent first. "
                "Falls back to the local cache when the remote store is unreachable."
)
async def list_symptoms(
    user: Optional[str] = Query(None, description="User to load instead of the selected one", examples=["mina"]),
    service: SymptomService = Depends(get_symptom_service)
):
    user_name = user or service.user_name
    if not user_name:
        raise RecordValidationError(context=LOAD_FAILED, reason="no user selected")

    records = await service.load_records(user_name)
    error = None
    if service.last_load_source != SOURCE_REMOTE and service.error is not None:
        error = service.error.message

    return SymptomListResponse(
        records=to_record_list(records),
        source=service.last_load_source,
        error=error,
    )


@router.get(
    "/draft",
    summary="Blank draft",
    description="Empty record dated now, for pre-filling a new form."
)
async def new_draft(service: SymptomService = Depends(get_symptom_service)) -> Dict[str, Any]:
    return service.new_draft()


@router.post(
    "",
    response_model=SymptomRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Save a symptom record",
    description="Sanitize and store a record for the selected user. `date` and `time` are required."
)
async def create_symptom(
    draft: SymptomDraft,
    service: SymptomService = Depends(get_symptom_service)
):
    """
    Save a new record.

    Raises:
    - 400 Bad Request: date/time missing or no user selected (RecordValidationError)
    - 503 Service Unavailable: remote store unreachable (RemoteUnavailableError)
    """
    saved = await service.save_record(draft.model_dump(exclude_unset=True))
    return to_record_response(saved)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a symptom record",
)
async def delete_symptom(
    record_id: str,
    service: SymptomService = Depends(get_symptom_service)
):
    await service.delete_record(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
