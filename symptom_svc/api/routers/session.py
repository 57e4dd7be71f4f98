"""
Session router - selected user, connection status and error dismissal.

All endpoints require API key authentication.
"""
import logging

from fastapi import APIRouter, Depends, Response, status

from symptom_svc.core.auth import verify_api_key
from symptom_svc.core.dependencies import get_symptom_service
from symptom_svc.schemas import (
    ConnectionResponse,
    ErrorConditionResponse,
    SessionResponse,
    UserSelect,
    UserSelectResponse,
)
from symptom_svc.services import SymptomService
from symptom_svc.api.routers.symptoms import to_record_list

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/session",
    tags=["Session"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("", response_model=SessionResponse, summary="Current session state")
async def get_session(service: SymptomService = Depends(get_symptom_service)):
    error = None
    if service.error is not None:
        error = ErrorConditionResponse(**service.error.to_dict())
    return SessionResponse(
        user_name=service.user_name,
        connection_status=service.connection_status,
        error=error,
    )


@router.put(
    "/user",
    response_model=UserSelectResponse,
    summary="Select user",
    description="Remember the user to log symptoms under and load their records."
)
async def select_user(
    body: UserSelect,
    service: SymptomService = Depends(get_symptom_service)
):
    records = await service.set_user(body.user_name)
    return UserSelectResponse(
        user_name=service.user_name,
        records=to_record_list(records),
    )


@router.delete("/user", status_code=status.HTTP_204_NO_CONTENT, summary="Change user")
async def change_user(service: SymptomService = Depends(get_symptom_service)):
    service.change_user()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/connection",
    response_model=ConnectionResponse,
    summary="Test connection",
    description="Probe the remote store (10 second timeout) and report the result."
)
async def test_connection(service: SymptomService = Depends(get_symptom_service)):
    connection_status = await service.test_connection()
    return ConnectionResponse(connection_status=connection_status)


@router.delete("/error", status_code=status.HTTP_204_NO_CONTENT, summary="Dismiss error")
async def dismiss_error(service: SymptomService = Depends(get_symptom_service)):
    service.dismiss_error()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
