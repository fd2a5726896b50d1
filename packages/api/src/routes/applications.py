# This project was developed with assistance from AI tools.
"""Applicant-facing application routes."""

import uuid

from fastapi import APIRouter, Depends, Response, status

from ..schemas.application import (
    ApplicationForm,
    ApplicationResponse,
    ApplicationStatusResponse,
    NewApplicationDetails,
)
from ..services.orchestrator import ApplicationOrchestrator, get_orchestrator

router = APIRouter()


@router.post("/start", response_model=NewApplicationDetails, status_code=status.HTTP_201_CREATED)
async def start_application(
    orchestrator: ApplicationOrchestrator = Depends(get_orchestrator),
) -> NewApplicationDetails:
    """Start a new application and its linked Codat company."""
    return await orchestrator.create_application()


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: uuid.UUID,
    orchestrator: ApplicationOrchestrator = Depends(get_orchestrator),
) -> ApplicationResponse:
    return await orchestrator.get_application(application_id)


@router.get("/{application_id}/status", response_model=ApplicationStatusResponse)
async def get_application_status(
    application_id: uuid.UUID,
    orchestrator: ApplicationOrchestrator = Depends(get_orchestrator),
) -> ApplicationStatusResponse:
    current = await orchestrator.get_application_status(application_id)
    return ApplicationStatusResponse(application_id=application_id, status=current)


@router.post("/{application_id}/form", status_code=status.HTTP_204_NO_CONTENT)
async def submit_application_form(
    application_id: uuid.UUID,
    form: ApplicationForm,
    orchestrator: ApplicationOrchestrator = Depends(get_orchestrator),
) -> Response:
    """Record the loan terms; may complete data collection and trigger underwriting."""
    await orchestrator.submit_application_details(application_id, form)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
