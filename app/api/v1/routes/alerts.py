"""Alert workflow endpoints: emergencies, assignments and progress updates."""

import structlog
from fastapi import APIRouter, HTTPException, Request

from api.dependencies.auth import CurrentIdentityDep
from api.dependencies.rate_limits import emergency_rate_limit, get_limiter
from infrastructure.services import (
    AssignmentOrchestratorDep,
    EmergencyOrchestratorDep,
    ProgressOrchestratorDep,
)
from modules.alerts import (
    AssignmentRequest,
    EmergencyRequest,
    FanOutSummary,
    ProgressRequest,
)

logger = structlog.get_logger()

router = APIRouter(tags=["Alerts"])
limiter = get_limiter()


@router.post("/emergencies", response_model=FanOutSummary)
@limiter.limit(emergency_rate_limit)
async def create_emergency(
    request: Request,
    emergency: EmergencyRequest,
    identity: CurrentIdentityDep,
    orchestrator: EmergencyOrchestratorDep,
):
    """Raise an emergency for a patient.

    Always answers 200 with the fan-out summary. When none of the assigned
    staff could be resolved the summary carries ``success: false`` and
    ``error: "No assigned staff found"`` so the client can direct the
    patient to contact staff directly.
    """
    logger.info(
        "emergency_request_received",
        patient_id=emergency.patient_id,
        severity=emergency.severity,
        requested_by=identity.uid,
    )
    return await orchestrator.handle(emergency)


@router.post("/assignments", response_model=FanOutSummary)
async def notify_assignment(
    assignment: AssignmentRequest,
    identity: CurrentIdentityDep,
    orchestrator: AssignmentOrchestratorDep,
):
    """Notify staff newly assigned to a patient."""
    logger.info(
        "assignment_request_received",
        patient_id=assignment.patient_id,
        requested_by=identity.uid,
    )
    try:
        return await orchestrator.handle(assignment)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/progress-updates", response_model=FanOutSummary)
async def send_progress_update(
    progress: ProgressRequest,
    identity: CurrentIdentityDep,
    orchestrator: ProgressOrchestratorDep,
):
    """Send a progress update to every staff member assigned to the patient."""
    logger.info(
        "progress_update_request_received",
        patient_id=progress.patient_id,
        requested_by=identity.uid,
    )
    return await orchestrator.handle(progress)
