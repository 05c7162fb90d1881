from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.policy import Actor
from app.database import get_db
from app.dependencies import get_current_actor
from app.models.enums import ApplicationStatus
from app.schemas.application import (
    ApplicationCreate,
    ApplicationList,
    ApplicationResponse,
    ApplicationUpdate,
)
from app.schemas.common import Envelope
from app.services import application_tracker

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("", response_model=Envelope[ApplicationList])
def list_applications(
    status: ApplicationStatus | None = None,
    job: str | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Job seekers get their own applications; recruiters get the ones sent to their jobs."""
    items = application_tracker.list_for(db, actor, status=status, job_id=job)
    applications = [ApplicationResponse.model_validate(a) for a in items]
    return Envelope(data=ApplicationList(count=len(applications), applications=applications))


@router.get("/{application_id}", response_model=Envelope[ApplicationResponse])
def get_application(
    application_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    application = application_tracker.get(db, actor, application_id)
    return Envelope(data=ApplicationResponse.model_validate(application))


@router.post("", response_model=Envelope[ApplicationResponse], status_code=status.HTTP_201_CREATED)
def create_application(
    body: ApplicationCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    application = application_tracker.apply(
        db, actor, body.job_id, cover_letter=body.cover_letter, resume=body.resume
    )
    return Envelope(
        message="Application submitted successfully",
        data=ApplicationResponse.model_validate(application),
    )


@router.put("/{application_id}", response_model=Envelope[ApplicationResponse])
def update_application(
    application_id: str,
    body: ApplicationUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Set status and/or notes. Only the recruiter who posted the job may do this."""
    application = application_tracker.set_status(
        db, actor, application_id, status=body.status, notes=body.notes
    )
    return Envelope(
        message="Application updated successfully",
        data=ApplicationResponse.model_validate(application),
    )


@router.delete("/{application_id}", response_model=Envelope[dict])
def delete_application(
    application_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    application_tracker.withdraw(db, actor, application_id)
    return Envelope(message="Application deleted successfully", data={})
