import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFound, ValidationError
from app.core.policy import Action, Actor, application_scope, decide, enforce
from app.core.validation import parse
from app.models._types import utcnow
from app.models.application import Application
from app.models.enums import ApplicationStatus
from app.repos import application_repo, job_repo
from app.schemas.application import ApplicationCreate

logger = logging.getLogger(__name__)


def _check_status(status: str | None) -> str | None:
    if status is None:
        return None
    try:
        return ApplicationStatus(status).value
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValidationError(errors=[{"field": "status", "message": f"Status must be one of: {allowed}"}]) from None


def status_changes(status: str) -> dict[str, Any]:
    """Columns to write for a status change. Leaving pending stamps reviewed_at, returning clears it."""
    reviewed_at = None if status == ApplicationStatus.PENDING else utcnow()
    return {"status": status, "reviewed_at": reviewed_at}


def apply(
    db: Session,
    actor: Actor,
    job_id: str,
    cover_letter: str | None = None,
    resume: Any = None,
) -> Application:
    """
    Submit an application for ``actor`` to ``job_id``.

    The (job, applicant) unique constraint decides duplicates: the insert is
    attempted directly, so two concurrent submissions cannot both succeed.
    """
    data = parse(ApplicationCreate, {"job_id": job_id, "cover_letter": cover_letter, "resume": resume})
    job = job_repo.get_by_id(db, data.job_id)
    enforce(decide(actor, Action.CREATE_APPLICATION, job))

    target_id = job.id
    resume_data = data.resume.model_dump(mode="json", exclude_none=True) if data.resume else None
    try:
        application = application_repo.create(
            db,
            job_id=target_id,
            applicant_id=actor.id,
            cover_letter=data.cover_letter or None,
            resume=resume_data or None,
        )
    except IntegrityError:
        db.rollback()
        if application_repo.get_existing(db, target_id, actor.id) is None:
            raise
        logger.info("Duplicate application rejected: job=%s applicant=%s", target_id, actor.id)
        enforce(decide(actor, Action.CREATE_APPLICATION, job, already_applied=True))
        raise
    logger.info("Application submitted: %s job=%s applicant=%s", application.id, target_id, actor.id)
    return application


def _load(db: Session, application_id: str) -> Application:
    application = application_repo.get_by_id(db, application_id)
    if not application:
        raise NotFound("Application not found")
    return application


def get(db: Session, actor: Actor, application_id: str) -> Application:
    application = _load(db, application_id)
    enforce(decide(actor, Action.READ_APPLICATION, application, job=application.job))
    return application


def list_for(
    db: Session,
    actor: Actor,
    status: str | None = None,
    job_id: str | None = None,
) -> list[Application]:
    """Applications the actor may see: their own as a job seeker, those to their jobs as a recruiter."""
    status = _check_status(status)
    scope = application_scope(actor)
    return application_repo.list_scoped(db, scope, status=status, job_id=job_id)


def set_status(
    db: Session,
    actor: Actor,
    application_id: str,
    status: str | None = None,
    notes: str | None = None,
) -> Application:
    status = _check_status(status)
    application = _load(db, application_id)
    enforce(decide(actor, Action.UPDATE_APPLICATION, application, job=application.job))

    changes: dict[str, Any] = {}
    if status is not None:
        changes.update(status_changes(status))
    if notes is not None:
        changes["notes"] = notes
    application = application_repo.update(db, application, changes)
    logger.info(
        "Application %s updated by %s: status=%s reviewed_at=%s",
        application.id, actor.id, application.status, application.reviewed_at,
    )
    return application


def withdraw(db: Session, actor: Actor, application_id: str) -> None:
    application = _load(db, application_id)
    enforce(decide(actor, Action.DELETE_APPLICATION, application))
    application_repo.delete_one(db, application)
    logger.info("Application withdrawn: %s by %s", application_id, actor.id)
