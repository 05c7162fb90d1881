from sqlalchemy.orm import Session, joinedload

from app.core.policy import ApplicationScope
from app.core.security import generate_id
from app.models.application import Application
from app.models.job import Job
from app.models._types import utcnow


def create(
    db: Session,
    *,
    job_id: str,
    applicant_id: str,
    cover_letter: str | None = None,
    resume: dict | None = None,
) -> Application:
    """Insert an application. The (job, applicant) unique constraint raises IntegrityError on a repeat."""
    application = Application(
        id=generate_id(),
        job_id=job_id,
        applicant_id=applicant_id,
        status="pending",
        cover_letter=cover_letter,
        resume=resume,
        applied_at=utcnow(),
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


def get_by_id(db: Session, application_id: str) -> Application | None:
    return (
        db.query(Application)
        .options(joinedload(Application.job), joinedload(Application.applicant))
        .filter(Application.id == application_id)
        .first()
    )


def get_existing(db: Session, job_id: str, applicant_id: str) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.job_id == job_id, Application.applicant_id == applicant_id)
        .first()
    )


def list_scoped(
    db: Session,
    scope: ApplicationScope,
    status: str | None = None,
    job_id: str | None = None,
) -> list[Application]:
    """Applications inside ``scope``, newest first. The scope is applied in SQL."""
    q = db.query(Application).options(joinedload(Application.job), joinedload(Application.applicant))
    if scope.applicant_id is not None:
        q = q.filter(Application.applicant_id == scope.applicant_id)
    elif scope.job_owner_id is not None:
        q = q.join(Job, Application.job_id == Job.id).filter(Job.posted_by == scope.job_owner_id)
    else:
        return []
    if status:
        q = q.filter(Application.status == status)
    if job_id:
        q = q.filter(Application.job_id == job_id)
    return q.order_by(Application.applied_at.desc(), Application.id.desc()).all()


def update(db: Session, application: Application, changes: dict) -> Application:
    for key, value in changes.items():
        setattr(application, key, value)
    db.commit()
    db.refresh(application)
    return application


def delete_one(db: Session, application: Application) -> None:
    db.delete(application)
    db.commit()
