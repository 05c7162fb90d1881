import logging

from sqlalchemy import case, or_
from sqlalchemy.orm import Session, joinedload

from app.core.security import generate_id
from app.models.job import Job
from app.models._types import utcnow

logger = logging.getLogger(__name__)

# Relevance weight of a term found in each text field
TEXT_WEIGHTS = (("title", 3), ("company", 2), ("description", 1))


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def create(db: Session, posted_by: str, fields: dict) -> Job:
    now = utcnow()
    job = Job(id=generate_id(), posted_by=posted_by, created_at=now, updated_at=now, **fields)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def get_by_id(db: Session, job_id: str) -> Job | None:
    return (
        db.query(Job)
        .options(joinedload(Job.poster))
        .filter(Job.id == job_id)
        .first()
    )


def search(
    db: Session,
    *,
    terms: list[str] | None = None,
    job_type: str | None = None,
    location: str | None = None,
    status: str | None = "active",
    posted_by: str | None = None,
    sort: str = "newest",
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Job], int]:
    """
    Filtered job search. Returns (items, total) where total counts every match.

    A job matches ``terms`` when any term appears in its title, company or
    description. ``sort="relevance"`` ranks by the summed field weights of
    the matched terms; otherwise newest first.
    """
    q = db.query(Job).options(joinedload(Job.poster))
    if status:
        q = q.filter(Job.status == status)
    if job_type:
        q = q.filter(Job.type == job_type)
    if location and location.strip():
        q = q.filter(Job.location.ilike(_like_pattern(location.strip()), escape="\\"))
    if posted_by:
        q = q.filter(Job.posted_by == posted_by)

    score = None
    if terms:
        matches = []
        for term in terms:
            pattern = _like_pattern(term)
            for field, weight in TEXT_WEIGHTS:
                column = getattr(Job, field)
                matches.append(column.ilike(pattern, escape="\\"))
                hit = case((column.ilike(pattern, escape="\\"), weight), else_=0)
                score = hit if score is None else score + hit
        q = q.filter(or_(*matches))

    total = q.count()
    if sort == "relevance" and score is not None:
        q = q.order_by(score.desc(), Job.created_at.desc(), Job.id.desc())
    else:
        q = q.order_by(Job.created_at.desc(), Job.id.desc())
    items = q.offset(offset).limit(limit).all()
    return items, total


def list_by_poster(db: Session, user_id: str) -> list[Job]:
    return (
        db.query(Job)
        .filter(Job.posted_by == user_id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )


def update_one(db: Session, job: Job, changes: dict) -> Job:
    for key, value in changes.items():
        setattr(job, key, value)
    job.updated_at = utcnow()
    db.commit()
    db.refresh(job)
    return job


def delete_one(db: Session, job: Job) -> int:
    """Delete a job and its applications. Returns how many applications went with it."""
    job_id, removed = job.id, len(job.applications)
    db.delete(job)
    db.commit()
    logger.info("Deleted job %s with %d application(s)", job_id, removed)
    return removed
