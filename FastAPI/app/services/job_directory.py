"""
Job postings: create, read, search, update and delete.

Public reads need no actor. Writes go through the authorization policy, so
only recruiters post and only the posting recruiter changes or removes a job.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.core.policy import Action, Actor, decide, enforce
from app.core.validation import parse
from app.models.enums import JobStatus
from app.models.job import Job
from app.repos import job_repo
from app.schemas.job import JobCreate, JobSearchFilters, JobUpdate

logger = logging.getLogger(__name__)


@dataclass
class JobPage:
    items: list[Job]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0


def create(db: Session, actor: Actor, fields: JobCreate | Mapping[str, Any]) -> Job:
    enforce(decide(actor, Action.CREATE_JOB))
    data = parse(JobCreate, fields)
    job = job_repo.create(db, actor.id, data.model_dump())
    logger.info("Job posted: %s (%s) by %s", job.id, job.title, actor.id)
    return job


def get(db: Session, job_id: str) -> Job:
    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise NotFound("Job not found")
    return job


def search(
    db: Session,
    filters: JobSearchFilters | Mapping[str, Any] | None = None,
    page: int = 1,
    page_size: int | None = None,
    actor: Actor | None = None,
) -> JobPage:
    """
    Search jobs with offset pagination.

    Only ``active`` jobs are public. Asking for another status is limited to
    recruiters and only ever returns their own postings.
    """
    filters = parse(JobSearchFilters, filters or {})
    page_size = page_size or settings.default_page_size
    if page < 1:
        raise ValidationError(errors=[{"field": "page", "message": "Page must be at least 1"}])
    if not 1 <= page_size <= settings.max_page_size:
        raise ValidationError(
            errors=[{"field": "page_size", "message": f"Page size must be between 1 and {settings.max_page_size}"}]
        )

    posted_by = None
    if filters.status != JobStatus.ACTIVE:
        if actor is None or not actor.is_recruiter:
            raise Forbidden("Only the posting recruiter can browse closed or draft jobs")
        posted_by = actor.id

    terms = filters.text.split() if filters.text else None
    items, total = job_repo.search(
        db,
        terms=terms,
        job_type=filters.type,
        location=filters.location,
        status=filters.status,
        posted_by=posted_by,
        sort=filters.sort,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    logger.debug("Job search filters=%s page=%d total=%d", filters.model_dump(exclude_none=True), page, total)
    return JobPage(items=items, total=total, page=page, page_size=page_size)


def list_own(db: Session, actor: Actor) -> list[Job]:
    """Every job the recruiter posted, whatever its status."""
    enforce(decide(actor, Action.LIST_OWN_JOBS))
    return job_repo.list_by_poster(db, actor.id)


def update(db: Session, actor: Actor, job_id: str, patch: JobUpdate | Mapping[str, Any]) -> Job:
    job = get(db, job_id)
    enforce(decide(actor, Action.UPDATE_JOB, job))
    changes = parse(JobUpdate, patch).model_dump(exclude_unset=True)
    job = job_repo.update_one(db, job, changes)
    logger.info("Job updated: %s fields=%s by %s", job.id, sorted(changes), actor.id)
    return job


def delete(db: Session, actor: Actor, job_id: str) -> None:
    job = get(db, job_id)
    enforce(decide(actor, Action.DELETE_JOB, job))
    job_repo.delete_one(db, job)
    logger.info("Job deleted: %s by %s", job_id, actor.id)
