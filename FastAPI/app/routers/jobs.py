from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.policy import Actor
from app.database import get_db
from app.dependencies import get_current_actor, get_optional_actor
from app.models.enums import JobStatus, JobType
from app.models.job import Job
from app.schemas.common import Envelope
from app.schemas.job import JobCreate, JobList, JobPage, JobResponse, JobUpdate, PosterSummary
from app.services import job_directory

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _job_to_response(job: Job) -> JobResponse:
    poster = job.poster
    return JobResponse(
        id=job.id,
        title=job.title,
        description=job.description,
        company=job.company,
        location=job.location,
        type=job.type,
        salary=job.salary,
        requirements=job.requirements,
        posted_by=job.posted_by,
        poster=PosterSummary(
            id=poster.id,
            name=poster.name,
            email=poster.email,
            company=(poster.profile or {}).get("company"),
        ) if poster else None,
        status=job.status,
        application_deadline=job.application_deadline,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


@router.get("", response_model=Envelope[JobPage])
def search_jobs(
    search: str | None = None,
    type: JobType | None = None,
    location: str | None = None,
    status: JobStatus = JobStatus.ACTIVE,
    sort: str = Query("newest", pattern="^(newest|relevance)$"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
    actor: Actor | None = Depends(get_optional_actor),
):
    """Public job search. Closed and draft jobs are only visible to the recruiter who posted them."""
    filters = {"text": search, "type": type, "location": location, "status": status, "sort": sort}
    result = job_directory.search(db, filters, page=page, page_size=limit, actor=actor)
    jobs = [_job_to_response(j) for j in result.items]
    return Envelope(
        data=JobPage(count=len(jobs), total=result.total, page=result.page, pages=result.pages, jobs=jobs)
    )


@router.get("/my-jobs", response_model=Envelope[JobList])
def my_jobs(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    jobs = [_job_to_response(j) for j in job_directory.list_own(db, actor)]
    return Envelope(data=JobList(count=len(jobs), jobs=jobs))


@router.get("/{job_id}", response_model=Envelope[JobResponse])
def get_job(job_id: str, db: Session = Depends(get_db)):
    return Envelope(data=_job_to_response(job_directory.get(db, job_id)))


@router.post("", response_model=Envelope[JobResponse], status_code=status.HTTP_201_CREATED)
def create_job(
    body: JobCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    job = job_directory.create(db, actor, body)
    return Envelope(message="Job created successfully", data=_job_to_response(job))


@router.put("/{job_id}", response_model=Envelope[JobResponse])
def update_job(
    job_id: str,
    body: JobUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    job = job_directory.update(db, actor, job_id, body)
    return Envelope(message="Job updated successfully", data=_job_to_response(job))


@router.delete("/{job_id}", response_model=Envelope[dict])
def delete_job(
    job_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    job_directory.delete(db, actor, job_id)
    return Envelope(message="Job deleted successfully", data={})
