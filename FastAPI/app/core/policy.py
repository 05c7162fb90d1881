"""
Authorization policy for jobs, applications and user records.

``decide`` is a pure function of the actor, the action and the records
involved; it never touches the database. Services load what the rule needs,
ask for a decision and call ``enforce`` to turn a denial into the matching
domain error. Rules are checked in a fixed order and the first match wins.
"""

import enum
from dataclasses import dataclass
from typing import Any

from app.core.exceptions import Duplicate, Forbidden, InvalidState, NotFound
from app.models.enums import JobStatus, Role


class Action(str, enum.Enum):
    READ_JOB = "read_job"
    CREATE_JOB = "create_job"
    UPDATE_JOB = "update_job"
    DELETE_JOB = "delete_job"
    LIST_OWN_JOBS = "list_own_jobs"
    CREATE_APPLICATION = "create_application"
    READ_APPLICATION = "read_application"
    LIST_APPLICATIONS = "list_applications"
    UPDATE_APPLICATION = "update_application"
    DELETE_APPLICATION = "delete_application"
    READ_USER = "read_user"
    LIST_USERS = "list_users"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"


class DenyReason(str, enum.Enum):
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class Actor:
    """The authenticated user performing an operation."""

    id: str
    role: str

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(id=user.id, role=user.role)

    @property
    def is_recruiter(self) -> bool:
        return self.role == Role.RECRUITER

    @property
    def is_job_seeker(self) -> bool:
        return self.role == Role.JOB_SEEKER


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None
    message: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(allowed=True)


def deny(reason: DenyReason = DenyReason.FORBIDDEN, message: str | None = None) -> Decision:
    return Decision(allowed=False, reason=reason, message=message)


@dataclass(frozen=True)
class ApplicationScope:
    """Server-side restriction for listing applications. Exactly one field is set."""

    applicant_id: str | None = None
    job_owner_id: str | None = None


def _owns_job(actor: Actor, job: Any) -> bool:
    return job is not None and actor.is_recruiter and job.posted_by == actor.id


def decide(
    actor: Actor,
    action: Action,
    resource: Any = None,
    *,
    job: Any = None,
    already_applied: bool = False,
    recruiters_manage_users: bool = True,
) -> Decision:
    """
    Decide whether ``actor`` may perform ``action``.

    ``resource`` is the record acted on: a Job for job actions and for
    CREATE_APPLICATION (the target job, None if it does not exist), an
    Application for the other application actions, a User for user actions.
    ``job`` is the job an Application points at, needed to identify the
    owning recruiter.
    """
    if action == Action.READ_JOB:
        return ALLOW

    if action in (Action.CREATE_JOB, Action.LIST_OWN_JOBS):
        if actor.is_recruiter:
            return ALLOW
        return deny(message="Only recruiters can manage job postings")

    if action in (Action.UPDATE_JOB, Action.DELETE_JOB):
        if _owns_job(actor, resource):
            return ALLOW
        verb = "update" if action == Action.UPDATE_JOB else "delete"
        return deny(message=f"Not authorized to {verb} this job")

    if action == Action.CREATE_APPLICATION:
        if not actor.is_job_seeker:
            return deny(message="Only job seekers can apply to jobs")
        if resource is None:
            return deny(DenyReason.NOT_FOUND, "Job not found")
        if resource.status != JobStatus.ACTIVE:
            return deny(DenyReason.INVALID_STATE, "Cannot apply to inactive job")
        if already_applied:
            return deny(DenyReason.DUPLICATE, "You have already applied to this job")
        return ALLOW

    if action == Action.READ_APPLICATION:
        if actor.is_job_seeker and resource.applicant_id == actor.id:
            return ALLOW
        if _owns_job(actor, job):
            return ALLOW
        return deny(message="Not authorized to view this application")

    if action == Action.LIST_APPLICATIONS:
        if actor.is_job_seeker or actor.is_recruiter:
            return ALLOW
        return deny(message="Not authorized to list applications")

    if action == Action.UPDATE_APPLICATION:
        if _owns_job(actor, job):
            return ALLOW
        return deny(message="Not authorized to update this application")

    if action == Action.DELETE_APPLICATION:
        if resource.applicant_id == actor.id:
            return ALLOW
        return deny(message="Not authorized to delete this application")

    if action == Action.READ_USER:
        if resource.id == actor.id:
            return ALLOW
        return deny(message="Not authorized to view this user")

    if action == Action.LIST_USERS:
        if actor.is_recruiter:
            return ALLOW
        return deny(message="Only recruiters can browse users")

    if action in (Action.UPDATE_USER, Action.DELETE_USER):
        if resource.id == actor.id:
            return ALLOW
        if recruiters_manage_users and actor.is_recruiter:
            return ALLOW
        verb = "update" if action == Action.UPDATE_USER else "delete"
        return deny(message=f"Not authorized to {verb} this user")

    return deny(message="Unknown action")


def application_scope(actor: Actor) -> ApplicationScope:
    """The only applications ``actor`` may see: their own, or those against jobs they posted."""
    enforce(decide(actor, Action.LIST_APPLICATIONS))
    if actor.is_job_seeker:
        return ApplicationScope(applicant_id=actor.id)
    return ApplicationScope(job_owner_id=actor.id)


_ERRORS = {
    DenyReason.FORBIDDEN: Forbidden,
    DenyReason.NOT_FOUND: NotFound,
    DenyReason.INVALID_STATE: InvalidState,
    DenyReason.DUPLICATE: Duplicate,
}


def enforce(decision: Decision) -> None:
    """Raise the domain error matching a denial; do nothing on allow."""
    if decision.allowed:
        return
    raise _ERRORS[decision.reason](decision.message)
