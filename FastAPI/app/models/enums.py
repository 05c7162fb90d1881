import enum


class Role(str, enum.Enum):
    JOB_SEEKER = "job_seeker"
    RECRUITER = "recruiter"


class JobType(str, enum.Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class JobStatus(str, enum.Enum):
    """
    Job visibility.

    - ACTIVE: listed in public search, accepts applications
    - CLOSED: no longer accepting applications
    - DRAFT: not published yet
    """
    ACTIVE = "active"
    CLOSED = "closed"
    DRAFT = "draft"


class ApplicationStatus(str, enum.Enum):
    """Review workflow. Any status may follow any other; leaving PENDING stamps reviewed_at."""
    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    ACCEPTED = "accepted"
