import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone  # noqa: E402

import bcrypt  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.policy import Actor  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.database import Base, create_db_engine, create_session_factory, get_db, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.repos import user_repo  # noqa: E402
from app.services import job_directory  # noqa: E402

_real_gensalt = bcrypt.gensalt


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    # Minimum cost keeps password hashing from dominating test time
    monkeypatch.setattr(bcrypt, "gensalt", lambda *args, **kwargs: _real_gensalt(rounds=4))


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    db = create_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(db_session):
    def _db_override():
        yield db_session

    app.dependency_overrides[get_db] = _db_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(role="job_seeker", name=None, email=None, password="secret123"):
        counter["n"] += 1
        n = counter["n"]
        return user_repo.create(
            db_session,
            name=name or f"{role.replace('_', ' ').title()} {n}",
            email=email or f"{role}{n}@example.com",
            password=password,
            role=role,
        )

    return _make


@pytest.fixture
def recruiter(make_user):
    return make_user("recruiter", name="Rita Recruiter")


@pytest.fixture
def seeker(make_user):
    return make_user("job_seeker", name="Sam Seeker")


@pytest.fixture
def make_job(db_session):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(owner, **fields):
        counter["n"] += 1
        data = {
            "title": f"Backend Engineer {counter['n']}",
            "description": "Build and run backend services.",
            "company": "Acme",
            "location": "Remote",
            "type": "full-time",
        }
        data.update(fields)
        job = job_directory.create(db_session, Actor.from_user(owner), data)
        # Spread creation times so newest-first ordering is deterministic
        job.created_at = base + timedelta(minutes=counter["n"])
        db_session.commit()
        return job

    return _make


def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def headers():
    return auth_headers
