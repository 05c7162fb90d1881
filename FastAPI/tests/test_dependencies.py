import pytest

import app.dependencies as deps
from app.core.exceptions import Unauthenticated
from app.core.policy import Actor


class _Creds:
    def __init__(self, token: str):
        self.credentials = token


class _User:
    def __init__(self, user_id="u1", role="job_seeker"):
        self.id = user_id
        self.role = role


def test_get_current_user_missing_credentials():
    with pytest.raises(Unauthenticated) as ex:
        deps.get_current_user(db=object(), credentials=None)
    assert ex.value.status_code == 401


def test_get_current_user_invalid_token(monkeypatch):
    monkeypatch.setattr(deps, "decode_access_token", lambda token: None)
    with pytest.raises(Unauthenticated) as ex:
        deps.get_current_user(db=object(), credentials=_Creds("bad"))
    assert "Invalid" in ex.value.message


def test_get_current_user_user_not_found(monkeypatch):
    monkeypatch.setattr(deps, "decode_access_token", lambda token: ("u1", "job_seeker"))
    monkeypatch.setattr(deps, "get_by_id", lambda db, uid: None)
    with pytest.raises(Unauthenticated):
        deps.get_current_user(db=object(), credentials=_Creds("tok"))


def test_get_current_user_success(monkeypatch):
    user = _User(user_id="u1")
    monkeypatch.setattr(deps, "decode_access_token", lambda token: ("u1", "job_seeker"))
    monkeypatch.setattr(deps, "get_by_id", lambda db, uid: user)
    assert deps.get_current_user(db=object(), credentials=_Creds("tok")) is user


def test_actor_role_comes_from_stored_user(monkeypatch):
    # Token still says job_seeker; the stored record wins
    monkeypatch.setattr(deps, "decode_access_token", lambda token: ("u1", "job_seeker"))
    monkeypatch.setattr(deps, "get_by_id", lambda db, uid: _User("u1", "recruiter"))
    user = deps.get_current_user(db=object(), credentials=_Creds("tok"))
    assert deps.get_current_actor(user=user) == Actor(id="u1", role="recruiter")


def test_get_optional_actor(monkeypatch):
    assert deps.get_optional_actor(db=object(), credentials=None) is None

    monkeypatch.setattr(deps, "decode_access_token", lambda token: None)
    with pytest.raises(Unauthenticated):
        deps.get_optional_actor(db=object(), credentials=_Creds("bad"))

    monkeypatch.setattr(deps, "decode_access_token", lambda token: ("r1", "recruiter"))
    monkeypatch.setattr(deps, "get_by_id", lambda db, uid: _User("r1", "recruiter"))
    assert deps.get_optional_actor(db=object(), credentials=_Creds("tok")) == Actor(id="r1", role="recruiter")
