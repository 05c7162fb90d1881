import pytest

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.core.policy import Actor
from app.models.application import Application
from app.services import application_tracker, job_directory


def _actor(user):
    return Actor.from_user(user)


class TestCreate:
    def test_recruiter_becomes_poster(self, db_session, recruiter):
        job = job_directory.create(
            db_session,
            _actor(recruiter),
            {
                "title": "  Data Engineer ",
                "description": "Pipelines",
                "company": "Acme",
                "location": "Berlin",
                "type": "contract",
                "salary": {"min": 50000, "max": 70000, "currency": "eur"},
                "requirements": {"skills": ["Python", "python", "SQL"]},
            },
        )
        assert job.posted_by == recruiter.id
        assert job.title == "Data Engineer"
        assert job.status == "active"
        assert job.salary == {"min": 50000, "max": 70000, "currency": "EUR"}
        assert job.requirements["skills"] == ["Python", "SQL"]
        assert job.created_at is not None and job.updated_at is not None

    def test_missing_required_fields(self, db_session, recruiter):
        with pytest.raises(ValidationError) as ex:
            job_directory.create(db_session, _actor(recruiter), {"title": "Only a title"})
        fields = {e["field"] for e in ex.value.errors}
        assert {"description", "company", "location", "type"} <= fields

    @pytest.mark.parametrize("bad", [{"type": "freelance"}, {"status": "archived"}])
    def test_enum_fields_are_checked(self, db_session, recruiter, bad):
        data = {"title": "T", "description": "D", "company": "C", "location": "L", "type": "full-time"}
        data.update(bad)
        with pytest.raises(ValidationError) as ex:
            job_directory.create(db_session, _actor(recruiter), data)
        assert ex.value.errors[0]["field"] in bad

    def test_salary_range_must_be_ordered(self, db_session, recruiter):
        data = {
            "title": "T", "description": "D", "company": "C", "location": "L", "type": "full-time",
            "salary": {"min": 10, "max": 5},
        }
        with pytest.raises(ValidationError):
            job_directory.create(db_session, _actor(recruiter), data)

    def test_job_seeker_cannot_post(self, db_session, seeker):
        with pytest.raises(Forbidden):
            job_directory.create(
                db_session, _actor(seeker),
                {"title": "T", "description": "D", "company": "C", "location": "L", "type": "full-time"},
            )


class TestUpdateDelete:
    def test_owner_updates_and_updated_at_moves(self, db_session, recruiter, make_job):
        job = make_job(recruiter)
        before = job.updated_at
        updated = job_directory.update(db_session, _actor(recruiter), job.id, {"status": "closed"})
        assert updated.status == "closed"
        assert updated.title == job.title
        assert updated.updated_at > before

    def test_other_recruiter_is_forbidden(self, db_session, recruiter, make_user, make_job):
        job = make_job(recruiter)
        other = make_user("recruiter")
        with pytest.raises(Forbidden):
            job_directory.update(db_session, _actor(other), job.id, {"title": "Hijacked"})
        with pytest.raises(Forbidden):
            job_directory.delete(db_session, _actor(other), job.id)
        assert job_directory.get(db_session, job.id).title != "Hijacked"

    def test_missing_job_is_not_found(self, db_session, recruiter):
        with pytest.raises(NotFound):
            job_directory.update(db_session, _actor(recruiter), "nope", {"title": "X"})
        with pytest.raises(NotFound):
            job_directory.delete(db_session, _actor(recruiter), "nope")

    def test_required_fields_cannot_be_cleared(self, db_session, recruiter, make_job):
        job = make_job(recruiter)
        with pytest.raises(ValidationError):
            job_directory.update(db_session, _actor(recruiter), job.id, {"title": None})

    def test_delete_removes_applications(self, db_session, recruiter, seeker, make_job):
        job = make_job(recruiter)
        job_id = job.id
        application_tracker.apply(db_session, _actor(seeker), job.id)
        job_directory.delete(db_session, _actor(recruiter), job_id)
        with pytest.raises(NotFound):
            job_directory.get(db_session, job_id)
        assert db_session.query(Application).count() == 0


class TestSearch:
    def test_remote_page_two(self, db_session, recruiter, make_job):
        for i in range(25):
            make_job(recruiter, location="Remote (US)" if i % 2 else "remote - EU")
        make_job(recruiter, location="Paris")

        page = job_directory.search(db_session, {"location": "remote"}, page=2, page_size=10)

        assert page.total == 25
        assert page.pages == 3
        assert len(page.items) == 10
        # Newest first: the 26 jobs were created in order, Paris last; page 2 skips 10 remote ones
        created = [j.created_at for j in page.items]
        assert created == sorted(created, reverse=True)
        assert page.items[0].title == "Backend Engineer 15"

    def test_last_page_is_partial(self, db_session, recruiter, make_job):
        for _ in range(12):
            make_job(recruiter)
        page = job_directory.search(db_session, {}, page=2, page_size=10)
        assert len(page.items) == 2
        assert page.pages == 2

    def test_public_search_hides_closed_and_draft(self, db_session, recruiter, make_job):
        make_job(recruiter)
        make_job(recruiter, status="closed")
        make_job(recruiter, status="draft")
        page = job_directory.search(db_session)
        assert [j.status for j in page.items] == ["active"]

    def test_closed_jobs_only_for_their_recruiter(self, db_session, recruiter, seeker, make_user, make_job):
        mine = make_job(recruiter, status="closed")
        other = make_user("recruiter")
        make_job(other, status="closed")

        page = job_directory.search(db_session, {"status": "closed"}, actor=_actor(recruiter))
        assert [j.id for j in page.items] == [mine.id]

        with pytest.raises(Forbidden):
            job_directory.search(db_session, {"status": "closed"})
        with pytest.raises(Forbidden):
            job_directory.search(db_session, {"status": "draft"}, actor=_actor(seeker))

    def test_text_and_type_filters(self, db_session, recruiter, make_job):
        python = make_job(recruiter, title="Python Developer", type="part-time")
        make_job(recruiter, title="Java Developer", description="JVM work", type="part-time")
        by_company = make_job(recruiter, title="Analyst", company="PythonSoft", type="contract")

        page = job_directory.search(db_session, {"text": "python"})
        assert {j.id for j in page.items} == {python.id, by_company.id}

        page = job_directory.search(db_session, {"text": "python", "type": "part-time"})
        assert [j.id for j in page.items] == [python.id]

    def test_relevance_sort_prefers_title_hits(self, db_session, recruiter, make_job):
        in_title = make_job(recruiter, title="Rust Engineer")
        make_job(recruiter, title="Platform Engineer", description="Some Rust tooling")

        newest = job_directory.search(db_session, {"text": "rust"})
        assert newest.items[0].id != in_title.id

        ranked = job_directory.search(db_session, {"text": "rust", "sort": "relevance"})
        assert ranked.items[0].id == in_title.id

    def test_like_wildcards_are_literal(self, db_session, recruiter, make_job):
        make_job(recruiter, location="Remote")
        assert job_directory.search(db_session, {"location": "%"}).total == 0

    def test_bad_paging(self, db_session):
        with pytest.raises(ValidationError):
            job_directory.search(db_session, page=0)
        with pytest.raises(ValidationError):
            job_directory.search(db_session, page_size=1000)

    def test_empty_result(self, db_session):
        page = job_directory.search(db_session, {"text": "nothing"})
        assert page.total == 0
        assert page.pages == 0
        assert page.items == []


def test_list_own_returns_every_status(db_session, recruiter, seeker, make_user, make_job):
    a = make_job(recruiter)
    b = make_job(recruiter, status="draft")
    make_job(make_user("recruiter"))
    assert [j.id for j in job_directory.list_own(db_session, _actor(recruiter))] == [b.id, a.id]
    with pytest.raises(Forbidden):
        job_directory.list_own(db_session, _actor(seeker))
