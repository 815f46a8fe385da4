import pytest

from academy.application.use_cases.assessments.resolve_learner import (
    LearnerQuery,
    lookup_by_email,
    resolve_learner,
    try_resolve_learner,
)
from academy.domain.assessments.entities import Learner
from academy.domain.assessments.errors import NotFound
from tests.factories import SCHOOL
from tests.fakes import FakeLearnerRepository


class TestResolveLearner:
    def test_by_student_code(self, learners, learner):
        found = resolve_learner(learners, LearnerQuery(school_code=SCHOOL, student_code="S-0011"))
        assert found == learner

    def test_by_email_case_insensitive(self, learners, learner):
        found = resolve_learner(learners, LearnerQuery(school_code=SCHOOL, email="  KIM@Example.com "))
        assert found == learner

    def test_student_code_takes_priority_over_email(self, learner):
        other = Learner(id=99, school_code=SCHOOL, group_id=1, student_code="S-0099", email="kim@example.com")
        repo = FakeLearnerRepository(other, learner)
        found = resolve_learner(
            repo,
            LearnerQuery(school_code=SCHOOL, student_code="S-0011", email="kim@example.com"),
        )
        assert found.id == learner.id

    def test_falls_back_to_email_when_code_unknown(self, learners, learner):
        found = resolve_learner(
            learners,
            LearnerQuery(school_code=SCHOOL, student_code="nope", email="kim@example.com"),
        )
        assert found.id == learner.id

    def test_scope_is_enforced(self, learners):
        with pytest.raises(NotFound):
            resolve_learner(learners, LearnerQuery(school_code="OTHER", student_code="S-0011"))

    def test_missing_scope_is_rejected(self, learners):
        with pytest.raises(ValueError):
            resolve_learner(learners, LearnerQuery(school_code="  ", student_code="S-0011"))

    def test_custom_lookup_order(self, learners, learner):
        found = resolve_learner(
            learners,
            LearnerQuery(school_code=SCHOOL, student_code="S-0011", email="kim@example.com"),
            lookups=(lookup_by_email,),
        )
        assert found.id == learner.id

    def test_try_resolve_returns_none(self, learners):
        assert try_resolve_learner(learners, LearnerQuery(school_code=SCHOOL, email="x@y.z")) is None
