from __future__ import annotations

import pytest

from academy.domain.assessments.entities import Learner
from academy.domain.assessments.policy import AttemptPolicy, ReattemptStrategy
from tests.factories import GROUP, LEARNER_ID, SCHOOL, make_assessment
from tests.fakes import (
    T0,
    FakeAssessmentRepository,
    FakeAttemptRepository,
    FakeLearnerRepository,
)


@pytest.fixture
def now():
    return T0


@pytest.fixture
def learner():
    return Learner(
        id=LEARNER_ID,
        school_code=SCHOOL,
        group_id=GROUP,
        student_code="S-0011",
        email="kim@example.com",
    )


@pytest.fixture
def learners(learner):
    return FakeLearnerRepository(learner)


@pytest.fixture
def assessment():
    return make_assessment()


@pytest.fixture
def assessments(assessment):
    return FakeAssessmentRepository(assessment)


@pytest.fixture
def attempts(now):
    return FakeAttemptRepository(now=now)


@pytest.fixture
def abandon_policy():
    return AttemptPolicy(reattempt_strategy=ReattemptStrategy.ABANDON_AND_INSERT)


@pytest.fixture
def reset_policy():
    return AttemptPolicy(reattempt_strategy=ReattemptStrategy.RESET_IN_PLACE)
