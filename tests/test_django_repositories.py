from datetime import timedelta

import pytest
from django.utils import timezone

from academy.adapters.db.django.repositories_assessments import (
    DjangoAssessmentRepository,
    DjangoAttemptRepository,
    DjangoLearnerRepository,
)
from academy.application.use_cases.assessments import (
    record_answer,
    start_attempt,
    submit_attempt,
)
from academy.domain.assessments.entities import AttemptStatus, QuestionType
from academy.domain.assessments.errors import (
    ConditionFailed,
    InvalidState,
    NotFound,
    TransientStoreError,
)
from apps.domains.assessments.models import Assessment, AssessmentAttempt, AssessmentQuestion
from apps.domains.students.models import Student

pytestmark = pytest.mark.django_db

SCHOOL = "SCH01"


@pytest.fixture
def student():
    return Student.objects.create(
        name="Kim",
        school_code=SCHOOL,
        student_code="S-0011",
        email="Kim@Example.com",
        class_instance_id=7,
    )


@pytest.fixture
def quiz():
    a = Assessment.objects.create(
        title="Unit 1",
        school_code=SCHOOL,
        class_instance_id=7,
        time_limit_seconds=600,
    )
    AssessmentQuestion.objects.create(
        assessment=a,
        order=2,
        question_text="Second letter?",
        question_type="choice",
        options=["A", "B", "C"],
        correct_index=1,
    )
    AssessmentQuestion.objects.create(
        assessment=a,
        order=1,
        question_text="First letter?",
        question_type="choice",
        options=["A", "B", "C"],
        correct_index=0,
    )
    return a


@pytest.fixture
def repos():
    return DjangoAssessmentRepository(), DjangoAttemptRepository(), DjangoLearnerRepository()


class TestAssessmentRepository:
    def test_questions_are_ordered_and_keyed_by_string_id(self, quiz, repos):
        assessment = repos[0].get_with_questions(quiz.id)

        assert assessment.title == "Unit 1"
        assert assessment.group_id == 7
        assert assessment.is_timed
        assert [q.text for q in assessment.questions] == ["First letter?", "Second letter?"]
        assert all(isinstance(q.id, str) for q in assessment.questions)
        assert assessment.questions[0].question_type == QuestionType.CHOICE
        assert assessment.questions[0].options == ("A", "B", "C")

    def test_missing(self, repos):
        with pytest.raises(NotFound):
            repos[0].get_with_questions(999)

    def test_list_for_group_skips_inactive_and_other_groups(self, quiz, repos):
        Assessment.objects.create(title="Hidden", school_code=SCHOOL, class_instance_id=7, is_active=False)
        Assessment.objects.create(title="Other", school_code=SCHOOL, class_instance_id=8)
        Assessment.objects.create(title="Other school", school_code="X", class_instance_id=7)

        rows = repos[0].list_for_group(SCHOOL, 7)

        assert [a.id for a in rows] == [quiz.id]


class TestAttemptRepository:
    def test_insert_full_and_minimal_shapes(self, quiz, student, repos):
        attempts = repos[1]
        started = timezone.now() - timedelta(minutes=1)

        first = attempts.insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}, "started_at": started})
        assert first.started_at == started
        attempts.update(first.id, {"status": AttemptStatus.ABANDONED})

        second = attempts.insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}})
        assert second.started_at is not None
        assert attempts.find_latest(quiz.id, student.id).id == second.id

    def test_second_in_progress_insert_is_condition_failed(self, quiz, student, repos):
        attempts = repos[1]
        attempts.insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}})

        with pytest.raises(ConditionFailed):
            attempts.insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}})

        assert AssessmentAttempt.objects.filter(status="in_progress").count() == 1

    def test_unknown_column_is_rejected(self, quiz, student, repos):
        with pytest.raises(TransientStoreError):
            repos[1].insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}, "legacy_col": 1})

    def test_conditional_update(self, quiz, student, repos):
        attempts = repos[1]
        a = attempts.insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}})

        done = attempts.update(
            a.id,
            {"status": AttemptStatus.COMPLETED, "score": 1, "total_points": 2, "completed_at": timezone.now()},
            expected_status=AttemptStatus.IN_PROGRESS,
        )
        assert done.status == AttemptStatus.COMPLETED

        with pytest.raises(ConditionFailed):
            attempts.update(a.id, {"score": 2}, expected_status=AttemptStatus.IN_PROGRESS)
        assert attempts.get(a.id).score == 1

        with pytest.raises(NotFound):
            attempts.update(987654, {"score": 2})

    def test_reset_conflicting_with_live_attempt(self, quiz, student, repos):
        attempts = repos[1]
        old = attempts.insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}})
        attempts.update(old.id, {"status": AttemptStatus.COMPLETED})
        attempts.insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}})

        with pytest.raises(ConditionFailed):
            attempts.update(old.id, {"status": AttemptStatus.IN_PROGRESS}, expected_status=AttemptStatus.COMPLETED)

    def test_latest_statuses_and_listing(self, quiz, student, repos):
        attempts = repos[1]
        other = Assessment.objects.create(title="Unit 2", school_code=SCHOOL, class_instance_id=7)
        a = attempts.insert(quiz.id, student.id, {"status": AttemptStatus.IN_PROGRESS, "answers": {}})
        attempts.update(a.id, {"status": AttemptStatus.COMPLETED, "completed_at": timezone.now()})

        statuses = attempts.latest_statuses(student.id, [quiz.id, other.id])

        assert statuses == {quiz.id: AttemptStatus.COMPLETED}
        assert attempts.latest_statuses(student.id, []) == {}
        assert [x.id for x in attempts.list_for_learner(student.id, [AttemptStatus.COMPLETED])] == [a.id]
        assert attempts.list_for_learner(student.id, [AttemptStatus.ABANDONED]) == []


class TestLearnerRepository:
    def test_lookups_are_school_scoped(self, student, repos):
        learners = repos[2]

        assert learners.find_by_id(SCHOOL, student.id).group_id == 7
        assert learners.find_by_student_code(SCHOOL, "S-0011").id == student.id
        assert learners.find_by_email(SCHOOL, "kim@example.com").id == student.id
        assert learners.find_by_student_code("OTHER", "S-0011") is None
        assert learners.find_by_id("OTHER", student.id) is None


def test_attempt_flow_against_orm(quiz, student, repos):
    assessments, attempts, _ = repos
    q1, q2 = assessments.get_with_questions(quiz.id).questions

    attempt = start_attempt(assessments, attempts, assessment_id=quiz.id, learner_id=student.id)
    again = start_attempt(assessments, attempts, assessment_id=quiz.id, learner_id=student.id)
    assert again.id == attempt.id

    record_answer(attempts, attempt_id=attempt.id, question_id=q1.id, value="A", learner_id=student.id)
    done = submit_attempt(
        assessments,
        attempts,
        attempt_id=attempt.id,
        learner_id=student.id,
        answers={q2.id: "b"},
    )

    assert done.status == AttemptStatus.COMPLETED
    assert (done.score, done.earned_points, done.total_points) == (2, 2, 2)
    assert done.answers == {q1.id: "A", q2.id: "b"}

    with pytest.raises(InvalidState):
        start_attempt(assessments, attempts, assessment_id=quiz.id, learner_id=student.id)
