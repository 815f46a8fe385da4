import pytest

from academy.application.use_cases.assessments.submit_attempt import merge_answers, submit_attempt
from academy.domain.assessments.entities import AttemptStatus
from academy.domain.assessments.errors import (
    ConditionFailed,
    InvalidState,
    NotFound,
    Unauthorized,
)
from tests.factories import LEARNER_ID


def _submit(assessments, attempts, attempt_id, answers=None, learner_id=LEARNER_ID, now=None):
    return submit_attempt(
        assessments,
        attempts,
        attempt_id=attempt_id,
        learner_id=learner_id,
        answers=answers,
        now=now,
    )


class TestSubmitAttempt:
    def test_all_correct(self, assessments, attempts, now):
        a = attempts.seed(1, LEARNER_ID, AttemptStatus.IN_PROGRESS)

        done = _submit(assessments, attempts, a.id, {"q1": "A", "q2": "B"}, now=now)

        assert done.status == AttemptStatus.COMPLETED
        assert (done.score, done.earned_points, done.total_points) == (2, 2, 2)
        assert done.completed_at == now
        assert done.answers == {"q1": "A", "q2": "B"}

    def test_wrong_and_unanswered(self, assessments, attempts):
        a = attempts.seed(1, LEARNER_ID, AttemptStatus.IN_PROGRESS)

        done = _submit(assessments, attempts, a.id, {"q1": "wrong"})

        assert (done.score, done.total_points) == (0, 2)

    def test_merges_unflushed_answers(self, assessments, attempts):
        a = attempts.seed(1, LEARNER_ID, AttemptStatus.IN_PROGRESS, answers={"q1": "A", "q2": "C"})

        done = _submit(assessments, attempts, a.id, {"q2": "B"})

        assert done.answers == {"q1": "A", "q2": "B"}
        assert done.score == 2

    def test_write_is_conditional_on_in_progress(self, assessments, attempts):
        a = attempts.seed(1, LEARNER_ID, AttemptStatus.IN_PROGRESS)

        _submit(assessments, attempts, a.id)

        _, _, expected = attempts.update_calls[-1]
        assert expected == AttemptStatus.IN_PROGRESS

    def test_double_submit_is_rejected_without_changing_score(self, assessments, attempts):
        a = attempts.seed(1, LEARNER_ID, AttemptStatus.IN_PROGRESS)
        first = _submit(assessments, attempts, a.id, {"q1": "A"})

        with pytest.raises(InvalidState):
            _submit(assessments, attempts, a.id, {"q1": "A", "q2": "B"})

        stored = attempts.get(a.id)
        assert (stored.score, stored.total_points) == (first.score, first.total_points) == (1, 2)
        assert stored.answers == {"q1": "A"}

    def test_lost_race_raises_condition_failed(self, assessments, attempts):
        a = attempts.seed(1, LEARNER_ID, AttemptStatus.IN_PROGRESS)

        def auto_submit_wins():
            _submit(assessments, attempts, a.id, {"q1": "A"})

        attempts.before_update = auto_submit_wins

        with pytest.raises(ConditionFailed):
            _submit(assessments, attempts, a.id, {"q1": "A", "q2": "B"})

        completed = [r for r in attempts.rows.values() if r.status == AttemptStatus.COMPLETED]
        assert len(completed) == 1
        assert completed[0].score == 1

    def test_ownership(self, assessments, attempts):
        a = attempts.seed(1, LEARNER_ID, AttemptStatus.IN_PROGRESS)

        with pytest.raises(Unauthorized):
            _submit(assessments, attempts, a.id, learner_id=12)

        assert attempts.get(a.id).status == AttemptStatus.IN_PROGRESS

    def test_missing_attempt(self, assessments, attempts):
        with pytest.raises(NotFound):
            _submit(assessments, attempts, 123)


def test_merge_answers_normalizes_keys():
    assert merge_answers({1: "A"}, {"2": "B", 1: "C"}) == {"1": "C", "2": "B"}
    assert merge_answers(None, None) == {}
