import pytest

from academy.application.use_cases.assessments.grant_reattempt import grant_reattempt
from academy.application.use_cases.assessments.start_attempt import start_attempt
from academy.domain.assessments.entities import AttemptStatus
from academy.domain.assessments.errors import InvalidState, Unauthorized
from tests.factories import LEARNER_ID


def _completed(attempts, now):
    return attempts.seed(
        1,
        LEARNER_ID,
        AttemptStatus.COMPLETED,
        answers={"q1": "A", "q2": "C"},
        completed_at=now,
        score=1,
        earned_points=1,
        total_points=2,
    )


class TestGrantReattempt:
    def test_abandon_then_start_creates_fresh_row(self, assessments, attempts, now, abandon_policy):
        done = _completed(attempts, now)

        granted = grant_reattempt(attempts, attempt_id=done.id, learner_id=LEARNER_ID, policy=abandon_policy, now=now)
        assert granted.status == AttemptStatus.ABANDONED
        # 채점 기록은 이력으로 남는다
        assert granted.score == 1

        # allow_reattempts=False 여도 abandoned 는 새 행 허용
        fresh = start_attempt(assessments, attempts, assessment_id=1, learner_id=LEARNER_ID, policy=abandon_policy, now=now)
        assert fresh.id != done.id
        assert fresh.status == AttemptStatus.IN_PROGRESS
        assert fresh.answers == {}
        assert fresh.score is None and fresh.total_points is None

        again = start_attempt(assessments, attempts, assessment_id=1, learner_id=LEARNER_ID, policy=abandon_policy, now=now)
        assert again.id == fresh.id

    def test_reset_reopens_same_row(self, assessments, attempts, now, reset_policy):
        done = _completed(attempts, now)

        granted = grant_reattempt(attempts, attempt_id=done.id, learner_id=LEARNER_ID, policy=reset_policy, now=now)

        assert granted.id == done.id
        assert granted.status == AttemptStatus.IN_PROGRESS
        assert granted.answers == {}
        assert (granted.score, granted.earned_points, granted.total_points) == (None, None, None)
        assert granted.completed_at is None

        resumed = start_attempt(assessments, attempts, assessment_id=1, learner_id=LEARNER_ID, policy=reset_policy, now=now)
        assert resumed.id == done.id
        assert len(attempts.rows) == 1

    def test_only_completed_attempts(self, attempts, abandon_policy):
        live = attempts.seed(1, LEARNER_ID, AttemptStatus.IN_PROGRESS)

        with pytest.raises(InvalidState):
            grant_reattempt(attempts, attempt_id=live.id, learner_id=LEARNER_ID, policy=abandon_policy)

        assert attempts.get(live.id).status == AttemptStatus.IN_PROGRESS

    def test_learner_must_match(self, attempts, now, abandon_policy):
        done = _completed(attempts, now)

        with pytest.raises(Unauthorized):
            grant_reattempt(attempts, attempt_id=done.id, learner_id=404, policy=abandon_policy)

    def test_concurrent_change_is_invalid_state(self, attempts, now, abandon_policy):
        done = _completed(attempts, now)

        def granted_elsewhere():
            attempts.update(done.id, {"status": AttemptStatus.ABANDONED})

        attempts.before_update = granted_elsewhere

        with pytest.raises(InvalidState):
            grant_reattempt(attempts, attempt_id=done.id, learner_id=LEARNER_ID, policy=abandon_policy, now=now)
