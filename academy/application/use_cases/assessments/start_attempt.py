"""
Attempt 시작/재개 Use Case — Attempt 상태 머신의 중심

상태: none(행 없음) → IN_PROGRESS → COMPLETED | ABANDONED

규칙
1) 최신 attempt 없음 → 새 행 (IN_PROGRESS, 빈 답안, started_at=now)
2) 최신이 IN_PROGRESS → 그대로 재개 (중복 클릭이어도 같은 행)
3) 최신이 ABANDONED → 재응시 권한 부여 결과이므로 새 행
4) 최신이 COMPLETED
   - allow_reattempts=False → InvalidState
   - allow_reattempts=True → policy.reattempt_strategy 에 따라 reset / abandon+insert

모든 상태 변경 쓰기는 expected_status 조건부 update.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from academy.application.ports.repositories import AssessmentRepository, AttemptRepository
from academy.application.use_cases.assessments.submit_attempt import complete_attempt
from academy.domain.assessments.entities import Assessment, Attempt, AttemptStatus
from academy.domain.assessments.errors import ConditionFailed, InvalidState, TransientStoreError
from academy.domain.assessments.policy import (
    DEFAULT_POLICY,
    AttemptPolicy,
    ReattemptStrategy,
    is_expired,
    utcnow,
)

logger = logging.getLogger(__name__)

InsertShape = Callable[[datetime], dict[str, Any]]


def _full_shape(now: datetime) -> dict[str, Any]:
    return {
        "status": AttemptStatus.IN_PROGRESS,
        "answers": {},
        "started_at": now,
    }


def _minimal_shape(now: datetime) -> dict[str, Any]:
    # started_at 은 저장소 기본값에 맡긴다
    return {
        "status": AttemptStatus.IN_PROGRESS,
        "answers": {},
    }


# 앞에서부터 시도. 각 shape 는 그 자체로 완결된 insert.
INSERT_SHAPES: tuple[InsertShape, ...] = (_full_shape, _minimal_shape)


def reset_fields(now: datetime) -> dict[str, Any]:
    return {
        "status": AttemptStatus.IN_PROGRESS,
        "answers": {},
        "score": None,
        "earned_points": None,
        "total_points": None,
        "completed_at": None,
        "started_at": now,
    }


def _current_in_progress(
    attempts: AttemptRepository,
    assessment_id: int,
    learner_id: int,
) -> Optional[Attempt]:
    current = attempts.find_latest(assessment_id, learner_id)
    if current is not None and current.is_in_progress:
        return current
    return None


def insert_attempt(
    attempts: AttemptRepository,
    assessment_id: int,
    learner_id: int,
    now: datetime,
    shapes: tuple[InsertShape, ...] = INSERT_SHAPES,
) -> Attempt:
    """
    shape 순서대로 insert 시도.
    - ConditionFailed(IN_PROGRESS 중복) → 먼저 생긴 행을 재개
    - TransientStoreError → 직전 쓰기가 실제로 반영됐는지 확인 후 다음 shape
    """
    last_error: Optional[TransientStoreError] = None

    for shape in shapes:
        try:
            attempt = attempts.insert(assessment_id, learner_id, shape(now))
            logger.info(
                "attempt created attempt_id=%s assessment_id=%s learner_id=%s shape=%s",
                attempt.id,
                assessment_id,
                learner_id,
                shape.__name__,
            )
            return attempt
        except ConditionFailed:
            current = _current_in_progress(attempts, assessment_id, learner_id)
            if current is not None:
                logger.info(
                    "attempt insert raced; resuming attempt_id=%s assessment_id=%s learner_id=%s",
                    current.id,
                    assessment_id,
                    learner_id,
                )
                return current
            raise
        except TransientStoreError as e:
            logger.warning(
                "attempt insert rejected shape=%s assessment_id=%s learner_id=%s err=%s",
                shape.__name__,
                assessment_id,
                learner_id,
                e,
            )
            last_error = e
            current = _current_in_progress(attempts, assessment_id, learner_id)
            if current is not None:
                return current

    raise last_error or TransientStoreError("no insert shape configured")


def _reattempt(
    attempts: AttemptRepository,
    latest: Attempt,
    policy: AttemptPolicy,
    now: datetime,
) -> Attempt:
    assessment_id = latest.assessment_id
    learner_id = latest.learner_id

    if policy.reattempt_strategy == ReattemptStrategy.RESET_IN_PLACE:
        try:
            attempt = attempts.update(
                latest.id,
                reset_fields(now),
                expected_status=AttemptStatus.COMPLETED,
            )
            logger.info("attempt reset for reattempt attempt_id=%s", latest.id)
            return attempt
        except ConditionFailed:
            current = _current_in_progress(attempts, assessment_id, learner_id)
            if current is not None:
                return current
            raise
        except TransientStoreError as e:
            logger.warning(
                "attempt reset rejected attempt_id=%s err=%s; creating new row",
                latest.id,
                e,
            )
            return insert_attempt(attempts, assessment_id, learner_id, now)

    # ABANDON_AND_INSERT
    try:
        attempts.update(
            latest.id,
            {"status": AttemptStatus.ABANDONED},
            expected_status=AttemptStatus.COMPLETED,
        )
        logger.info("attempt abandoned for reattempt attempt_id=%s", latest.id)
    except ConditionFailed:
        current = attempts.find_latest(assessment_id, learner_id)
        if current is not None and current.is_in_progress:
            return current
        if current is None or current.status != AttemptStatus.ABANDONED:
            raise

    return insert_attempt(attempts, assessment_id, learner_id, now)


def _expire_stale(
    attempts: AttemptRepository,
    assessment: Assessment,
    attempt: Attempt,
    now: datetime,
) -> Optional[Attempt]:
    """방치된 IN_PROGRESS 를 저장된 답안으로 채점 종료. 경합에서 지면 최신 상태 재조회."""
    logger.info(
        "expiring stale attempt attempt_id=%s started_at=%s",
        attempt.id,
        attempt.started_at,
    )
    try:
        return complete_attempt(attempts, assessment, attempt, dict(attempt.answers or {}), now=now)
    except ConditionFailed:
        return attempts.find_latest(attempt.assessment_id, attempt.learner_id)


def start_attempt(
    assessments: AssessmentRepository,
    attempts: AttemptRepository,
    *,
    assessment_id: int,
    learner_id: int,
    policy: AttemptPolicy = DEFAULT_POLICY,
    now: Optional[datetime] = None,
) -> Attempt:
    """
    Raises:
      - NotFound: 평가 없음
      - InvalidState: 완료됐고 재응시 불가
      - TransientStoreError: 모든 insert shape 실패
    """
    now = now or utcnow()
    assessment = assessments.get_with_questions(assessment_id)

    latest = attempts.find_latest(assessment_id, learner_id)

    if (
        latest is not None
        and policy.lazy_expiry
        and is_expired(assessment, latest, now, policy.expiry_grace_seconds)
    ):
        latest = _expire_stale(attempts, assessment, latest, now)

    if latest is None:
        return insert_attempt(attempts, assessment_id, learner_id, now)

    if latest.is_in_progress:
        logger.info("attempt resumed attempt_id=%s", latest.id)
        return latest

    if latest.status == AttemptStatus.ABANDONED:
        return insert_attempt(attempts, assessment_id, learner_id, now)

    if not assessment.allow_reattempts:
        raise InvalidState("Reattempts are not allowed for this assessment")

    return _reattempt(attempts, latest, policy, now)
