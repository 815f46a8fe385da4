"""
재응시 권한 부여 Use Case (교사/관리자 전용 — 권한 확인은 view 계층 책임)

COMPLETED attempt 만 대상. IN_PROGRESS 중인 쌍에는 실행하지 않는다
(expected_status=COMPLETED 조건부 update 가 막아준다).
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from academy.application.ports.repositories import AttemptRepository
from academy.application.use_cases.assessments.start_attempt import reset_fields
from academy.application.use_cases.assessments.submit_attempt import load_owned_attempt
from academy.domain.assessments.entities import Attempt, AttemptStatus
from academy.domain.assessments.errors import ConditionFailed, InvalidState
from academy.domain.assessments.policy import (
    DEFAULT_POLICY,
    AttemptPolicy,
    ReattemptStrategy,
    utcnow,
)

logger = logging.getLogger(__name__)


def grant_reattempt(
    attempts: AttemptRepository,
    *,
    attempt_id: int,
    learner_id: int,
    policy: AttemptPolicy = DEFAULT_POLICY,
    now: Optional[datetime] = None,
) -> Attempt:
    """
    ABANDON_AND_INSERT: COMPLETED → ABANDONED (다음 start 가 새 행 생성)
    RESET_IN_PLACE: COMPLETED → IN_PROGRESS (답안/점수 초기화, 다음 start 는 이 행 재개)

    Raises:
      - NotFound / Unauthorized (attempt 학생 ≠ learner_id)
      - InvalidState: COMPLETED 가 아님
    """
    now = now or utcnow()
    attempt = load_owned_attempt(attempts, attempt_id, learner_id)

    if attempt.status != AttemptStatus.COMPLETED:
        raise InvalidState(
            f"Only completed attempts can be reopened (status: {attempt.status.value})"
        )

    if policy.reattempt_strategy == ReattemptStrategy.RESET_IN_PLACE:
        fields = reset_fields(now)
    else:
        fields = {"status": AttemptStatus.ABANDONED}

    try:
        updated = attempts.update(attempt.id, fields, expected_status=AttemptStatus.COMPLETED)
    except ConditionFailed as e:
        raise InvalidState("Attempt changed while granting reattempt") from e

    logger.info(
        "reattempt granted attempt_id=%s learner_id=%s strategy=%s",
        attempt.id,
        learner_id,
        policy.reattempt_strategy.value,
    )
    return updated
