"""
답안 1건 저장 Use Case (부분 저장)

문항 이동(다음/이전) 직전, 제출 직전에 호출된다.
문항 단위 last-write-wins. 소유 학생만 쓰므로 충돌 감지는 하지 않는다.
"""
from __future__ import annotations

import logging
from typing import Any

from academy.application.ports.repositories import AttemptRepository
from academy.application.use_cases.assessments.submit_attempt import load_owned_attempt
from academy.domain.assessments.entities import Attempt, AttemptStatus
from academy.domain.assessments.errors import ConditionFailed, InvalidState

logger = logging.getLogger(__name__)


def record_answer(
    attempts: AttemptRepository,
    *,
    attempt_id: int,
    question_id: Any,
    value: Any,
    learner_id: int,
) -> Attempt:
    """
    Raises:
      - NotFound / Unauthorized
      - InvalidState: IN_PROGRESS 아님 (이미 제출됨)
    """
    attempt = load_owned_attempt(attempts, attempt_id, learner_id)

    if not attempt.is_in_progress:
        raise InvalidState(
            f"Cannot save answer - attempt is not in progress (status: {attempt.status.value})"
        )

    updated_answers = dict(attempt.answers or {})
    updated_answers[str(question_id)] = value

    try:
        saved = attempts.update(
            attempt.id,
            {"answers": updated_answers},
            expected_status=AttemptStatus.IN_PROGRESS,
        )
    except ConditionFailed as e:
        # 읽은 뒤 쓰기 전에 제출(자동/수동)이 먼저 끝났다
        raise InvalidState("Cannot save answer - attempt is no longer in progress") from e

    logger.debug("answer saved attempt_id=%s question_id=%s", attempt.id, question_id)
    return saved
