"""
Attempt 제출 Use Case — 도메인/포트만 사용 (Django 미사용)

IN_PROGRESS → COMPLETED 전이는 반드시 expected_status=IN_PROGRESS 조건부 update 로만.
수동 제출과 타이머 자동 제출이 경합해도 한쪽만 성공한다 (진 쪽은 ConditionFailed).
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from academy.application.ports.repositories import AssessmentRepository, AttemptRepository
from academy.domain.assessments.entities import AnswerMap, Assessment, Attempt, AttemptStatus
from academy.domain.assessments.errors import InvalidState, NotFound, Unauthorized
from academy.domain.assessments.grading import grade_answers
from academy.domain.assessments.policy import utcnow

logger = logging.getLogger(__name__)


def merge_answers(stored: Optional[Mapping[str, Any]], pending: Optional[Mapping[str, Any]]) -> AnswerMap:
    """저장된 답안 위에 아직 flush 안 된 답안을 덮어쓴다 (문항 단위 last-write-wins)."""
    merged: AnswerMap = {str(k): v for k, v in (stored or {}).items()}
    for k, v in (pending or {}).items():
        merged[str(k)] = v
    return merged


def load_owned_attempt(attempts: AttemptRepository, attempt_id: int, learner_id: int) -> Attempt:
    attempt = attempts.get(attempt_id)
    if attempt is None:
        raise NotFound("Attempt not found")
    if not attempt.owned_by(learner_id):
        raise Unauthorized("Not authorized to modify this attempt")
    return attempt


def complete_attempt(
    attempts: AttemptRepository,
    assessment: Assessment,
    attempt: Attempt,
    final_answers: AnswerMap,
    now: Optional[datetime] = None,
) -> Attempt:
    """채점 + COMPLETED 기록. 경합에서 지면 ConditionFailed 그대로 전파."""
    now = now or utcnow()
    grade = grade_answers(assessment.questions, final_answers)

    updated = attempts.update(
        attempt.id,
        {
            "status": AttemptStatus.COMPLETED,
            "answers": final_answers,
            "score": grade.correct,
            "earned_points": grade.correct,
            "total_points": grade.total,
            "completed_at": now,
        },
        expected_status=AttemptStatus.IN_PROGRESS,
    )
    logger.info(
        "attempt completed attempt_id=%s assessment_id=%s score=%s/%s",
        attempt.id,
        assessment.id,
        grade.correct,
        grade.total,
    )
    return updated


def submit_attempt(
    assessments: AssessmentRepository,
    attempts: AttemptRepository,
    *,
    attempt_id: int,
    learner_id: int,
    answers: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
) -> Attempt:
    """
    Raises:
      - NotFound / Unauthorized
      - InvalidState: 이미 IN_PROGRESS 아님 (중복 제출)
      - ConditionFailed: 읽은 뒤 쓰기 전에 다른 경로가 먼저 제출함
    """
    attempt = load_owned_attempt(attempts, attempt_id, learner_id)

    if not attempt.is_in_progress:
        raise InvalidState(
            f"Cannot submit test - attempt is not in progress (status: {attempt.status.value})"
        )

    final_answers = merge_answers(attempt.answers, answers)
    assessment = assessments.get_with_questions(attempt.assessment_id)

    return complete_attempt(attempts, assessment, attempt, final_answers, now=now)
