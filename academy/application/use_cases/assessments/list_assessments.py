"""
학생용 평가 조회 Use Case
- 응시 가능 목록
- 응시 화면용 평가 + 기존 attempt
- 응시 이력 (채점 완료분)

목록 경로에서 학생을 못 찾으면 예외가 아니라 빈 목록.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from academy.application.ports.repositories import (
    AssessmentRepository,
    AttemptRepository,
    LearnerRepository,
)
from academy.application.use_cases.assessments.resolve_learner import (
    LearnerQuery,
    try_resolve_learner,
)
from academy.domain.assessments.entities import Assessment, Attempt, AttemptStatus
from academy.domain.assessments.errors import TransientStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailableAssessment:
    assessment: Assessment
    latest_status: Optional[AttemptStatus] = None

    @property
    def can_resume(self) -> bool:
        return self.latest_status == AttemptStatus.IN_PROGRESS


@dataclass(frozen=True)
class AssessmentForTaking:
    assessment: Assessment
    existing_attempt: Optional[Attempt] = None


def _is_startable(assessment: Assessment, latest_status: Optional[AttemptStatus]) -> bool:
    # 완료했고 재응시 불가면 목록에서 숨긴다 (start 버튼 자체를 노출하지 않음)
    if latest_status == AttemptStatus.COMPLETED:
        return bool(assessment.allow_reattempts)
    return True


def list_available_assessments(
    learners: LearnerRepository,
    assessments: AssessmentRepository,
    attempts: AttemptRepository,
    query: LearnerQuery,
) -> list[AvailableAssessment]:
    learner = try_resolve_learner(learners, query)
    if learner is None or not learner.group_id:
        return []

    items = assessments.list_for_group(learner.school_code, learner.group_id)
    if not items:
        return []

    try:
        statuses = attempts.latest_statuses(learner.id, [a.id for a in items])
    except TransientStoreError as e:
        # best-effort: 상태 조회 실패 시 필터 없이 전체 노출
        logger.warning("latest attempt statuses unavailable learner_id=%s err=%s", learner.id, e)
        return [AvailableAssessment(assessment=a) for a in items]

    return [
        AvailableAssessment(assessment=a, latest_status=statuses.get(a.id))
        for a in items
        if _is_startable(a, statuses.get(a.id))
    ]


def get_assessment_for_taking(
    assessments: AssessmentRepository,
    attempts: AttemptRepository,
    *,
    assessment_id: int,
    learner_id: int,
) -> AssessmentForTaking:
    """Raises NotFound: 평가 없음."""
    assessment = assessments.get_with_questions(assessment_id)

    existing: Optional[Attempt] = None
    try:
        existing = attempts.find_latest(assessment_id, learner_id)
    except TransientStoreError as e:
        logger.warning(
            "existing attempt lookup failed assessment_id=%s learner_id=%s err=%s",
            assessment_id,
            learner_id,
            e,
        )

    return AssessmentForTaking(assessment=assessment, existing_attempt=existing)


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def get_attempt_history(
    learners: LearnerRepository,
    attempts: AttemptRepository,
    query: LearnerQuery,
) -> list[Attempt]:
    """채점 완료된 attempt (COMPLETED, 또는 재응시 권한으로 ABANDONED 된 채점분). 최근 완료순."""
    learner = try_resolve_learner(learners, query)
    if learner is None:
        return []

    rows = attempts.list_for_learner(
        learner.id,
        statuses=(AttemptStatus.COMPLETED, AttemptStatus.ABANDONED),
    )
    graded = [a for a in rows if a.completed_at is not None]
    graded.sort(key=lambda a: a.completed_at or _EPOCH, reverse=True)
    return graded
