# apps/domains/assessments/services/attempt_service.py
"""
Use case ↔ Django repository / settings 연결 전담

view 는 이 서비스만 호출한다. 상태 전이 규칙은 전부 academy.application.use_cases 쪽.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from academy.adapters.db.django.repositories_assessments import (
    DjangoAssessmentRepository,
    DjangoAttemptRepository,
    DjangoLearnerRepository,
)
from academy.application.use_cases.assessments import (
    LearnerQuery,
    get_assessment_for_taking,
    get_attempt_history,
    grant_reattempt,
    list_available_assessments,
    record_answer,
    resolve_learner,
    start_attempt,
    submit_attempt,
)
from academy.application.use_cases.assessments.list_assessments import (
    AssessmentForTaking,
    AvailableAssessment,
)
from academy.domain.assessments.entities import Attempt, AttemptStatus, Learner
from academy.domain.assessments.errors import ConditionFailed, InvalidState
from academy.domain.assessments.policy import remaining_seconds, utcnow

from .policy_loader import load_attempt_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartedAttempt:
    attempt: Attempt
    remaining_seconds: Optional[int]


@dataclass(frozen=True)
class SubmitOutcome:
    attempt: Attempt
    already_submitted: bool = False


def learner_query_for_user(user, params: Optional[Mapping[str, Any]] = None) -> LearnerQuery:
    """
    로그인 사용자 → LearnerQuery

    - student_profile 연결된 계정: 프로필 기준으로만 조회 (요청 파라미터 무시)
    - 연결 없는 레거시 계정: school_code + student_code(hint) 파라미터, 계정 이메일
    """
    params = params or {}

    # 역방향 OneToOne 미존재 예외는 AttributeError 하위 클래스
    profile = getattr(user, "student_profile", None)
    if profile is not None:
        return LearnerQuery(
            school_code=profile.school_code,
            learner_id=profile.id,
            student_code=profile.student_code or "",
            email=profile.email or "",
        )

    return LearnerQuery(
        school_code=str(params.get("school_code") or ""),
        student_code=str(params.get("student_code") or ""),
        email=getattr(user, "email", "") or "",
    )


class AssessmentAttemptService:
    """
    학생 응시 흐름 + 재응시 권한 부여

    🔥 동시성
    - 모든 상태 변경은 저장소 조건부 update 1회 (select_for_update / 다중 행 트랜잭션 없음)
    - 제출 경합에서 진 쪽은 저장된 완료 attempt 를 돌려받는다
    """

    @staticmethod
    def _repos():
        return (
            DjangoAssessmentRepository(),
            DjangoAttemptRepository(),
            DjangoLearnerRepository(),
        )

    @staticmethod
    def resolve(query: LearnerQuery) -> Learner:
        return resolve_learner(DjangoLearnerRepository(), query)

    @staticmethod
    def available(query: LearnerQuery) -> list[AvailableAssessment]:
        assessments, attempts, learners = AssessmentAttemptService._repos()
        return list_available_assessments(learners, assessments, attempts, query)

    @staticmethod
    def history(query: LearnerQuery) -> list[Attempt]:
        _, attempts, learners = AssessmentAttemptService._repos()
        return get_attempt_history(learners, attempts, query)

    @staticmethod
    def for_taking(*, assessment_id: int, learner_id: int) -> AssessmentForTaking:
        assessments, attempts, _ = AssessmentAttemptService._repos()
        return get_assessment_for_taking(
            assessments,
            attempts,
            assessment_id=assessment_id,
            learner_id=learner_id,
        )

    @staticmethod
    def start(*, assessment_id: int, learner_id: int) -> StartedAttempt:
        assessments, attempts, _ = AssessmentAttemptService._repos()
        policy = load_attempt_policy()
        now = utcnow()

        attempt = start_attempt(
            assessments,
            attempts,
            assessment_id=assessment_id,
            learner_id=learner_id,
            policy=policy,
            now=now,
        )
        assessment = assessments.get_with_questions(assessment_id)
        return StartedAttempt(
            attempt=attempt,
            remaining_seconds=remaining_seconds(assessment, attempt, now, policy.resume_timer),
        )

    @staticmethod
    def save_answer(*, attempt_id: int, learner_id: int, question_id: Any, value: Any) -> Attempt:
        _, attempts, _ = AssessmentAttemptService._repos()
        return record_answer(
            attempts,
            attempt_id=attempt_id,
            question_id=question_id,
            value=value,
            learner_id=learner_id,
        )

    @staticmethod
    def submit(
        *,
        attempt_id: int,
        learner_id: int,
        answers: Optional[Mapping[str, Any]] = None,
        auto: bool = False,
    ) -> SubmitOutcome:
        """
        - ConditionFailed (읽은 뒤 다른 경로가 먼저 제출): 저장된 완료 attempt 반환
        - InvalidState (이미 제출됨): 자동 제출이면 저장된 attempt 반환, 수동이면 그대로 전파
        """
        assessments, attempts, _ = AssessmentAttemptService._repos()

        try:
            attempt = submit_attempt(
                assessments,
                attempts,
                attempt_id=attempt_id,
                learner_id=learner_id,
                answers=answers,
            )
            return SubmitOutcome(attempt=attempt)
        except ConditionFailed:
            stored = attempts.get(attempt_id)
            if stored is not None and stored.status == AttemptStatus.COMPLETED:
                logger.info(
                    "submit lost race; returning stored result attempt_id=%s auto=%s",
                    attempt_id,
                    auto,
                )
                return SubmitOutcome(attempt=stored, already_submitted=True)
            raise
        except InvalidState:
            if not auto:
                raise
            stored = attempts.get(attempt_id)
            if stored is None:
                raise
            logger.info(
                "auto-submit after completion ignored attempt_id=%s status=%s",
                attempt_id,
                stored.status.value,
            )
            return SubmitOutcome(attempt=stored, already_submitted=True)

    @staticmethod
    def grant(*, attempt_id: int, learner_id: int) -> Attempt:
        _, attempts, _ = AssessmentAttemptService._repos()
        return grant_reattempt(
            attempts,
            attempt_id=attempt_id,
            learner_id=learner_id,
            policy=load_attempt_policy(),
        )
