"""
Learner 해석 Use Case — 로그인 신원 → 명단(Student) 레코드

조회 전략을 우선순위 목록으로 두고 순서대로 시도한다.
각 전략은 순수 조회 (LearnerRepository, LearnerQuery) → Optional[Learner].
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from academy.application.ports.repositories import LearnerRepository
from academy.domain.assessments.entities import Learner
from academy.domain.assessments.errors import NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LearnerQuery:
    school_code: str
    learner_id: Optional[int] = None
    student_code: str = ""
    email: str = ""

    def normalized(self) -> "LearnerQuery":
        return LearnerQuery(
            school_code=str(self.school_code or "").strip(),
            learner_id=int(self.learner_id) if self.learner_id else None,
            student_code=str(self.student_code or "").strip(),
            email=str(self.email or "").strip().lower(),
        )


LearnerLookup = Callable[[LearnerRepository, LearnerQuery], Optional[Learner]]


def lookup_by_id(repo: LearnerRepository, q: LearnerQuery) -> Optional[Learner]:
    if not q.learner_id:
        return None
    return repo.find_by_id(q.school_code, q.learner_id)


def lookup_by_student_code(repo: LearnerRepository, q: LearnerQuery) -> Optional[Learner]:
    if not q.student_code:
        return None
    return repo.find_by_student_code(q.school_code, q.student_code)


def lookup_by_email(repo: LearnerRepository, q: LearnerQuery) -> Optional[Learner]:
    if not q.email:
        return None
    return repo.find_by_email(q.school_code, q.email)


# id(이미 알고 있으면) → 학번(hint code) → 이메일(contact address)
DEFAULT_LOOKUPS: tuple[LearnerLookup, ...] = (
    lookup_by_id,
    lookup_by_student_code,
    lookup_by_email,
)


def resolve_learner(
    repo: LearnerRepository,
    query: LearnerQuery,
    lookups: Sequence[LearnerLookup] = DEFAULT_LOOKUPS,
) -> Learner:
    """
    Raises:
      - ValueError: school_code 누락
      - NotFound: 어떤 전략으로도 못 찾음
    """
    q = query.normalized()
    if not q.school_code:
        raise ValueError("school_code required")

    for lookup in lookups:
        learner = lookup(repo, q)
        if learner is not None:
            return learner

    logger.info(
        "learner not resolved school_code=%s student_code=%s email=%s",
        q.school_code,
        q.student_code or "-",
        q.email or "-",
    )
    raise NotFound("Student not found")


def try_resolve_learner(
    repo: LearnerRepository,
    query: LearnerQuery,
    lookups: Sequence[LearnerLookup] = DEFAULT_LOOKUPS,
) -> Optional[Learner]:
    """목록 경로용: 못 찾으면 None ('볼 수 있는 평가 없음')."""
    try:
        return resolve_learner(repo, query, lookups)
    except NotFound:
        return None
