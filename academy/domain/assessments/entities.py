"""
평가(Assessment) 도메인 엔티티 — 순수 파이썬 (Django/ORM 미사용)

상태 전이 규칙은 엔티티 메서드로 표현.
영속화는 어댑터(academy.adapters.db.django)가 담당한다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

# question_id(str) → 학생이 제출한 값
AnswerMap = dict[str, Any]


class QuestionType(str, Enum):
    """문항 유형 (apps.domains.assessments.models AssessmentQuestion choices와 동기화)."""
    CHOICE = "choice"
    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"

    @classmethod
    def parse(cls, value: object) -> "QuestionType":
        """
        레거시 표기 허용: mcq / multiple_choice → choice, text → short_text.
        모르는 값은 short_text로 취급 (자동채점 불가 문항이 되어도 예외는 없음).
        """
        v = str(value or "").strip().lower()
        if v in ("choice", "mcq", "multiple_choice"):
            return cls.CHOICE
        if v in ("long_text", "long", "essay"):
            return cls.LONG_TEXT
        return cls.SHORT_TEXT


class AttemptStatus(str, Enum):
    """Attempt 상태. none(행 없음) → IN_PROGRESS → COMPLETED | ABANDONED."""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


TERMINAL_STATUSES = (AttemptStatus.COMPLETED, AttemptStatus.ABANDONED)


@dataclass(frozen=True)
class Question:
    """
    문항 (출제 시점 엔티티, 이 코어에서는 읽기 전용).

    - choice: options + correct_index
    - text 계열: correct_text (없으면 자동채점 불가)
    """
    id: str
    text: str
    question_type: QuestionType
    options: tuple[str, ...] = ()
    correct_index: Optional[int] = None
    correct_text: Optional[str] = None


@dataclass(frozen=True)
class Assessment:
    """응시 중에는 불변."""
    id: int
    title: str
    group_id: Optional[int]
    questions: tuple[Question, ...] = ()
    time_limit_seconds: Optional[int] = None
    allow_reattempts: bool = False
    school_code: str = ""
    description: str = ""
    assessment_type: str = "quiz"
    created_at: Optional[datetime] = None

    @property
    def is_timed(self) -> bool:
        return bool(self.time_limit_seconds and self.time_limit_seconds > 0)

    @property
    def question_count(self) -> int:
        return len(self.questions)


@dataclass(frozen=True)
class Learner:
    """명단(roster) 레코드. group_id = 반 배정(class instance) id."""
    id: int
    school_code: str
    group_id: Optional[int]
    student_code: str = ""
    email: str = ""


@dataclass
class Attempt:
    """
    학생 1명의 평가 1회 응시.

    🔥 핵심 불변식
    - (assessment, learner) 쌍마다 IN_PROGRESS attempt는 최대 1개
    - COMPLETED 는 종료 상태: 재응시 권한 부여(grant)로만 바뀐다
    """
    id: int
    assessment_id: int
    learner_id: int
    status: AttemptStatus
    answers: AnswerMap = field(default_factory=dict)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    score: Optional[int] = None
    earned_points: Optional[int] = None
    total_points: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_in_progress(self) -> bool:
        return self.status == AttemptStatus.IN_PROGRESS

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_graded(self) -> bool:
        return self.completed_at is not None and self.total_points is not None

    def owned_by(self, learner_id: object) -> bool:
        return str(self.learner_id) == str(learner_id)
