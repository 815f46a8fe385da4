"""
자동 채점 엔진 — 순수 함수 (부작용/예외 없음)

채점 정책 v1 (문항별 정오만, 부분점수/가중치 없음)
- choice: options[correct_index] 와 비교. 인덱스가 없거나 범위 밖이면 correct_text 로 대체
- text 계열: correct_text 가 있을 때만 비교, 없으면 항상 오답
- 미응답/None/빈 문자열은 항상 오답
- 비교는 앞뒤 공백 제거 + 대소문자 무시
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, NamedTuple, Optional

from academy.domain.assessments.entities import Question, QuestionType


class GradeResult(NamedTuple):
    correct: int
    total: int

    @property
    def ratio(self) -> float:
        return (self.correct / self.total) if self.total else 0.0


def _norm(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip().upper()


def _choice_key(q: Question) -> Optional[str]:
    idx = q.correct_index
    if idx is not None and 0 <= int(idx) < len(q.options):
        return q.options[int(idx)]
    return q.correct_text


def correct_value(q: Question) -> Optional[str]:
    """문항의 기준 정답 문자열. 자동채점 불가면 None."""
    if q.question_type == QuestionType.CHOICE:
        key = _choice_key(q)
    else:
        key = q.correct_text
    return key if _norm(key) != "" else None


def is_correct(q: Question, submitted: Any) -> bool:
    ans = _norm(submitted)
    if ans == "":
        return False

    key = correct_value(q)
    if key is None:
        return False

    return ans == _norm(key)


def grade_answers(
    questions: Iterable[Question],
    answers: Optional[Mapping[str, Any]],
) -> GradeResult:
    """
    (문항 집합, 답안 map) → (정답 수, 전체 문항 수)

    answers 키는 question id 문자열. int 키로 들어와도 str 로 맞춰 조회한다.
    """
    answers = answers or {}
    lookup = {str(k): v for k, v in answers.items()}

    correct = 0
    total = 0
    for q in questions:
        total += 1
        if is_correct(q, lookup.get(str(q.id))):
            correct += 1

    return GradeResult(correct=max(0, correct), total=max(0, total))
