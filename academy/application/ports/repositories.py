"""
Repository 포트 — 영속화 추상화 (Django/ORM 미사용)

저장소는 단건 조회/쓰기 + 단건 조건부 update 만 제공한다고 가정한다.
다중 행 트랜잭션은 없다. 동시성 안전은 expected_status 조건부 update 가 유일한 장치.
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Any, Iterable, Mapping, Optional, Protocol

from academy.domain.assessments.entities import (
    Assessment,
    Attempt,
    AttemptStatus,
    Learner,
)


class AssessmentRepository(Protocol):
    """평가 + 문항 조회 (읽기 전용)."""

    @abstractmethod
    def get_with_questions(self, assessment_id: int) -> Assessment:
        """문항 포함 조회. 없으면 NotFound."""
        ...

    @abstractmethod
    def list_for_group(self, school_code: str, group_id: int) -> list[Assessment]:
        """반(group)에 배정된 평가 목록, 최신 생성순."""
        ...


class AttemptRepository(Protocol):
    """Attempt 영속화."""

    @abstractmethod
    def get(self, attempt_id: int) -> Optional[Attempt]:
        """id로 조회. 없으면 None."""
        ...

    @abstractmethod
    def find_latest(self, assessment_id: int, learner_id: int) -> Optional[Attempt]:
        """(평가, 학생) 최신 attempt (created_at desc). 없으면 None."""
        ...

    @abstractmethod
    def insert(
        self,
        assessment_id: int,
        learner_id: int,
        fields: Mapping[str, Any],
    ) -> Attempt:
        """
        새 attempt 행 생성. fields 는 status/answers 필수, 나머지는 선택.

        Raises:
          - ConditionFailed: 같은 쌍에 IN_PROGRESS 행이 이미 있음
          - TransientStoreError: 저장소가 이 shape 를 거부 / 네트워크 실패
        """
        ...

    @abstractmethod
    def update(
        self,
        attempt_id: int,
        fields: Mapping[str, Any],
        expected_status: Optional[AttemptStatus] = None,
    ) -> Attempt:
        """
        단건 update. expected_status 가 있으면 현재 status 가 같을 때만 적용.

        Raises:
          - NotFound: 행 없음
          - ConditionFailed: status 불일치 (경합에서 짐)
          - TransientStoreError
        """
        ...

    @abstractmethod
    def list_for_learner(
        self,
        learner_id: int,
        statuses: Optional[Iterable[AttemptStatus]] = None,
    ) -> list[Attempt]:
        """학생의 attempt 목록 (최신순)."""
        ...

    @abstractmethod
    def latest_statuses(
        self,
        learner_id: int,
        assessment_ids: Iterable[int],
    ) -> dict[int, AttemptStatus]:
        """평가별 최신 attempt status. attempt 없는 평가는 키 없음."""
        ...


class LearnerRepository(Protocol):
    """학생(명단) 조회. 모든 조회는 school_code 범위 안에서만."""

    @abstractmethod
    def find_by_id(self, school_code: str, learner_id: int) -> Optional[Learner]:
        ...

    @abstractmethod
    def find_by_student_code(self, school_code: str, student_code: str) -> Optional[Learner]:
        ...

    @abstractmethod
    def find_by_email(self, school_code: str, email: str) -> Optional[Learner]:
        ...
