"""
Assessment / Attempt / Learner Repository — Django ORM 구현 (메서드 내부에서만 apps.domains import)

조건부 update 는 filter(id, status=expected).update() 한 문장으로 처리한다.
영향 행 0 이면 행 존재 여부로 NotFound / ConditionFailed 를 구분.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from academy.domain.assessments.entities import (
    Assessment,
    Attempt,
    AttemptStatus,
    Learner,
    Question,
    QuestionType,
)
from academy.domain.assessments.errors import (
    ConditionFailed,
    NotFound,
    TransientStoreError,
)

logger = logging.getLogger(__name__)

# insert / update 로 쓸 수 있는 컬럼. 그 외 키는 저장소가 shape 를 거부한 것으로 본다.
WRITABLE_COLUMNS = frozenset(
    {
        "status",
        "answers",
        "started_at",
        "completed_at",
        "score",
        "earned_points",
        "total_points",
    }
)


def _question_to_entity(q) -> Question:
    options = q.options if isinstance(q.options, (list, tuple)) else []
    return Question(
        id=str(q.id),
        text=q.question_text or "",
        question_type=QuestionType.parse(q.question_type),
        options=tuple(str(o) for o in options),
        correct_index=q.correct_index,
        correct_text=q.correct_text,
    )


def _assessment_to_entity(m) -> Assessment:
    return Assessment(
        id=m.id,
        title=m.title,
        group_id=m.class_instance_id,
        questions=tuple(_question_to_entity(q) for q in m.questions.all()),
        time_limit_seconds=m.time_limit_seconds,
        allow_reattempts=bool(m.allow_reattempts),
        school_code=m.school_code or "",
        description=m.description or "",
        assessment_type=m.assessment_type or "quiz",
        created_at=getattr(m, "created_at", None),
    )


def _attempt_to_entity(m) -> Optional[Attempt]:
    if m is None:
        return None
    return Attempt(
        id=m.id,
        assessment_id=m.assessment_id,
        learner_id=m.student_id,
        status=AttemptStatus(m.status),
        answers=dict(m.answers or {}),
        started_at=m.started_at,
        completed_at=m.completed_at,
        score=m.score,
        earned_points=m.earned_points,
        total_points=m.total_points,
        created_at=getattr(m, "created_at", None),
        updated_at=getattr(m, "updated_at", None),
    )


def _learner_to_entity(m) -> Optional[Learner]:
    if m is None:
        return None
    return Learner(
        id=m.id,
        school_code=m.school_code,
        group_id=m.class_instance_id,
        student_code=m.student_code or "",
        email=m.email or "",
    )


def _to_columns(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - WRITABLE_COLUMNS
    if unknown:
        raise TransientStoreError(f"unsupported attempt columns: {sorted(unknown)}")
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in fields.items()}


class DjangoAssessmentRepository:
    """AssessmentRepository 구현. ORM 접근은 모두 메서드 내부에서 lazy import."""

    def get_with_questions(self, assessment_id: int) -> Assessment:
        from apps.domains.assessments.models import Assessment as AssessmentModel
        m = (
            AssessmentModel.objects.filter(id=assessment_id)
            .prefetch_related("questions")
            .first()
        )
        if m is None:
            raise NotFound("Assessment not found")
        return _assessment_to_entity(m)

    def list_for_group(self, school_code: str, group_id: int) -> list[Assessment]:
        from apps.domains.assessments.models import Assessment as AssessmentModel
        qs = (
            AssessmentModel.objects.filter(
                school_code=school_code,
                class_instance_id=group_id,
                is_active=True,
            )
            .prefetch_related("questions")
            .order_by("-created_at", "-id")
        )
        return [_assessment_to_entity(m) for m in qs]


class DjangoAttemptRepository:
    """AttemptRepository 구현."""

    def get(self, attempt_id: int) -> Optional[Attempt]:
        from apps.domains.assessments.models import AssessmentAttempt
        return _attempt_to_entity(AssessmentAttempt.objects.filter(id=attempt_id).first())

    def find_latest(self, assessment_id: int, learner_id: int) -> Optional[Attempt]:
        from django.db import DatabaseError
        from apps.domains.assessments.models import AssessmentAttempt
        try:
            m = (
                AssessmentAttempt.objects.filter(
                    assessment_id=assessment_id,
                    student_id=learner_id,
                )
                .order_by("-created_at", "-id")
                .first()
            )
        except DatabaseError as e:
            raise TransientStoreError(str(e)) from e
        return _attempt_to_entity(m)

    def _has_in_progress(self, assessment_id: int, learner_id: int) -> bool:
        from apps.domains.assessments.models import AssessmentAttempt
        return AssessmentAttempt.objects.filter(
            assessment_id=assessment_id,
            student_id=learner_id,
            status=AttemptStatus.IN_PROGRESS.value,
        ).exists()

    def insert(
        self,
        assessment_id: int,
        learner_id: int,
        fields: Mapping[str, Any],
    ) -> Attempt:
        from django.db import DatabaseError, IntegrityError, transaction
        from apps.domains.assessments.models import AssessmentAttempt

        cols = _to_columns(fields)
        try:
            with transaction.atomic():
                m = AssessmentAttempt.objects.create(
                    assessment_id=assessment_id,
                    student_id=learner_id,
                    **cols,
                )
        except IntegrityError as e:
            if self._has_in_progress(assessment_id, learner_id):
                raise ConditionFailed("An in-progress attempt already exists") from e
            raise TransientStoreError(str(e)) from e
        except DatabaseError as e:
            raise TransientStoreError(str(e)) from e

        return _attempt_to_entity(m)

    def update(
        self,
        attempt_id: int,
        fields: Mapping[str, Any],
        expected_status: Optional[AttemptStatus] = None,
    ) -> Attempt:
        from django.db import DatabaseError, IntegrityError, transaction
        from django.utils import timezone
        from apps.domains.assessments.models import AssessmentAttempt

        cols = _to_columns(fields)
        qs = AssessmentAttempt.objects.filter(id=attempt_id)
        if expected_status is not None:
            qs = qs.filter(status=AttemptStatus(expected_status).value)

        try:
            with transaction.atomic():
                n = qs.update(**cols, updated_at=timezone.now())
        except IntegrityError as e:
            # reset 으로 IN_PROGRESS 복귀 시 같은 쌍의 다른 IN_PROGRESS 와 충돌
            raise ConditionFailed("Attempt state conflict") from e
        except DatabaseError as e:
            raise TransientStoreError(str(e)) from e

        if n == 0:
            if not AssessmentAttempt.objects.filter(id=attempt_id).exists():
                raise NotFound("Attempt not found")
            logger.info(
                "conditional attempt update lost attempt_id=%s expected_status=%s",
                attempt_id,
                getattr(expected_status, "value", expected_status),
            )
            raise ConditionFailed("Attempt status changed")

        return self.get(attempt_id)

    def list_for_learner(
        self,
        learner_id: int,
        statuses: Optional[Iterable[AttemptStatus]] = None,
    ) -> list[Attempt]:
        from apps.domains.assessments.models import AssessmentAttempt
        qs = AssessmentAttempt.objects.filter(student_id=learner_id)
        if statuses is not None:
            qs = qs.filter(status__in=[AttemptStatus(s).value for s in statuses])
        return [_attempt_to_entity(m) for m in qs.order_by("-created_at", "-id")]

    def latest_statuses(
        self,
        learner_id: int,
        assessment_ids: Iterable[int],
    ) -> dict[int, AttemptStatus]:
        from django.db import DatabaseError
        from apps.domains.assessments.models import AssessmentAttempt

        ids = list(assessment_ids)
        if not ids:
            return {}

        try:
            rows = list(
                AssessmentAttempt.objects.filter(
                    student_id=learner_id,
                    assessment_id__in=ids,
                )
                .order_by("assessment_id", "-created_at", "-id")
                .values_list("assessment_id", "status")
            )
        except DatabaseError as e:
            raise TransientStoreError(str(e)) from e

        out: dict[int, AttemptStatus] = {}
        for assessment_id, status in rows:
            if assessment_id not in out:
                out[assessment_id] = AttemptStatus(status)
        return out


class DjangoLearnerRepository:
    """LearnerRepository 구현 (students.Student)."""

    def find_by_id(self, school_code: str, learner_id: int) -> Optional[Learner]:
        from apps.domains.students.models import Student
        return _learner_to_entity(
            Student.objects.filter(school_code=school_code, id=learner_id).first()
        )

    def find_by_student_code(self, school_code: str, student_code: str) -> Optional[Learner]:
        from apps.domains.students.models import Student
        return _learner_to_entity(
            Student.objects.filter(school_code=school_code, student_code=student_code).first()
        )

    def find_by_email(self, school_code: str, email: str) -> Optional[Learner]:
        from apps.domains.students.models import Student
        return _learner_to_entity(
            Student.objects.filter(school_code=school_code, email__iexact=email)
            .order_by("id")
            .first()
        )
