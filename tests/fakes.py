"""
저장소 포트의 in-memory 구현 (use case 단위 테스트용)

Django 어댑터와 같은 계약을 지킨다:
- (assessment, learner) 쌍마다 IN_PROGRESS 행 최대 1개 → insert 시 ConditionFailed
- expected_status 조건부 update → 불일치 시 ConditionFailed
"""
from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional

from academy.domain.assessments.entities import (
    Assessment,
    Attempt,
    AttemptStatus,
    Learner,
)
from academy.domain.assessments.errors import (
    ConditionFailed,
    NotFound,
    TransientStoreError,
)

T0 = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


def _copy(a: Optional[Attempt]) -> Optional[Attempt]:
    if a is None:
        return None
    return dataclasses.replace(a, answers=dict(a.answers))


class FakeAssessmentRepository:
    def __init__(self, *assessments: Assessment):
        self.items = {a.id: a for a in assessments}

    def add(self, assessment: Assessment) -> Assessment:
        self.items[assessment.id] = assessment
        return assessment

    def get_with_questions(self, assessment_id: int) -> Assessment:
        a = self.items.get(int(assessment_id))
        if a is None:
            raise NotFound("Assessment not found")
        return a

    def list_for_group(self, school_code: str, group_id: int) -> list[Assessment]:
        rows = [
            a for a in self.items.values()
            if a.school_code == school_code and a.group_id == group_id
        ]
        rows.sort(key=lambda a: (a.created_at or T0, a.id), reverse=True)
        return rows


class FakeAttemptRepository:
    def __init__(self, now: datetime = T0):
        self.rows: dict[int, Attempt] = {}
        self.now = now
        self._next_id = 1

        self.rejected_columns: set[str] = set()
        self.fail_latest_statuses = False
        self.fail_all_inserts = False
        self.insert_calls: list[dict[str, Any]] = []
        self.update_calls: list[tuple[int, dict[str, Any], Optional[AttemptStatus]]] = []

        # 다음 update 직전에 1회 실행 (경합 주입)
        self.before_update: Optional[Callable[[], None]] = None

    # -- helpers -------------------------------------------------------
    def seed(self, assessment_id: int, learner_id: int, status: AttemptStatus, **fields) -> Attempt:
        attempt = Attempt(
            id=self._next_id,
            assessment_id=assessment_id,
            learner_id=learner_id,
            status=status,
            answers=dict(fields.pop("answers", {})),
            started_at=fields.pop("started_at", self.now),
            created_at=fields.pop("created_at", self.now),
            **fields,
        )
        self.rows[attempt.id] = attempt
        self._next_id += 1
        return _copy(attempt)

    def in_progress_rows(self, assessment_id: int, learner_id: int) -> list[Attempt]:
        return [
            a for a in self.rows.values()
            if a.assessment_id == assessment_id
            and a.learner_id == learner_id
            and a.status == AttemptStatus.IN_PROGRESS
        ]

    def _check_columns(self, fields: Mapping[str, Any]) -> None:
        rejected = set(fields) & self.rejected_columns
        if rejected:
            raise TransientStoreError(f"column rejected: {sorted(rejected)}")

    # -- port ----------------------------------------------------------
    def get(self, attempt_id: int) -> Optional[Attempt]:
        return _copy(self.rows.get(int(attempt_id)))

    def find_latest(self, assessment_id: int, learner_id: int) -> Optional[Attempt]:
        rows = [
            a for a in self.rows.values()
            if a.assessment_id == assessment_id and a.learner_id == learner_id
        ]
        if not rows:
            return None
        return _copy(max(rows, key=lambda a: a.id))

    def insert(self, assessment_id: int, learner_id: int, fields: Mapping[str, Any]) -> Attempt:
        self.insert_calls.append(dict(fields))
        if self.fail_all_inserts:
            raise TransientStoreError("store unreachable")
        self._check_columns(fields)

        if self.in_progress_rows(assessment_id, learner_id):
            raise ConditionFailed("An in-progress attempt already exists")

        return self.seed(
            assessment_id,
            learner_id,
            AttemptStatus(fields["status"]),
            answers=fields.get("answers") or {},
            started_at=fields.get("started_at", self.now),
        )

    def update(
        self,
        attempt_id: int,
        fields: Mapping[str, Any],
        expected_status: Optional[AttemptStatus] = None,
    ) -> Attempt:
        if self.before_update is not None:
            hook, self.before_update = self.before_update, None
            hook()

        self.update_calls.append((attempt_id, dict(fields), expected_status))

        row = self.rows.get(int(attempt_id))
        if row is None:
            raise NotFound("Attempt not found")
        self._check_columns(fields)

        if expected_status is not None and row.status != expected_status:
            raise ConditionFailed("Attempt status changed")

        new_status = fields.get("status")
        if new_status is not None and AttemptStatus(new_status) == AttemptStatus.IN_PROGRESS:
            others = [a for a in self.in_progress_rows(row.assessment_id, row.learner_id) if a.id != row.id]
            if others:
                raise ConditionFailed("Attempt state conflict")

        changes = dict(fields)
        if "status" in changes:
            changes["status"] = AttemptStatus(changes["status"])
        if "answers" in changes:
            changes["answers"] = dict(changes["answers"] or {})
        updated = dataclasses.replace(row, **changes, updated_at=self.now)
        self.rows[updated.id] = updated
        return _copy(updated)

    def list_for_learner(
        self,
        learner_id: int,
        statuses: Optional[Iterable[AttemptStatus]] = None,
    ) -> list[Attempt]:
        wanted = set(statuses) if statuses is not None else None
        rows = [
            a for a in self.rows.values()
            if a.learner_id == learner_id and (wanted is None or a.status in wanted)
        ]
        rows.sort(key=lambda a: a.id, reverse=True)
        return [_copy(a) for a in rows]

    def latest_statuses(self, learner_id: int, assessment_ids: Iterable[int]) -> dict[int, AttemptStatus]:
        if self.fail_latest_statuses:
            raise TransientStoreError("store unreachable")
        out: dict[int, AttemptStatus] = {}
        for assessment_id in assessment_ids:
            latest = self.find_latest(assessment_id, learner_id)
            if latest is not None:
                out[assessment_id] = latest.status
        return out


class FakeLearnerRepository:
    def __init__(self, *learners: Learner):
        self.learners = list(learners)

    def find_by_id(self, school_code: str, learner_id: int) -> Optional[Learner]:
        return next(
            (x for x in self.learners if x.school_code == school_code and x.id == learner_id),
            None,
        )

    def find_by_student_code(self, school_code: str, student_code: str) -> Optional[Learner]:
        return next(
            (x for x in self.learners if x.school_code == school_code and x.student_code == student_code),
            None,
        )

    def find_by_email(self, school_code: str, email: str) -> Optional[Learner]:
        return next(
            (x for x in self.learners if x.school_code == school_code and x.email.lower() == email.lower()),
            None,
        )
