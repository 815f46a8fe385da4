"""
Attempt 운영 정책 — 순수 파이썬

settings → AttemptPolicy 변환은 apps.domains.assessments.services.policy_loader 가 담당.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from academy.domain.assessments.entities import Assessment, Attempt


class ReattemptStrategy(str, Enum):
    """
    재응시 처리 방식. 한 배포 안에서는 하나만 쓴다 (start 경로/grant 경로 공통).

    ABANDON_AND_INSERT: 완료 attempt 를 ABANDONED 로 돌리고 새 행 생성 (append-only 유지)
    RESET_IN_PLACE: 같은 행을 IN_PROGRESS 로 되돌리고 답안/점수 초기화
    """
    ABANDON_AND_INSERT = "abandon"
    RESET_IN_PLACE = "reset"


class ResumeTimerMode(str, Enum):
    """
    ELAPSED: remaining = time_limit - (now - started_at)
    FULL: 재진입 시 항상 전체 시간으로 다시 시작 (레거시 동작)
    """
    ELAPSED = "elapsed"
    FULL = "full"


DEFAULT_WARNING_THRESHOLDS = (30, 10)


@dataclass(frozen=True)
class AttemptPolicy:
    reattempt_strategy: ReattemptStrategy = ReattemptStrategy.ABANDON_AND_INSERT
    resume_timer: ResumeTimerMode = ResumeTimerMode.ELAPSED
    lazy_expiry: bool = False
    expiry_grace_seconds: int = 5
    warning_thresholds: tuple[int, ...] = DEFAULT_WARNING_THRESHOLDS


DEFAULT_POLICY = AttemptPolicy()


def elapsed_seconds(attempt: Attempt, now: datetime) -> int:
    if attempt.started_at is None:
        return 0
    return max(0, int((now - attempt.started_at).total_seconds()))


def remaining_seconds(
    assessment: Assessment,
    attempt: Attempt,
    now: datetime,
    mode: ResumeTimerMode = ResumeTimerMode.ELAPSED,
) -> Optional[int]:
    """
    카운트다운 시작 값. 시간 제한 없는 평가면 None.
    ELAPSED 모드는 0 미만으로 내려가지 않는다.
    """
    if not assessment.is_timed:
        return None

    limit = int(assessment.time_limit_seconds or 0)
    if mode == ResumeTimerMode.FULL:
        return limit

    return max(0, limit - elapsed_seconds(attempt, now))


def is_expired(
    assessment: Assessment,
    attempt: Attempt,
    now: datetime,
    grace_seconds: int = 0,
) -> bool:
    """방치된 IN_PROGRESS attempt 판정 (lazy expiry 용)."""
    if not assessment.is_timed or not attempt.is_in_progress:
        return False
    if attempt.started_at is None:
        return False
    limit = int(assessment.time_limit_seconds or 0) + max(0, int(grace_seconds))
    return elapsed_seconds(attempt, now) > limit


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
